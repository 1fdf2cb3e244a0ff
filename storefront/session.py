"""
Session context shared by the storefront components.
Holds the bearer token, username and wallet balance. Components receive
the store explicitly and read it at call time.
"""
from typing import Dict, Any, Optional

from storefront.logger import logger


class SessionStore:
    """Process-wide key/value store standing in for browser storage."""

    TOKEN_KEY = "token"
    USERNAME_KEY = "username"
    BALANCE_KEY = "balance"

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any):
        self._values[key] = value

    def delete(self, key: str):
        self._values.pop(key, None)

    @property
    def token(self) -> Optional[str]:
        return self._values.get(self.TOKEN_KEY) or None

    @property
    def username(self) -> Optional[str]:
        return self._values.get(self.USERNAME_KEY) or None

    @property
    def balance(self) -> float:
        raw = self._values.get(self.BALANCE_KEY)
        if raw is None:
            return 0
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring unreadable stored balance: {raw!r}")
            return 0

    @property
    def is_logged_in(self) -> bool:
        return bool(self.token and self.username)

    def persist_login(self, token: str, username: str, balance: float = 0):
        self._values[self.TOKEN_KEY] = token
        self._values[self.USERNAME_KEY] = username
        self._values[self.BALANCE_KEY] = balance
        logger.info(f"Session stored for user '{username}'")

    def set_balance(self, balance: float):
        self._values[self.BALANCE_KEY] = balance

    def clear(self):
        for key in (self.TOKEN_KEY, self.USERNAME_KEY, self.BALANCE_KEY):
            self._values.pop(key, None)
