"""
Transient user-visible notices.
Every failure ends up here instead of propagating out of a component.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

from storefront.logger import logger


@dataclass(frozen=True)
class Notice:
    level: str
    text: str


class NoticeBoard:
    """Collects notices and forwards them to any registered listeners."""

    def __init__(self):
        self.history: List[Notice] = []
        self._listeners: List[Callable[[Notice], None]] = []

    def subscribe(self, listener: Callable[[Notice], None]):
        self._listeners.append(listener)

    def _post(self, level: str, text: str) -> Notice:
        notice = Notice(level=level, text=text)
        self.history.append(notice)
        if level == "error":
            logger.warning(f"Notice [{level}]: {text}")
        else:
            logger.info(f"Notice [{level}]: {text}")
        for listener in self._listeners:
            listener(notice)
        return notice

    def error(self, text: str) -> Notice:
        return self._post("error", text)

    def info(self, text: str) -> Notice:
        return self._post("info", text)

    def success(self, text: str) -> Notice:
        return self._post("success", text)

    @property
    def latest(self) -> Optional[Notice]:
        return self.history[-1] if self.history else None

    @property
    def errors(self) -> List[str]:
        return [notice.text for notice in self.history if notice.level == "error"]

    def clear(self):
        self.history.clear()
