from typing import List, Optional

from storefront.logger import logger


class Navigator:
    """Records page transitions requested by the engine. The router lives outside."""

    def __init__(self):
        self.history: List[str] = []

    def push(self, path: str):
        logger.info(f"Navigating to {path}")
        self.history.append(path)

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None
