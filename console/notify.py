"""User-facing notification sink."""

from __future__ import annotations

import logging
from typing import Callable, List


logger = logging.getLogger("vcms.notify")


class Notifier:
    """Collects transient error messages for the UI layer to display.

    Callable so it can be handed to AsyncOperationGuard directly.
    """

    def __init__(self, sink: Callable[[str], None] | None = None, limit: int = 50) -> None:
        self._sink = sink
        self._limit = limit
        self._messages: List[str] = []

    def __call__(self, message: str) -> None:
        self.error(message)

    def error(self, message: str) -> None:
        logger.info("notify_error message=%s", message)
        self._messages.append(message)
        if len(self._messages) > self._limit:
            del self._messages[0]
        if self._sink is not None:
            self._sink(message)

    def pending(self) -> list[str]:
        return list(self._messages)

    def drain(self) -> list[str]:
        messages = list(self._messages)
        self._messages.clear()
        return messages
