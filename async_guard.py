"""Busy flag, error capture and user notification around async actions."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from content_model import SchemaConfigError


logger = logging.getLogger("vcms.guard")

Notifier = Callable[[str], None]

DEFAULT_ERROR_MESSAGE = "An error occurred"


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    error: str | None = None


def failure_message(exc: BaseException, fallback: str) -> str:
    text = str(exc).strip()
    return text or fallback


class AsyncOperationGuard:
    """Runs view actions so failures become a message instead of a crash.

    This is the one boundary that turns a raised error into a failed
    outcome. SchemaConfigError is re-raised: it is a programming mistake and
    must reach the developer, not a toast.
    """

    def __init__(self, notify: Notifier | None = None, default_error_message: str = DEFAULT_ERROR_MESSAGE) -> None:
        self._notify = notify
        self._default_error_message = default_error_message
        self._active = 0
        self.error: str | None = None

    @property
    def busy(self) -> bool:
        return self._active > 0

    async def attempt(
        self,
        operation: Callable[[], Awaitable[Any]] | Awaitable[Any],
        error_message: str | None = None,
        notify_on_error: bool = True,
    ) -> Outcome:
        self._active += 1
        self.error = None
        try:
            awaitable = operation if inspect.isawaitable(operation) else operation()
            value = await awaitable
            return Outcome(ok=True, value=value)
        except SchemaConfigError:
            raise
        except Exception as exc:
            message = failure_message(exc, error_message or self._default_error_message)
            self.error = message
            logger.warning("operation_failed error=%s type=%s", message, exc.__class__.__name__)
            if notify_on_error:
                self._send(message)
            return Outcome(ok=False, error=message)
        finally:
            self._active -= 1

    async def run(
        self,
        operation: Callable[[], Awaitable[Any]] | Awaitable[Any],
        error_message: str | None = None,
        notify_on_error: bool = True,
    ) -> Any:
        """Return the operation's result, or None when it failed.

        Use ``attempt`` when None is a legitimate result of the operation.
        """
        outcome = await self.attempt(operation, error_message=error_message, notify_on_error=notify_on_error)
        return outcome.value if outcome.ok else None

    def reset(self) -> None:
        """Clear the last error. ``busy`` is left to the runs still in flight."""
        self.error = None

    def _send(self, message: str) -> None:
        if self._notify is None:
            return
        try:
            self._notify(message)
        except Exception:
            logger.exception("notify_failed")
