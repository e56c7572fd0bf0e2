"""Per-document debouncing of collection triggers."""

from __future__ import annotations

import logging
from typing import Callable

from .base import DocumentId, Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class DebounceScheduler:
    """Coalesce bursts of triggers into one deferred callback per document.

    Each document owns at most one pending timer. A new trigger cancels the
    pending timer and arms a fresh one, so the callback fires ``interval_ms``
    after the last trigger of a burst.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval_ms: int,
        callback: Callable[[DocumentId], None],
    ) -> None:
        if interval_ms < 0:
            raise ValueError("Debounce interval must be non-negative")
        self._scheduler = scheduler
        self._interval = interval_ms / 1000.0
        self._callback = callback
        self._pending: dict[DocumentId, TimerHandle] = {}

    @property
    def interval_ms(self) -> int:
        return int(round(self._interval * 1000))

    def trigger(self, document: DocumentId) -> None:
        self.cancel(document)
        handle = self._scheduler.call_later(self._interval, self._fire, document)
        self._pending[document] = handle

    def cancel(self, document: DocumentId) -> bool:
        handle = self._pending.pop(document, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug("Cancelled pending spelling pass for %s", document)
        return True

    def cancel_all(self) -> None:
        for document in list(self._pending):
            self.cancel(document)

    def is_pending(self, document: DocumentId) -> bool:
        return document in self._pending

    def pending_documents(self) -> list[DocumentId]:
        return list(self._pending)

    def _fire(self, document: DocumentId) -> None:
        self._pending.pop(document, None)
        self._callback(document)


__all__ = ["DebounceScheduler"]
