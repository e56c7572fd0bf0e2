"""In-memory host collaborators used by the CLI and tests."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from .base import DiagnosticRecord, DocumentId, SyntaxStack


@dataclass(slots=True)
class _Document:
    lines: list[str]
    filetype: str | None
    spelling_enabled: bool = True


class InMemoryDocumentStore:
    """A minimal document store keyed by arbitrary hashable identifiers."""

    def __init__(self) -> None:
        self._documents: dict[DocumentId, _Document] = {}
        self._current: DocumentId | None = None

    def open(
        self,
        document: DocumentId,
        lines: Iterable[str],
        *,
        filetype: str | None = "tex",
        spelling_enabled: bool = True,
    ) -> None:
        self._documents[document] = _Document(
            lines=list(lines),
            filetype=filetype,
            spelling_enabled=spelling_enabled,
        )
        self._current = document

    def open_path(self, path: Path, *, spelling_enabled: bool = True) -> str:
        resolved = Path(path).expanduser().resolve()
        text = resolved.read_bytes().decode("utf-8")
        filetype = resolved.suffix.lstrip(".").lower() or None
        document = str(resolved)
        lines = [line.removesuffix("\r") for line in text.split("\n")]
        if lines and lines[-1] == "":
            lines.pop()
        self.open(document, lines, filetype=filetype, spelling_enabled=spelling_enabled)
        return document

    def set_lines(self, document: DocumentId, lines: Iterable[str]) -> None:
        self._documents[document].lines = list(lines)

    def set_spelling_enabled(self, document: DocumentId, enabled: bool) -> None:
        self._documents[document].spelling_enabled = enabled

    def close(self, document: DocumentId) -> None:
        self._documents.pop(document, None)
        if self._current == document:
            self._current = None

    def focus(self, document: DocumentId) -> None:
        if document in self._documents:
            self._current = document

    def get_lines(self, document: DocumentId) -> Sequence[str]:
        return list(self._documents[document].lines)

    def is_spelling_enabled(self, document: DocumentId) -> bool:
        entry = self._documents.get(document)
        return bool(entry and entry.spelling_enabled)

    def is_valid(self, document: DocumentId) -> bool:
        return document in self._documents

    def filetype(self, document: DocumentId) -> str | None:
        entry = self._documents.get(document)
        return entry.filetype if entry else None

    def open_documents(self) -> list[DocumentId]:
        return list(self._documents)

    def current_document(self) -> DocumentId | None:
        return self._current


class InMemoryDiagnosticSink:
    """Stores one immutable tuple of records per (document, namespace)."""

    def __init__(self) -> None:
        self._sets: dict[tuple[DocumentId, str], tuple[DiagnosticRecord, ...]] = {}
        self.publish_count = 0

    def publish(
        self,
        document: DocumentId,
        namespace: str,
        records: Sequence[DiagnosticRecord],
    ) -> None:
        self._sets[(document, namespace)] = tuple(records)
        self.publish_count += 1

    def clear(self, document: DocumentId, namespace: str) -> None:
        self._sets[(document, namespace)] = ()

    def get(self, document: DocumentId, namespace: str) -> tuple[DiagnosticRecord, ...]:
        return self._sets.get((document, namespace), ())

    def namespaces(self, document: DocumentId) -> list[str]:
        return sorted(namespace for (doc, namespace) in self._sets if doc == document)


class PlainTextSyntaxProvider:
    """Reports every position as plain text (an empty syntax stack)."""

    def stack_at(self, document: DocumentId, line: int, column: int) -> SyntaxStack:
        return ()


class ManualTimer:
    __slots__ = ("when", "callback", "args", "cancelled")

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Deterministic scheduler with a virtual clock.

    Mirrors the ``call_soon``/``call_later`` surface of an asyncio loop.
    Nothing runs until ``run_ready`` or ``advance`` is called.
    """

    now: float = 0.0
    _ready: list[ManualTimer] = field(default_factory=list, init=False)
    _timers: list[tuple[float, int, ManualTimer]] = field(default_factory=list, init=False)
    _sequence: Any = field(default_factory=itertools.count, init=False)

    def time(self) -> float:
        return self.now

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(self.now, callback, args)
        self._ready.append(timer)
        return timer

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(self.now + max(delay, 0.0), callback, args)
        heapq.heappush(self._timers, (timer.when, next(self._sequence), timer))
        return timer

    def run_ready(self) -> int:
        """Run callbacks queued with ``call_soon``, including ones they queue."""

        ran = 0
        while self._ready:
            timer = self._ready.pop(0)
            if timer.cancelled:
                continue
            timer.callback(*timer.args)
            ran += 1
        return ran

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in order."""

        target = self.now + seconds
        ran = self.run_ready()
        while self._timers and self._timers[0][0] <= target:
            when, _seq, timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self.now = when
            timer.callback(*timer.args)
            ran += 1 + self.run_ready()
        self.now = target
        ran += self.run_ready()
        return ran

    def pending_timers(self) -> int:
        return sum(1 for _when, _seq, timer in self._timers if not timer.cancelled)


__all__ = [
    "InMemoryDiagnosticSink",
    "InMemoryDocumentStore",
    "ManualScheduler",
    "ManualTimer",
    "PlainTextSyntaxProvider",
]
