"""Core spelling interfaces and data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Hashable, Iterable, Protocol, Sequence, Union

DocumentId = Hashable

KIND_BAD = "bad"
KIND_CAPS = "caps"
KIND_RARE = "rare"
KIND_LOCAL = "local"
KNOWN_KINDS = (KIND_BAD, KIND_CAPS, KIND_RARE, KIND_LOCAL)


class SpellDiagnosticsError(RuntimeError):
    """Base error for the spelling diagnostics subsystem."""


class ConfigError(SpellDiagnosticsError, ValueError):
    """Raised when a configuration source cannot be used at all."""


class OracleError(SpellDiagnosticsError):
    """Raised when a spell oracle backend cannot be initialised."""


class Severity(IntEnum):
    """Diagnostic severity levels, numbered like LSP severities."""

    ERROR = 1
    WARN = 2
    INFO = 3
    HINT = 4


@dataclass(frozen=True, slots=True)
class Position:
    """1-based line and column in raw scanning space."""

    line: int
    column: int

    @classmethod
    def from_token(cls, line_index: int, token: "Token") -> "Position":
        return cls(line=line_index + 1, column=token.start + 1)


@dataclass(frozen=True, slots=True)
class RegionTag:
    """A syntax region label, with the syntax engine's own spell attribute."""

    name: str
    spell: bool = False

    @classmethod
    def coerce(cls, value: "RegionTag | str") -> "RegionTag":
        if isinstance(value, RegionTag):
            return value
        return cls(name=str(value))


SyntaxStack = Sequence[Union[RegionTag, str]]


@dataclass(frozen=True, slots=True)
class Token:
    """A word-shaped run in a line; ``start``/``end`` are 0-based, end exclusive."""

    text: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class OracleResult:
    """Verdict returned by a spell oracle for a single word."""

    misspelled: bool
    kind: str = KIND_BAD
    word: str = ""

    @classmethod
    def correct(cls) -> "OracleResult":
        return cls(misspelled=False, kind="", word="")

    @classmethod
    def bad(cls, word: str, kind: str | None = KIND_BAD) -> "OracleResult":
        return cls(misspelled=True, kind=kind or KIND_BAD, word=word)


@dataclass(frozen=True, slots=True)
class DiagnosticRecord:
    """A single spelling diagnostic; positions are 0-based and half-open."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    severity: Severity
    message: str
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_line": self.start_line,
            "start_col": self.start_col,
            "end_line": self.end_line,
            "end_col": self.end_col,
            "severity": self.severity.name.lower(),
            "message": self.message,
            "source": self.source,
        }


class DocumentStore(Protocol):
    """Host-owned view of open documents."""

    def get_lines(self, document: DocumentId) -> Sequence[str]:
        ...

    def is_spelling_enabled(self, document: DocumentId) -> bool:
        ...

    def is_valid(self, document: DocumentId) -> bool:
        ...

    def filetype(self, document: DocumentId) -> str | None:
        ...

    def open_documents(self) -> Iterable[DocumentId]:
        ...

    def current_document(self) -> DocumentId | None:
        ...


class SyntaxStackProvider(Protocol):
    """Returns the region tags active at a 1-based position, outermost first."""

    def stack_at(self, document: DocumentId, line: int, column: int) -> SyntaxStack:
        ...


class SpellOracle(Protocol):
    def check(self, word: str) -> OracleResult:
        ...


class DiagnosticSink(Protocol):
    """Namespaced diagnostic storage; ``publish`` replaces the whole set."""

    def publish(
        self,
        document: DocumentId,
        namespace: str,
        records: Sequence[DiagnosticRecord],
    ) -> None:
        ...

    def clear(self, document: DocumentId, namespace: str) -> None:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Deferred-execution primitives; an ``asyncio`` event loop satisfies this."""

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> Any:
        ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


__all__ = [
    "ConfigError",
    "DiagnosticRecord",
    "DiagnosticSink",
    "DocumentId",
    "DocumentStore",
    "KIND_BAD",
    "KIND_CAPS",
    "KIND_LOCAL",
    "KIND_RARE",
    "KNOWN_KINDS",
    "OracleError",
    "OracleResult",
    "Position",
    "RegionTag",
    "Scheduler",
    "Severity",
    "SpellDiagnosticsError",
    "SpellOracle",
    "SyntaxStack",
    "SyntaxStackProvider",
    "TimerHandle",
    "Token",
]
