"""Mapping from oracle error kinds to diagnostic severities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .base import (
    KIND_BAD,
    KIND_CAPS,
    KIND_LOCAL,
    KIND_RARE,
    KNOWN_KINDS,
    ConfigError,
    Severity,
)

_LEVEL_NAMES = {
    "error": Severity.ERROR,
    "warn": Severity.WARN,
    "warning": Severity.WARN,
    "info": Severity.INFO,
    "information": Severity.INFO,
    "hint": Severity.HINT,
}

_KIND_ALIASES = {"loc": KIND_LOCAL}


def normalize_kind(kind: str | None) -> str:
    """Fold empty, unknown and aliased kinds onto the four recognised ones."""

    if not kind:
        return KIND_BAD
    candidate = str(kind).strip().lower()
    candidate = _KIND_ALIASES.get(candidate, candidate)
    if candidate not in KNOWN_KINDS:
        return KIND_BAD
    return candidate


def parse_level(value: Any) -> Severity:
    if isinstance(value, Severity):
        return value
    if isinstance(value, bool):
        raise ConfigError(f"Invalid severity level {value!r}")
    if isinstance(value, int):
        try:
            return Severity(value)
        except ValueError as exc:
            raise ConfigError(f"Severity level must be between 1 and 4, got {value}") from exc
    if isinstance(value, str):
        level = _LEVEL_NAMES.get(value.strip().lower())
        if level is not None:
            return level
    choices = ", ".join(sorted(_LEVEL_NAMES))
    raise ConfigError(f"Invalid severity level {value!r}; expected one of: {choices}")


@dataclass(frozen=True, slots=True)
class SeverityMap:
    bad: Severity = Severity.ERROR
    caps: Severity = Severity.WARN
    rare: Severity = Severity.HINT
    local: Severity = Severity.INFO

    def severity(self, kind: str | None) -> Severity:
        normalized = normalize_kind(kind)
        if normalized == KIND_CAPS:
            return self.caps
        if normalized == KIND_RARE:
            return self.rare
        if normalized == KIND_LOCAL:
            return self.local
        return self.bad

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, Any],
        *,
        problems: list[str] | None = None,
    ) -> "SeverityMap":
        """Build a map from config, falling back per kind on invalid entries."""

        levels: dict[str, Severity] = {}
        for raw_key, raw_value in payload.items():
            key = str(raw_key).strip().lower()
            key = _KIND_ALIASES.get(key, key)
            if key not in KNOWN_KINDS:
                _note(problems, f"severity: unknown error kind '{raw_key}' ignored")
                continue
            try:
                levels[key] = parse_level(raw_value)
            except ConfigError as exc:
                _note(problems, f"severity.{key}: {exc}; using default")
        return cls(**levels)


def _note(problems: list[str] | None, message: str) -> None:
    if problems is not None:
        problems.append(message)


DEFAULT_SEVERITY = SeverityMap()


__all__ = [
    "DEFAULT_SEVERITY",
    "SeverityMap",
    "normalize_kind",
    "parse_level",
]
