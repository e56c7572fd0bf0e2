"""Configuration helpers for spelling diagnostics."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from texspell import paths
from .base import ConfigError
from .collector import DEFAULT_SOURCE
from .severity import SeverityMap

EVENT_OPENED = "document-opened"
EVENT_SAVED = "document-saved"
EVENT_EDIT_SETTLED = "edit-settled"
EVENT_CLOSED = "document-closed"

DEFAULT_DEBOUNCE_MS = 500
DEFAULT_TRIGGER_EVENTS = frozenset({EVENT_OPENED, EVENT_SAVED, EVENT_EDIT_SETTLED})
DEFAULT_FILETYPES = ("tex",)
DEFAULT_NAMESPACE = "texspell"

_KEY_ALIASES = {
    "debounce_time": "debounce_ms",
    "debounce_interval_ms": "debounce_ms",
    "check_on": "trigger_events",
}
_KNOWN_KEYS = frozenset(
    {
        "enabled",
        "severity",
        "debounce_ms",
        "trigger_events",
        "filetypes",
        "namespace",
        "source",
        "extra_spellable_regions",
        "extra_skipped_regions",
    }
)


@dataclass(frozen=True, slots=True)
class SpellConfig:
    enabled: bool = True
    severity: SeverityMap = field(default_factory=SeverityMap)
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    trigger_events: frozenset[str] = DEFAULT_TRIGGER_EVENTS
    filetypes: tuple[str, ...] = DEFAULT_FILETYPES
    namespace: str = DEFAULT_NAMESPACE
    source: str = DEFAULT_SOURCE
    extra_spellable_regions: tuple[str, ...] = ()
    extra_skipped_regions: tuple[str, ...] = ()

    @classmethod
    def default(cls) -> "SpellConfig":
        return cls()

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, Any],
        *,
        problems: list[str] | None = None,
    ) -> "SpellConfig":
        """Validate ``payload``; each invalid option falls back to its default.

        Problems are appended to ``problems`` as human-readable strings.
        """

        issues: list[str] = [] if problems is None else problems
        values: dict[str, Any] = {}

        for raw_key, value in payload.items():
            key = str(raw_key).strip()
            key = _KEY_ALIASES.get(key, key)
            if key not in _KNOWN_KEYS:
                issues.append(f"Unknown option '{raw_key}' ignored")
                continue
            try:
                values[key] = _PARSERS[key](value, issues)
            except ConfigError as exc:
                issues.append(f"{key}: {exc}; using default")

        return cls(**values)

    def with_enabled(self, enabled: bool) -> "SpellConfig":
        return replace(self, enabled=enabled)

    def validated(self, *, problems: list[str] | None = None) -> "SpellConfig":
        """Re-run option validation on an already built config."""

        return type(self).from_mapping(asdict(self), problems=problems)


def load_config_mapping(config_path: Path | None) -> Mapping[str, Any]:
    """Read the raw YAML mapping, or an empty mapping when no file exists."""

    if config_path is not None:
        resolved = Path(config_path).expanduser()
        if not resolved.exists():
            raise FileNotFoundError(f"Spelling config '{resolved}' does not exist")
        return _read_yaml(resolved)

    default_path = paths.get_config_file()
    if default_path.exists():
        return _read_yaml(default_path)
    return {}


def load_spell_config(
    config_path: Path | None,
    *,
    problems: list[str] | None = None,
) -> SpellConfig:
    data = load_config_mapping(config_path)
    if not data:
        return SpellConfig.default()
    return SpellConfig.from_mapping(data, problems=problems)


def _read_yaml(path: Path) -> Mapping[str, Any]:
    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Spelling config '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError("Spelling config must be a mapping")
    return data


def _parse_enabled(value: Any, _issues: list[str]) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"expected a boolean, got {value!r}")


def _parse_severity(value: Any, issues: list[str]) -> SeverityMap:
    if not isinstance(value, Mapping):
        raise ConfigError(f"expected a mapping of error kind to level, got {value!r}")
    return SeverityMap.from_mapping(value, problems=issues)


def _parse_debounce(value: Any, _issues: list[str]) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"expected an integer number of milliseconds, got {value!r}")
    if value < 0:
        raise ConfigError(f"must be >= 0, got {value}")
    return value


def _parse_events(value: Any, _issues: list[str]) -> frozenset[str]:
    return frozenset(_normalize_names(value))


def _parse_filetypes(value: Any, _issues: list[str]) -> tuple[str, ...]:
    return tuple(name.lower().lstrip(".") for name in _normalize_names(value))


def _parse_name(value: Any, _issues: list[str]) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"expected a non-empty string, got {value!r}")
    return value.strip()


def _parse_prefixes(value: Any, _issues: list[str]) -> tuple[str, ...]:
    return _normalize_names(value)


def _normalize_names(values: Any) -> tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, Sequence) and not isinstance(values, (set, frozenset)):
        raise ConfigError(f"expected a list of names, got {values!r}")
    names: list[str] = []
    for raw in values:
        token = str(raw).strip()
        if token:
            names.append(token)
    return tuple(dict.fromkeys(names))


_PARSERS = {
    "enabled": _parse_enabled,
    "severity": _parse_severity,
    "debounce_ms": _parse_debounce,
    "trigger_events": _parse_events,
    "filetypes": _parse_filetypes,
    "namespace": _parse_name,
    "source": _parse_name,
    "extra_spellable_regions": _parse_prefixes,
    "extra_skipped_regions": _parse_prefixes,
}


__all__ = [
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_FILETYPES",
    "DEFAULT_NAMESPACE",
    "DEFAULT_TRIGGER_EVENTS",
    "EVENT_CLOSED",
    "EVENT_EDIT_SETTLED",
    "EVENT_OPENED",
    "EVENT_SAVED",
    "SpellConfig",
    "load_config_mapping",
    "load_spell_config",
]
