"""Spelling diagnostics for LaTeX-like documents."""

from .base import (
    ConfigError,
    DiagnosticRecord,
    OracleError,
    OracleResult,
    Position,
    RegionTag,
    Severity,
    SpellDiagnosticsError,
    Token,
)
from .tokenizer import is_command_name, tokenize
from .regions import RegionClassifier, is_spellcheckable
from .severity import SeverityMap, normalize_kind
from .collector import DiagnosticCollector
from .debounce import DebounceScheduler
from .config import SpellConfig, load_config_mapping, load_spell_config
from .oracles import SpellCheckerOracle, WordListOracle
from .host import (
    InMemoryDiagnosticSink,
    InMemoryDocumentStore,
    ManualScheduler,
    PlainTextSyntaxProvider,
)
from .service import SpellDiagnostics
from .commands import CommandTable, register_commands

__all__ = [
    "CommandTable",
    "ConfigError",
    "DebounceScheduler",
    "DiagnosticCollector",
    "DiagnosticRecord",
    "InMemoryDiagnosticSink",
    "InMemoryDocumentStore",
    "ManualScheduler",
    "OracleError",
    "OracleResult",
    "PlainTextSyntaxProvider",
    "Position",
    "RegionClassifier",
    "RegionTag",
    "Severity",
    "SeverityMap",
    "SpellCheckerOracle",
    "SpellConfig",
    "SpellDiagnostics",
    "SpellDiagnosticsError",
    "Token",
    "WordListOracle",
    "is_command_name",
    "is_spellcheckable",
    "load_config_mapping",
    "load_spell_config",
    "normalize_kind",
    "register_commands",
    "tokenize",
]
