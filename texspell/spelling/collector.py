"""Scan documents and turn misspelled words into diagnostic records."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from .base import (
    DiagnosticRecord,
    DocumentId,
    DocumentStore,
    Position,
    SpellOracle,
    SyntaxStack,
    SyntaxStackProvider,
    Token,
)
from .regions import RegionClassifier, default_classifier
from .severity import DEFAULT_SEVERITY, SeverityMap, normalize_kind
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "texspell"
MESSAGE_TEMPLATE = "Spelling: {word} ({kind})"

StackLookup = Callable[[Position], SyntaxStack]


class DiagnosticCollector:
    """Run tokenizer, region classifier, oracle and severity map over lines."""

    def __init__(
        self,
        oracle: SpellOracle,
        *,
        classifier: RegionClassifier | None = None,
        severity: SeverityMap | None = None,
        source: str = DEFAULT_SOURCE,
    ) -> None:
        self.oracle = oracle
        self.classifier = classifier or default_classifier
        self.severity = severity or DEFAULT_SEVERITY
        self.source = source

    def collect(
        self,
        lines: Sequence[str],
        *,
        stack_at: StackLookup | None = None,
        spelling_enabled: bool = True,
    ) -> list[DiagnosticRecord]:
        """Return diagnostics for ``lines`` in document order.

        Oracle errors propagate; the caller decides what happens to the
        previously published set.
        """

        if not spelling_enabled:
            return []

        records: list[DiagnosticRecord] = []
        for line_index, line in enumerate(lines):
            for token in tokenize(line):
                position = Position.from_token(line_index, token)
                if not self._should_check(position, stack_at):
                    continue
                record = self._check_token(line_index, token)
                if record is not None:
                    records.append(record)
        return records

    def collect_document(
        self,
        store: DocumentStore,
        syntax: SyntaxStackProvider,
        document: DocumentId,
    ) -> list[DiagnosticRecord]:
        if not store.is_spelling_enabled(document):
            return []

        def stack_at(position: Position) -> SyntaxStack:
            return syntax.stack_at(document, position.line, position.column)

        return self.collect(store.get_lines(document), stack_at=stack_at)

    def _should_check(self, position: Position, stack_at: StackLookup | None) -> bool:
        if stack_at is None:
            return True
        try:
            stack = stack_at(position)
        except Exception as exc:  # noqa: BLE001 - provider failures degrade to plain text
            logger.debug(
                "Syntax stack lookup failed at %s:%s: %s",
                position.line,
                position.column,
                exc,
            )
            return True
        return self.classifier.is_spellcheckable(stack or ())

    def _check_token(self, line_index: int, token: Token) -> DiagnosticRecord | None:
        if not token.text:
            return None

        result = self.oracle.check(token.text)
        if not result.misspelled or result.word != token.text:
            return None

        kind = normalize_kind(result.kind)
        return DiagnosticRecord(
            start_line=line_index,
            start_col=token.start,
            end_line=line_index,
            end_col=token.end,
            severity=self.severity.severity(kind),
            message=MESSAGE_TEMPLATE.format(word=result.word, kind=kind),
            source=self.source,
        )


__all__ = ["DEFAULT_SOURCE", "DiagnosticCollector", "MESSAGE_TEMPLATE"]
