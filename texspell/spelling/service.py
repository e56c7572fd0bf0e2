"""Host-facing spelling diagnostics service."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .base import (
    DiagnosticSink,
    DocumentId,
    DocumentStore,
    Scheduler,
    SpellOracle,
    SyntaxStackProvider,
)
from .collector import DiagnosticCollector
from .config import EVENT_CLOSED, SpellConfig
from .debounce import DebounceScheduler
from .regions import RegionClassifier

logger = logging.getLogger(__name__)


class SpellDiagnostics:
    """Wire the collector to host events, the debouncer and the sink.

    Collection passes never run inside the caller's turn: a debounced trigger,
    ``refresh`` or ``enable`` queues the pass on the scheduler with
    ``call_soon``. At most one queued pass exists per document. A pass that
    fails leaves the previously published diagnostics in place.
    """

    def __init__(
        self,
        store: DocumentStore,
        syntax: SyntaxStackProvider,
        oracle: SpellOracle,
        sink: DiagnosticSink,
        *,
        scheduler: Scheduler,
    ) -> None:
        self._store = store
        self._syntax = syntax
        self._oracle = oracle
        self._sink = sink
        self._scheduler = scheduler
        self._queued: set[DocumentId] = set()
        self._config = SpellConfig.default()
        self._collector = self._build_collector(self._config)
        self._debouncer = DebounceScheduler(scheduler, self._config.debounce_ms, self._update)

    @property
    def config(self) -> SpellConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def debouncer(self) -> DebounceScheduler:
        return self._debouncer

    def setup(self, config: SpellConfig | Mapping[str, Any] | None = None) -> list[str]:
        """Store a new configuration and return any problems found in it."""

        problems: list[str] = []
        if config is None:
            resolved = SpellConfig.default()
        elif isinstance(config, SpellConfig):
            resolved = config.validated(problems=problems)
        else:
            resolved = SpellConfig.from_mapping(config, problems=problems)

        for problem in problems:
            logger.warning("Spelling config: %s", problem)

        collector = self._build_collector(resolved)
        debouncer = DebounceScheduler(self._scheduler, resolved.debounce_ms, self._update)

        # Published sets live under the old namespace; drop them before it is forgotten.
        previous = self._config
        stale: list[DocumentId] = []
        if previous.enabled and (not resolved.enabled or resolved.namespace != previous.namespace):
            stale = self._eligible_documents()
            for document in stale:
                self._clear(document)

        self._debouncer.cancel_all()
        if not resolved.enabled:
            self._queued.clear()
        self._config = resolved
        self._collector = collector
        self._debouncer = debouncer

        if resolved.enabled:
            for document in stale:
                if self._is_eligible(document):
                    self._update(document)
        return problems

    def enable(self) -> None:
        self._config = self._config.with_enabled(True)
        for document in self._eligible_documents():
            self._update(document)

    def disable(self) -> None:
        self._config = self._config.with_enabled(False)
        self._debouncer.cancel_all()
        self._queued.clear()
        for document in self._eligible_documents():
            self._clear(document)

    def toggle(self) -> None:
        if self.enabled:
            self.disable()
        else:
            self.enable()

    def refresh(self, document: DocumentId | None = None) -> None:
        if document is None:
            document = self._store.current_document()
        if document is None or not self._is_eligible(document):
            logger.debug("Refresh ignored for %s", document)
            return
        self._debouncer.cancel(document)
        self._update(document)

    def handle_event(self, event: str, document: DocumentId) -> None:
        if event == EVENT_CLOSED:
            self.document_closed(document)
            return
        if not self.enabled or event not in self._config.trigger_events:
            return
        if not self._is_eligible(document):
            return
        self._debouncer.trigger(document)

    def document_closed(self, document: DocumentId) -> None:
        self._debouncer.cancel(document)
        self._queued.discard(document)
        self._clear(document)

    def shutdown(self) -> None:
        self._debouncer.cancel_all()
        self._queued.clear()

    def _build_collector(self, config: SpellConfig) -> DiagnosticCollector:
        classifier = RegionClassifier.with_extra(
            spellable=config.extra_spellable_regions,
            skipped=config.extra_skipped_regions,
        )
        return DiagnosticCollector(
            self._oracle,
            classifier=classifier,
            severity=config.severity,
            source=config.source,
        )

    def _update(self, document: DocumentId) -> None:
        if not self.enabled or document in self._queued:
            return
        self._queued.add(document)
        self._scheduler.call_soon(self._run_pass, document)

    def _run_pass(self, document: DocumentId) -> None:
        if document not in self._queued:
            return
        self._queued.discard(document)
        if not self.enabled:
            return
        if not self._store.is_valid(document):
            logger.debug("Skipping spelling pass for closed document %s", document)
            return

        try:
            records = self._collector.collect_document(self._store, self._syntax, document)
        except Exception:
            logger.exception("Spelling pass failed for %s; keeping previous diagnostics", document)
            return

        try:
            self._sink.publish(document, self._config.namespace, records)
        except Exception:
            logger.exception("Failed to publish spelling diagnostics for %s", document)
            return
        logger.debug("Published %s spelling diagnostics for %s", len(records), document)

    def _clear(self, document: DocumentId) -> None:
        try:
            self._sink.clear(document, self._config.namespace)
        except Exception:
            logger.exception("Failed to clear spelling diagnostics for %s", document)

    def _is_eligible(self, document: DocumentId) -> bool:
        try:
            if not self._store.is_valid(document):
                return False
            filetypes = self._config.filetypes
            if not filetypes:
                return True
            return (self._store.filetype(document) or "").lower() in filetypes
        except Exception:
            logger.exception("Document store lookup failed for %s", document)
            return False

    def _eligible_documents(self) -> list[DocumentId]:
        try:
            documents = list(self._store.open_documents())
        except Exception:
            logger.exception("Could not list open documents")
            return []
        return [document for document in documents if self._is_eligible(document)]


__all__ = ["SpellDiagnostics"]
