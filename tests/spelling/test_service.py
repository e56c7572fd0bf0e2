"""Tests for the host-facing spelling diagnostics service."""

from __future__ import annotations

import logging

from texspell.spelling.base import OracleResult, Severity
from texspell.spelling.config import SpellConfig
from texspell.spelling.host import (
    InMemoryDiagnosticSink,
    InMemoryDocumentStore,
    ManualScheduler,
    PlainTextSyntaxProvider,
)
from texspell.spelling.oracles import WordListOracle
from texspell.spelling.service import SpellDiagnostics

NS = "texspell"


class Harness:
    def __init__(self, oracle=None, syntax=None) -> None:
        self.store = InMemoryDocumentStore()
        self.sink = InMemoryDiagnosticSink()
        self.scheduler = ManualScheduler()
        self.oracle = oracle or WordListOracle(["answer", "the", "is"])
        self.service = SpellDiagnostics(
            self.store,
            syntax or PlainTextSyntaxProvider(),
            self.oracle,
            self.sink,
            scheduler=self.scheduler,
        )

    def messages(self, document) -> list[str]:
        return [record.message for record in self.sink.get(document, NS)]


class FlakyOracle:
    def __init__(self) -> None:
        self.fail = False

    def check(self, word: str) -> OracleResult:
        if self.fail:
            raise RuntimeError("backend went away")
        return OracleResult.bad(word)


class MapSyntax:
    def __init__(self, stack) -> None:
        self.stack = stack

    def stack_at(self, document, line, column):
        return self.stack


def test_open_event_publishes_after_debounce_interval() -> None:
    harness = Harness()
    harness.store.open("doc", [r"\flashcard{Hte answer}"])

    harness.service.handle_event("document-opened", "doc")
    harness.scheduler.advance(0.4)
    assert harness.sink.get("doc", NS) == ()

    harness.scheduler.advance(0.11)

    records = harness.sink.get("doc", NS)
    assert len(records) == 1
    assert (records[0].start_col, records[0].end_col) == (11, 14)
    assert records[0].message == "Spelling: Hte (bad)"
    assert records[0].severity is Severity.ERROR


def test_rapid_edits_produce_one_collection_pass() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])

    for _ in range(5):
        harness.service.handle_event("edit-settled", "doc")
        harness.scheduler.advance(0.1)
    harness.scheduler.advance(1.0)

    assert harness.sink.publish_count == 1
    assert harness.messages("doc") == ["Spelling: wrod (bad)"]


def test_events_outside_trigger_set_and_filetype_are_ignored() -> None:
    harness = Harness()
    harness.store.open("notes", ["wrod"], filetype="markdown")
    harness.store.open("doc", ["wrod"])

    harness.service.handle_event("cursor-moved", "doc")
    harness.service.handle_event("document-saved", "notes")
    harness.scheduler.advance(1.0)

    assert harness.sink.publish_count == 0


def test_refresh_defaults_to_current_document_and_is_deferred() -> None:
    harness = Harness()
    harness.store.open("other", ["wrod"])
    harness.store.open("doc", ["speling"])

    harness.service.handle_event("edit-settled", "doc")
    harness.service.refresh()

    assert harness.sink.publish_count == 0
    harness.scheduler.run_ready()
    assert harness.messages("doc") == ["Spelling: speling (bad)"]

    harness.scheduler.advance(1.0)
    assert harness.sink.publish_count == 1
    assert harness.sink.get("other", NS) == ()


def test_enable_is_idempotent_and_disable_clears() -> None:
    harness = Harness()
    harness.store.open("a", ["wrod"])
    harness.store.open("b", ["answer"])

    harness.service.enable()
    harness.service.enable()
    harness.scheduler.run_ready()

    assert harness.sink.publish_count == 2
    assert harness.messages("a") == ["Spelling: wrod (bad)"]

    harness.service.disable()

    assert harness.service.enabled is False
    assert harness.sink.get("a", NS) == ()
    assert harness.sink.get("b", NS) == ()


def test_disable_drops_pending_and_queued_passes() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])

    harness.service.handle_event("document-opened", "doc")
    harness.service.refresh("doc")
    harness.service.disable()
    harness.scheduler.advance(1.0)

    assert harness.sink.publish_count == 0
    assert harness.service.debouncer.pending_documents() == []


def test_events_are_ignored_while_disabled_and_toggle_restores() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])

    harness.service.toggle()
    harness.service.handle_event("document-saved", "doc")
    harness.scheduler.advance(1.0)
    assert harness.sink.publish_count == 0

    harness.service.toggle()
    harness.scheduler.run_ready()

    assert harness.service.enabled is True
    assert harness.messages("doc") == ["Spelling: wrod (bad)"]


def test_failed_pass_keeps_previous_diagnostics(caplog) -> None:
    oracle = FlakyOracle()
    harness = Harness(oracle=oracle)
    harness.store.open("doc", ["wrod"])
    harness.service.refresh("doc")
    harness.scheduler.run_ready()
    previous = harness.sink.get("doc", NS)

    oracle.fail = True
    with caplog.at_level(logging.ERROR):
        harness.service.refresh("doc")
        harness.scheduler.run_ready()

    assert harness.sink.get("doc", NS) == previous
    assert len(previous) == 1
    assert "keeping previous diagnostics" in caplog.text


def test_close_cancels_pending_pass_and_clears() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])
    harness.service.refresh("doc")
    harness.scheduler.run_ready()

    harness.service.handle_event("edit-settled", "doc")
    harness.service.handle_event("document-closed", "doc")
    harness.store.close("doc")
    harness.scheduler.advance(1.0)

    assert harness.sink.get("doc", NS) == ()
    assert harness.sink.publish_count == 1


def test_closed_document_makes_refresh_a_noop() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])
    harness.service.refresh("doc")
    harness.store.close("doc")
    harness.scheduler.run_ready()

    harness.service.refresh("doc")
    harness.service.refresh("missing")
    harness.scheduler.run_ready()

    assert harness.sink.publish_count == 0


def test_setup_reports_problems_and_falls_back(caplog) -> None:
    harness = Harness()

    with caplog.at_level(logging.WARNING):
        problems = harness.service.setup({"debounce_ms": -1, "bogus": 1, "severity": {"bad": "hint"}})

    assert len(problems) == 2
    assert harness.service.config.debounce_ms == 500
    assert harness.service.config.severity.bad is Severity.HINT
    assert "bogus" in caplog.text


def test_setup_interval_and_severity_flow_into_passes() -> None:
    harness = Harness()
    harness.service.setup(SpellConfig.from_mapping({"debounce_ms": 100, "severity": {"bad": "warn"}}))
    harness.store.open("doc", ["wrod"])

    harness.service.handle_event("document-opened", "doc")
    harness.scheduler.advance(0.11)

    records = harness.sink.get("doc", NS)
    assert len(records) == 1
    assert records[0].severity is Severity.WARN


def test_disabled_config_ignores_triggers_until_enabled() -> None:
    harness = Harness()
    harness.service.setup({"enabled": False})
    harness.store.open("doc", ["wrod"])

    harness.service.handle_event("document-opened", "doc")
    harness.scheduler.advance(1.0)
    assert harness.sink.publish_count == 0

    harness.service.enable()
    harness.scheduler.run_ready()
    assert harness.messages("doc") == ["Spelling: wrod (bad)"]


def test_other_namespaces_are_left_alone() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])
    harness.sink.publish("doc", "linter", ())

    harness.service.refresh("doc")
    harness.scheduler.run_ready()
    harness.service.disable()

    assert harness.sink.namespaces("doc") == ["linter", NS]


def test_region_config_reaches_classifier() -> None:
    harness = Harness(syntax=MapSyntax(["myVerbatimZone"]))
    harness.service.setup({"extra_skipped_regions": ["myVerbatim"]})
    harness.store.open("doc", ["wrod"])

    harness.service.refresh("doc")
    harness.scheduler.run_ready()

    assert harness.sink.get("doc", NS) == ()
    assert harness.sink.publish_count == 1


def test_document_spelling_flag_publishes_empty_set() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"], spelling_enabled=False)

    harness.service.refresh("doc")
    harness.scheduler.run_ready()

    assert harness.sink.publish_count == 1
    assert harness.sink.get("doc", NS) == ()


def test_setup_validates_config_instances() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])

    problems = harness.service.setup(SpellConfig(debounce_ms=-1, namespace=""))

    assert len(problems) == 2
    assert harness.service.config.debounce_ms == 500
    assert harness.service.config.namespace == NS
    assert harness.service.debouncer.interval_ms == 500

    harness.service.handle_event("document-opened", "doc")
    harness.scheduler.advance(0.51)
    assert harness.messages("doc") == ["Spelling: wrod (bad)"]


def test_setup_with_valid_instance_reports_no_problems() -> None:
    harness = Harness()
    config = SpellConfig.from_mapping({"debounce_ms": 100, "severity": {"caps": "error"}})

    assert harness.service.setup(config) == []
    assert harness.service.config == config


def test_setup_namespace_change_moves_published_sets() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])
    harness.service.refresh("doc")
    harness.scheduler.run_ready()

    harness.service.setup({"namespace": "other"})
    assert harness.sink.get("doc", NS) == ()

    harness.scheduler.run_ready()
    assert [record.message for record in harness.sink.get("doc", "other")] == ["Spelling: wrod (bad)"]

    harness.service.disable()
    assert harness.sink.get("doc", NS) == ()
    assert harness.sink.get("doc", "other") == ()


def test_setup_disabling_clears_published_sets() -> None:
    harness = Harness()
    harness.store.open("doc", ["wrod"])
    harness.service.refresh("doc")
    harness.scheduler.run_ready()
    harness.service.handle_event("edit-settled", "doc")

    harness.service.setup({"enabled": False})
    harness.scheduler.advance(1.0)

    assert harness.service.enabled is False
    assert harness.sink.get("doc", NS) == ()
    assert harness.sink.publish_count == 1
