from __future__ import annotations

import json
import logging

from core.exceptions import ConcurrencyError
from infra import logging_config
from infra import operational_support as support_mod
from infra.operational_support import (
    REDACTED,
    REDACTED_ACCOUNT,
    REDACTED_EMAIL,
    OperationalSupport,
    TraceIdLogFilter,
    bind_trace_id,
    current_trace_id,
)


def test_operational_support_emits_redacted_structured_event(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = OperationalSupport(events_path=events_path)

    with bind_trace_id("inc-test-123"):
        trace_id = support.emit_event(
            event_type="ledger.test",
            message="token=abc123 paid from DE89 3704 0044 0532 0130 00 by alice@example.com",
            data={
                "password": "StrongPass123",
                "contact": "alice@example.com",
                "nested": {"iban": "DE89370400440532013000"},
                "amount": 1250.5,
            },
        )

    assert trace_id == "inc-test-123"
    rows = events_path.read_text(encoding="utf-8").splitlines()
    assert len(rows) == 1
    payload = json.loads(rows[0])
    assert payload["trace_id"] == "inc-test-123"
    assert payload["event_type"] == "ledger.test"
    assert "abc123" not in payload["message"]
    assert "alice@example.com" not in payload["message"]
    assert REDACTED_ACCOUNT in payload["message"]
    assert payload["data"]["password"] == REDACTED
    assert payload["data"]["nested"]["iban"] == REDACTED
    assert payload["data"]["contact"] == REDACTED_EMAIL
    assert payload["data"]["amount"] == 1250.5


def test_record_failure_keeps_error_code(tmp_path):
    support = OperationalSupport(events_path=tmp_path / "support-events.jsonl")

    try:
        raise ConcurrencyError("Commitment was updated by another user.", code="STALE_WRITE")
    except ConcurrencyError as exc:
        support.record_failure(exc, context="unit-test", trace_id="inc-crash-1")

    payload = support.read_events(trace_id="inc-crash-1")[0]
    assert payload["event_type"] == "ledger.failure"
    assert payload["level"] == "ERROR"
    assert payload["data"]["exception_type"] == "ConcurrencyError"
    assert payload["data"]["error_code"] == "STALE_WRITE"


def test_trace_id_is_scoped_to_the_block():
    assert current_trace_id() is None
    with bind_trace_id(None) as generated:
        assert generated.startswith("inc-")
        assert current_trace_id() == generated
    assert current_trace_id() is None


def test_trace_filter_tags_log_records(caplog):
    logger = logging.getLogger("tests.trace")
    handler_filter = TraceIdLogFilter()
    caplog.handler.addFilter(handler_filter)
    try:
        with caplog.at_level(logging.INFO, logger="tests.trace"):
            with bind_trace_id("inc-log-1"):
                logger.info("payment recorded")
    finally:
        caplog.handler.removeFilter(handler_filter)

    assert caplog.records[-1].trace_id == "inc-log-1"


def test_setup_logging_writes_rotating_file(tmp_path, monkeypatch):
    support = OperationalSupport(events_path=tmp_path / "support-events.jsonl")
    monkeypatch.setattr(logging_config, "get_operational_support", lambda: support)
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level

    try:
        log_file = logging_config.setup_logging(log_dir=tmp_path / "logs")
        with bind_trace_id("inc-setup"):
            logging.getLogger("core.services.ledger").info("ledger ready")
        for handler in root.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    assert log_file.name == "ledger.log"
    assert "trace=inc-setup core.services.ledger - ledger ready" in text
    assert support.read_events(event_type="app.logging.initialized")


def test_global_support_is_lazily_created(tmp_path, monkeypatch):
    monkeypatch.setattr(support_mod, "_GLOBAL_SUPPORT", None)
    monkeypatch.setattr(support_mod, "user_data_dir", lambda: tmp_path)

    support = support_mod.get_operational_support()

    assert support.events_path == tmp_path / "logs" / "support-events.jsonl"
    assert support_mod.get_operational_support() is support
