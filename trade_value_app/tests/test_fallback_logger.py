"""Tests for the background fallback event logger."""

from __future__ import annotations

import logging

from fakes import FakeStore

from trade_value_app.fallback_logger import FallbackLogger


def test_event_is_written_to_sink() -> None:
    store = FakeStore()
    fallback_logger = FallbackLogger(store)
    future = fallback_logger.log_event("pokemon", 12.5, "No settings found for game pokemon", "user-1")
    future.result(timeout=5)
    fallback_logger.shutdown()
    assert len(store.logs) == 1
    row = store.logs[0]
    assert row["game"] == "pokemon"
    assert row["base_value"] == 12.5
    assert row["reason"] == "No settings found for game pokemon"
    assert row["user_id"] == "user-1"
    assert row["created_at"].endswith("+00:00")


def test_anonymous_user_is_stored_as_none() -> None:
    store = FakeStore()
    fallback_logger = FallbackLogger(store)
    fallback_logger.log_event("magic", 3, "reason", "").result(timeout=5)
    fallback_logger.shutdown()
    assert store.logs[0]["user_id"] is None


def test_sink_failure_is_only_logged(caplog) -> None:
    class BrokenSink:
        def insert_fallback_log(self, row):
            raise ConnectionError("sink unavailable")

    fallback_logger = FallbackLogger(BrokenSink())
    with caplog.at_level(logging.ERROR):
        future = fallback_logger.log_event("pokemon", 1, "reason")
        assert future.result(timeout=5) is None
    fallback_logger.shutdown()
    assert "Failed to log fallback event: sink unavailable" in caplog.text


def test_events_after_shutdown_are_dropped() -> None:
    store = FakeStore()
    fallback_logger = FallbackLogger(store)
    fallback_logger.shutdown()
    assert fallback_logger.log_event("pokemon", 1, "reason") is None
    assert store.logs == []
