from __future__ import annotations

from fakes import fixed, ranged

from trade_value_app.sqlite_store import SqliteStore


def test_replace_and_fetch_keep_insertion_order(tmp_path) -> None:
    store = SqliteStore(str(tmp_path / "db" / "trade_values.db"))
    store.replace_settings("pokemon", [ranged(10, 100, 40, 55), ranged(0, 9.99, 30, 45)])
    rows = store.fetch_settings("pokemon")
    assert [(row["min_value"], row["max_value"]) for row in rows] == [(10, 100), (0, 9.99)]
    assert all(row["game"] == "pokemon" for row in rows)
    assert rows[0]["fixed_cash_value"] is None
    assert store.fetch_settings("magic") == []


def test_replace_discards_previous_rows(tmp_path) -> None:
    store = SqliteStore(str(tmp_path / "trade_values.db"))
    store.replace_settings("magic", [ranged(0, 10, 30, 45)])
    store.replace_settings("magic", [fixed(2, 3)])
    rows = store.fetch_settings("magic")
    assert len(rows) == 1
    assert (rows[0]["fixed_cash_value"], rows[0]["fixed_trade_value"]) == (2, 3)


def test_fallback_log_rows(tmp_path) -> None:
    store = SqliteStore(str(tmp_path / "trade_values.db"))
    store.insert_fallback_log(
        {
            "game": "pokemon",
            "base_value": 1000,
            "reason": "No price range match",
            "user_id": None,
            "created_at": "2024-01-01T00:00:00+00:00",
        }
    )
    logs = store.fetch_fallback_logs()
    assert len(logs) == 1
    assert logs[0]["reason"] == "No price range match"
    assert logs[0]["user_id"] is None
