from __future__ import annotations

import pytest

from trade_value_app.services import build_services, create_store
from trade_value_app.settings import Settings
from trade_value_app.sqlite_store import SqliteStore
from trade_value_app.supabase_store import SupabaseStore


def test_auto_backend_without_supabase_uses_sqlite(tmp_path) -> None:
    settings = Settings(SUPABASE_URL=None, SQLITE_DB=str(tmp_path / "t.db"), STORE_BACKEND="auto")
    assert settings.resolved_backend() == "sqlite"
    assert isinstance(create_store(settings), SqliteStore)


def test_auto_backend_with_supabase_credentials() -> None:
    settings = Settings(
        SUPABASE_URL="https://example.supabase.co",
        SUPABASE_SERVICE_ROLE_KEY=None,
        SUPABASE_ANON_KEY="anon",
        STORE_BACKEND="auto",
    )
    assert settings.resolved_backend() == "supabase"
    assert isinstance(create_store(settings), SupabaseStore)


def test_unknown_backend_is_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(STORE_BACKEND="redis").resolved_backend()


def test_cors_origins_are_split() -> None:
    settings = Settings(CORS_ORIGINS="http://a.test, http://b.test,")
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_build_services_end_to_end_with_sqlite(tmp_path) -> None:
    settings = Settings(SUPABASE_URL=None, SQLITE_DB=str(tmp_path / "t.db"), STORE_BACKEND="sqlite")
    services = build_services(settings)
    services.store.replace_settings(
        "pokemon",
        [{"min_value": 0, "max_value": 10, "cash_percentage": 30, "trade_percentage": 45}],
    )
    result = services.engine.calculate("pokemon", 5)
    assert (result.cash_value, result.trade_value) == (1.5, 2.25)
    fallback = services.engine.calculate("magic", 10, user_id="u1")
    services.fallback_logger.shutdown()
    assert fallback.fallback_reason == "NO_SETTINGS_FOUND"
    logs = services.store.fetch_fallback_logs()
    assert [(row["game"], row["user_id"]) for row in logs] == [("magic", "u1")]
