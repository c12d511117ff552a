"""Unit tests for engine and session helpers."""

from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from src.services import build_engine, get_db, init_db


class TestDatabaseHelpers:
    """Tests for build_engine, init_db and get_db."""

    def test_sqlite_engine_uses_static_pool(self):
        engine = build_engine("sqlite:///:memory:")

        assert isinstance(engine.pool, StaticPool)
        engine.dispose()

    def test_init_db_creates_audit_and_entity_tables(self):
        engine = build_engine("sqlite:///:memory:")

        init_db(engine)

        tables = set(inspect(engine).get_table_names())
        assert {"audit_logs", "users", "agencies", "residents", "care_plans"} <= tables
        engine.dispose()

    def test_get_db_closes_session(self):
        generator = get_db()
        session = next(generator)

        assert session.is_active
        generator.close()
