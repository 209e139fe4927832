"""
Tests for trace sources (manual and SQLAlchemy).
"""

import pytest
from sqlalchemy import event, text

from expected_queries.connectors import ManualTraceSource, SQLAlchemyTraceSource
from expected_queries.core.collector import QueryCollector
from expected_queries.errors import TraceSourceError
from expected_queries.models import TableOperation


def _collector() -> QueryCollector:
    return QueryCollector(capture_stack_trace=False)


class TestManualTraceSource:
    """Tests for ManualTraceSource."""

    def test_records_while_active(self, manual_source):
        collector = _collector()
        manual_source.activate(collector)
        manual_source.query_start()
        manual_source.query_end("SELECT * FROM book")
        manual_source.record("DELETE FROM book", duration=0.5)
        manual_source.deactivate()

        assert [q.operation for q in collector.queries] == [
            TableOperation.SELECT,
            TableOperation.DELETE,
        ]
        assert collector.queries[1].duration == 0.5

    def test_ignored_while_inactive(self, manual_source):
        assert manual_source.query_end("SELECT * FROM book") is None
        assert manual_source.record("SELECT * FROM book") is None
        manual_source.query_start()

    def test_double_activate_rejected(self, manual_source):
        manual_source.activate(_collector())
        with pytest.raises(TraceSourceError):
            manual_source.activate(_collector())
        manual_source.deactivate()

    def test_deactivate_idempotent(self, manual_source):
        manual_source.deactivate()
        manual_source.activate(_collector())
        manual_source.deactivate()
        manual_source.deactivate()
        assert not manual_source.active


class TestSQLAlchemyTraceSource:
    """Tests for SQLAlchemyTraceSource on an in-memory SQLite engine."""

    def test_records_statements(self, engine, sqlalchemy_source):
        collector = _collector()
        sqlalchemy_source.activate(collector)
        with engine.begin() as conn:
            conn.execute(text("SELECT * FROM book WHERE id = :id"), {"id": 1})
            conn.execute(text("UPDATE author SET name = :name WHERE id = 1"), {"name": "U"})
        sqlalchemy_source.deactivate()

        assert [(q.operation, q.table) for q in collector.queries] == [
            (TableOperation.SELECT, "book"),
            (TableOperation.UPDATE, "author"),
        ]
        assert all(q.duration >= 0 for q in collector.queries)

    def test_listeners_removed(self, engine, sqlalchemy_source):
        sqlalchemy_source.activate(_collector())
        assert event.contains(
            engine, "after_cursor_execute", sqlalchemy_source._after_cursor_execute
        )
        assert event.contains(engine, "handle_error", sqlalchemy_source._handle_error)
        sqlalchemy_source.deactivate()

        assert not event.contains(
            engine, "before_cursor_execute", sqlalchemy_source._before_cursor_execute
        )
        assert not event.contains(
            engine, "after_cursor_execute", sqlalchemy_source._after_cursor_execute
        )
        assert not event.contains(engine, "handle_error", sqlalchemy_source._handle_error)

    def test_records_statement_that_raised(self, engine, sqlalchemy_source):
        """Test a failing statement is recorded and later ones are timed afresh."""
        collector = _collector()
        sqlalchemy_source.activate(collector)
        with engine.connect() as conn:
            with pytest.raises(Exception):
                conn.execute(text("SELECT * FROM missing_table"))
            conn.rollback()
            conn.execute(text("SELECT * FROM book"))
        sqlalchemy_source.deactivate()

        assert [q.table for q in collector.queries] == ["missing_table", "book"]
        assert collector._start_time is None

    def test_not_recording_after_deactivate(self, engine, sqlalchemy_source):
        collector = _collector()
        sqlalchemy_source.activate(collector)
        sqlalchemy_source.deactivate()
        with engine.connect() as conn:
            conn.execute(text("SELECT * FROM book"))

        assert collector.queries == []

    def test_accepts_object_with_sync_engine(self, engine):
        class FakeAsyncEngine:
            sync_engine = engine

        source = SQLAlchemyTraceSource(FakeAsyncEngine())
        assert source.engine is engine
