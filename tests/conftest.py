"""
Global pytest configuration and fixtures for expected-queries tests.

This module provides:
- An in-memory SQLite engine with an author/book schema
- Trace source and recorder fixtures
- Query construction helpers
"""

from __future__ import annotations

from typing import Generator

import pytest
from sqlalchemy import Engine, create_engine, text

from expected_queries.connectors import ManualTraceSource, SQLAlchemyTraceSource
from expected_queries.core.recorder import QueryRecorder
from expected_queries.core.sinks import CollectingSink
from expected_queries.models import Query

pytest_plugins = ["expected_queries.pytest_plugin"]


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with ``author`` and ``book`` tables."""
    engine = create_engine("sqlite:///:memory:")
    with engine.begin() as conn:
        conn.execute(
            text("CREATE TABLE author (id INTEGER PRIMARY KEY, name VARCHAR(100))")
        )
        conn.execute(
            text(
                "CREATE TABLE book ("
                "id INTEGER PRIMARY KEY, "
                "title VARCHAR(200), "
                "author_id INTEGER REFERENCES author(id))"
            )
        )
        conn.execute(text("INSERT INTO author (id, name) VALUES (1, 'Le Guin')"))
        conn.execute(
            text(
                "INSERT INTO book (id, title, author_id) VALUES "
                "(1, 'The Dispossessed', 1), (2, 'The Lathe of Heaven', 1)"
            )
        )
    yield engine
    engine.dispose()


# =============================================================================
# Recorder Fixtures
# =============================================================================


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def manual_source() -> ManualTraceSource:
    return ManualTraceSource()


@pytest.fixture
def sqlalchemy_source(engine: Engine) -> Generator[SQLAlchemyTraceSource, None, None]:
    source = SQLAlchemyTraceSource(engine)
    yield source
    source.deactivate()


@pytest.fixture
def recorder(manual_source: ManualTraceSource, sink: CollectingSink) -> QueryRecorder:
    """Recorder over a manual source, without stack traces."""
    return QueryRecorder(manual_source, sink=sink, capture_stack_trace=False)


# =============================================================================
# Helpers
# =============================================================================


def make_query(sql: str, duration: float = 0.0) -> Query:
    """Build a classified Query record without a stack trace."""
    return Query.from_sql(sql, duration=duration)
