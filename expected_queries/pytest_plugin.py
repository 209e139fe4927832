"""
pytest fixtures for expected-queries.

Enable in a conftest.py:

    pytest_plugins = ["expected_queries.pytest_plugin"]

then:

    def test_book_listing(engine, query_recorder_factory):
        recorder = query_recorder_factory(SQLAlchemyTraceSource(engine))
        recorder.run(list_books)
        recorder.test({"book": {"select": 1}})
"""

from __future__ import annotations

from typing import Any, Callable, Generator, List

import pytest

from expected_queries.connectors.base import TraceSource
from expected_queries.core.recorder import QueryRecorder


@pytest.fixture
def query_recorder_factory() -> Generator[Callable[..., QueryRecorder], None, None]:
    """
    Build QueryRecorders for a test.

    Trace sources left active by a failing test are deactivated at teardown.
    """
    recorders: List[QueryRecorder] = []

    def _factory(source: TraceSource, **kwargs: Any) -> QueryRecorder:
        recorder = QueryRecorder(source, **kwargs)
        recorders.append(recorder)
        return recorder

    yield _factory

    for recorder in recorders:
        recorder.source.deactivate()
