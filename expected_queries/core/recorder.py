"""
Query Recorder

Records the SQL statements run by a piece of code under test and checks them
against expected per-table counts and durations.

Simple:

    expected_queries(
        SQLAlchemyTraceSource(engine),
        lambda: load_books(session),
        {
            "book": {"select": "<= 2"},
            "author": {"insert": None},   # any number is fine
        },
    )

Flexible:

    recorder = QueryRecorder(SQLAlchemyTraceSource(engine))
    recorder.run(lambda: session.get(Book, 34))
    recorder.run(lambda: session.add(Author(name="x")))
    recorder.test({"book": {"select": "<= 2"}, "author": {"insert": 1}})

Every table operation that ran is expected to run 0 times unless the
expectations (or the ``_all_`` defaults) say otherwise. Table operations that
never ran are not checked at all.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from expected_queries.config import settings
from expected_queries.connectors.base import TraceSource
from expected_queries.core.collector import QueryCollector
from expected_queries.core.evaluator import evaluate
from expected_queries.core.report import format_report
from expected_queries.core.sinks import AssertionSink, RaisingSink
from expected_queries.core.statistics import GroupKey, StatSample, aggregate
from expected_queries.errors import Violation
from expected_queries.models.query import Query

logger = logging.getLogger(__name__)


class QueryRecorder:
    """
    Collects queries across one or more ``run()`` calls until ``test()``.

    Not thread-safe; use one recorder per test.
    """

    def __init__(
        self,
        source: TraceSource,
        *,
        sink: Optional[AssertionSink] = None,
        stack_trace_ignore: Optional[Iterable[str]] = None,
        capture_stack_trace: Optional[bool] = None,
        resolve_subselect: Optional[bool] = None,
    ):
        """
        Args:
            source: Trace source hooked into the database layer
            sink: Receives the verdict of ``test()`` (default: RaisingSink)
            stack_trace_ignore: Frame labels trimmed from stack traces
            capture_stack_trace: Capture a stack trace per query
            resolve_subselect: Attribute sub-selects to their inner table
        """
        self.source = source
        self.sink = sink if sink is not None else RaisingSink()
        self.stack_trace_ignore = tuple(
            settings.STACK_TRACE_IGNORE if stack_trace_ignore is None else stack_trace_ignore
        )
        self.capture_stack_trace = (
            settings.CAPTURE_STACK_TRACE if capture_stack_trace is None else capture_stack_trace
        )
        self.resolve_subselect = (
            settings.RESOLVE_SUBSELECT if resolve_subselect is None else resolve_subselect
        )

        self._queries: List[Query] = []
        self._table_statistics: Optional[Dict[GroupKey, StatSample]] = None

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def _new_collector(self) -> QueryCollector:
        return QueryCollector(
            self.stack_trace_ignore,
            capture_stack_trace=self.capture_stack_trace,
            resolve_subselect=self.resolve_subselect,
        )

    @contextmanager
    def recording(self) -> Iterator[QueryCollector]:
        """
        Record queries for the duration of a ``with`` block.

        The trace source is deactivated on every exit path, and the queries
        collected so far are kept even if deactivation fails. Exceptions from
        the block propagate unchanged.
        """
        collector = self._new_collector()
        self.source.activate(collector)
        try:
            yield collector
        finally:
            try:
                self.source.deactivate()
            finally:
                self.extend(collector.queries)

    def run(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call ``func(*args, **kwargs)`` while recording; return its result."""
        with self.recording():
            return func(*args, **kwargs)

    def extend(self, queries: Iterable[Query]) -> None:
        """Append queries and invalidate the cached statistics."""
        queries = list(queries)
        if not queries:
            return
        self._queries.extend(queries)
        self._table_statistics = None
        logger.info(
            "Recorded %d queries (%d total)", len(queries), len(self._queries)
        )

    def reset(self) -> None:
        self._queries = []
        self._table_statistics = None

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def queries(self) -> List[Query]:
        return list(self._queries)

    @property
    def unknown_queries(self) -> List[Query]:
        return [q for q in self._queries if not q.is_classified]

    @property
    def table_statistics(self) -> Dict[GroupKey, StatSample]:
        """Per-(table, operation) samples, rebuilt after queries change."""
        if self._table_statistics is None:
            self._table_statistics = aggregate(self._queries)
        return self._table_statistics

    def sql_queries_for_table(self, table: str) -> str:
        """SQL (and stack traces) of every query on ``table``, one per line."""
        table_key = (table or "").lower()
        return "\n".join(
            q.display_sql for q in self._queries if (q.table_key or "") == table_key
        )

    # -------------------------------------------------------------------------
    # Checking
    # -------------------------------------------------------------------------

    def check(self, expected: Mapping[str, Any]) -> List[Violation]:
        """Evaluate the recorded queries without reporting or resetting."""
        return evaluate(self.table_statistics, expected)

    def test(self, expected: Mapping[str, Any]) -> bool:
        """
        Test the recorded queries against ``expected`` and report the verdict.

        The recorded queries are cleared afterwards. A malformed expectation
        map raises ConfigurationError and leaves the recorded queries intact.

        Returns:
            bool: True if every expectation held
        """
        violations = self.check(expected)
        unknown = self.unknown_queries
        message = format_report(violations, unknown, self.sql_queries_for_table)
        passed = not violations

        if unknown:
            logger.warning("%d unknown queries recorded", len(unknown))
        logger.info(
            "Expected queries %s (%d violations)",
            "passed" if passed else "failed",
            len(violations),
        )

        self.reset()
        self.sink.emit(passed, message)
        return passed


def expected_queries(
    source: TraceSource,
    func: Callable[[], Any],
    expected: Mapping[str, Any],
    **recorder_kwargs: Any,
) -> Any:
    """
    Run ``func`` while recording, test the queries against ``expected`` and
    return ``func``'s result.

    Fails through a RaisingSink unless another ``sink`` is passed.
    """
    recorder = QueryRecorder(source, **recorder_kwargs)
    result = recorder.run(func)
    recorder.test(expected)
    return result
