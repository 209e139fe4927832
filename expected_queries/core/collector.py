"""
Query collector.

Receives "query started" / "query ended" notifications from a trace source
and turns each finished statement into a classified Query record with its
duration and (optionally) the caller's stack trace.
"""

from __future__ import annotations

import logging
import time
import traceback
from typing import Callable, Iterable, List, Optional

from expected_queries.models.query import Query

logger = logging.getLogger(__name__)


class QueryCollector:
    """
    Collects Query records for one recording window.

    Usage:
        collector = QueryCollector(stack_trace_ignore=["sqlalchemy"])
        collector.query_start()
        collector.query_end("SELECT * FROM book")
        collector.queries  # [Query(sql="SELECT * FROM book", ...)]
    """

    def __init__(
        self,
        stack_trace_ignore: Iterable[str] = (),
        *,
        capture_stack_trace: bool = True,
        resolve_subselect: bool = False,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.stack_trace_ignore = tuple(stack_trace_ignore)
        self.capture_stack_trace = capture_stack_trace
        self.resolve_subselect = resolve_subselect
        self._clock = clock
        self._start_time: Optional[float] = None
        self.queries: List[Query] = []

    def query_start(self, sql: Optional[str] = None) -> None:
        """Mark the start of a statement; only the clock reading is kept."""
        self._start_time = self._clock()

    def query_end(self, sql: str) -> Query:
        """Record a finished statement. Duration is 0 if no start was seen."""
        duration = 0.0
        if self._start_time is not None:
            duration = max(0.0, self._clock() - self._start_time)
            self._start_time = None

        return self.add(sql, duration)

    def add(self, sql: str, duration: float = 0.0) -> Query:
        """Record a statement with an already known duration (seconds)."""
        stack_trace = self._stack_trace() if self.capture_stack_trace else None
        query = Query.from_sql(
            sql,
            duration=duration,
            stack_trace=stack_trace,
            resolve_subselect=self.resolve_subselect,
        )
        self.queries.append(query)
        logger.debug(
            "Recorded %s on %s (%.6fs)",
            query.operation.value if query.operation else "unknown query",
            query.table,
            duration,
        )
        return query

    def _is_ignored(self, module: str) -> bool:
        """True if the dotted ``module`` name contains a label as whole segments."""
        parts = module.split(".")
        for label in self.stack_trace_ignore:
            wanted = label.split(".")
            size = len(wanted)
            if any(parts[i : i + size] == wanted for i in range(len(parts) - size + 1)):
                return True
        return False

    def _stack_trace(self) -> str:
        frames = [
            (frame, lineno)
            for frame, lineno in traceback.walk_stack(None)
            if not self._is_ignored(frame.f_globals.get("__name__") or "")
        ]
        frames.reverse()
        return "".join(traceback.StackSummary.extract(frames).format())
