"""
Manual trace source for database layers without an event hook.

The code under test (or a thin wrapper around its driver) reports each
statement itself. Reports made while the source is inactive are dropped.
"""

from __future__ import annotations

import logging
from typing import Optional

from expected_queries.connectors.base import TraceSource
from expected_queries.models.query import Query

logger = logging.getLogger(__name__)


class ManualTraceSource(TraceSource):
    """Trace source driven by explicit ``query_start``/``query_end`` calls."""

    def _install(self) -> None:
        pass

    def _uninstall(self) -> None:
        pass

    def query_start(self, sql: Optional[str] = None) -> None:
        if self._collector is None:
            logger.debug("query_start outside a recording window ignored")
            return
        self._collector.query_start(sql)

    def query_end(self, sql: str) -> Optional[Query]:
        if self._collector is None:
            logger.debug("query_end outside a recording window ignored: %s", sql)
            return None
        return self._collector.query_end(sql)

    def record(self, sql: str, duration: float = 0.0) -> Optional[Query]:
        """Report a statement with a known duration (seconds)."""
        if self._collector is None:
            logger.debug("record outside a recording window ignored: %s", sql)
            return None
        return self._collector.add(sql, duration)
