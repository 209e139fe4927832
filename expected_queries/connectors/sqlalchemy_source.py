"""
SQLAlchemy trace source.

Listens to the engine's ``before_cursor_execute`` / ``after_cursor_execute``
events for the duration of a recording window. A statement that raises is
recorded from ``handle_error``, since ``after_cursor_execute`` never fires for it.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Engine

from expected_queries.connectors.base import TraceSource

logger = logging.getLogger(__name__)


class SQLAlchemyTraceSource(TraceSource):
    """
    Trace every statement executed through a SQLAlchemy engine.

    Usage:
        recorder = QueryRecorder(SQLAlchemyTraceSource(engine))
        recorder.run(lambda: session.get(Book, 1))
    """

    def __init__(self, engine: Any):
        """
        Args:
            engine: An Engine, or an AsyncEngine (its ``sync_engine`` is used).
        """
        super().__init__()
        self.engine: Engine = getattr(engine, "sync_engine", engine)
        self._pending = False

    def _before_cursor_execute(
        self, conn, cursor, statement, parameters, context, executemany
    ) -> None:
        if self._collector is not None:
            self._pending = True
            self._collector.query_start(statement)

    def _after_cursor_execute(
        self, conn, cursor, statement, parameters, context, executemany
    ) -> None:
        if self._collector is not None and self._pending:
            self._pending = False
            self._collector.query_end(statement)

    def _handle_error(self, context) -> None:
        # after_cursor_execute does not fire for a statement that raised
        if self._collector is not None and self._pending and context.statement is not None:
            self._pending = False
            self._collector.query_end(context.statement)

    def _install(self) -> None:
        self._pending = False
        event.listen(self.engine, "before_cursor_execute", self._before_cursor_execute)
        event.listen(self.engine, "after_cursor_execute", self._after_cursor_execute)
        event.listen(self.engine, "handle_error", self._handle_error)

    def _uninstall(self) -> None:
        self._pending = False
        for name, handler in (
            ("before_cursor_execute", self._before_cursor_execute),
            ("after_cursor_execute", self._after_cursor_execute),
            ("handle_error", self._handle_error),
        ):
            if event.contains(self.engine, name, handler):
                event.remove(self.engine, name, handler)
