"""
Trace sources that hook into database access layers.
"""

from expected_queries.connectors.base import TraceSource
from expected_queries.connectors.manual import ManualTraceSource
from expected_queries.connectors.sqlalchemy_source import SQLAlchemyTraceSource

__all__ = [
    "TraceSource",
    "ManualTraceSource",
    "SQLAlchemyTraceSource",
]
