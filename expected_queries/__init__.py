"""
expected-queries: test that only the SQL queries you expect are run.

Record the statements a piece of code executes, classify them by table and
operation, and check per-table counts and durations against expectations.
"""

from expected_queries.config import ALL_TABLES_KEY, Settings, settings
from expected_queries.connectors import (
    ManualTraceSource,
    SQLAlchemyTraceSource,
    TraceSource,
)
from expected_queries.core import (
    AssertionSink,
    CollectingSink,
    LoggingSink,
    RaisingSink,
    StatSample,
    aggregate,
    classify,
    evaluate,
)
from expected_queries.core.recorder import QueryRecorder, expected_queries
from expected_queries.errors import (
    ConfigurationError,
    ExpectedQueriesError,
    ExpectedQueriesFailed,
    InvalidComparisonError,
    TraceSourceError,
    UnsupportedStatisticError,
    Violation,
)
from expected_queries.models import (
    Comparison,
    ExpectationSpec,
    Query,
    StatisticKind,
    TableOperation,
)

__version__ = "0.3.0"

__all__ = [
    "ALL_TABLES_KEY",
    "Settings",
    "settings",
    "TraceSource",
    "ManualTraceSource",
    "SQLAlchemyTraceSource",
    "AssertionSink",
    "CollectingSink",
    "LoggingSink",
    "RaisingSink",
    "StatSample",
    "aggregate",
    "classify",
    "evaluate",
    "QueryRecorder",
    "expected_queries",
    "ConfigurationError",
    "ExpectedQueriesError",
    "ExpectedQueriesFailed",
    "InvalidComparisonError",
    "TraceSourceError",
    "UnsupportedStatisticError",
    "Violation",
    "Comparison",
    "ExpectationSpec",
    "Query",
    "StatisticKind",
    "TableOperation",
]
