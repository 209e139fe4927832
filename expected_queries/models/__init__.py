"""
Data models for expected-queries.

This package contains:
- Query records and table operations
- Expectation maps, statistics and comparisons
"""

from expected_queries.models.query import (
    TableOperation,
    Query,
)

from expected_queries.models.expectations import (
    StatisticKind,
    Comparison,
    ExpectationSpec,
    DEFAULT_OUTCOME,
    parse_outcome,
)

__all__ = [
    # query
    "TableOperation",
    "Query",
    # expectations
    "StatisticKind",
    "Comparison",
    "ExpectationSpec",
    "DEFAULT_OUTCOME",
    "parse_outcome",
]
