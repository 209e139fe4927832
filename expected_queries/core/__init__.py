"""
Core recording, aggregation and evaluation.
"""

from expected_queries.core.classifier import (
    Classified,
    Unclassified,
    UNCLASSIFIED,
    SUBSELECT_TABLE,
    classify,
)
from expected_queries.core.statistics import StatSample, aggregate
from expected_queries.core.evaluator import evaluate
from expected_queries.core.collector import QueryCollector
from expected_queries.core.sinks import (
    AssertionSink,
    RaisingSink,
    LoggingSink,
    CollectingSink,
)

__all__ = [
    "Classified",
    "Unclassified",
    "UNCLASSIFIED",
    "SUBSELECT_TABLE",
    "classify",
    "StatSample",
    "aggregate",
    "evaluate",
    "QueryCollector",
    "AssertionSink",
    "RaisingSink",
    "LoggingSink",
    "CollectingSink",
]
