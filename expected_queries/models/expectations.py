"""
Expectation Models

Parses the caller's expectation map::

    {
        "book": {"select": "<= 2"},
        "author": {"insert": None},            # don't care
        "genre": {"select": {"count": 1, "max": "< 0.5"}},
        "_all_": {"select": 3},                # default for other tables
    }

into validated comparisons. Any table/operation without an entry (and no
``_all_`` default) is expected to run exactly 0 times.
"""

from __future__ import annotations

import math
import operator
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from expected_queries.config import ALL_TABLES_KEY
from expected_queries.errors import (
    ConfigurationError,
    InvalidComparisonError,
    UnsupportedStatisticError,
)


class StatisticKind(str, Enum):
    """Statistics that can be asserted for a table operation."""

    COUNT = "count"
    MEAN = "mean"
    SUM = "sum"
    MAX = "max"
    MIN = "min"

    @classmethod
    def parse(cls, name: Any) -> "StatisticKind":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise UnsupportedStatisticError(name) from None


_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

# Only the leading "[op] number" must match; trailing text is a comment.
_COMPARISON_RE = re.compile(r"^\s*(?:(==|!=|>=|<=|>|<)\s*)?(\d+(?:\.\d+)?)")

Number = Union[int, float]


def _to_number(text: str) -> Number:
    value = float(text)
    return int(value) if value.is_integer() and "." not in text else value


@dataclass(frozen=True, slots=True)
class Comparison:
    """A parsed expected outcome: ``actual <operator> threshold``."""

    operator: str
    threshold: Number
    raw: str

    @classmethod
    def parse(cls, outcome: Any) -> "Comparison":
        """
        Parse a bare number or a string starting with ``"[<op>] <number>"``,
        such as ``"<= 2"`` or ``"2 selects"``.

        Raises:
            InvalidComparisonError: if the outcome is anything else.
        """
        if isinstance(outcome, bool):
            raise InvalidComparisonError(outcome, "booleans are not counts")
        if isinstance(outcome, (int, float)):
            if not math.isfinite(outcome) or outcome < 0:
                raise InvalidComparisonError(outcome, "must be a non-negative number")
            return cls("==", outcome, str(outcome))
        if not isinstance(outcome, str):
            raise InvalidComparisonError(outcome)

        match = _COMPARISON_RE.match(outcome)
        if match is None:
            raise InvalidComparisonError(outcome)
        op, number = match.groups()
        return cls(op or "==", _to_number(number), outcome)

    def check(self, actual: Number) -> bool:
        return _OPERATORS[self.operator](actual, self.threshold)


# Statistic -> comparison, or None for "don't care".
Outcome = Optional[Dict[StatisticKind, Comparison]]

DEFAULT_OUTCOME: Mapping[StatisticKind, Comparison] = MappingProxyType(
    {StatisticKind.COUNT: Comparison("==", 0, "0")}
)


def _operation_key(name: Any) -> str:
    if isinstance(name, Enum):
        name = name.value
    return str(name).strip().lower()


def parse_outcome(outcome: Any) -> Outcome:
    """Normalize one expected outcome to a statistic -> comparison mapping."""
    if outcome is None:
        return None
    if isinstance(outcome, Mapping):
        parsed: Dict[StatisticKind, Comparison] = {}
        for name, value in outcome.items():
            kind = StatisticKind.parse(name)
            if value is None:
                continue
            parsed[kind] = Comparison.parse(value)
        return parsed
    return {StatisticKind.COUNT: Comparison.parse(outcome)}


class ExpectationSpec:
    """
    Validated expectation map.

    Every outcome is parsed on construction, so a malformed entry is a
    configuration error even if its table never runs a query.
    """

    def __init__(self, tables: Dict[str, Dict[str, Outcome]]):
        self.tables = tables

    @classmethod
    def from_mapping(cls, expected: Mapping[str, Any]) -> "ExpectationSpec":
        if isinstance(expected, ExpectationSpec):
            return expected
        if expected is None:
            expected = {}
        if not isinstance(expected, Mapping):
            raise ConfigurationError(
                f"expected_queries: expectations must be a mapping, got {type(expected).__name__}"
            )

        tables: Dict[str, Dict[str, Outcome]] = {}
        for table, operations in expected.items():
            if not isinstance(operations, Mapping):
                raise ConfigurationError(
                    f"expected_queries: operations for table '{table}' must be a mapping"
                )
            table_key = str(table).lower()
            entry = tables.setdefault(table_key, {})
            for operation_name, outcome in operations.items():
                entry[_operation_key(operation_name)] = parse_outcome(outcome)
        return cls(tables)

    def resolve(self, table: str, operation: Any) -> Outcome:
        """
        Expected outcome for a table operation.

        Priority: table-specific entry, then the ``_all_`` entry, then the
        default of exactly 0 queries. ``None`` means don't care. The result
        is a fresh dict the caller may change.
        """
        operation_key = _operation_key(operation)
        for table_key in (str(table).lower(), ALL_TABLES_KEY):
            entry = self.tables.get(table_key)
            if entry is not None and operation_key in entry:
                outcome = entry[operation_key]
                return None if outcome is None else dict(outcome)
        return dict(DEFAULT_OUTCOME)

    def __repr__(self) -> str:
        return f"ExpectationSpec({self.tables!r})"
