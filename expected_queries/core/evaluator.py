"""
Expectation evaluator.

Checks aggregated per-table statistics against an expectation map and
returns every violation found.

Only table operations that actually ran are evaluated. A table named in the
expectations that ran no queries at all is not checked, so an expectation
like ``{"book": {"select": 2}}`` does not fail when ``book`` is never queried.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from expected_queries.core.statistics import GroupKey, StatSample
from expected_queries.errors import Violation
from expected_queries.models.expectations import (
    Comparison,
    ExpectationSpec,
    StatisticKind,
)

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Render integral values without a decimal point."""
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    return f"{value:.6g}"


def check_statistic(
    table: str,
    operation: str,
    kind: StatisticKind,
    comparison: Comparison,
    sample: StatSample,
) -> Violation | None:
    """Compare one statistic of a sample; return a Violation if it fails."""
    actual = sample.statistic(kind)
    passed = comparison.check(actual)
    logger.debug(
        "Check %s.%s %s: %s %s %s -> %s",
        table,
        operation,
        kind.value,
        actual,
        comparison.operator,
        comparison.threshold,
        "ok" if passed else "FAIL",
    )
    if passed:
        return None

    return Violation(
        table=table,
        operation=operation,
        statistic=kind.value,
        expected_outcome=comparison.raw,
        actual_value=actual,
        message=(
            f"Expected {kind.value} '{comparison.raw}' {operation}s "
            f"for table '{table}', got '{format_number(actual)}'"
        ),
    )


def evaluate(
    aggregates: Mapping[GroupKey, StatSample],
    expected: Union[ExpectationSpec, Mapping[str, Any], None],
) -> List[Violation]:
    """
    Evaluate aggregated statistics against expectations.

    Args:
        aggregates: Output of ``aggregate()``.
        expected: Expectation map or an already parsed ExpectationSpec.

    Returns:
        Violations ordered by table, operation, then statistic name.

    Raises:
        ConfigurationError: if the expectation map is malformed. Nothing is
            compared in that case.
    """
    spec = ExpectationSpec.from_mapping(expected)

    violations: List[Violation] = []
    for table, operation in sorted(aggregates, key=lambda k: (k[0], k[1].value)):
        outcome = spec.resolve(table, operation)
        if outcome is None:
            continue

        sample = aggregates[(table, operation)]
        for kind in sorted(outcome, key=lambda k: k.value):
            violation = check_statistic(
                table, operation.value, kind, outcome[kind], sample
            )
            if violation is not None:
                violations.append(violation)

    logger.info(
        "Evaluated %d table operations: %d violations",
        len(aggregates),
        len(violations),
    )
    return violations
