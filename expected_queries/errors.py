"""
Error types for expected-queries.

Two failure kinds are kept apart:
- configuration errors (a malformed expectation map) abort evaluation and
  must be fixed by the caller;
- violations (an observed statistic outside its expected range) are collected
  in full and reported together.
"""

from __future__ import annotations

from dataclasses import dataclass


class ExpectedQueriesError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(ExpectedQueriesError, ValueError):
    """The expectation map is malformed."""


class InvalidComparisonError(ConfigurationError):
    """An expected outcome could not be parsed into (operator, threshold)."""

    def __init__(self, outcome: object, reason: str | None = None) -> None:
        self.outcome = outcome
        message = f"expected_queries: invalid comparison ({outcome!r})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedStatisticError(ConfigurationError):
    """A statistic name outside count/mean/sum/max/min was requested."""

    def __init__(self, statistic: object) -> None:
        self.statistic = statistic
        super().__init__(
            f"expected_queries: unsupported statistic ({statistic!r}), "
            "expected one of count, mean, sum, max, min"
        )


class TraceSourceError(ExpectedQueriesError, RuntimeError):
    """A trace source was activated twice or used out of order."""


class ExpectedQueriesFailed(AssertionError):
    """Raised by RaisingSink when the recorded queries miss expectations."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class Violation:
    """One evaluated expectation that did not hold."""

    table: str
    operation: str
    statistic: str
    expected_outcome: str
    actual_value: float
    message: str
