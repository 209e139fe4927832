"""
Assertion sinks.

A sink receives exactly one (passed, message) signal per
QueryRecorder.test() call.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Tuple

from expected_queries.errors import ExpectedQueriesFailed

logger = logging.getLogger(__name__)


class AssertionSink(ABC):
    """Receives the verdict of a recorder test."""

    @abstractmethod
    def emit(self, passed: bool, message: str) -> None:
        """
        Report one verdict.

        Args:
            passed: True if every expectation held
            message: Formatted report
        """
        pass


class RaisingSink(AssertionSink):
    """Raise ExpectedQueriesFailed on failure; the test framework reports it."""

    def emit(self, passed: bool, message: str) -> None:
        if passed:
            logger.info("%s", message)
            return
        raise ExpectedQueriesFailed(message)


class LoggingSink(AssertionSink):
    """Log the verdict, never raise."""

    def emit(self, passed: bool, message: str) -> None:
        if passed:
            logger.info("%s", message)
        else:
            logger.error("%s", message)


class CollectingSink(AssertionSink):
    """Keep every verdict in ``results``."""

    def __init__(self) -> None:
        self.results: List[Tuple[bool, str]] = []

    def emit(self, passed: bool, message: str) -> None:
        self.results.append((passed, message))

    @property
    def passed(self) -> int:
        return sum(1 for ok, _ in self.results if ok)

    @property
    def failed(self) -> int:
        return sum(1 for ok, _ in self.results if not ok)
