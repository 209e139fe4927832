"""
Base Trace Source

Abstract interface for hooking into a database access layer and reporting
every executed SQL statement to a QueryCollector.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from expected_queries.core.collector import QueryCollector
from expected_queries.errors import TraceSourceError

logger = logging.getLogger(__name__)


class TraceSource(ABC):
    """
    Abstract base class for trace sources.

    Subclasses install their hook in ``_install()`` and remove it in
    ``_uninstall()``; this class tracks the active collector.
    """

    def __init__(self):
        self._collector: Optional[QueryCollector] = None

    @property
    def active(self) -> bool:
        return self._collector is not None

    @property
    def collector(self) -> Optional[QueryCollector]:
        return self._collector

    def activate(self, collector: QueryCollector) -> None:
        """
        Start delivering statements to ``collector``.

        Raises:
            TraceSourceError: if the source is already active
        """
        if self._collector is not None:
            raise TraceSourceError(f"{self.__class__.__name__} is already active")
        self._collector = collector
        try:
            self._install()
        except Exception:
            self._collector = None
            raise
        logger.debug("%s activated", self.__class__.__name__)

    def deactivate(self) -> None:
        """Stop delivering statements. Safe to call when inactive."""
        if self._collector is None:
            return
        try:
            self._uninstall()
        finally:
            self._collector = None
            logger.debug("%s deactivated", self.__class__.__name__)

    @abstractmethod
    def _install(self) -> None:
        """Install the hook into the database layer."""
        pass

    @abstractmethod
    def _uninstall(self) -> None:
        """Remove the hook and restore the previous state."""
        pass
