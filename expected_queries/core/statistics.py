"""
Per-table statistics.

Groups classified queries by (table, operation) and exposes count, mean,
sum, max and min of their durations. All statistics are order-independent.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Sequence, Tuple

from expected_queries.models.expectations import StatisticKind
from expected_queries.models.query import Query, TableOperation

logger = logging.getLogger(__name__)

GroupKey = Tuple[str, TableOperation]


class StatSample:
    """Duration samples (seconds) for one table operation."""

    def __init__(self, durations: Iterable[float] = ()):
        self._durations: List[float] = [float(d) for d in durations]

    def add(self, duration: float) -> None:
        self._durations.append(float(duration))

    @property
    def durations(self) -> Tuple[float, ...]:
        return tuple(self._durations)

    @property
    def count(self) -> int:
        return len(self._durations)

    @property
    def sum(self) -> float:
        return math.fsum(self._durations)

    @property
    def mean(self) -> float:
        if not self._durations:
            return 0.0
        return self.sum / len(self._durations)

    @property
    def max(self) -> float:
        if not self._durations:
            return 0.0
        return max(self._durations)

    @property
    def min(self) -> float:
        if not self._durations:
            return 0.0
        return min(self._durations)

    def statistic(self, kind: StatisticKind | str) -> float:
        """
        Look up a statistic by kind.

        Raises:
            UnsupportedStatisticError: for names outside StatisticKind.
        """
        kind = StatisticKind.parse(kind)
        if kind is StatisticKind.COUNT:
            return self.count
        if kind is StatisticKind.MEAN:
            return self.mean
        if kind is StatisticKind.SUM:
            return self.sum
        if kind is StatisticKind.MAX:
            return self.max
        return self.min

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {kind.value: self.statistic(kind) for kind in StatisticKind}

    def __repr__(self) -> str:
        return f"StatSample(count={self.count}, sum={self.sum:.6f})"


def aggregate(queries: Sequence[Query]) -> Dict[GroupKey, StatSample]:
    """
    Build per-(table, operation) samples from classified queries.

    Unclassified queries are skipped. Table names are grouped
    case-insensitively.
    """
    samples: Dict[GroupKey, StatSample] = {}
    skipped = 0
    for query in queries:
        if not query.is_classified:
            skipped += 1
            continue
        key = (query.table_key, query.operation)
        sample = samples.get(key)
        if sample is None:
            sample = samples[key] = StatSample()
        sample.add(query.duration)

    logger.debug(
        "Aggregated %d queries into %d groups (%d unclassified)",
        len(queries),
        len(samples),
        skipped,
    )
    return samples
