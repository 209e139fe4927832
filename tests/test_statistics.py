"""
Tests for StatSample and aggregate().
"""

import itertools

import pytest

from expected_queries.core.statistics import StatSample, aggregate
from expected_queries.errors import UnsupportedStatisticError
from expected_queries.models import StatisticKind, TableOperation

from conftest import make_query


class TestStatSample:
    """Tests for derived statistics."""

    def test_basic_statistics(self):
        sample = StatSample([0.1, 0.4, 0.25])

        assert sample.count == 3
        assert sample.sum == pytest.approx(0.75)
        assert sample.mean == pytest.approx(0.25)
        assert sample.max == 0.4
        assert sample.min == 0.1

    def test_empty_sample_reports_zero(self):
        sample = StatSample()

        assert sample.count == 0
        assert sample.sum == 0.0
        assert sample.mean == 0.0
        assert sample.max == 0.0
        assert sample.min == 0.0

    def test_add_keeps_observation_order(self):
        sample = StatSample()
        sample.add(3)
        sample.add(1)
        sample.add(2)
        assert sample.durations == (3.0, 1.0, 2.0)

    def test_statistic_lookup(self):
        sample = StatSample([1.0, 3.0])

        assert sample.statistic(StatisticKind.COUNT) == 2
        assert sample.statistic("mean") == 2.0
        assert sample.statistic("sum") == 4.0
        assert sample.statistic("max") == 3.0
        assert sample.statistic("min") == 1.0

    def test_statistic_unsupported(self):
        with pytest.raises(UnsupportedStatisticError):
            StatSample([1.0]).statistic("stddev")

    def test_to_dict(self):
        assert StatSample([2.0]).to_dict() == {
            "count": 1,
            "mean": 2.0,
            "sum": 2.0,
            "max": 2.0,
            "min": 2.0,
        }


class TestAggregate:
    """Tests for grouping queries by table and operation."""

    def test_groups_by_table_and_operation(self):
        queries = [
            make_query("SELECT * FROM book", 0.1),
            make_query("SELECT * FROM book", 0.3),
            make_query("INSERT INTO book (title) VALUES ('x')", 0.2),
            make_query("SELECT * FROM author", 0.05),
        ]
        samples = aggregate(queries)

        assert set(samples) == {
            ("book", TableOperation.SELECT),
            ("book", TableOperation.INSERT),
            ("author", TableOperation.SELECT),
        }
        assert samples[("book", TableOperation.SELECT)].count == 2
        assert samples[("book", TableOperation.SELECT)].max == 0.3

    def test_unclassified_excluded(self):
        samples = aggregate(
            [make_query("PRAGMA foreign_keys = ON"), make_query("DELETE FROM book")]
        )
        assert list(samples) == [("book", TableOperation.DELETE)]

    def test_table_names_grouped_case_insensitively(self):
        samples = aggregate(
            [make_query("SELECT * FROM Book"), make_query("select * from book")]
        )
        assert samples[("book", TableOperation.SELECT)].count == 2

    def test_empty(self):
        assert aggregate([]) == {}

    def test_order_independent(self):
        """Test permuting the input yields identical statistics."""
        queries = [
            make_query("SELECT * FROM book", 0.1),
            make_query("SELECT * FROM book", 0.2),
            make_query("SELECT * FROM book", 0.7),
            make_query("UPDATE book SET title = 'x'", 0.3),
        ]
        expected = {k: v.to_dict() for k, v in aggregate(queries).items()}

        for permutation in itertools.permutations(queries):
            actual = {k: v.to_dict() for k, v in aggregate(list(permutation)).items()}
            assert actual == expected
