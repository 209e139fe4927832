"""
Report formatting for QueryRecorder.test().
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence

from expected_queries.errors import Violation
from expected_queries.models.query import Query

PASS_HEADER = "Expected queries for tables"
FAIL_HEADER = "Expected queries for tables:\n\n"


def unknown_warning(unknown_queries: Sequence[Query]) -> str:
    """Advisory block listing unclassified queries, empty if there are none."""
    if not unknown_queries:
        return ""
    listing = "\n".join(query.display_sql for query in unknown_queries)
    return f"\n\nWarning: unknown queries:\n{listing}\n"


def failure_message(
    violations: Sequence[Violation],
    sql_for_table: Callable[[str], str],
) -> str:
    """
    Per-table failure listing: violation lines, then every SQL statement
    executed on that table.
    """
    by_table: Dict[str, List[Violation]] = {}
    for violation in violations:
        by_table.setdefault(violation.table, []).append(violation)

    message = ""
    for table in sorted(by_table):
        message += f"* Table: {table}\n"
        message += "\n".join(v.message for v in by_table[table])
        message += f"\nActually executed SQL queries on table '{table}':\n"
        message += sql_for_table(table) + "\n\n"
    return message


def format_report(
    violations: Sequence[Violation],
    unknown_queries: Sequence[Query],
    sql_for_table: Callable[[str], str],
) -> str:
    warning = unknown_warning(unknown_queries)
    if violations:
        return FAIL_HEADER + failure_message(violations, sql_for_table) + warning
    return PASS_HEADER + warning
