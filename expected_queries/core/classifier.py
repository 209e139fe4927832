"""
SQL statement classifier.

Extracts (operation, table) from a raw SQL string with lexical patterns, not a
grammar. The first matching rule wins:

1. ``SELECT ... FROM <target>``
2. ``INSERT INTO <target>``
3. ``UPDATE <target> SET``
4. ``DELETE FROM <target>``

Anything else is unclassified. Classification never raises.

A SELECT whose FROM target is a parenthesised sub-select is attributed to the
degenerate table name ``"select"``, unless ``resolve_subselect`` is set, in
which case the FROM rule is applied again to the sub-select body.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from expected_queries.models.query import TableOperation

# Table name reported for "SELECT ... FROM (SELECT ...)" when the sub-select
# is not resolved.
SUBSELECT_TABLE = "select"

_PART = r"(?:`[^`]*`|\"[^\"]*\"|'[^']*'|[^\s,;().`\"']+)"
_PART_RE = re.compile(_PART)
_TARGET = rf"(?P<target>\(|{_PART}(?:\.{_PART})*)"

_SELECT_RE = re.compile(
    r"^\s*SELECT\b.*?\bFROM\s+" + _TARGET, re.IGNORECASE | re.DOTALL
)
_FROM_RE = re.compile(r"\bFROM\s+" + _TARGET, re.IGNORECASE | re.DOTALL)
_INSERT_RE = re.compile(r"^\s*INSERT\s+INTO\s+" + _TARGET, re.IGNORECASE)
_UPDATE_RE = re.compile(
    r"^\s*UPDATE\s+" + _TARGET + r"\s+SET\b", re.IGNORECASE | re.DOTALL
)
_DELETE_RE = re.compile(r"^\s*DELETE\s+FROM\s+" + _TARGET, re.IGNORECASE)

_QUOTES = ("`", '"', "'")


@dataclass(frozen=True, slots=True)
class Classified:
    """A statement attributed to one table and operation."""

    operation: TableOperation
    table: str

    @property
    def is_classified(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Unclassified:
    """A statement the classifier could not attribute to any table."""

    @property
    def is_classified(self) -> bool:
        return False

    @property
    def operation(self) -> None:
        return None

    @property
    def table(self) -> None:
        return None


UNCLASSIFIED = Unclassified()

ClassificationResult = Union[Classified, Unclassified]


def _strip_quotes(part: str) -> str:
    if len(part) >= 2 and part[0] == part[-1] and part[0] in _QUOTES:
        return part[1:-1]
    return part


def normalize_target(target: str) -> str:
    """
    Strip one layer of backticks/quotes from each dotted part of a target.

    >>> normalize_target("`file`")
    'file'
    >>> normalize_target('"other_db"."file"')
    'other_db.file'
    """
    return ".".join(_strip_quotes(part) for part in _PART_RE.findall(target))


def _subselect_table(body: str) -> Optional[str]:
    """Apply the FROM rule to a sub-select body, descending into nested ones."""
    match = _FROM_RE.search(body)
    if match is None:
        return None
    target = match.group("target")
    if target == "(":
        return _subselect_table(body[match.end():])
    return normalize_target(target)


def classify(sql: str, *, resolve_subselect: bool = False) -> ClassificationResult:
    """
    Classify a SQL statement by operation and table.

    Args:
        sql: Raw statement text.
        resolve_subselect: Look inside ``FROM (subselect)`` for the first real
            table instead of reporting the table as ``"select"``.

    Returns:
        Classified(operation, table) or UNCLASSIFIED.
    """
    if not isinstance(sql, str) or not sql.strip():
        return UNCLASSIFIED

    match = _SELECT_RE.match(sql)
    if match is not None:
        target = match.group("target")
        if target != "(":
            return Classified(TableOperation.SELECT, normalize_target(target))
        table = None
        if resolve_subselect:
            table = _subselect_table(sql[match.end():])
        return Classified(TableOperation.SELECT, table or SUBSELECT_TABLE)

    for operation, pattern in (
        (TableOperation.INSERT, _INSERT_RE),
        (TableOperation.UPDATE, _UPDATE_RE),
        (TableOperation.DELETE, _DELETE_RE),
    ):
        match = pattern.match(sql)
        if match is not None and match.group("target") != "(":
            return Classified(operation, normalize_target(match.group("target")))

    return UNCLASSIFIED
