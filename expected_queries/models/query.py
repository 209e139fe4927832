"""
Query Models

Defines the record kept for every observed SQL statement.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TableOperation(str, Enum):
    """Table operations a statement can be attributed to."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class Query(BaseModel):
    """
    One observed SQL statement plus timing metadata.

    ``operation`` and ``table`` are either both set (classified) or both
    ``None`` (unknown statement). Instances are immutable.
    """

    model_config = ConfigDict(frozen=True)

    sql: str = Field(..., description="Statement text, trailing newline removed")
    operation: Optional[TableOperation] = Field(
        None, description="Classified operation, None if unknown"
    )
    table: Optional[str] = Field(
        None, description="Table name as written (quotes stripped)"
    )
    duration: float = Field(0.0, ge=0.0, description="Execution time (seconds)")
    stack_trace: Optional[str] = Field(
        None, description="Caller stack trace, captured at creation"
    )

    @model_validator(mode="after")
    def validate_classification(self) -> "Query":
        """Classification is all-or-nothing."""
        if (self.operation is None) != (self.table is None):
            raise ValueError("operation and table must both be set or both be None")
        return self

    @classmethod
    def from_sql(
        cls,
        sql: str,
        *,
        duration: float = 0.0,
        stack_trace: Optional[str] = None,
        resolve_subselect: bool = False,
    ) -> "Query":
        """Classify ``sql`` and build the record for it."""
        from expected_queries.core.classifier import classify

        # drop a single trailing line ending only
        if sql.endswith("\r\n"):
            sql = sql[:-2]
        elif sql.endswith("\n"):
            sql = sql[:-1]
        result = classify(sql, resolve_subselect=resolve_subselect)
        return cls(
            sql=sql,
            operation=result.operation,
            table=result.table,
            duration=duration,
            stack_trace=stack_trace,
        )

    @property
    def is_classified(self) -> bool:
        return self.operation is not None

    @property
    def table_key(self) -> Optional[str]:
        """Lowercase table name used for grouping and comparison."""
        if self.table is None:
            return None
        return self.table.lower()

    @property
    def display_sql(self) -> str:
        """SQL text as shown in reports, followed by the stack trace if any."""
        if self.stack_trace:
            return f"{self.sql}\n{self.stack_trace.rstrip()}"
        return self.sql
