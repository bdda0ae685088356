"""
Type definitions for pipeline results.

Provides typed results instead of raw wire dictionaries.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .row_map import Row
from .value import Value


@dataclass(frozen=True)
class Col:
    """Result column metadata."""

    name: str
    decltype: str | None = None


@dataclass
class QueryResult:
    """
    Rows returned by a statement.

    Attributes:
        cols: Column metadata
        rows: Fully materialized rows, each as wide as ``cols``
        replication_index: Replication position reported by the server
        rows_read: Rows read by the statement
        rows_written: Rows written by the statement
        query_duration_ms: Server-side execution time
    """

    cols: list[Col] = field(default_factory=list)
    rows: list[list[Value]] = field(default_factory=list)
    replication_index: str | None = None
    rows_read: int | None = None
    rows_written: int | None = None
    query_duration_ms: float | None = None

    @property
    def column_names(self) -> list[str]:
        """Get column names in order."""
        return [col.name for col in self.cols]

    def row(self, index: int) -> Row:
        """Get one row as a name-addressable view."""
        return Row(self.cols, self.rows[index])

    @property
    def first(self) -> Row | None:
        """Get first row or None."""
        return self.row(0) if self.rows else None

    def rows_as_dicts(self) -> list[dict[str, Any]]:
        """Get all rows as column-name to native-value dicts."""
        return [Row(self.cols, values).as_dict() for values in self.rows]

    def __iter__(self) -> Iterator[Row]:
        return (Row(self.cols, values) for values in self.rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class ExecResult:
    """
    Execution metadata of a statement that does not return rows.

    Attributes:
        affected_row_count: Rows changed by the statement
        last_insert_rowid: Rowid of the last inserted row, if any
    """

    affected_row_count: int = 0
    last_insert_rowid: int | None = None
    replication_index: str | None = None
    rows_read: int | None = None
    rows_written: int | None = None


@dataclass
class SqlError:
    """
    A statement-level SQL error inside a batch.

    Reported in place of the failing statement's result; it does not fail
    the batch call.
    """

    request_index: int
    message: str
    code: str | None = None


StatementOutcome = QueryResult | ExecResult | SqlError
