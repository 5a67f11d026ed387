"""State tracked for each query submitted through the client."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .column import Column


class QueryStatus(str, Enum):
    """Execution states reported by Athena."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


@dataclass(eq=False)
class Query:
    """A single query and everything learned about it while it runs.

    Attributes:
        original_sql: SQL as supplied by the caller
        sql: SQL after parameter binding; this is what Athena receives
        parameters: Values bound into ``sql``
        id: Optional caller-supplied ID used for lookup and cancellation
        execution_id: Athena QueryExecutionId, assigned once after submission
        status: Last state reported by Athena (raw text, may be unknown)
        columns: Column bindings, assigned once on the first result page
        results: Typed records, only ever appended to
    """

    original_sql: str
    sql: str
    parameters: Any = None
    id: Optional[str] = None
    execution_id: Optional[str] = None
    status: Optional[str] = None
    columns: List[Column] = field(default_factory=list)
    results: List[Dict[str, Any]] = field(default_factory=list)

    def assign_execution_id(self, execution_id: str) -> None:
        if self.execution_id:
            raise ValueError(
                f"Query already has execution ID {self.execution_id}"
            )
        self.execution_id = execution_id

    def bind_columns(self, columns: Iterable[Column]) -> None:
        if self.has_columns():
            raise ValueError("Query columns are already bound")
        self.columns = list(columns)

    def add_results(self, records: Iterable[Dict[str, Any]]) -> None:
        self.results.extend(records)

    def has_columns(self) -> bool:
        return len(self.columns) > 0

    def has_results(self) -> bool:
        return len(self.results) > 0
