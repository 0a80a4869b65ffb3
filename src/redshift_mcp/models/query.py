"""Query execution result model."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class QueryResult(BaseModel):
    """Rows produced by a read-only query, fully materialized."""

    rows: list[dict[str, Any]] = Field(..., description="Result rows as dictionaries")
    columns: list[str] = Field(default_factory=list, description="Column names in order")
    row_count: int = Field(..., description="Number of rows returned")
    execution_time_ms: Optional[float] = Field(
        None, description="Execution time in milliseconds"
    )

    @property
    def is_empty(self) -> bool:
        """Check if result set is empty."""
        return self.row_count == 0
