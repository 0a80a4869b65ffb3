"""Pydantic models for configuration, catalog metadata and query results."""

from .catalog import (
    ColumnDescriptor,
    TableDescriptor,
    TableKind,
    TableRef,
    TableSchemaResult,
)
from .config import DatabaseConfig
from .query import QueryResult

__all__ = [
    "DatabaseConfig",
    "TableKind",
    "TableDescriptor",
    "ColumnDescriptor",
    "TableRef",
    "TableSchemaResult",
    "QueryResult",
]
