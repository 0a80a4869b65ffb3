"""Core database operations layer."""

from .catalog import CatalogReader
from .connection import ConnectionProvider, DatabaseConnection
from .executor import QueryExecutor

__all__ = [
    "ConnectionProvider",
    "DatabaseConnection",
    "CatalogReader",
    "QueryExecutor",
]
