"""
redshift_mcp - Read-only MCP server for Amazon Redshift

A Model Context Protocol (MCP) server that lists tables, describes table
schemas and runs read-only SQL against a Redshift cluster.
"""

__version__ = "0.1.0"

from redshift_mcp.errors import (
    ArgumentError,
    DatabaseError,
    ResourceError,
    ToolError,
    UnknownToolError,
)
from redshift_mcp.models import (
    ColumnDescriptor,
    DatabaseConfig,
    QueryResult,
    TableDescriptor,
    TableKind,
    TableRef,
    TableSchemaResult,
)

__all__ = [
    "DatabaseConfig",
    "TableKind",
    "TableDescriptor",
    "ColumnDescriptor",
    "TableRef",
    "TableSchemaResult",
    "QueryResult",
    "ToolError",
    "ArgumentError",
    "ResourceError",
    "DatabaseError",
    "UnknownToolError",
]
