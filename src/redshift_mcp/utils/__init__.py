"""Utility modules for the Redshift MCP server."""

from redshift_mcp.utils.serialization import (
    convert_rows_to_json_safe,
    convert_value_to_json_safe,
    dumps,
)

__all__ = [
    "convert_value_to_json_safe",
    "convert_rows_to_json_safe",
    "dumps",
]
