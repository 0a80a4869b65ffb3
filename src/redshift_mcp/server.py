"""Redshift MCP Server

A Model Context Protocol (MCP) server exposing table listings, table schema
metadata and read-only SQL execution over an Amazon Redshift cluster.
"""

import asyncio
import logging
import os
import sys
from typing import Any, Iterable, Optional
from urllib.parse import quote, unquote, urlparse

from dotenv import load_dotenv
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl

from redshift_mcp import __version__
from redshift_mcp.core import (
    CatalogReader,
    ConnectionProvider,
    DatabaseConnection,
    QueryExecutor,
)
from redshift_mcp.dispatcher import ToolDispatcher
from redshift_mcp.errors import ArgumentError, ToolError
from redshift_mcp.models.config import DatabaseConfig
from redshift_mcp.utils import dumps

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-server-redshift"
RESOURCE_SCHEME = "redshift"


class RedshiftMCPServer:
    """MCP server for read-only Redshift access."""

    def __init__(
        self, config: DatabaseConfig, connection: Optional[ConnectionProvider] = None
    ):
        """
        Initialize Redshift MCP server.

        Args:
            config: Database configuration
            connection: Connection provider to use instead of a pooled engine
        """
        self.config = config
        self.connection = connection or DatabaseConnection(config)
        self.catalog = CatalogReader(self.connection, config)
        self.executor = QueryExecutor(self.connection)
        self.dispatcher = ToolDispatcher(self.catalog, self.executor)
        self.server = Server(SERVER_NAME, version=__version__)
        self._register_handlers()

    async def initialize(self) -> None:
        """Create the connection pool."""
        if isinstance(self.connection, DatabaseConnection):
            await self.connection.initialize()

        logger.info(
            f"Initialized {SERVER_NAME} "
            f"(schemas: {', '.join(self.config.schemas)}; "
            f"tools: {', '.join(self.dispatcher.tool_names)})"
        )

    def _register_handlers(self) -> None:
        """Register MCP request handlers on the low-level server."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            result = await self.dispatcher.dispatch(name, arguments)
            if result.isError:
                # The SDK turns a raised error into an isError=True tool result.
                raise ToolError(result.content[0].text)
            return [c for c in result.content if isinstance(c, TextContent)]

        @self.server.list_resources()
        async def list_resources() -> list[Resource]:
            return await self.list_resources()

        @self.server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            text = await self.read_resource(str(uri))
            return [ReadResourceContents(content=text, mime_type="application/json")]

    def list_tools(self) -> list[Tool]:
        """All tools exposed by this server."""
        return [
            self._create_list_tables_tool(),
            self._create_get_table_schema_tool(),
            self._create_get_tables_schema_tool(),
            self._create_query_tool(),
        ]

    def _create_list_tables_tool(self) -> Tool:
        """Create list_tables tool."""
        return Tool(
            name="list_tables",
            description="List all tables, views, and materialized views in the specified schemas",
            inputSchema={
                "type": "object",
                "properties": {
                    "schemas": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "List of schemas to list tables from. If not provided, uses configured schemas.",
                    },
                },
                "required": [],
            },
        )

    def _create_get_table_schema_tool(self) -> Tool:
        """Create get_table_schema tool."""
        return Tool(
            name="get_table_schema",
            description="Get column information for a single table",
            inputSchema={
                "type": "object",
                "properties": {
                    "schema": {"type": "string", "description": "The schema name"},
                    "table": {"type": "string", "description": "The table name"},
                },
                "required": ["schema", "table"],
            },
        )

    def _create_get_tables_schema_tool(self) -> Tool:
        """Create get_tables_schema tool."""
        return Tool(
            name="get_tables_schema",
            description="Get schema information for multiple tables across different schemas in a single request",
            inputSchema={
                "type": "object",
                "properties": {
                    "tables": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "schema": {
                                    "type": "string",
                                    "description": "The schema name",
                                },
                                "table": {
                                    "type": "string",
                                    "description": "The table name",
                                },
                            },
                            "required": ["schema", "table"],
                        },
                        "description": "List of tables to get schema information for",
                    },
                },
                "required": ["tables"],
            },
        )

    def _create_query_tool(self) -> Tool:
        """Create query tool."""
        return Tool(
            name="query",
            description="Execute a read-only SQL query against the Redshift database",
            inputSchema={
                "type": "object",
                "properties": {
                    "sql": {
                        "type": "string",
                        "description": "The SQL query to execute",
                    },
                },
                "required": ["sql"],
            },
        )

    # Resources
    def resource_uri(self, schema: str, table: str) -> str:
        """redshift://<host>/<schema>/<table>"""
        return (
            f"{RESOURCE_SCHEME}://{self.config.host}/"
            f"{quote(schema, safe='')}/{quote(table, safe='')}"
        )

    async def list_resources(self) -> list[Resource]:
        """One resource per relation in the configured schemas."""
        tables = await self.catalog.list_tables()
        return [
            Resource(
                uri=AnyUrl(self.resource_uri(t.schema, t.name)),
                name=f"{t.qualified_name} ({t.type.value})",
                description=t.description or None,
                mimeType="application/json",
            )
            for t in tables
        ]

    async def read_resource(self, uri: str) -> str:
        """
        Column listing for the table a resource URI points at.

        Raises:
            ArgumentError: If the URI path is not /<schema>/<table>
        """
        parts = [unquote(p) for p in urlparse(uri).path.split("/") if p]
        if len(parts) < 2:
            raise ArgumentError(
                f"Invalid resource URI: {uri}. "
                f"Expected format: {RESOURCE_SCHEME}://host/schema/table"
            )

        schema, table = parts[0], parts[1]
        logger.debug(f"Reading schema for table: {schema}.{table}")

        columns = await self.catalog.get_table_schema(schema, table)
        return dumps([c.model_dump(by_alias=True) for c in columns])

    async def cleanup(self) -> None:
        """Cleanup resources."""
        if isinstance(self.connection, DatabaseConnection):
            await self.connection.dispose()
        logger.info("Redshift MCP server cleaned up")


def configure_logging() -> None:
    """Log to stderr so the stdio transport's stdout stays clean."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def main() -> None:
    """Main entry point for the MCP server."""
    from redshift_mcp.transports import run_transport

    load_dotenv()
    configure_logging()

    config = DatabaseConfig.from_env()
    mcp_server = RedshiftMCPServer(config)

    try:
        await mcp_server.initialize()
        await run_transport(
            mcp_server,
            os.getenv("TRANSPORT_TYPE", "stdio"),
            int(os.getenv("PORT", "3000")),
        )
    finally:
        await mcp_server.cleanup()


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'redshift-mcp' console script.
    It sets up the event loop and runs the async main() function.
    """
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli_entry()
