"""Tool dispatch: validate arguments, run the operation, wrap the result."""

import logging
import time
from typing import Any, Awaitable, Callable, Optional

from mcp.types import CallToolResult, TextContent
from pydantic import BaseModel, Field, ValidationError

from redshift_mcp.core import CatalogReader, QueryExecutor
from redshift_mcp.errors import ArgumentError, ToolError, UnknownToolError
from redshift_mcp.models.catalog import TableRef
from redshift_mcp.utils import dumps

logger = logging.getLogger(__name__)


class ListTablesArguments(BaseModel):
    schemas: Optional[list[str]] = Field(
        None, description="Schemas to list; omitted means the configured schemas"
    )


class GetTableSchemaArguments(BaseModel):
    schema: str = Field(..., description="Schema name")
    table: str = Field(..., description="Table name")


class GetTablesSchemaArguments(BaseModel):
    tables: list[TableRef] = Field(..., description="Tables to describe")


class QueryArguments(BaseModel):
    sql: str = Field(..., description="SQL to execute")


def parse_arguments(model: type[BaseModel], tool: str, arguments: dict[str, Any]) -> Any:
    """
    Validate raw tool arguments against an argument model.

    Raises:
        ArgumentError: Listing every missing or malformed argument
    """
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise ArgumentError(f"Invalid arguments for {tool}: {problems}") from e


class ToolDispatcher:
    """Maps a tool name to exactly one catalog or query operation.

    Arguments are validated before any connection is acquired, so a request
    that fails validation, or names an unknown tool, never touches the pool.
    """

    def __init__(self, catalog: CatalogReader, executor: QueryExecutor):
        """
        Initialize tool dispatcher.

        Args:
            catalog: Catalog reader for the introspection tools
            executor: Read-only executor for the query tool
        """
        self.catalog = catalog
        self.executor = executor
        self._handlers: dict[str, Callable[[dict[str, Any]], Awaitable[Any]]] = {
            "list_tables": self.handle_list_tables,
            "get_table_schema": self.handle_get_table_schema,
            "get_tables_schema": self.handle_get_tables_schema,
            "query": self.handle_query,
        }

    @property
    def tool_names(self) -> list[str]:
        """Names of all tools this dispatcher serves."""
        return list(self._handlers)

    async def dispatch(
        self, name: str, arguments: Optional[dict[str, Any]]
    ) -> CallToolResult:
        """
        Run one tool call and wrap its outcome in a response envelope.

        Args:
            name: Tool name
            arguments: Decoded JSON arguments (None treated as empty)

        Returns:
            CallToolResult with the JSON payload, or isError=True and a message
        """
        start_time = time.time()

        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownToolError(name)

            payload = await handler(arguments or {})
            text = dumps(payload)
        except ToolError as e:
            logger.warning(f"Tool {name} failed: {e.message}")
            return self._error_result(e.message)
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            return self._error_result(f"Internal error in {name}: {e}")

        elapsed = (time.time() - start_time) * 1000
        logger.debug(f"Tool {name} completed in {elapsed:.1f} ms")

        return CallToolResult(
            content=[TextContent(type="text", text=text)],
            isError=False,
        )

    async def handle_list_tables(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        """Handle list_tables request."""
        args = parse_arguments(ListTablesArguments, "list_tables", arguments)

        tables = await self.catalog.list_tables(args.schemas)
        return [t.model_dump(mode="json") for t in tables]

    async def handle_get_table_schema(
        self, arguments: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Handle get_table_schema request."""
        args = parse_arguments(GetTableSchemaArguments, "get_table_schema", arguments)

        columns = await self.catalog.get_table_schema(args.schema, args.table)
        return [c.model_dump(by_alias=True) for c in columns]

    async def handle_get_tables_schema(
        self, arguments: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Handle get_tables_schema request."""
        args = parse_arguments(GetTablesSchemaArguments, "get_tables_schema", arguments)

        results = await self.catalog.get_tables_schema(args.tables)
        return [r.model_dump(by_alias=True) for r in results]

    async def handle_query(self, arguments: dict[str, Any]) -> list[dict[str, Any]]:
        """Handle query request."""
        args = parse_arguments(QueryArguments, "query", arguments)

        result = await self.executor.execute(args.sql)
        return result.rows

    @staticmethod
    def _error_result(message: str) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=message)],
            isError=True,
        )
