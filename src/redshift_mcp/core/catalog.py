"""Catalog introspection: tables per schema and columns per table."""

import logging
from typing import Optional, Sequence

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncConnection

from redshift_mcp.core.connection import ConnectionProvider
from redshift_mcp.models.catalog import (
    ColumnDescriptor,
    TableDescriptor,
    TableRef,
    TableSchemaResult,
)
from redshift_mcp.models.config import DatabaseConfig

logger = logging.getLogger(__name__)

# Schema names are bound as an expanding parameter, never interpolated.
LIST_TABLES_QUERY = text("""
    SELECT
        t.table_schema AS schema,
        t.table_name AS name,
        t.table_type AS type,
        COALESCE(
            (SELECT pg_catalog.obj_description(c.oid)
             FROM pg_catalog.pg_class c
             WHERE c.relname = t.table_name
             AND c.relnamespace = (
                 SELECT n.oid FROM pg_catalog.pg_namespace n
                 WHERE n.nspname = t.table_schema
             )),
            ''
        ) AS description
    FROM information_schema.tables t
    WHERE t.table_schema IN :schemas
    AND t.table_type IN ('BASE TABLE', 'VIEW', 'MATERIALIZED VIEW')
    ORDER BY t.table_schema, t.table_name
""").bindparams(bindparam("schemas", expanding=True))

TABLE_COLUMNS_QUERY = text("""
    SELECT
        col.column_name AS name,
        col.data_type AS data_type,
        col.is_nullable = 'YES' AS is_nullable,
        COALESCE(
            (SELECT pg_catalog.col_description(cls.oid, att.attnum)
             FROM pg_catalog.pg_class cls
             JOIN pg_catalog.pg_attribute att ON att.attrelid = cls.oid
             WHERE cls.relname = :table
             AND cls.relnamespace = (
                 SELECT n.oid FROM pg_catalog.pg_namespace n
                 WHERE n.nspname = :schema
             )
             AND att.attname = col.column_name
             AND att.attnum > 0),
            ''
        ) AS description
    FROM information_schema.columns col
    WHERE col.table_schema = :schema
    AND col.table_name = :table
    ORDER BY col.ordinal_position
""")


class CatalogReader:
    """Reads table and column metadata from the warehouse catalog."""

    def __init__(self, connection: ConnectionProvider, config: DatabaseConfig):
        """
        Initialize catalog reader.

        Args:
            connection: Connection provider
            config: Configuration supplying the default schemas
        """
        self.connection = connection
        self.config = config

    def resolve_schemas(self, schemas: Optional[Sequence[str]]) -> list[str]:
        """
        Decide which schemas a listing covers.

        None means the configured defaults. An explicit empty list follows
        the configured ``empty_schemas`` policy.
        """
        if schemas is None:
            return list(self.config.schemas)
        if not schemas:
            if self.config.empty_schemas == "defaults":
                return list(self.config.schemas)
            return []
        return list(schemas)

    async def list_tables(
        self, schemas: Optional[Sequence[str]] = None
    ) -> list[TableDescriptor]:
        """
        List tables, views and materialized views.

        Args:
            schemas: Schemas to list (None for the configured defaults)

        Returns:
            Descriptors ordered by schema then table name
        """
        resolved = self.resolve_schemas(schemas)
        if not resolved:
            return []

        logger.debug(f"Listing tables in schemas: {resolved}")
        async with self.connection.get_connection() as conn:
            result = await conn.execute(LIST_TABLES_QUERY, {"schemas": resolved})
            rows = result.mappings().all()

        return [TableDescriptor.model_validate(dict(row)) for row in rows]

    async def get_table_schema(self, schema: str, table: str) -> list[ColumnDescriptor]:
        """
        Get the columns of one table.

        Returns:
            Columns in ordinal order; empty if the table does not exist
        """
        async with self.connection.get_connection() as conn:
            return await self._fetch_columns(conn, schema, table)

    async def get_tables_schema(
        self, tables: Sequence[TableRef]
    ) -> list[TableSchemaResult]:
        """
        Get the columns of several tables on one connection.

        Each pair is looked up with its own query. Results follow the input
        order, one per pair. Any failure aborts the whole batch.

        Args:
            tables: (schema, table) pairs to describe

        Returns:
            One TableSchemaResult per requested pair
        """
        results: list[TableSchemaResult] = []

        async with self.connection.get_connection() as conn:
            for ref in tables:
                columns = await self._fetch_columns(conn, ref.schema, ref.table)
                results.append(
                    TableSchemaResult(schema=ref.schema, table=ref.table, columns=columns)
                )

        return results

    async def _fetch_columns(
        self, conn: AsyncConnection, schema: str, table: str
    ) -> list[ColumnDescriptor]:
        result = await conn.execute(
            TABLE_COLUMNS_QUERY, {"schema": schema, "table": table}
        )
        rows = result.mappings().all()
        if not rows:
            logger.debug(f"No columns found for {schema}.{table}")
        return [ColumnDescriptor.model_validate(dict(row)) for row in rows]
