"""Read-only execution of caller-supplied SQL."""

import logging
import time

from sqlalchemy.ext.asyncio import AsyncTransaction

from redshift_mcp.core.connection import ConnectionProvider
from redshift_mcp.models.query import QueryResult
from redshift_mcp.utils import convert_rows_to_json_safe

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Runs SQL inside a transaction the engine itself keeps read-only.

    The SQL text is opaque here: no validation, rewriting, splitting or
    parameter substitution. It is sent without parameters, so the driver
    uses the simple-query protocol and a multi-statement batch runs as one
    request. Only the first statement's result set is returned.

    Write statements are rejected by the engine and surface as
    DatabaseError. Whatever happens, the transaction is rolled back and the
    connection goes back to the pool.
    """

    def __init__(self, connection: ConnectionProvider):
        """
        Initialize query executor.

        Args:
            connection: Connection provider
        """
        self.connection = connection

    async def execute(self, sql: str) -> QueryResult:
        """
        Execute SQL in a read-only transaction and return all rows.

        Args:
            sql: SQL text, passed to the engine verbatim

        Returns:
            Fully materialized query result

        Raises:
            ResourceError: If no connection could be acquired
            DatabaseError: If the engine rejects or fails the statement
        """
        start_time = time.time()

        async with self.connection.get_connection() as conn:
            # Must be set before BEGIN; psycopg then sends BEGIN READ ONLY.
            await conn.execution_options(postgresql_readonly=True)
            transaction = await conn.begin()
            try:
                result = await conn.exec_driver_sql(
                    sql, execution_options={"no_parameters": True}
                )
                if result.returns_rows:
                    columns = list(result.keys())
                    rows = [dict(zip(columns, row)) for row in result.fetchall()]
                else:
                    columns, rows = [], []
            finally:
                await self._rollback(transaction)

        rows = convert_rows_to_json_safe(rows)
        execution_time = (time.time() - start_time) * 1000

        return QueryResult(
            rows=rows,
            columns=columns,
            row_count=len(rows),
            execution_time_ms=execution_time,
        )

    async def _rollback(self, transaction: AsyncTransaction) -> None:
        """Roll back, logging instead of raising if the rollback itself fails."""
        try:
            await transaction.rollback()
        except Exception as e:
            logger.warning(f"Could not roll back the read-only transaction: {e}")
