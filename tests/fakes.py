"""In-memory stand-ins for pooled connections, used by module-level tests.

FakeConnectionProvider hands out FakeConnection objects that answer
statements from a list of scripted responses and record every call, so
tests can assert on the acquire/begin/execute/rollback/release sequence
without a running warehouse.
"""

from typing import Any, Callable, Optional, Union

from sqlalchemy.exc import ProgrammingError

from redshift_mcp.core.connection import ConnectionProvider

Response = Union["FakeResult", Exception, Callable[[dict[str, Any]], "FakeResult"]]


def dbapi_error(message: str, statement: str = "SQL") -> ProgrammingError:
    """A SQLAlchemy-wrapped driver error, as the engine would raise it."""
    return ProgrammingError(statement, {}, Exception(message))


class FakeResult:
    """Minimal CursorResult: keys, fetchall and mappings().all()."""

    def __init__(
        self,
        columns: Optional[list[str]] = None,
        rows: Optional[list[tuple]] = None,
        returns_rows: bool = True,
    ):
        self._columns = columns or []
        self._rows = rows or []
        self.returns_rows = returns_rows

    @classmethod
    def from_dicts(cls, rows: list[dict[str, Any]], columns: Optional[list[str]] = None):
        columns = columns or (list(rows[0]) if rows else [])
        return cls(columns, [tuple(r[c] for c in columns) for r in rows])

    @classmethod
    def no_rows(cls) -> "FakeResult":
        return cls(returns_rows=False)

    def keys(self) -> list[str]:
        return list(self._columns)

    def fetchall(self) -> list[tuple]:
        return list(self._rows)

    def mappings(self) -> "FakeResult":
        return self

    def all(self) -> list[dict[str, Any]]:
        return [dict(zip(self._columns, row)) for row in self._rows]


class FakeTransaction:
    def __init__(self, conn: "FakeConnection"):
        self.conn = conn

    async def rollback(self) -> None:
        self.conn.events.append("rollback")
        if self.conn.provider.fail_rollback is not None:
            raise self.conn.provider.fail_rollback


class FakeConnection:
    def __init__(self, provider: "FakeConnectionProvider"):
        self.provider = provider
        self.events: list[str] = []
        self.options: dict[str, Any] = {}
        self.statement_options: list[dict[str, Any]] = []
        self.closed = False

    async def execution_options(self, **options: Any) -> "FakeConnection":
        self.events.append("execution_options")
        self.options.update(options)
        return self

    async def begin(self) -> FakeTransaction:
        self.events.append("begin")
        return FakeTransaction(self)

    async def exec_driver_sql(
        self,
        statement: str,
        parameters: Any = None,
        execution_options: Optional[dict[str, Any]] = None,
    ) -> FakeResult:
        self.events.append(f"exec:{statement}")
        self.statement_options.append(execution_options or {})
        self.provider.statements.append((statement, parameters))
        return self.provider.respond(statement, parameters or {})

    async def execute(self, statement: Any, parameters: Any = None) -> FakeResult:
        sql = str(statement)
        self.events.append("execute")
        self.provider.statements.append((sql, parameters))
        return self.provider.respond(sql, parameters or {})


class FakeConnectionProvider(ConnectionProvider):
    """Connection provider whose statements are answered from a script."""

    def __init__(self):
        self.responses: list[tuple[str, Response]] = []
        self.statements: list[tuple[str, Any]] = []
        self.connections: list[FakeConnection] = []
        self.acquired = 0
        self.released = 0
        self.fail_acquire: Optional[Exception] = None
        self.fail_rollback: Optional[Exception] = None

    def on(self, fragment: str, response: Response) -> None:
        """Answer statements containing ``fragment`` with ``response``."""
        self.responses.append((fragment, response))

    def respond(self, statement: str, parameters: dict[str, Any]) -> FakeResult:
        for fragment, response in self.responses:
            if fragment in statement:
                if isinstance(response, Exception):
                    raise response
                if callable(response):
                    return response(parameters)
                return response
        return FakeResult()

    @property
    def checked_out(self) -> int:
        return self.acquired - self.released

    async def acquire(self) -> FakeConnection:  # type: ignore[override]
        if self.fail_acquire is not None:
            raise self.fail_acquire
        self.acquired += 1
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn

    async def release(self, conn: FakeConnection) -> None:  # type: ignore[override]
        conn.closed = True
        conn.events.append("release")
        self.released += 1
