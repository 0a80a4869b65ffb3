"""Typed errors raised by the catalog reader, query executor and dispatcher.

Every error that reaches the tool dispatcher is a ``ToolError`` subclass and
is reported to the caller as an ``isError`` response carrying ``message``.
Nothing here is retried internally; ``retriable`` is a hint for the caller.
"""

from typing import Optional

from sqlalchemy.exc import DBAPIError


class ToolError(Exception):
    """Base class for errors reported back to the tool caller."""

    retriable = False

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ArgumentError(ToolError):
    """Missing or malformed tool arguments, raised before any connection is acquired."""


class ResourceError(ToolError):
    """The connection pool could not hand out a connection."""

    retriable = True


class DatabaseError(ToolError):
    """Engine-level failure during introspection or query execution."""

    @classmethod
    def from_dbapi(cls, error: DBAPIError) -> "DatabaseError":
        """Build from a SQLAlchemy-wrapped driver error, keeping the driver's message.

        Async adapters re-raise driver exceptions under their own DBAPI classes
        with a ``<class ...>:`` prefix; the chained driver exception carries
        the plain server message.
        """
        driver_error = error.orig
        if driver_error is not None and driver_error.__cause__ is not None:
            driver_error = driver_error.__cause__
        detail = str(driver_error if driver_error is not None else error).strip()
        return cls(f"Database error: {detail}", original_error=error)


class UnknownToolError(ToolError):
    """The requested tool name is not one this server exposes."""

    def __init__(self, tool: str):
        super().__init__(f"Unknown tool: {tool}")
        self.tool = tool
