"""JSON serialization for query rows and tool payloads, built on orjson.

orjson covers datetime, date, time, UUID and dataclasses natively. The
handler below covers what psycopg hands back for warehouse types orjson
does not know about. Decimal is rendered as a string so NUMERIC values keep
their full precision.
"""

import base64
import datetime
import decimal
import ipaddress
from typing import Any

import orjson


def _default_handler(obj: Any) -> Any:
    """
    Convert types orjson cannot serialize natively.

    Raises:
        TypeError: If object cannot be serialized
    """
    if isinstance(obj, decimal.Decimal):
        return str(obj)

    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    if isinstance(obj, (bytes, bytearray, memoryview)):
        data = bytes(obj)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    if isinstance(obj, (set, frozenset)):
        return list(obj)

    if isinstance(
        obj,
        (
            ipaddress.IPv4Address,
            ipaddress.IPv6Address,
            ipaddress.IPv4Network,
            ipaddress.IPv6Network,
        ),
    ):
        return str(obj)

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def convert_value_to_json_safe(value: Any) -> Any:
    """
    Convert a single value to what it will look like once serialized.

    Values orjson cannot handle at all fall back to their string form.
    """
    try:
        return orjson.loads(orjson.dumps(value, default=_default_handler))
    except TypeError:
        return str(value)


def convert_rows_to_json_safe(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert every value of every row to a JSON-safe equivalent."""
    return [
        {key: convert_value_to_json_safe(value) for key, value in row.items()}
        for row in rows
    ]


def dumps(obj: Any, indent: bool = True) -> str:
    """
    Serialize a tool payload to a JSON string.

    Args:
        obj: Object to serialize
        indent: Pretty-print with two-space indentation

    Returns:
        JSON string

    Raises:
        TypeError: If the payload contains a value that cannot be serialized
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, default=_default_handler, option=option).decode("utf-8")
