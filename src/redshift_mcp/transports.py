"""Transport selection: stdio pipe or HTTP with server-sent events."""

import logging
from typing import TYPE_CHECKING

import uvicorn
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

if TYPE_CHECKING:
    from redshift_mcp.server import RedshiftMCPServer

logger = logging.getLogger(__name__)

SUPPORTED_TRANSPORTS = ("stdio", "sse")


async def run_stdio(mcp_server: "RedshiftMCPServer") -> None:
    """Serve one client over stdin/stdout."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP server started with stdio transport")
        await mcp_server.server.run(
            read_stream,
            write_stream,
            mcp_server.server.create_initialization_options(),
        )


def create_sse_app(mcp_server: "RedshiftMCPServer") -> Starlette:
    """
    Build the Starlette app for the SSE transport.

    GET /sse opens an event stream per client session; clients POST their
    messages to /messages/?session_id=... .
    """
    sse = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        logger.info("New SSE connection established")
        async with sse.connect_sse(
            request.scope, request.receive, request._send
        ) as (read_stream, write_stream):
            await mcp_server.server.run(
                read_stream,
                write_stream,
                mcp_server.server.create_initialization_options(),
            )
        logger.info("SSE connection closed")
        return Response()

    return Starlette(
        routes=[
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse.handle_post_message),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["Content-Type"],
            )
        ],
    )


async def run_sse(mcp_server: "RedshiftMCPServer", port: int) -> None:
    """Serve clients over HTTP/SSE until the process is stopped."""
    app = create_sse_app(mcp_server)
    config = uvicorn.Config(app, host="0.0.0.0", port=port, log_level="info")
    logger.info(f"MCP server starting with SSE transport on port {port}")
    await uvicorn.Server(config).serve()


async def run_transport(
    mcp_server: "RedshiftMCPServer", transport_type: str, port: int = 3000
) -> None:
    """
    Run the server on the named transport.

    Raises:
        ValueError: If the transport type is not supported
    """
    transport_type = transport_type.strip().lower()

    if transport_type == "stdio":
        await run_stdio(mcp_server)
    elif transport_type == "sse":
        await run_sse(mcp_server, port)
    else:
        raise ValueError(
            f"Unsupported transport type: {transport_type}. "
            f"Supported: {', '.join(SUPPORTED_TRANSPORTS)}"
        )
