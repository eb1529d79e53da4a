#!/usr/bin/env python3
"""
HTTP Server - Hexagonal Architecture

Upload endpoint for log archives plus the MCP tools over SSE, using
dependency injection and hexagonal architecture.

Run with: poetry run uvicorn log_archive_counter.server_http:app --host 127.0.0.1 --port 8080

Endpoints:
- POST /api/analyze/logs?text=&date=&days=  multipart field "file" (.zip)
- GET  /ping                                health check
- GET  /sse, POST /messages/                MCP over SSE

Configuration:
- PORT, HOST: Bind address (default: 127.0.0.1:8080)
- TEMP_DIR: Base directory for per-request temp directories
- MIN_FILES_FOR_PARALLEL: Minimum file count for parallel counting (default: 5)
- COUNT_GRACE_SECONDS: Worker pool grace period (default: 3)
"""

import asyncio
import logging
import signal
from datetime import datetime
from typing import Any

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from .adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from .adapters.request_params import build_request
from .config import get_count_grace_seconds, get_host, get_min_files_for_parallel, get_port, get_temp_dir
from .container import Container
from .core.domain import ArchiveSource
from .core.errors import InvalidInputError, LogCounterError
from .formatters import format_count_result

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(threadName)s] %(message)s"
LOG_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"
ERROR_TIME_FORMAT = "%d-%m-%Y %H:%M:%S"


class MillisecondFormatter(logging.Formatter):
    """Formatter printing local time with .mmm milliseconds"""
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        stamp = datetime.fromtimestamp(record.created).strftime(datefmt or LOG_DATE_FORMAT)
        return f"{stamp}.{int(record.msecs):03d}"


def configure_logging(level: int = logging.INFO) -> None:
    """Root logging for the server process; worker thread names show up in every line"""
    logging.basicConfig(level=level)
    formatter = MillisecondFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for root_handler in logging.root.handlers:
        root_handler.setFormatter(formatter)


configure_logging()
logger = logging.getLogger(__name__)


def create_app(container: Container) -> Starlette:
    """Build the Starlette app around a container"""

    async def ping(request: Request) -> Response:
        return JSONResponse({"status": "ok"})

    async def analyze_logs(request: Request) -> Response:
        """POST multipart 'file' with optional ?text=&date=&days="""
        params = request.query_params
        logger.info(
            "Received log analysis request: "
            f"text={params.get('text')}, date={params.get('date')}, days={params.get('days')}"
        )
        async with request.form() as form:
            upload = form.get("file")
            archive = None
            if isinstance(upload, UploadFile):
                archive = ArchiveSource(filename=upload.filename, content=upload.file)

            count_request = build_request(archive, params.get("text"), params.get("date"), params.get("days"))
            result = await asyncio.to_thread(container.count_entries.execute, count_request)

        logger.info(f"Request processed successfully, returning {len(result)} entries")
        return JSONResponse(result)

    return Starlette(
        routes=[
            Route("/ping", ping),
            Route("/api/analyze/logs", analyze_logs, methods=["POST"]),
        ],
        exception_handlers={
            InvalidInputError: _bad_request,
            LogCounterError: _server_error,
            OSError: _server_error,
            Exception: _server_error,
        }
    )


def _error_response(exc: Exception, status_code: int) -> JSONResponse:
    logger.error(f"Exception occurred: {type(exc).__name__} ({exc})")
    return JSONResponse(
        {
            "errorType": type(exc).__name__,
            "errorMessage": str(exc),
            "errorTime": datetime.now().strftime(ERROR_TIME_FORMAT),
        },
        status_code=status_code
    )


async def _bad_request(request: Request, exc: Exception) -> Response:
    return _error_response(exc, 400)


async def _server_error(request: Request, exc: Exception) -> Response:
    return _error_response(exc, 500)


def mount_mcp(app: Starlette, handlers: MCPHandlers) -> Server:
    """Expose the MCP tools on /sse and /messages/ of an existing app"""
    mcp_server = Server("log-archive-counter")
    sse_transport = SseServerTransport("/messages/")

    @mcp_server.list_tools()  # type: ignore[misc,no-untyped-call]
    async def list_tools() -> list[Tool]:
        return [Tool(**schema) for schema in TOOL_SCHEMAS.values()]

    @mcp_server.call_tool()  # type: ignore[misc,no-untyped-call]
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        if name != "count_log_entries":
            raise ValueError(f"Unknown tool: {name}")

        logger.info(f"MCP {name}: {arguments}")
        result = await handlers.count_log_entries(
            archive_path=arguments["archive_path"],
            text=arguments.get("text"),
            date=arguments.get("date"),
            days=arguments.get("days")
        )
        return [TextContent(type="text", text=format_count_result(result))]

    async def sse(request: Request) -> Response:
        peer = request.client.host if request.client else "unknown"
        logger.info(f"MCP session opened by {peer}")
        async with sse_transport.connect_sse(request.scope, request.receive, request._send) as (reader, writer):
            await mcp_server.run(reader, writer, mcp_server.create_initialization_options())
        logger.info(f"MCP session closed by {peer}")
        return Response()

    app.router.routes.extend([
        Route("/sse", sse),
        Mount("/messages/", app=sse_transport.handle_post_message),
    ])
    return mcp_server


container = Container(
    temp_dir=get_temp_dir(),
    min_files_for_parallel=get_min_files_for_parallel(),
    grace_seconds=get_count_grace_seconds()
)
app = create_app(container)
mcp_server = mount_mcp(app, MCPHandlers(container))


def _exit_on_sigterm(signum, frame):
    logger.info("Received SIGTERM, shutting down")
    raise SystemExit(0)


if __name__ == "__main__":
    import uvicorn
    signal.signal(signal.SIGTERM, _exit_on_sigterm)
    host, port = get_host(), get_port()
    logger.info(f"Starting log analysis server on {host}:{port}")
    uvicorn.run(app, host=host, port=port)
