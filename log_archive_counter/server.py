"""
log-archive-counter MCP Server

MCP delivery layer - wraps the container's handlers as MCP tools.
Separation of concerns: this file only handles MCP protocol.
"""
import argparse
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .adapters.mcp import MCPHandlers
from .config import get_count_grace_seconds, get_host, get_min_files_for_parallel, get_port, get_temp_dir
from .container import Container

# stdio transport owns stdout; keep logs quiet on stderr
logging.basicConfig(level=logging.WARNING)

container = Container(
    temp_dir=get_temp_dir(),
    min_files_for_parallel=get_min_files_for_parallel(),
    grace_seconds=get_count_grace_seconds()
)
handlers = MCPHandlers(container)

mcp = FastMCP("log-archive-counter", host=get_host(), port=get_port())


@mcp.tool()
async def count_log_entries(
    archive_path: str,
    text: Optional[str] = None,
    date: Optional[str] = None,
    days: Optional[int] = None
) -> dict:
    """
    Count lines in the daily access logs of a zip archive.

    Only entries named logs_YYYY-MM-DD-access.log are considered, and only
    those inside the date window.

    Args:
        archive_path: Path to a .zip archive
        text: Substring to look for (case-sensitive). Omit to count all lines.
        date: First day of the window (YYYY-MM-DD or DD.MM.YYYY)
        days: Window length in days. Without date, the last N days up to today.

    Returns:
        Dictionary with per-file counts, or success=False and the error

    Example:
        count_log_entries("/data/logs.zip", text="Mozilla", date="2018-02-27", days=3)
        → {counts: {"logs_2018-02-27-access.log": 40, ...}, file_count: 3, ...}
    """
    return await handlers.count_log_entries(archive_path=archive_path, text=text, date=date, days=days)


def main():
    """Main entry point for the MCP server."""
    parser = argparse.ArgumentParser(
        description="log-archive-counter: count lines in dated access logs inside zip archives."
    )
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "streamable-http"],
        help="Transport method (default: stdio)"
    )
    args = parser.parse_args()

    if args.transport == "streamable-http":
        print(f"Starting log-archive-counter on http://{mcp.settings.host}:{mcp.settings.port}")
        print(f"Temp directory: {container.extractor.temp_dir}")
        mcp.run(transport="streamable-http")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
