"""
MCP Tool Handlers

Shared handlers for MCP tools that use the hexagonal core.
"""
import asyncio
import logging
from typing import Any, Optional

from ...container import Container
from ...core.domain import ArchiveSource
from ..request_params import build_request

logger = logging.getLogger(__name__)


class MCPHandlers:
    """Handlers for MCP tools using dependency injection"""

    def __init__(self, container: Container):
        self.container = container

    async def count_log_entries(
        self,
        archive_path: str,
        text: Optional[str] = None,
        date: Optional[str] = None,
        days: Optional[int] = None
    ) -> dict[str, Any]:
        """Count matching lines per log file in a local archive"""
        try:
            request = build_request(ArchiveSource.from_path(archive_path), text, date, days)
            counts = await asyncio.to_thread(self.container.count_entries.execute, request)

            return {
                "success": True,
                "archive": archive_path,
                "text": text,
                "counts": counts,
                "file_count": len(counts),
                "total": sum(counts.values()),
            }

        except Exception as e:
            logger.error(f"count_log_entries: {type(e).__name__} ({e})")
            return {
                "success": False,
                "error_type": type(e).__name__,
                "error": f"Failed to count log entries: {str(e)}"
            }
