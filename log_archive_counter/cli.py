#!/usr/bin/env python3
"""
CLI for log-archive-counter - run the counting tools without a server

Usage:
  log-archive-counter-cli list-tools                                   # Show MCP tool definitions
  log-archive-counter-cli count logs.zip                               # Count all lines in today's log
  log-archive-counter-cli count logs.zip --text Mozilla --date 2018-02-27 --days 3
  log-archive-counter-cli count logs.zip --days 7                      # Last 7 days up to today

Uses the hexagonal core directly (no MCP layer)
"""

import argparse
import asyncio
import json
import sys

from .adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from .config import get_count_grace_seconds, get_min_files_for_parallel, get_temp_dir
from .container import Container
from .formatters import format_count_result


async def list_tools_command() -> int:
    """Show MCP tool definitions, one parameter per line"""
    for schema in TOOL_SCHEMAS.values():
        input_schema = schema["inputSchema"]
        required = set(input_schema.get("required", []))

        print(f"Tool: {schema['name']}")
        print(schema["description"].strip())
        print()
        for param, prop in input_schema["properties"].items():
            marker = "*" if param in required else " "
            print(f"  {marker} {param:<14} {prop['type']:<8} {prop.get('description', '')}")
        print()

    print("* required")
    return 0


async def count_command(
    archive: str,
    text: str | None,
    date: str | None,
    days: int | None,
    temp_dir: str,
    as_json: bool = False,
) -> int:
    """Count matching lines per log file"""
    container = Container(
        temp_dir=temp_dir,
        min_files_for_parallel=get_min_files_for_parallel(),
        grace_seconds=get_count_grace_seconds()
    )
    handlers = MCPHandlers(container)

    result = await handlers.count_log_entries(archive_path=archive, text=text, date=date, days=days)

    if as_json and result["success"]:
        print(json.dumps(result["counts"], indent=2))
    else:
        print(format_count_result(result))

    return 0 if result["success"] else 1


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Count lines in dated access logs inside zip archives"
    )
    parser.add_argument(
        "--temp-dir",
        default=str(get_temp_dir()),
        help="Base directory for extracted files (default: $TEMP_DIR or system temp)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("list-tools", help="Show MCP tool definitions")

    count_parser = subparsers.add_parser("count", help="Count lines in log files of an archive")
    count_parser.add_argument("archive", help="Path to a .zip archive")
    count_parser.add_argument("--text", help="Substring to look for (default: count every line)")
    count_parser.add_argument("--date", help="First day of the window (YYYY-MM-DD or DD.MM.YYYY)")
    count_parser.add_argument("--days", type=int, help="Window length in days")
    count_parser.add_argument("--json", action="store_true", help="Print counts as JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "list-tools":
        return asyncio.run(list_tools_command())
    elif args.command == "count":
        return asyncio.run(count_command(
            archive=args.archive,
            text=args.text,
            date=args.date,
            days=args.days,
            temp_dir=args.temp_dir,
            as_json=args.json
        ))
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
