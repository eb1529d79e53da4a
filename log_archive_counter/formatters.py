"""
BBG Lite formatters for tool results

Format handler results as Bloomberg Terminal-inspired text output.
Used by both CLI and MCP adapters for consistent presentation.
"""

from typing import Any


def format_count_result(result: dict[str, Any]) -> str:
    """Format count_log_entries result as BBG Lite text.

    Example output:
        logs.zip | "Mozilla" | 3 FILES | 81 LINES

        FILE                              LINES
        logs_2018-02-27-access.log           40
        logs_2018-02-28-access.log           18
        logs_2018-03-01-access.log           23
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    counts = result["counts"]
    archive = str(result.get("archive", "archive")).rsplit("/", 1)[-1]
    query = f'"{result["text"]}"' if result.get("text") is not None else "ALL LINES"

    lines = [f"{archive} | {query} | {result['file_count']} FILES | {result['total']:,} LINES", ""]

    if not counts:
        lines.append("No log files matched the date window.")
        return "\n".join(lines)

    width = max(len(name) for name in counts)
    lines.append(f"{'FILE':<{width}}  {'LINES':>8}")
    for name, count in counts.items():
        lines.append(f"{name:<{width}}  {count:>8,}")

    return "\n".join(lines)
