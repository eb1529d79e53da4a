"""
MCP Tool Definitions

Single source of truth for tool schemas and descriptions.
Used by both stdio and HTTP/SSE servers.
"""

# Tool schemas for MCP
TOOL_SCHEMAS = {
    "count_log_entries": {
        "name": "count_log_entries",
        "description": """Count lines in daily access logs (logs_YYYY-MM-DD-access.log) inside a zip archive.

count_log_entries("/data/logs.zip", text="Mozilla", date="2018-02-27", days=3)
→ {"logs_2018-02-27-access.log": 40, "logs_2018-02-28-access.log": 18, ...}

Without text every line is counted. Without date/days only today's log is counted.
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "archive_path": {
                    "type": "string",
                    "description": "Path to a .zip archive on the server"
                },
                "text": {
                    "type": "string",
                    "description": "Substring to look for (case-sensitive, no regex). Omit to count all lines."
                },
                "date": {
                    "type": "string",
                    "description": "First day of the window (YYYY-MM-DD or DD.MM.YYYY)"
                },
                "days": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Window length in days. Without date: the last N days up to today."
                }
            },
            "required": ["archive_path"]
        }
    },
}
