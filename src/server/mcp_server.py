"""
Mac Calendar Tools — MCP server.

Serves the four calendar tools over MCP stdio. Each tool forwards its
arguments to the ToolService untouched, so defaults and validation live in
one place and every response is the service's text.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP
from mcp.types import Tool as MCPTool

from src.core.tool_service import TOOLS, ToolService
from src.ports.calendar_port import CalendarAccessError

if TYPE_CHECKING:
    from src.ports.calendar_port import CalendarPort

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Read and manage the user's local macOS calendar. "
    "Dates are 'YYYY-MM-DD HH:MM' for start/end_time and 'YYYY-MM-DD' for date, "
    "in the computer's local time zone."
)


class CalendarMCP(FastMCP):
    """FastMCP that advertises each tool's request model as its input schema.

    The tool functions take every argument loosely so the raw values reach
    ToolService, which owns validation and its `ERROR: ...` texts.
    """

    async def list_tools(self) -> list[MCPTool]:
        tools = await super().list_tools()
        return [
            tool.model_copy(
                update={"inputSchema": TOOLS[tool.name].request_model.model_json_schema()}
            )
            if tool.name in TOOLS
            else tool
            for tool in tools
        ]


def build_server(backend: CalendarPort) -> FastMCP:
    """Create the MCP server with all tools bound to `backend`."""
    service = ToolService(backend)
    server = CalendarMCP("mac-calendar", instructions=INSTRUCTIONS)

    @server.tool(
        name="get_upcoming_events",
        description=TOOLS["get_upcoming_events"].description,
    )
    def get_upcoming_events(days: Any = None, calendar: Any = None) -> str:
        # days: number of days ahead to look (default 7); calendar: name filter
        return service.call("get_upcoming_events", {"days": days, "calendar": calendar}).text

    @server.tool(
        name="search_events",
        description=TOOLS["search_events"].description,
    )
    def search_events(query: Any = None, days: Any = None) -> str:
        # days: days back and forward to search (default 30)
        return service.call("search_events", {"query": query, "days": days}).text

    @server.tool(
        name="create_event",
        description=TOOLS["create_event"].description,
    )
    def create_event(
        title: Any = None,
        start: Any = None,
        end_time: Any = None,
        calendar: Any = None,
        notes: Any = None,
    ) -> str:
        return service.call(
            "create_event",
            {
                "title": title,
                "start": start,
                "end_time": end_time,
                "calendar": calendar,
                "notes": notes,
            },
        ).text

    @server.tool(
        name="delete_event",
        description=TOOLS["delete_event"].description,
    )
    def delete_event(title: Any = None, date: Any = None) -> str:
        return service.call("delete_event", {"title": title, "date": date}).text

    return server


def main() -> None:
    """Entry point: authorize, build the backend and serve over stdio."""
    from src.adapters.calendar_factory import create_calendar_adapter

    logger.info("Starting Mac Calendar MCP server...")
    try:
        backend = create_calendar_adapter()
    except CalendarAccessError:
        # stdout belongs to the MCP protocol; report on stderr.
        print("ERROR: Calendar access not authorized.", file=sys.stderr)
        sys.exit(1)

    build_server(backend).run(transport="stdio")

