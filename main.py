"""
Mac Calendar Tools — Entry Point.

`python main.py` starts the MCP server on stdio.
`python main.py <tool_name> '<json>'` runs one tool call and prints the result.
"""

import logging
import sys

from src.config import settings

# stderr only: stdout carries tool output / MCP messages.
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

if __name__ == "__main__":
    if len(sys.argv) > 1:
        from src.server.cli import main as run_once

        sys.exit(run_once(sys.argv[1:]))

    from src.server.mcp_server import main as serve

    serve()
