"""
Mac Calendar Tools — One-shot command.

    python main.py <tool_name> '<json object>'

Runs a single tool call and prints its text to stdout. Malformed
invocations go to stderr with exit status 1.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Sequence

from src.core.tool_service import TOOLS, ToolService
from src.ports.calendar_port import CalendarAccessError

logger = logging.getLogger(__name__)

USAGE = "Usage: main.py <subcommand> <json>"


class UsageError(Exception):
    """The command line itself is malformed; no tool runs."""


def parse_invocation(argv: Sequence[str]) -> tuple[str, dict[str, Any]]:
    """Split argv into (tool name, argument bag)."""
    if len(argv) != 2:
        raise UsageError(USAGE)

    subcommand, raw_args = argv
    try:
        args = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        raise UsageError("ERROR: Invalid JSON") from exc
    if not isinstance(args, dict):
        raise UsageError("ERROR: Invalid JSON")

    if subcommand not in TOOLS:
        raise UsageError(f"ERROR: Unknown subcommand '{subcommand}'")
    return subcommand, args


def main(argv: Sequence[str] | None = None) -> int:
    from src.adapters.calendar_factory import create_calendar_adapter

    try:
        name, args = parse_invocation(sys.argv[1:] if argv is None else argv)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        calendar = create_calendar_adapter()
    except CalendarAccessError:
        print("ERROR: Calendar access not authorized.")
        return 1

    result = ToolService(calendar).call(name, args)
    print(result.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
