"""
Mac Calendar Tools — osascript runner.

Runs a generated AppleScript in a separate `osascript` process and returns
its trimmed stdout. The script goes in on stdin, so no shell ever sees it.
"""

from __future__ import annotations

import logging
import subprocess

from src.ports.calendar_port import CalendarError

logger = logging.getLogger(__name__)


def run_osascript(script: str, *, executable: str = "osascript", timeout: float = 30.0) -> str:
    """Execute `script` and return stdout without surrounding whitespace.

    Raises:
        CalendarError: osascript is missing, timed out, or exited non-zero.
    """
    logger.debug("Running AppleScript:\n%s", script)
    try:
        proc = subprocess.run(
            [executable, "-"],
            input=script,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        logger.error("osascript timed out after %ss", timeout)
        raise CalendarError(f"Calendar script timed out after {timeout:g} seconds.") from exc
    except OSError as exc:
        logger.error("Failed to launch %s: %s", executable, exc)
        raise CalendarError(f"Failed to run {executable}: {exc}") from exc

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        logger.error("osascript exited with %d: %s", proc.returncode, stderr)
        raise CalendarError(f"Calendar script failed: {stderr or f'exit status {proc.returncode}'}")

    return (proc.stdout or "").strip()
