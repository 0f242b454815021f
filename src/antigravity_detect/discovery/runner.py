"""Shell command execution with a hard time bound.

Commands are run through the platform shell because the enumeration
commands rely on pipes and ``||`` fallbacks. Each shell starts in its own
process group so that a timeout kills the whole pipeline, not just the
shell, before ``CommandTimeoutError`` is raised.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
import subprocess
import sys

from antigravity_detect.exceptions import (
    CommandExecutionError,
    CommandTimeoutError,
    CommandUnavailableError,
)

logger = logging.getLogger(__name__)

# Exit statuses meaning "command not found": POSIX sh and Windows cmd.exe.
_NOT_FOUND_CODES: frozenset[int] = frozenset({127, 9009})
_NOT_FOUND_MARKERS: tuple[str, ...] = ("not found", "not recognized")

# Upper bound on reaping a killed command (seconds).
KILL_GRACE: float = 1.0

_IS_WINDOWS = sys.platform == "win32"


def _is_unavailable(returncode: int | None, stderr: str) -> bool:
    if returncode in _NOT_FOUND_CODES:
        return True
    lowered = stderr.lower()
    return any(marker in lowered for marker in _NOT_FOUND_MARKERS)


def _group_kwargs() -> dict[str, object]:
    """Subprocess options placing the shell at the head of a new process group."""
    if _IS_WINDOWS:
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


async def _kill_tree(proc: asyncio.subprocess.Process) -> None:
    """Kill the shell and every process it started, then reap it."""
    if _IS_WINDOWS:
        try:
            killer = await asyncio.create_subprocess_exec(
                "taskkill", "/T", "/F", "/PID", str(proc.pid),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.debug("taskkill unavailable: %s", exc)
        else:
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(killer.wait(), timeout=KILL_GRACE)
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
    else:
        with contextlib.suppress(ProcessLookupError, PermissionError):
            os.killpg(proc.pid, signal.SIGKILL)

    with contextlib.suppress(asyncio.TimeoutError):
        await asyncio.wait_for(proc.wait(), timeout=KILL_GRACE)


async def run_command(command: str, timeout: float) -> str:
    """Run ``command`` in a shell and return its decoded stdout.

    Args:
        command: Shell command line.
        timeout: Seconds to wait before killing the command.

    Returns:
        Standard output, decoded as UTF-8 with replacement.

    Raises:
        CommandTimeoutError: The command ran longer than ``timeout``.
        CommandUnavailableError: The shell or the invoked tool is missing.
        CommandExecutionError: The command exited with a nonzero status.
    """
    logger.debug("Running %r (timeout %.1fs)", command, timeout)
    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            **_group_kwargs(),
        )
    except OSError as exc:
        raise CommandUnavailableError(
            f"failed to start command: {exc}", command=command
        ) from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill_tree(proc)
        raise CommandTimeoutError(
            f"command timeout after {timeout:.1f}s", command=command
        ) from None

    err_text = stderr.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        error_cls = (
            CommandUnavailableError
            if _is_unavailable(proc.returncode, err_text)
            else CommandExecutionError
        )
        raise error_cls(
            f"command exited with status {proc.returncode}",
            command=command,
            returncode=proc.returncode,
            stderr=err_text,
        )
    return stdout.decode("utf-8", errors="replace")
