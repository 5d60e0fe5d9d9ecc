"""
Shell utilities for safe subprocess execution.

This module runs external executables without a shell, as discrete
argument tokens, on the asyncio event loop. A run either completes, times
out, or is cancelled; in the last two cases the child process is killed so
nothing is left running after the request that started it.
"""

import asyncio
import shutil
from pathlib import Path
from typing import NamedTuple, Protocol

from loguru import logger


class CommandResult(NamedTuple):
    """Result of a command execution."""
    returncode: int
    stdout: str
    stderr: str


class CommandTimeoutError(Exception):
    """Raised when a command does not finish within its timeout."""

    def __init__(self, timeout_seconds: float):
        super().__init__(f"Command timed out after {timeout_seconds} seconds")
        self.timeout_seconds = timeout_seconds


class CommandRunner(Protocol):
    """Narrow seam over process execution, substituted with fakes in tests."""

    async def run(self, cmd: list[str], timeout: float | None = None) -> CommandResult:
        ...


async def run_command_safely(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float | None = 300,
    env: dict[str, str] | None = None
) -> CommandResult:
    """
    Run a command as a child process and capture its output.

    Args:
        cmd: Command to run as list of strings
        cwd: Working directory for the command
        timeout: Timeout in seconds, None waits forever
        env: Environment variables, None inherits the current environment

    Returns:
        CommandResult with return code and decoded output

    Raises:
        OSError: If the process cannot be started (e.g. executable missing)
        CommandTimeoutError: If the command times out
        asyncio.CancelledError: If the awaiting task is cancelled
    """
    logger.debug(f"Running command: {' '.join(cmd)}")

    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=env,
    )

    try:
        stdout_b, stderr_b = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        _kill(proc)
        await proc.wait()
        raise CommandTimeoutError(timeout)
    except asyncio.CancelledError:
        logger.warning(f"Command cancelled, killing pid {proc.pid}: {' '.join(cmd)}")
        _kill(proc)
        await asyncio.shield(proc.wait())
        raise

    stdout = stdout_b.decode(errors="replace")
    stderr = stderr_b.decode(errors="replace")

    logger.debug(f"Command completed with return code: {proc.returncode}")
    if stdout:
        logger.debug(f"STDOUT: {stdout[:200]}...")
    if stderr:
        logger.debug(f"STDERR: {stderr[:200]}...")

    return CommandResult(returncode=proc.returncode, stdout=stdout, stderr=stderr)


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass


class SubprocessRunner:
    """CommandRunner backed by real child processes."""

    async def run(self, cmd: list[str], timeout: float | None = None) -> CommandResult:
        return await run_command_safely(cmd, timeout=timeout)


def check_command_available(cmd: str) -> bool:
    """
    Check if a command is available in the system.

    Args:
        cmd: Executable path or name to look up on PATH

    Returns:
        True if command is available, False otherwise
    """
    return shutil.which(cmd) is not None
