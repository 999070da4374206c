"""
Process runner — the single place external processes are launched.

``run_command`` is the blocking form used for quick toolchain queries
(``dotnet --list-sdks``). ``run_process`` is the async, cancellable
form used by installers: the process wait races the cancellation
token and the process is killed when the token wins.

Neither raises for a failing command; the outcome is captured in a
CommandResult. Only cancellation propagates, as OperationCancelled.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
import time
from collections.abc import Sequence
from dataclasses import dataclass

from sdkdoctor.core.engine.cancellation import CancellationToken, OperationCancelled

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of one process run."""

    command: list[str]
    returncode: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None      # launch failure or timeout
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0

    @property
    def stdout_lines(self) -> list[str]:
        return self.stdout.splitlines()


def run_command(cmd: Sequence[str], timeout: int = 30, cwd: str | None = None) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        cmd: Command list for ``subprocess.run()``.
        timeout: Seconds before the command is abandoned.
        cwd: Optional working directory.

    Returns:
        CommandResult; ``error`` is set if the process could not run.
    """
    command = [str(part) for part in cmd]
    logger.debug("Executing: %s", command)
    start = time.monotonic()

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(command=command, error=f"Command timed out after {timeout}s")
    except OSError as e:
        return CommandResult(command=command, error=f"Command execution error: {e}")

    return CommandResult(
        command=command,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        elapsed_ms=int((time.monotonic() - start) * 1000),
    )


async def run_process(
    cmd: Sequence[str],
    token: CancellationToken,
    timeout: int | None = None,
    cwd: str | None = None,
) -> CommandResult:
    """Run a command asynchronously, killing it on cancellation.

    Raises:
        OperationCancelled: If the token fires before the process exits.
    """
    command = [str(part) for part in cmd]
    token.raise_if_cancelled()
    logger.debug("Launching: %s", command)
    start = time.monotonic()

    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        return CommandResult(command=command, error=f"Command execution error: {e}")

    try:
        stdout, stderr = await token.run(asyncio.wait_for(proc.communicate(), timeout))
    except (OperationCancelled, asyncio.CancelledError):
        logger.info("Cancelling process %s (pid %s)", command[0], proc.pid)
        _kill(proc)
        await proc.wait()
        raise
    except asyncio.TimeoutError:
        _kill(proc)
        await proc.wait()
        return CommandResult(command=command, error=f"Command timed out after {timeout}s")

    return CommandResult(
        command=command,
        returncode=proc.returncode,
        stdout=stdout.decode(errors="replace") if stdout else "",
        stderr=stderr.decode(errors="replace") if stderr else "",
        elapsed_ms=int((time.monotonic() - start) * 1000),
    )


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
