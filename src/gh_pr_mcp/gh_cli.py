"""GitHub CLI process runner.

Provides:
- argument-vector execution (no shell, so caller text is never interpreted)
- awaitable process execution with an optional host-configured timeout
- safe error translation of non-zero exits and spawn failures
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .commands import GhCommand
from .errors import gh_command_error

logger = logging.getLogger(__name__)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()


class GhCliRunner:
    """Runs gh subcommands against the checkout the server was started in."""

    def __init__(
        self,
        *,
        gh_path: str = "gh",
        cwd: Path | None = None,
        timeout_s: float | None = None,
    ) -> None:
        """Create a runner.

        Args:
            gh_path: Executable name (resolved via PATH) or absolute path.
            cwd: Working directory for gh; ``None`` inherits the server's.
            timeout_s: Kill gh after this many seconds; ``None`` waits indefinitely.
        """
        self._gh_path = gh_path
        self._cwd = cwd
        self._timeout_s = timeout_s

    async def run(self, command: GhCommand) -> str:
        """Run gh with the command's arguments and return its stdout.

        The child is killed if the awaiting task is cancelled.

        Raises:
            SafeError: code ``GitHubCLI`` when gh cannot be spawned, exits non-zero
                or exceeds the timeout.
        """
        described = f"{self._gh_path} {command.suffix}"
        logger.debug("Running: %s", described)

        try:
            proc = await asyncio.create_subprocess_exec(
                self._gh_path,
                *command.args,
                cwd=self._cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            # ValueError covers NUL bytes and unencodable text in arguments.
            raise gh_command_error(str(exc)) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout_s)
        except asyncio.TimeoutError as exc:
            await _kill(proc)
            raise gh_command_error(f"Command timed out after {self._timeout_s}s: {described}") from exc
        except BaseException:
            await _kill(proc)
            raise

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace")
            raise gh_command_error(f"Command failed: {described}\n{detail}", exit_code=proc.returncode)

        return stdout.decode("utf-8", errors="replace")
