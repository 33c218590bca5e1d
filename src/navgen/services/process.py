"""External process runner."""

import asyncio
import logging
import shlex

from navgen.errors import ExternalToolError, NotFoundError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs external tools and collects their output.

    No timeout is applied. Cancelling the awaiting task kills the child
    process before the cancellation propagates.
    """

    async def run(self, *command: str, input: bytes | None = None) -> bytes:
        """Run a command and return its raw stdout.

        Args:
            command: Executable followed by its arguments
            input: Bytes written to the process's stdin

        Returns:
            Captured stdout

        Raises:
            NotFoundError: If the executable cannot be started
            ExternalToolError: If the process exits non-zero
        """
        logger.debug(f"Running: {shlex.join(command)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE if input is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise NotFoundError(command[0], f"Cannot run {command[0]}: {e}") from e

        try:
            stdout, stderr = await process.communicate(input)
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace")
            raise ExternalToolError(
                message if message.strip() else f"{command[0]} exited with code {process.returncode}",
                command=command,
                returncode=process.returncode,
            )
        return stdout

    async def execute(self, *command: str, input: str | None = None) -> str:
        """Run a command with text input and return its decoded stdout."""
        stdout = await self.run(
            *command,
            input=input.encode("utf-8") if input is not None else None,
        )
        return stdout.decode("utf-8", errors="replace")
