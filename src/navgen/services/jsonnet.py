"""Config Reader for navigation sources."""

import json
import logging
import shlex
from collections.abc import Sequence
from pathlib import Path

from navgen.errors import DecodeError
from navgen.services.process import CommandRunner

logger = logging.getLogger(__name__)


class JsonnetReader:
    """Decodes navigation sources into raw values.

    ``.json`` files are parsed directly; anything else is evaluated with the
    ``jsonnet`` executable and its JSON output parsed.
    """

    def __init__(
        self,
        runner: CommandRunner,
        executable: str = "jsonnet",
        include_dirs: Sequence[Path] = (),
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._include_dirs = tuple(include_dirs)

    def command(self, path: Path) -> list[str]:
        """Build the evaluation command line for a source file."""
        command = shlex.split(self._executable)
        for include_dir in self._include_dirs:
            command.extend(["-J", str(include_dir)])
        command.append(str(path))
        return command

    async def read(self, path: Path) -> object:
        """Decode a navigation source.

        Args:
            path: Source file

        Returns:
            Raw decoded value

        Raises:
            DecodeError: If the source is not UTF-8 or the output is not valid JSON
            ExternalToolError: If jsonnet rejects the source
            NotFoundError: If the jsonnet executable is missing
        """
        if path.suffix == ".json":
            try:
                text = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"{path}: not valid UTF-8: {e}") from e
        else:
            text = await self._runner.execute(*self.command(path))

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"{path}: invalid JSON: {e}") from e

        logger.debug(f"Read navigation source {path}")
        return data
