"""Source formatting through prettier."""

import logging
import shlex
from pathlib import Path

from navgen.errors import ExternalToolError, NotFoundError
from navgen.services.process import CommandRunner

logger = logging.getLogger(__name__)


class Formatter:
    """Pipes generated sources through an external formatter.

    Formatting is best effort: a missing or failing formatter leaves the
    source unformatted. An empty command disables formatting.
    """

    def __init__(self, runner: CommandRunner, command: str = "prettier") -> None:
        self._runner = runner
        self._command = shlex.split(command)

    @property
    def enabled(self) -> bool:
        return bool(self._command)

    async def format(self, source: str, path: Path) -> str:
        """Format source text as if it were the file at ``path``."""
        if not self.enabled:
            return source

        try:
            return await self._runner.execute(
                *self._command,
                "--stdin-filepath",
                str(path),
                input=source,
            )
        except (ExternalToolError, NotFoundError) as e:
            logger.debug(f"Formatting {path.name} failed, keeping unformatted source: {e}")
            return source
