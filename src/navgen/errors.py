"""Error types raised while generating navigation artifacts."""

from collections.abc import Sequence


class NavgenError(Exception):
    """Base class for navgen errors."""


class DecodeError(NavgenError, ValueError):
    """Raw navigation tree does not match the expected shape."""


class ExternalToolError(NavgenError):
    """External tool exited with a non-zero status or rejected its input.

    The message is the tool's error stream verbatim.
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode


class NotFoundError(NavgenError):
    """Required external tool executable is missing."""

    def __init__(self, executable: str, message: str | None = None) -> None:
        super().__init__(message or f"Executable not found: {executable}")
        self.executable = executable


class PromptCancelled(NavgenError):
    """User aborted an interactive prompt."""
