"""Navigation source discovery."""

import fnmatch
import logging
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "**/navigation.jsonnet"
DEFAULT_IGNORE = ("node_modules/**", "android/**", "ios/**")


def is_ignored(relative: Path, ignore: Sequence[str]) -> bool:
    """Check a root-relative path against ignore patterns.

    Patterns match the POSIX form of the path; ``*`` also matches ``/``.
    """
    posix = relative.as_posix()
    return any(fnmatch.fnmatchcase(posix, pattern) for pattern in ignore)


def find_sources(
    root: Path,
    pattern: str = DEFAULT_PATTERN,
    ignore: Sequence[str] = DEFAULT_IGNORE,
) -> list[Path]:
    """Find navigation sources under a directory.

    Args:
        root: Directory to search
        pattern: Glob pattern relative to root
        ignore: Patterns of root-relative paths to skip

    Returns:
        Sorted absolute paths of matching files
    """
    root = root.resolve()
    sources = sorted(
        path
        for path in root.glob(pattern)
        if path.is_file() and not is_ignored(path.relative_to(root), ignore)
    )
    logger.debug(f"Found {len(sources)} navigation sources under {root}")
    return sources
