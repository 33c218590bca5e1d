"""Regenerate navigation artifacts when sources change."""

import fnmatch
import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from watchfiles import Change, awatch

from navgen.services.discovery import DEFAULT_IGNORE, is_ignored

logger = logging.getLogger(__name__)

DEFAULT_WATCH_PATTERNS = ("*.jsonnet", "*.libsonnet", "*.json")

ChangeHandler = Callable[[set[Path]], Awaitable[None]]


class SourceWatcher:
    """Watches a directory tree and reports changed navigation sources.

    Changes arrive in batches from watchfiles; each batch with at least one
    matching path triggers one call of the handler. Deletions are ignored.
    """

    def __init__(
        self,
        root_dir: Path,
        on_change: ChangeHandler,
        watch_patterns: Sequence[str] | None = None,
        ignore: Sequence[str] = DEFAULT_IGNORE,
    ) -> None:
        """Initialize the watcher.

        Args:
            root_dir: Directory to watch
            on_change: Coroutine called with the changed paths of a batch
            watch_patterns: Patterns of root-relative paths to react to
            ignore: Patterns of root-relative paths to skip
        """
        self._root_dir = root_dir.resolve()
        self._on_change = on_change
        self._watch_patterns = tuple(watch_patterns or DEFAULT_WATCH_PATTERNS)
        self._ignore = tuple(ignore)

    async def run(self) -> None:
        """Watch until cancelled."""
        logger.info(f"Watching {self._root_dir} for changes")
        async for changes in awatch(self._root_dir):
            await self.handle_changes(changes)

    async def handle_changes(self, changes: set[tuple[Change, str]]) -> None:
        """Filter one batch of raw changes and notify the handler."""
        paths = {
            Path(path_str)
            for change_type, path_str in changes
            if change_type != Change.deleted and self._matches_patterns(Path(path_str))
        }
        if not paths:
            return

        logger.info(f"Detected changes in {', '.join(sorted(p.name for p in paths))}")
        await self._on_change(paths)

    def _matches_patterns(self, path: Path) -> bool:
        """Check if a path matches any watch pattern and no ignore pattern.

        Args:
            path: Path to check

        Returns:
            True if path should trigger regeneration
        """
        try:
            relative = path.resolve().relative_to(self._root_dir)
        except ValueError:
            return False

        if is_ignored(relative, self._ignore):
            return False
        posix = relative.as_posix()
        return any(fnmatch.fnmatchcase(posix, pattern) for pattern in self._watch_patterns)
