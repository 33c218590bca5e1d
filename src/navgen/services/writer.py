"""Serialization and persistence of generated files."""

import logging
import os
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path

from navgen.codegen import ts
from navgen.services.formatter import Formatter

logger = logging.getLogger(__name__)

PostProcess = Callable[[str], str]


def write_atomic(path: Path, content: str | bytes) -> None:
    """Write a file so readers never observe a partial file.

    Content goes to a temporary file in the target directory, which then
    replaces the target. Parent directories are created as needed.
    """
    write_atomic_many([(path, content)])


def write_atomic_many(files: Sequence[tuple[Path, str | bytes]]) -> None:
    """Write a set of files, replacing targets only once all are staged.

    Every file is first written to a temporary file beside its target. The
    targets are replaced only after all temporary files exist, so a failure
    while staging leaves every target untouched.
    """
    staged: list[tuple[str, Path]] = []
    try:
        for path, content in files:
            staged.append((_stage(path, content), path))
        for tmp_name, path in staged:
            os.replace(tmp_name, path)
    except BaseException:
        for tmp_name, _ in staged:
            Path(tmp_name).unlink(missing_ok=True)
        raise


def _stage(path: Path, content: str | bytes) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content.encode("utf-8") if isinstance(content, str) else content)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return tmp_name


class Writer:
    """Turns declarations into formatted source and writes files."""

    def __init__(self, formatter: Formatter) -> None:
        self._formatter = formatter

    async def render(
        self,
        path: Path,
        declarations: Sequence[ts.Declaration],
        post_process: PostProcess | None = None,
    ) -> str:
        """Serialize and format declarations destined for ``path``.

        Args:
            path: Target file, used to pick the formatter's parser
            declarations: Top-level declarations in order
            post_process: Optional text substitution applied after formatting

        Returns:
            Final file content
        """
        source = ts.Module(list(declarations)).render()
        source = await self._formatter.format(source, path)
        if post_process is not None:
            source = post_process(source)
        return source

    async def format(self, path: Path, source: str) -> str:
        return await self._formatter.format(source, path)

    def write(self, path: Path, content: str | bytes) -> Path:
        write_atomic(path, content)
        logger.info(f"Wrote {path}")
        return path

    def write_all(self, files: Sequence[tuple[Path, str | bytes]]) -> list[Path]:
        """Write a set of files together; see :func:`write_atomic_many`."""
        write_atomic_many(files)
        paths = [path for path, _ in files]
        for path in paths:
            logger.info(f"Wrote {path}")
        return paths
