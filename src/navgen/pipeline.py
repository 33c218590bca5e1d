"""Generation pipeline.

For every navigation source: decode, normalize, flatten, run the three
emitters concurrently, then write the artifacts next to the source and
offer screen scaffolding. Sources are processed with bounded parallelism
and a failing source never stops the others.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from navgen.config import Config
from navgen.core.flatten import FlatTree, flatten
from navgen.core.normalize import normalize
from navgen.core.tree import Tree
from navgen.emit.components import NAVIGATION_FILENAME, build_navigation_module
from navgen.emit.graph import DOT_FILENAME, build_graph
from navgen.emit.routes import ROUTES_FILENAME, build_routes_module, tidy_params_spacing
from navgen.emit.scaffold import scaffold
from navgen.errors import NavgenError
from navgen.services.discovery import find_sources
from navgen.services.formatter import Formatter
from navgen.services.jsonnet import JsonnetReader
from navgen.services.process import CommandRunner
from navgen.services.prompt import Prompt
from navgen.services.render import GraphRenderer
from navgen.services.writer import Writer

logger = logging.getLogger(__name__)

GRAPH_IMAGE_STEM = "navigation.gen"


@dataclass
class GenerateContext:
    """Services shared by one invocation.

    ``renderer`` is None when graph images are disabled and ``prompt`` is
    None when scaffolding is disabled.
    """

    reader: JsonnetReader
    writer: Writer
    renderer: GraphRenderer | None = None
    prompt: Prompt | None = None
    graph_format: str = "svg"

    @classmethod
    def from_config(cls, config: Config, runner: CommandRunner | None = None) -> GenerateContext:
        """Build the services described by a configuration."""
        runner = runner or CommandRunner()
        tools = config.tools

        renderer = None
        if config.graph.enabled:
            renderer = GraphRenderer(runner, dot=tools.dot, kroki_url=config.graph.kroki_url)

        return cls(
            reader=JsonnetReader(runner, tools.jsonnet, tools.include_dirs),
            writer=Writer(Formatter(runner, tools.prettier)),
            renderer=renderer,
            prompt=Prompt() if config.generate.scaffold else None,
            graph_format=config.graph.format,
        )


@dataclass(frozen=True)
class Artifact:
    """Generated file content, not yet written."""

    path: Path
    content: str | bytes


@dataclass
class GenerateReport:
    """Outcome of a generation run."""

    succeeded: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


async def load_tree(source: Path, reader: JsonnetReader) -> Tree:
    """Decode and normalize one navigation source."""
    return normalize(await reader.read(source))


async def build_artifacts(source: Path, flat: FlatTree, context: GenerateContext) -> list[Artifact]:
    """Run the emitters concurrently and collect their output in memory.

    Raises:
        NavgenError: The first emitter failure, after all emitters finished
    """
    directory = source.parent

    async def navigation() -> list[Artifact]:
        path = directory / NAVIGATION_FILENAME
        content = await context.writer.render(path, build_navigation_module(flat))
        return [Artifact(path, content)]

    async def routes() -> list[Artifact]:
        path = directory / ROUTES_FILENAME
        content = await context.writer.render(
            path, build_routes_module(flat), post_process=tidy_params_spacing
        )
        return [Artifact(path, content)]

    async def graph() -> list[Artifact]:
        source_text = build_graph(flat.tree)
        artifacts = [Artifact(directory / DOT_FILENAME, source_text)]
        if context.renderer is not None:
            image = await context.renderer.render(source_text, context.graph_format)
            image_path = directory / f"{GRAPH_IMAGE_STEM}.{context.graph_format}"
            artifacts.append(Artifact(image_path, image))
        return artifacts

    results = await asyncio.gather(navigation(), routes(), graph(), return_exceptions=True)

    artifacts: list[Artifact] = []
    for result in results:
        if isinstance(result, BaseException):
            raise result
        artifacts.extend(result)
    return artifacts


async def generate_file(source: Path, context: GenerateContext) -> list[Path]:
    """Generate every artifact of one navigation source.

    Nothing is written unless all emitters succeed, and existing artifacts
    are replaced only once every new one is staged.

    Args:
        source: Navigation source file
        context: Invocation services

    Returns:
        Paths of written files, scaffolded files included
    """
    logger.info(f"Generating {source}")
    tree = await load_tree(source, context.reader)
    flat = flatten(tree)

    artifacts = await build_artifacts(source, flat, context)
    written = context.writer.write_all(
        [(artifact.path, artifact.content) for artifact in artifacts]
    )

    if context.prompt is not None:
        written.extend(await scaffold(flat, source.parent, context.prompt, context.writer))
    return written


async def generate_all(
    sources: Sequence[Path],
    context: GenerateContext,
    concurrency: int = 4,
) -> GenerateReport:
    """Generate many sources with bounded parallelism.

    Args:
        sources: Navigation source files
        context: Invocation services
        concurrency: Maximum number of sources in flight

    Returns:
        Report of succeeded and failed sources, in input order
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))
    errors: dict[Path, str] = {}

    async def run(source: Path) -> None:
        async with semaphore:
            try:
                await generate_file(source, context)
            except (NavgenError, OSError) as e:
                logger.error(f"Failed to generate {source}: {e}")
                errors[source] = str(e)

    await asyncio.gather(*(run(source) for source in sources))

    report = GenerateReport()
    for source in sources:
        if source in errors:
            report.failed[source] = errors[source]
        else:
            report.succeeded.append(source)
    return report


async def generate(config: Config, context: GenerateContext | None = None) -> GenerateReport:
    """Discover navigation sources and generate all of them."""
    sources = find_sources(config.root_dir, config.source.pattern, config.source.ignore)
    if not sources:
        logger.warning(f"No navigation sources matching {config.source.pattern} in {config.root_dir}")
        return GenerateReport()

    context = context or GenerateContext.from_config(config)
    return await generate_all(sources, context, config.generate.concurrency)
