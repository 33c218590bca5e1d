"""CLI interface for navgen.

Command-line tool for generating React Navigation code from navigation trees.
"""

import asyncio
import json
import sys
from pathlib import Path

import click

from navgen.config import Config
from navgen.core.normalize import normalize
from navgen.errors import NavgenError
from navgen.live.watch import SourceWatcher
from navgen.log import configure_logging
from navgen.pipeline import GenerateContext, GenerateReport, generate
from navgen.services.jsonnet import JsonnetReader
from navgen.services.process import CommandRunner


@click.group()
def cli() -> None:
    """Navgen - React Navigation code generator."""


@click.group()
def navigation() -> None:
    """Navigation tree commands."""


cli.add_command(navigation)

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover navgen.toml)",
)
root_option = click.option(
    "--root",
    "-r",
    "root_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory to search for navigation sources (overrides config)",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)


@navigation.command("generate")
@config_option
@root_option
@click.option(
    "--concurrency",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Number of sources processed in parallel (overrides config)",
)
@click.option(
    "--graph/--no-graph",
    default=None,
    help="Enable/disable graph image rendering (overrides config, default: enabled)",
)
@click.option(
    "--scaffold/--no-scaffold",
    default=None,
    help="Enable/disable screen file scaffolding (overrides config, default: enabled)",
)
@verbose_option
def generate_command(
    config_path: Path | None,
    root_dir: Path | None,
    concurrency: int | None,
    graph: bool | None,
    scaffold: bool | None,
    verbose: bool,
) -> None:
    """Generate navigation components, routes and graphs."""
    configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        root_dir=root_dir,
        concurrency=concurrency,
        graph_enabled=graph,
        scaffold=scaffold,
    )

    report = asyncio.run(generate(config))
    _print_report(report)
    if not report.ok:
        sys.exit(1)


@navigation.command("tree")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_option
def tree_command(source: Path, config_path: Path | None) -> None:
    """Print the normalized navigation tree of SOURCE as JSON."""
    config = _load_config(config_path)
    reader = JsonnetReader(CommandRunner(), config.tools.jsonnet, config.tools.include_dirs)

    try:
        tree = normalize(asyncio.run(reader.read(source)))
    except NavgenError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(json.dumps(tree.to_dict(), indent=2))


@navigation.command("watch")
@config_option
@root_option
@verbose_option
def watch_command(config_path: Path | None, root_dir: Path | None, verbose: bool) -> None:
    """Regenerate navigation artifacts whenever sources change."""
    configure_logging(verbose)
    config = _load_config(config_path).with_overrides(root_dir=root_dir, scaffold=False)

    click.echo(f"Watching {config.root_dir}")
    click.echo("Press Ctrl+C to stop")
    try:
        asyncio.run(_watch(config))
    except KeyboardInterrupt:
        click.echo("\nStopped watching")


async def _watch(config: Config) -> None:
    context = GenerateContext.from_config(config)

    async def regenerate(_paths: set[Path]) -> None:
        _print_report(await generate(config, context))

    await regenerate(set())
    watcher = SourceWatcher(config.root_dir, regenerate, ignore=config.source.ignore)
    await watcher.run()


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _print_report(report: GenerateReport) -> None:
    for source in report.succeeded:
        click.echo(click.style(f"✓ {source}", fg="green"))
    for source, message in report.failed.items():
        click.echo(click.style(f"✗ {source}: {message}", fg="red"), err=True)

    total = len(report.succeeded) + len(report.failed)
    if total == 0:
        click.echo("No navigation sources found")
    elif report.ok:
        click.echo(click.style(f"\nGenerated {total} navigation source(s)", fg="green", bold=True))
    else:
        click.echo(
            click.style(f"\n{len(report.failed)} of {total} source(s) failed", fg="red", bold=True),
            err=True,
        )
