"""Screen file scaffolding.

Every ``config.template`` entry maps a file-name template to a content
template. Both are Mustache templates rendered per screen with
``component.name`` bound to the screen's import specifier; the files are
placed in the screen's import path. Only files that do not exist yet are
offered for creation.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import chevron

from navgen.core.flatten import FlatTree
from navgen.core.tree import Screen
from navgen.errors import PromptCancelled
from navgen.services.prompt import Choice, Prompt
from navgen.services.writer import Writer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScaffoldFile:
    """Candidate file to create."""

    title: str
    path: Path
    content: str


def screen_file_templates(screen: Screen) -> list[tuple[str, str]]:
    """Render a screen's file templates.

    Returns:
        (relative file path, content) pairs, empty without templates
    """
    if not screen.config.template:
        return []

    context = {"component": {"name": screen.import_specifier}}
    return [
        (
            f"{screen.import_path}/{chevron.render(name, context)}",
            chevron.render(content, context),
        )
        for name, content in screen.config.template.items()
    ]


def plan_scaffold(flat: FlatTree, source_dir: Path) -> list[ScaffoldFile]:
    """List template files that do not exist yet.

    Args:
        flat: Flattened tree
        source_dir: Directory of the navigation source; relative template
                    paths resolve against it

    Returns:
        Missing files in screen order
    """
    files: list[ScaffoldFile] = []
    for screen in flat.screens:
        for relative, content in screen_file_templates(screen):
            path = (source_dir / relative).resolve()
            if path.exists():
                continue
            files.append(ScaffoldFile(title=relative, path=path, content=content))
    return files


async def scaffold(
    flat: FlatTree,
    source_dir: Path,
    prompt: Prompt,
    writer: Writer,
) -> list[Path]:
    """Offer missing screen files and create the ones the user picks.

    A cancelled prompt creates nothing.

    Returns:
        Paths of the created files
    """
    candidates = plan_scaffold(flat, source_dir)
    if not candidates:
        return []

    try:
        selected = await prompt.multi_select(
            "Select files to create",
            [Choice(title=file.title, value=file) for file in candidates],
        )
    except PromptCancelled:
        logger.info("File scaffolding cancelled")
        return []

    created: list[Path] = []
    for file in selected:
        content = await writer.format(file.path, file.content)
        created.append(writer.write(file.path, content))
    return created
