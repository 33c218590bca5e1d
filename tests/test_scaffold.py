"""Tests for screen file scaffolding."""

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from navgen.core.flatten import FlatTree, flatten
from navgen.core.normalize import normalize
from navgen.emit.scaffold import plan_scaffold, scaffold, screen_file_templates
from navgen.errors import PromptCancelled
from navgen.services.writer import write_atomic


def _flat(template: dict[str, str] | None) -> FlatTree:
    config: dict[str, Any] = {"path": "screens"}
    if template is not None:
        config["template"] = template
    raw = {
        "config": config,
        "navigators": [
            {
                "_tag": "Navigator",
                "name": "App",
                "root": True,
                "children": [
                    {
                        "_tag": "Navigator",
                        "name": "Home",
                        "children": [{"_tag": "Screen", "name": "Feed"}],
                    },
                ],
            },
        ],
    }
    return flatten(normalize(raw))


TEMPLATE = {
    "index.ts": 'export { {{component.name}} } from "./{{ component.name }}";\n',
    "{{component.name}}.tsx": "export const {{component.name}} = () => null;\n",
}


def _writer() -> MagicMock:
    writer = MagicMock()
    writer.format = AsyncMock(side_effect=lambda path, content: content)
    writer.write = MagicMock(side_effect=lambda path, content: (write_atomic(path, content), path)[1])
    return writer


class TestScreenFileTemplates:
    """Tests for screen_file_templates()."""

    def test__templates__placed_in_import_path(self) -> None:
        screen = _flat(TEMPLATE).screens[0]

        assert screen_file_templates(screen) == [
            ("screens/Home/Feed/index.ts", 'export { HomeFeed } from "./HomeFeed";\n'),
            ("screens/Home/Feed/HomeFeed.tsx", "export const HomeFeed = () => null;\n"),
        ]

    def test__no_template__nothing(self) -> None:
        assert screen_file_templates(_flat(None).screens[0]) == []

    def test__triple_braces__unescaped_name(self) -> None:
        screen = _flat({"{{{component.name}}}.tsx": "// {{{component.name}}}\n"}).screens[0]

        assert screen_file_templates(screen) == [
            ("screens/Home/Feed/HomeFeed.tsx", "// HomeFeed\n"),
        ]

    def test__section__renders_nested_context(self) -> None:
        template = {"index.ts": "{{#component}}export * from './{{name}}';{{/component}}\n"}
        screen = _flat(template).screens[0]

        assert screen_file_templates(screen) == [
            ("screens/Home/Feed/index.ts", "export * from './HomeFeed';\n"),
        ]

    def test__unknown_name__empty(self) -> None:
        screen = _flat({"a.ts": "x{{missing.key}}y"}).screens[0]

        assert screen_file_templates(screen) == [("screens/Home/Feed/a.ts", "xy")]


class TestPlanScaffold:
    """Tests for plan_scaffold()."""

    def test__existing_files__skipped(self, tmp_path: Path) -> None:
        existing = tmp_path / "screens/Home/Feed/index.ts"
        existing.parent.mkdir(parents=True)
        existing.write_text("// mine\n")

        files = plan_scaffold(_flat(TEMPLATE), tmp_path)

        assert [file.title for file in files] == ["screens/Home/Feed/HomeFeed.tsx"]
        assert files[0].path == (tmp_path / "screens/Home/Feed/HomeFeed.tsx").resolve()


class TestScaffold:
    """Tests for scaffold()."""

    @pytest.mark.asyncio
    async def test__selected_files__written(self, tmp_path: Path) -> None:
        prompt = MagicMock()
        prompt.multi_select = AsyncMock(side_effect=lambda message, choices: [choices[1].value])

        created = await scaffold(_flat(TEMPLATE), tmp_path, prompt, _writer())

        target = (tmp_path / "screens/Home/Feed/HomeFeed.tsx").resolve()
        assert created == [target]
        assert target.read_text() == "export const HomeFeed = () => null;\n"
        assert not (tmp_path / "screens/Home/Feed/index.ts").exists()

    @pytest.mark.asyncio
    async def test__cancelled_prompt__creates_nothing(self, tmp_path: Path) -> None:
        prompt = MagicMock()
        prompt.multi_select = AsyncMock(side_effect=PromptCancelled("cancelled"))
        writer = _writer()

        created = await scaffold(_flat(TEMPLATE), tmp_path, prompt, writer)

        assert created == []
        writer.write.assert_not_called()

    @pytest.mark.asyncio
    async def test__nothing_missing__no_prompt(self, tmp_path: Path) -> None:
        prompt = MagicMock()
        prompt.multi_select = AsyncMock()

        created = await scaffold(_flat(None), tmp_path, prompt, _writer())

        assert created == []
        prompt.multi_select.assert_not_called()
