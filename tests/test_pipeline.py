"""Tests for the generation pipeline."""

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from navgen.config import Config
from navgen.errors import DecodeError, ExternalToolError
from navgen.pipeline import GenerateContext, generate, generate_all, generate_file
from navgen.services.formatter import Formatter
from navgen.services.jsonnet import JsonnetReader
from navgen.services.process import CommandRunner
from navgen.services.writer import Writer

GENERATED = ("navigation.gen.tsx", "routes.gen.ts", "navigation.gen.dot")


def _context(
    raw: Any,
    renderer: Any = None,
    prompt: Any = None,
) -> GenerateContext:
    reader = MagicMock()
    reader.read = AsyncMock(return_value=raw)
    return GenerateContext(
        reader=reader,
        writer=Writer(Formatter(CommandRunner(), "")),
        renderer=renderer,
        prompt=prompt,
    )


class TestGenerateFile:
    """Tests for generate_file()."""

    @pytest.mark.asyncio
    async def test__writes_artifacts_next_to_source(
        self, tmp_path: Path, app_raw: dict[str, Any]
    ) -> None:
        source = tmp_path / "navigation.jsonnet"

        written = await generate_file(source, _context(app_raw))

        assert written == [tmp_path / name for name in GENERATED]
        assert 'import * as route from "./routes.gen";' in (tmp_path / GENERATED[0]).read_text()
        assert 'export const routeHomeFeed = "HomeFeed";' in (tmp_path / GENERATED[1]).read_text()
        assert (tmp_path / GENERATED[2]).read_text().startswith("digraph G {")

    @pytest.mark.asyncio
    async def test__renderer__image_written(self, tmp_path: Path, app_raw: dict[str, Any]) -> None:
        renderer = MagicMock()
        renderer.render = AsyncMock(return_value=b"<svg/>")
        context = _context(app_raw, renderer=renderer)
        context.graph_format = "svg"

        written = await generate_file(tmp_path / "navigation.jsonnet", context)

        assert tmp_path / "navigation.gen.svg" in written
        assert (tmp_path / "navigation.gen.svg").read_bytes() == b"<svg/>"
        dot_source = (tmp_path / "navigation.gen.dot").read_text()
        renderer.render.assert_awaited_once_with(dot_source, "svg")

    @pytest.mark.asyncio
    async def test__renderer_failure__nothing_written(
        self, tmp_path: Path, app_raw: dict[str, Any]
    ) -> None:
        renderer = MagicMock()
        renderer.render = AsyncMock(side_effect=ExternalToolError("syntax error", command=("dot",)))

        with pytest.raises(ExternalToolError, match="syntax error"):
            await generate_file(tmp_path / "navigation.jsonnet", _context(app_raw, renderer=renderer))

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test__invalid_tree__decode_error(self, tmp_path: Path) -> None:
        with pytest.raises(DecodeError, match="tree.navigators is required"):
            await generate_file(tmp_path / "navigation.jsonnet", _context({"config": {"path": "src"}}))

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test__prompt__scaffolds_after_artifacts(
        self, tmp_path: Path, minimal_raw: dict[str, Any]
    ) -> None:
        template = {"index.ts": "// {{component.name}}\n"}
        raw = {**minimal_raw, "config": {"path": "screens", "template": template}}
        prompt = MagicMock()
        prompt.multi_select = AsyncMock(
            side_effect=lambda message, choices: [choice.value for choice in choices]
        )

        written = await generate_file(tmp_path / "navigation.jsonnet", _context(raw, prompt=prompt))

        scaffolded = (tmp_path / "screens/Search/index.ts").resolve()
        assert written[-1] == scaffolded
        assert scaffolded.read_text() == "// Search\n"


class TestGenerateAll:
    """Tests for generate_all()."""

    @pytest.mark.asyncio
    async def test__failure__isolated(self, tmp_path: Path, minimal_raw: dict[str, Any]) -> None:
        good = tmp_path / "good" / "navigation.jsonnet"
        bad = tmp_path / "bad" / "navigation.jsonnet"
        for source in (good, bad):
            source.parent.mkdir()

        async def read(path: Path) -> Any:
            if path == bad:
                raise DecodeError(f"{path}: invalid JSON")
            return minimal_raw

        context = _context(None)
        context.reader.read = AsyncMock(side_effect=read)

        report = await generate_all([bad, good], context, concurrency=1)

        assert report.ok is False
        assert report.succeeded == [good]
        assert list(report.failed) == [bad]
        assert "invalid JSON" in report.failed[bad]
        assert (good.parent / "routes.gen.ts").exists()
        assert not (bad.parent / "routes.gen.ts").exists()

    @pytest.mark.asyncio
    async def test__non_utf8_source__reported_not_raised(
        self, tmp_path: Path, minimal_raw: dict[str, Any]
    ) -> None:
        good = tmp_path / "good" / "navigation.json"
        bad = tmp_path / "bad" / "navigation.json"
        for source in (good, bad):
            source.parent.mkdir()
        good.write_text(json.dumps(minimal_raw))
        bad.write_bytes(b'{"config": {"path": "\xff"}}')
        context = GenerateContext(
            reader=JsonnetReader(CommandRunner()),
            writer=Writer(Formatter(CommandRunner(), "")),
        )

        report = await generate_all([bad, good], context)

        assert report.succeeded == [good]
        assert "not valid UTF-8" in report.failed[bad]
        assert (good.parent / "routes.gen.ts").exists()
        assert not (bad.parent / "routes.gen.ts").exists()

    @pytest.mark.asyncio
    async def test__empty__ok(self) -> None:
        report = await generate_all([], _context(None))

        assert report.ok is True
        assert report.succeeded == []


class TestGenerate:
    """Tests for generate()."""

    @pytest.mark.asyncio
    async def test__discovers_json_sources(self, tmp_path: Path, minimal_raw: dict[str, Any]) -> None:
        source = tmp_path / "app" / "navigation.json"
        source.parent.mkdir()
        source.write_text(json.dumps(minimal_raw))
        config_file = tmp_path / "navgen.toml"
        config_file.write_text('[source]\npattern = "**/navigation.json"\n')
        config = Config.load(config_file)
        context = GenerateContext(
            reader=JsonnetReader(CommandRunner()),
            writer=Writer(Formatter(CommandRunner(), "")),
        )

        report = await generate(config, context)

        assert report.succeeded == [source.resolve()]
        routes = (source.parent / "routes.gen.ts").read_text()
        assert routes.startswith('export const routeSearch = "Search";\n')

    @pytest.mark.asyncio
    async def test__no_sources__empty_report(self, tmp_path: Path) -> None:
        config_file = tmp_path / "navgen.toml"
        config_file.write_text("")

        report = await generate(Config.load(config_file), _context(None))

        assert report.ok is True
        assert report.succeeded == []
        assert report.failed == {}


class TestGenerateContext:
    """Tests for GenerateContext.from_config()."""

    def test__disabled_features__no_services(self, tmp_path: Path) -> None:
        config_file = tmp_path / "navgen.toml"
        config_file.write_text("[graph]\nenabled = false\n\n[generate]\nscaffold = false\n")

        context = GenerateContext.from_config(Config.load(config_file))

        assert context.renderer is None
        assert context.prompt is None

    def test__defaults__all_services(self, tmp_path: Path) -> None:
        config_file = tmp_path / "navgen.toml"
        config_file.write_text('[graph]\nformat = "png"\n')

        context = GenerateContext.from_config(Config.load(config_file))

        assert context.renderer is not None
        assert context.prompt is not None
        assert context.graph_format == "png"
