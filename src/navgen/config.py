"""Configuration management for navgen.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from navgen.services.discovery import DEFAULT_IGNORE, DEFAULT_PATTERN

CONFIG_FILENAME = "navgen.toml"


@dataclass
class SourceConfig:
    """Navigation source discovery configuration."""

    pattern: str = DEFAULT_PATTERN
    ignore: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))


@dataclass
class ToolsConfig:
    """External tool configuration."""

    jsonnet: str = "jsonnet"
    include_dirs: list[Path] = field(default_factory=list)
    prettier: str = "prettier"
    dot: str = "dot"


@dataclass
class GraphConfig:
    """Graph image rendering configuration."""

    enabled: bool = True
    format: str = "svg"
    kroki_url: str | None = None


@dataclass
class GenerateConfig:
    """Generation run configuration."""

    concurrency: int = 4
    scaffold: bool = True


@dataclass
class Config:
    """Application configuration."""

    root_dir: Path
    source: SourceConfig
    tools: ToolsConfig
    graph: GraphConfig
    generate: GenerateConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for navgen.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(
            root_dir=Path.cwd(),
            source=SourceConfig(),
            tools=ToolsConfig(),
            graph=GraphConfig(),
            generate=GenerateConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.resolve().parent

        return cls(
            root_dir=config_dir,
            source=cls._parse_source(data.get("source")),
            tools=cls._parse_tools(data.get("tools"), config_dir),
            graph=cls._parse_graph(data.get("graph")),
            generate=cls._parse_generate(data.get("generate")),
            config_path=path,
        )

    @classmethod
    def _parse_source(cls, data: object) -> SourceConfig:
        if data is None:
            return SourceConfig()

        if not isinstance(data, dict):
            raise ValueError("source section must be a dictionary")

        pattern = data.get("pattern", DEFAULT_PATTERN)
        if not isinstance(pattern, str):
            raise ValueError("source.pattern must be a string")

        ignore = _parse_string_list(data.get("ignore", list(DEFAULT_IGNORE)), "source.ignore")

        return SourceConfig(pattern=pattern, ignore=ignore)

    @classmethod
    def _parse_tools(cls, data: object, config_dir: Path) -> ToolsConfig:
        """Parse tools configuration section.

        Args:
            data: Raw tools section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ToolsConfig instance
        """
        if data is None:
            return ToolsConfig()

        if not isinstance(data, dict):
            raise ValueError("tools section must be a dictionary")

        commands: dict[str, str] = {}
        for key, default in (("jsonnet", "jsonnet"), ("prettier", "prettier"), ("dot", "dot")):
            value = data.get(key, default)
            if not isinstance(value, str):
                raise ValueError(f"tools.{key} must be a string")
            commands[key] = value

        include_dirs = [
            config_dir / item
            for item in _parse_string_list(data.get("include_dirs", []), "tools.include_dirs")
        ]

        return ToolsConfig(include_dirs=include_dirs, **commands)

    @classmethod
    def _parse_graph(cls, data: object) -> GraphConfig:
        if data is None:
            return GraphConfig()

        if not isinstance(data, dict):
            raise ValueError("graph section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("graph.enabled must be a boolean")

        output_format = data.get("format", "svg")
        if not isinstance(output_format, str) or not output_format:
            raise ValueError("graph.format must be a non-empty string")

        kroki_url = data.get("kroki_url")
        if kroki_url is not None and not isinstance(kroki_url, str):
            raise ValueError("graph.kroki_url must be a string")

        return GraphConfig(enabled=enabled, format=output_format, kroki_url=kroki_url)

    @classmethod
    def _parse_generate(cls, data: object) -> GenerateConfig:
        if data is None:
            return GenerateConfig()

        if not isinstance(data, dict):
            raise ValueError("generate section must be a dictionary")

        concurrency = data.get("concurrency", 4)
        if not isinstance(concurrency, int) or isinstance(concurrency, bool) or concurrency < 1:
            raise ValueError("generate.concurrency must be a positive integer")

        scaffold = data.get("scaffold", True)
        if not isinstance(scaffold, bool):
            raise ValueError("generate.scaffold must be a boolean")

        return GenerateConfig(concurrency=concurrency, scaffold=scaffold)

    def with_overrides(
        self,
        *,
        root_dir: Path | None = None,
        concurrency: int | None = None,
        graph_enabled: bool | None = None,
        scaffold: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            root_dir: Override the discovery root
            concurrency: Override generate.concurrency
            graph_enabled: Override graph.enabled
            scaffold: Override generate.scaffold

        Returns:
            New Config instance with overrides applied
        """
        generate = self.generate
        if concurrency is not None or scaffold is not None:
            generate = replace(
                self.generate,
                concurrency=concurrency if concurrency is not None else self.generate.concurrency,
                scaffold=scaffold if scaffold is not None else self.generate.scaffold,
            )

        graph = self.graph
        if graph_enabled is not None:
            graph = replace(self.graph, enabled=graph_enabled)

        return replace(
            self,
            root_dir=root_dir if root_dir is not None else self.root_dir,
            generate=generate,
            graph=graph,
        )


def _parse_string_list(value: object, name: str) -> list[str]:
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{name} items must be strings")
        items.append(item)
    return items
