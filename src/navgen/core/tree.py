"""Navigation tree model.

Typed, immutable nodes produced by normalization. Navigators may contain
screens, groups and further navigators; groups contain screens only.
Composite names (stack symbols, import specifiers, route literals, graph
ids) are exposed as properties and always derived from the node's parent
link, never by walking full nodes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from navgen.core.parent import GroupLink, Link, NavigatorLink
from navgen.core.types import ModulePath, NavigatorKind, ScreenKind

DEFAULT_NAVIGATOR_KIND = "native-stack"

NAVIGATOR_FACTORIES: dict[str, tuple[str, str]] = {
    "native-stack": ("createNativeStackNavigator", "@react-navigation/native-stack"),
    "bottom-tab": ("createBottomTabNavigator", "@react-navigation/bottom-tabs"),
    "stack": ("createStackNavigator", "@react-navigation/stack"),
}


@dataclass(frozen=True)
class TreeConfig:
    """Per-tree defaults shared by every node."""

    path: str
    lazy: bool = True
    template: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"path": self.path, "lazy": self.lazy}
        if self.template is not None:
            result["template"] = dict(self.template)
        return result


@dataclass(frozen=True)
class Expression:
    """Verbatim code fragment embedded in configuration data.

    ``use`` is an optional (symbol, module) import the fragment needs.
    """

    value: str
    use: tuple[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"_tag": "Expression", "value": self.value}
        if self.use is not None:
            result["use"] = list(self.use)
        return result


@dataclass(frozen=True)
class Screen:
    """Leaf node rendered as a stack screen."""

    name: str
    parent: Link
    config: TreeConfig
    lazy: bool | None = None
    kind: ScreenKind = "Screen"
    path: str | None = None
    props: dict[str, Any] | None = None
    params: dict[str, Any] | Expression | None = None

    @property
    def is_lazy(self) -> bool:
        return self.config.lazy if self.lazy is None else self.lazy

    @property
    def symbol(self) -> str:
        """Own exported symbol name, without any ancestor prefix."""
        if self.kind == "Navigator":
            return f"{self.name}Navigator"
        return self.name

    @property
    def navigator_name(self) -> str:
        """Name of the stack this screen is registered on."""
        name = self.parent.navigator_name
        if name:
            return name
        if isinstance(self.parent, GroupLink):
            return self.parent.parent.name if self.parent.parent else ""
        return self.parent.name

    @property
    def import_specifier(self) -> str:
        if isinstance(self.parent, NavigatorLink) and self.parent.reference:
            return self.symbol
        return f"{self.parent.import_specifier}{self.symbol}"

    @property
    def import_path(self) -> ModulePath:
        """Module the screen component is imported from.

        An explicit ``path`` wins over the derived one.
        """
        if self.path:
            return ModulePath(self.path)
        segments = [self.config.path, *self.parent.import_path, self.name]
        return ModulePath("/".join(segment for segment in segments if segment))

    @property
    def route_name(self) -> str:
        return f"route{self.import_specifier}"

    @property
    def route_literal(self) -> str:
        return f"{self.parent.route_literal}{self.name}"

    @property
    def graph_name(self) -> str:
        return f"{self.parent.graph_name}{self.name}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"_tag": "Screen", "name": self.name, "type": self.kind}
        if self.lazy is not None:
            result["lazy"] = self.lazy
        if self.path is not None:
            result["path"] = self.path
        if self.props is not None:
            result["props"] = encode_value(self.props)
        if self.params is not None:
            result["params"] = encode_value(self.params)
        result["parent"] = self.parent.to_dict()
        result["config"] = self.config.to_dict()
        return result


@dataclass(frozen=True)
class Group:
    """Named cluster of screens, declared once or defined inline."""

    name: str
    children: tuple[Screen, ...]
    config: TreeConfig
    reference: bool = False
    path: str | None = None
    props: dict[str, Any] | None = None
    parent: NavigatorLink | None = None

    @property
    def navigator_name(self) -> str:
        if self.parent is None:
            return self.name
        # Directly under a root navigator the chain is empty
        return self.parent.navigator_name or self.parent.name

    @property
    def stack_name(self) -> str:
        return f"{self.navigator_name}Stack"

    @property
    def graph_name(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.graph_name}{self.name}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "_tag": "Group",
            "name": self.name,
            "reference": self.reference,
        }
        if self.path is not None:
            result["path"] = self.path
        if self.props is not None:
            result["props"] = encode_value(self.props)
        result["children"] = [child.to_dict() for child in self.children]
        if self.parent is not None:
            result["parent"] = self.parent.to_dict()
        result["config"] = self.config.to_dict()
        return result


@dataclass(frozen=True)
class Navigator:
    """Container owning a navigation stack.

    A navigator without children but with a ``path`` is external: it is
    imported from ``path`` instead of being generated.
    """

    name: str
    children: tuple[Screen | Group | Navigator, ...]
    config: TreeConfig
    export: bool | None = None
    root: bool | None = None
    path: str | None = None
    kind: NavigatorKind = DEFAULT_NAVIGATOR_KIND
    props: dict[str, Any] | None = None
    parent: NavigatorLink | None = None

    @property
    def is_external(self) -> bool:
        return not self.children and self.path is not None

    @property
    def factory(self) -> tuple[str, str]:
        """Stack factory as (symbol, module)."""
        if isinstance(self.kind, tuple):
            return self.kind
        return NAVIGATOR_FACTORIES[self.kind]

    @property
    def navigator_name(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.navigator_name}{self.name}"

    @property
    def stack_name(self) -> str:
        return f"{self.navigator_name}Stack"

    @property
    def component_name(self) -> str:
        return f"{self.navigator_name}Navigator"

    @property
    def external_symbol(self) -> str:
        """Symbol imported from ``path`` for an external navigator."""
        return f"{self.name}Navigator"

    @property
    def graph_name(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.graph_name}{self.name}"

    def child_screen(self, child: Navigator) -> Screen:
        """Represent a child navigator as an eager screen of this stack."""
        return Screen(
            name=child.name,
            config=self.config,
            lazy=False,
            kind="Navigator",
            parent=NavigatorLink(
                name=self.name,
                parent=self.parent,
                reference=child.is_external,
                root=bool(self.root),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"_tag": "Navigator", "name": self.name}
        if self.export is not None:
            result["export"] = self.export
        if self.root is not None:
            result["root"] = self.root
        if self.path is not None:
            result["path"] = self.path
        result["type"] = list(self.kind) if isinstance(self.kind, tuple) else self.kind
        if self.props is not None:
            result["props"] = encode_value(self.props)
        result["children"] = [child.to_dict() for child in self.children]
        if self.parent is not None:
            result["parent"] = self.parent.to_dict()
        result["config"] = self.config.to_dict()
        return result


Node = Navigator | Group | Screen


@dataclass(frozen=True)
class Tree:
    """Canonical navigation tree of one source file."""

    config: TreeConfig
    groups: tuple[Group, ...]
    navigators: tuple[Navigator, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "config": self.config.to_dict(),
            "groups": [group.to_dict() for group in self.groups],
            "navigators": [navigator.to_dict() for navigator in self.navigators],
        }


def encode_value(value: Any) -> Any:
    """Encode a props/params value back to its raw form."""
    if isinstance(value, Expression):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {key: encode_value(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [encode_value(item) for item in value]
    return value
