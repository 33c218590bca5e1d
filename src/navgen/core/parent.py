"""Reduced parent links for name resolution.

Every non-root node carries a link to its enclosing container. A link holds
only what naming needs (tag, name, flags) and a pointer to the next link up,
so the chain never references full tree nodes.

Composite names are derived by walking the chain from the root down to the
link and accumulating names. Root navigators are skipped everywhere except
in ``graph_name``, which must stay unique for every drawn node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class NavigatorLink:
    """Link to an enclosing navigator.

    ``reference`` is only set on the synthetic link used when a child
    navigator is rendered as a screen; it marks the child as external.
    """

    tag: ClassVar[str] = "Navigator"

    name: str
    root: bool = False
    reference: bool = False
    parent: NavigatorLink | None = None

    @property
    def chain(self) -> list[Link]:
        """Links from the root down to this one."""
        return _chain(self)

    @property
    def route_path(self) -> list[Link]:
        """Navigator links contributing to names, root navigators excluded."""
        return _non_root_navigators(self.chain)

    @property
    def import_path(self) -> list[str]:
        return [link.name for link in self.route_path]

    @property
    def navigator_name(self) -> str:
        return "".join(self.import_path)

    @property
    def import_specifier(self) -> str:
        return self.navigator_name

    @property
    def route_literal(self) -> str:
        return self.navigator_name

    @property
    def graph_name(self) -> str:
        return "".join(link.name for link in self.chain)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "_tag": self.tag,
            "name": self.name,
            "reference": self.reference,
            "root": self.root,
        }
        if self.parent is not None:
            result["parent"] = self.parent.to_dict()
        return result


@dataclass(frozen=True)
class GroupLink:
    """Link to an enclosing group.

    A reference group (one declared in the tree's top-level ``groups``)
    contributes only its own name to import and route names.
    """

    tag: ClassVar[str] = "Group"

    name: str
    reference: bool = False
    parent: NavigatorLink | None = None

    @property
    def chain(self) -> list[Link]:
        """Links from the root down to this one."""
        return _chain(self)

    @property
    def _named(self) -> list[Link]:
        return [
            link
            for link in self.chain
            if isinstance(link, GroupLink) or not link.root
        ]

    @property
    def route_path(self) -> list[Link]:
        """Links contributing to route names."""
        if self.reference:
            return [self]
        return self._named

    @property
    def import_path(self) -> list[str]:
        if self.reference:
            return [self.name]
        return [link.name for link in self._named]

    @property
    def navigator_name(self) -> str:
        # A group never names a stack of its own
        return "".join(link.name for link in _non_root_navigators(self.chain))

    @property
    def import_specifier(self) -> str:
        return "".join(self.import_path)

    @property
    def route_literal(self) -> str:
        return "".join(self.import_path)

    @property
    def graph_name(self) -> str:
        return "".join(link.name for link in self.chain)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "_tag": self.tag,
            "name": self.name,
            "reference": self.reference,
        }
        if self.parent is not None:
            result["parent"] = self.parent.to_dict()
        return result


Link = NavigatorLink | GroupLink


def _chain(link: Link) -> list[Link]:
    # Walk up parent chain, then reverse to root-first
    links: list[Link] = []
    current: Link | None = link
    while current is not None:
        links.append(current)
        current = current.parent
    links.reverse()
    return links


def _non_root_navigators(links: list[Link]) -> list[Link]:
    return [
        link
        for link in links
        if isinstance(link, NavigatorLink) and not link.root
    ]
