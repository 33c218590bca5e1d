"""Flattened views over the canonical tree.

Emitters fold over these lists rather than the nested tree:
navigators in post-order, screens deduplicated, and every embedded
expression in traversal order.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from navgen.core.tree import Expression, Group, Navigator, Screen, Tree


@dataclass(frozen=True)
class FlatTree:
    """Canonical tree plus its flattened node lists."""

    tree: Tree
    navigators: tuple[Navigator, ...]
    screens: tuple[Screen, ...]
    expressions: tuple[Expression, ...]


def flatten(tree: Tree) -> FlatTree:
    """Extract navigators, screens and expressions from a tree.

    Only the navigator hierarchy is flattened; top-level group
    declarations are reached through their references.

    Args:
        tree: Canonical tree

    Returns:
        FlatTree with stable ordering for the same input
    """
    return FlatTree(
        tree=tree,
        navigators=tuple(flatten_navigators(tree.navigators)),
        screens=tuple(flatten_screens(tree.navigators)),
        expressions=tuple(find_expressions(tree.navigators)),
    )


def flatten_navigators(children: Iterable[Navigator | Group | Screen]) -> list[Navigator]:
    """Collect navigators so nested ones always precede their ancestors.

    Each navigator is appended after the ones already collected, and its own
    nested navigators are placed in front of everything collected so far.
    """
    result: list[Navigator] = []
    for child in children:
        if isinstance(child, Navigator):
            result = [*flatten_navigators(child.children), *result, child]
    return result


def flatten_screens(children: Iterable[Navigator | Group | Screen]) -> list[Screen]:
    """Collect screens depth-first, deduplicated by (name, parent name).

    First occurrence wins.
    """
    seen: set[tuple[str, str]] = set()
    result: list[Screen] = []
    for screen in _walk_screens(children):
        key = (screen.name, screen.parent.name)
        if key in seen:
            continue
        seen.add(key)
        result.append(screen)
    return result


def _walk_screens(children: Iterable[Navigator | Group | Screen]) -> Iterable[Screen]:
    for child in children:
        if isinstance(child, Screen):
            yield child
        else:
            yield from _walk_screens(child.children)


def find_expressions(value: object) -> list[Expression]:
    """Find every Expression reachable from a value.

    Nodes are scanned props first, then children (containers) or params
    (screens). Duplicates are kept.
    """
    expressions: list[Expression] = []
    _collect_expressions(value, expressions)
    return expressions


def _collect_expressions(value: object, expressions: list[Expression]) -> None:
    if isinstance(value, Expression):
        expressions.append(value)
    elif isinstance(value, Navigator | Group):
        _collect_expressions(value.props, expressions)
        _collect_expressions(value.children, expressions)
    elif isinstance(value, Screen):
        _collect_expressions(value.props, expressions)
        _collect_expressions(value.params, expressions)
    elif isinstance(value, Mapping):
        for item in value.values():
            _collect_expressions(item, expressions)
    elif isinstance(value, Sequence) and not isinstance(value, str):
        for item in value:
            _collect_expressions(item, expressions)
