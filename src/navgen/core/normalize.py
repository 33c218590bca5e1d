"""Tree normalization.

Turns the raw decoded navigation description (plain dicts and lists, as
produced by the Config Reader) into the canonical typed tree. The walk is
depth-first: every navigator and group hands its children a reduced parent
link, group references are resolved against the top-level ``groups``
declarations, and the root ``config`` is threaded to every node.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from navgen.core.parent import GroupLink, Link, NavigatorLink
from navgen.core.tree import (
    DEFAULT_NAVIGATOR_KIND,
    NAVIGATOR_FACTORIES,
    Expression,
    Group,
    Navigator,
    Screen,
    Tree,
    TreeConfig,
)
from navgen.core.types import NavigatorKind
from navgen.errors import DecodeError

logger = logging.getLogger(__name__)

NODE_TAGS = ("Navigator", "Group", "Screen")
SCREEN_KINDS = ("Screen", "Navigator")


@dataclass(frozen=True)
class _Context:
    """Values shared by the whole walk."""

    config: TreeConfig
    declared_groups: frozenset[str]


def normalize(raw: object) -> Tree:
    """Build the canonical tree from a raw navigation description.

    Args:
        raw: Decoded source value with ``config``, optional ``groups`` and
             ``navigators`` keys

    Returns:
        Immutable canonical Tree

    Raises:
        DecodeError: If the raw value does not match the tree schema
    """
    data = _expect_mapping(raw, "tree")
    config = _decode_config(data.get("config"), "config")

    groups_raw = _optional_list(data, "groups", "tree") or []
    declared = frozenset(
        _require_str(_expect_mapping(item, f"groups[{index}]"), "name", f"groups[{index}]")
        for index, item in enumerate(groups_raw)
    )
    context = _Context(config=config, declared_groups=declared)

    groups = tuple(
        _decode_group(
            item,
            GroupLink(name=item["name"], reference=True),
            context,
            f"groups[{index}]",
        )
        for index, item in enumerate(groups_raw)
    )

    navigators_raw = _optional_list(data, "navigators", "tree")
    if navigators_raw is None:
        raise DecodeError("tree.navigators is required")

    navigators: list[Navigator] = []
    for index, item in enumerate(navigators_raw):
        location = f"navigators[{index}]"
        element = _expect_tagged(item, location, ("Navigator",))
        name = _require_str(element, "name", location)
        root = _optional_bool(element, "root", location)
        link = NavigatorLink(name=name, root=bool(root))
        navigators.append(_decode_navigator(element, link, context, location))

    logger.debug(
        f"Normalized tree: {len(navigators)} navigators, {len(groups)} group declarations"
    )
    return Tree(config=config, groups=groups, navigators=tuple(navigators))


def _decode_navigator(
    data: Mapping[str, Any],
    link: NavigatorLink,
    context: _Context,
    location: str,
) -> Navigator:
    """Decode a navigator whose own link is ``link``."""
    children_raw = _optional_list(data, "children", location)
    if children_raw is None:
        raise DecodeError(f"{location}.children is required")

    children: list[Screen | Group | Navigator] = []
    for index, item in enumerate(children_raw):
        child_location = f"{location}.children[{index}]"
        child = _expect_tagged(item, child_location, NODE_TAGS)
        tag = child["_tag"]
        if tag == "Navigator":
            child_link = NavigatorLink(
                name=_require_str(child, "name", child_location),
                root=bool(_optional_bool(child, "root", child_location)),
                parent=link,
            )
            children.append(_decode_navigator(child, child_link, context, child_location))
        elif tag == "Group":
            name = _require_str(child, "name", child_location)
            group_link = GroupLink(
                name=name,
                reference=name in context.declared_groups,
                parent=link,
            )
            children.append(_decode_group(child, group_link, context, child_location))
        else:
            children.append(_decode_screen(child, link, context, child_location))

    return Navigator(
        name=link.name,
        children=tuple(children),
        config=context.config,
        export=_optional_bool(data, "export", location),
        root=_optional_bool(data, "root", location),
        path=_optional_str(data, "path", location),
        kind=_decode_kind(data.get("type"), f"{location}.type"),
        props=_decode_record(data.get("props"), f"{location}.props"),
        parent=link.parent,
    )


def _decode_group(
    data: Mapping[str, Any],
    link: GroupLink,
    context: _Context,
    location: str,
) -> Group:
    """Decode a group whose own link is ``link``."""
    _expect_tagged(data, location, ("Group",))
    children_raw = _optional_list(data, "children", location)
    if children_raw is None:
        raise DecodeError(f"{location}.children is required")

    children: list[Screen] = []
    for index, item in enumerate(children_raw):
        child_location = f"{location}.children[{index}]"
        child = _expect_tagged(item, child_location, NODE_TAGS)
        if child["_tag"] != "Screen":
            raise DecodeError(f"{child_location}: a group may only contain screens")
        children.append(_decode_screen(child, link, context, child_location))

    return Group(
        name=link.name,
        children=tuple(children),
        config=context.config,
        reference=link.reference,
        path=_optional_str(data, "path", location),
        props=_decode_record(data.get("props"), f"{location}.props"),
        parent=link.parent,
    )


def _decode_screen(
    data: Mapping[str, Any],
    parent: Link,
    context: _Context,
    location: str,
) -> Screen:
    """Decode a screen attached to its immediate parent's link."""
    kind = data.get("type", "Screen")
    if kind is None:
        kind = "Screen"
    if kind not in SCREEN_KINDS:
        raise DecodeError(f"{location}.type must be one of {', '.join(SCREEN_KINDS)}")

    return Screen(
        name=_require_str(data, "name", location),
        parent=parent,
        config=context.config,
        lazy=_optional_bool(data, "lazy", location),
        kind=kind,
        path=_optional_str(data, "path", location),
        props=_decode_record(data.get("props"), f"{location}.props"),
        params=_decode_params(data.get("params"), f"{location}.params"),
    )


def _decode_config(data: object, location: str) -> TreeConfig:
    """Decode the tree-wide config section."""
    config = _expect_mapping(data, location)

    path = _require_str(config, "path", location)
    lazy = _optional_bool(config, "lazy", location)

    template_raw = config.get("template")
    template: dict[str, str] | None = None
    if template_raw is not None:
        if not isinstance(template_raw, Mapping):
            raise DecodeError(f"{location}.template must be an object")
        template = {}
        for key, value in template_raw.items():
            if not isinstance(value, str):
                raise DecodeError(f"{location}.template.{key} must be a string")
            template[str(key)] = value

    return TreeConfig(
        path=path,
        lazy=True if lazy is None else lazy,
        template=template,
    )


def _decode_kind(value: object, location: str) -> NavigatorKind:
    """Decode a navigator kind: a built-in name or a [symbol, module] pair."""
    if value is None:
        return DEFAULT_NAVIGATOR_KIND
    if isinstance(value, str):
        if value not in NAVIGATOR_FACTORIES:
            raise DecodeError(
                f"{location} must be one of {', '.join(NAVIGATOR_FACTORIES)} "
                "or a [symbol, module] pair"
            )
        return value  # type: ignore[return-value]
    if (
        isinstance(value, list | tuple)
        and len(value) == 2
        and all(isinstance(item, str) for item in value)
    ):
        return (value[0], value[1])
    raise DecodeError(f"{location} must be a string or a [symbol, module] pair")


def _decode_params(value: object, location: str) -> dict[str, Any] | Expression | None:
    if value is None:
        return None
    if _is_expression(value):
        return _decode_expression(value, location)  # type: ignore[arg-type]
    return _decode_record(value, location)


def _decode_record(value: object, location: str) -> dict[str, Any] | None:
    """Decode an open-ended record, materializing embedded expressions."""
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise DecodeError(f"{location} must be an object")
    return {str(key): _decode_value(item, f"{location}.{key}") for key, item in value.items()}


def _decode_value(value: object, location: str) -> Any:
    if _is_expression(value):
        return _decode_expression(value, location)  # type: ignore[arg-type]
    if isinstance(value, Mapping):
        return {str(key): _decode_value(item, f"{location}.{key}") for key, item in value.items()}
    if isinstance(value, list):
        return [_decode_value(item, f"{location}[{index}]") for index, item in enumerate(value)]
    return value


def _is_expression(value: object) -> bool:
    return isinstance(value, Mapping) and value.get("_tag") == "Expression"


def _decode_expression(data: Mapping[str, Any], location: str) -> Expression:
    value = _require_str(data, "value", location)

    use_raw = data.get("use")
    use: tuple[str, str] | None = None
    if use_raw is not None:
        if not (
            isinstance(use_raw, list | tuple)
            and len(use_raw) == 2
            and all(isinstance(item, str) for item in use_raw)
        ):
            raise DecodeError(f"{location}.use must be a [symbol, module] pair")
        use = (use_raw[0], use_raw[1])

    return Expression(value=value, use=use)


def _expect_mapping(value: object, location: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(f"{location} must be an object")
    return value


def _expect_tagged(value: object, location: str, tags: tuple[str, ...]) -> Mapping[str, Any]:
    data = _expect_mapping(value, location)
    tag = data.get("_tag")
    if tag is None:
        raise DecodeError(f"{location}._tag is required")
    if tag not in tags:
        raise DecodeError(f"{location}._tag must be one of {', '.join(tags)}, got {tag!r}")
    return data


def _require_str(data: Mapping[str, Any], key: str, location: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"{location}.{key} must be a string")
    return value


def _optional_str(data: Mapping[str, Any], key: str, location: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise DecodeError(f"{location}.{key} must be a string")
    return value


def _optional_bool(data: Mapping[str, Any], key: str, location: str) -> bool | None:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise DecodeError(f"{location}.{key} must be a boolean")
    return value


def _optional_list(data: Mapping[str, Any], key: str, location: str) -> list[Any] | None:
    value = data.get(key)
    if value is not None and not isinstance(value, list):
        raise DecodeError(f"{location}.{key} must be a list")
    return value
