"""Graph emitter.

Renders the tree as a Graphviz ``digraph``: one box per navigator, group
and screen, keyed by its graph name, with an edge from every nested node
to its parent.
"""

import html
from collections.abc import Iterable, Mapping
from typing import Any

from navgen.core.tree import Expression, Group, Navigator, Node, Tree

DOT_FILENAME = "navigation.gen.dot"

GRAPH_TEMPLATE = """digraph G {
  layout=circo;
  graph [
    nodesep=2.0,
    ranksep=2.0,
    splines="curved",
    overlap=false,
    pad=1.5,
    sep="+2.0,2.0",
    defaultdist=0.1,
    mindist=0.1
  ];
  {{content}}
}"""

LINE_BREAK = '<br align="left" />'

NODE_COLORS = {
    "Navigator": "#FDE33A",
    "Group": "#F6ACD8",
    "Screen": "#C3EFE0",
}

NODE_WEIGHTS = {
    "Navigator": 10,
    "Group": 2,
    "Screen": 0.1,
}


def build_graph(tree: Tree) -> str:
    """Render the Graphviz source for a tree.

    Args:
        tree: Canonical tree

    Returns:
        Complete ``digraph`` source
    """
    content = "\n  ".join(graph_element(node) for node in traverse(tree.navigators))
    return GRAPH_TEMPLATE.replace("{{content}}", content)


def traverse(children: Iterable[Node], acc: list[Node] | None = None) -> list[Node]:
    """Order nodes for drawing: containers in front, leaves at the back."""
    result = list(acc or [])
    for child in children:
        if isinstance(child, Navigator | Group):
            result = traverse(child.children, [child, *result])
        else:
            result.append(child)
    return result


def graph_element(node: Node) -> str:
    """Node statement, plus an edge from its parent when it has one."""
    kind = _node_kind(node)
    path = None if isinstance(node, Navigator | Group) else node.import_path
    title = f"{kind}: <b>{html.escape(node.name, quote=False)}</b>"
    details = stringify_record({"path": path, "props": node.props})
    label = LINE_BREAK.join(part for part in (title, details) if part)

    style = ", ".join(
        f'{key}="{value}"'
        for key, value in {
            "shape": "box",
            "fillcolor": NODE_COLORS[kind],
            "style": "filled",
            "fontname": "monospace",
            "fontsize": 16,
            "margin": "0.3,0.2",
            "penwidth": 1.5,
        }.items()
    )
    weight = _format_scalar(NODE_WEIGHTS[kind])

    if node.parent is not None:
        node_id = quote_id(node.graph_name)
        return (
            f"{node_id} [label=<{label}> {style}, weight={weight}];\n"
            f'{quote_id(node.parent.graph_name)} -> {node_id} [dir="forward"]'
        )
    node_id = quote_id(node.name)
    return f"{node_id} [label=<{label}> {style}];\n{node_id} [weight={weight}]"


def stringify_record(record: Mapping[str, Any], depth: int = 0) -> str:
    """Render a record as left-aligned label lines.

    Top-level keys are capitalized; nested records are indented two
    ``&nbsp;`` per level. Keys and scalar values are HTML-escaped; values of
    other kinds are left out.
    """
    lines = []
    for key, value in record.items():
        name = html.escape(key[:1].upper() + key[1:] if depth == 0 else key, quote=False)
        padding = "&nbsp;" * (depth * 2)

        if isinstance(value, Expression):
            lines.append(f"{padding}{name}: <i>Expression</i>")
        elif isinstance(value, Mapping):
            lines.append(f"{padding}{name}:{LINE_BREAK}{stringify_record(value, depth + 1)}")
        elif isinstance(value, str | bool | int | float):
            lines.append(f"{padding}{name}: {html.escape(_format_scalar(value), quote=False)}")
    return LINE_BREAK.join(lines)


def quote_id(name: str) -> str:
    """Quote a node id so any name is a valid DOT identifier."""
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _node_kind(node: Node) -> str:
    if isinstance(node, Navigator):
        return "Navigator"
    if isinstance(node, Group):
        return "Group"
    return "Screen"


def _format_scalar(value: str | bool | int | float) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
