"""Minimal TypeScript/TSX source model.

Just enough syntax to express the generated navigation modules: literals,
member and call expressions, object literals, arrow functions, ``as``
casts, type literals, JSX elements, imports and ``const`` declarations.
Every node renders itself to source text at a given indentation level.
"""

import json
import re
from dataclasses import dataclass, field

INDENT = "  "

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _pad(level: int) -> str:
    return INDENT * level


def property_key(key: str) -> str:
    """Render an object or type member key, quoting it when needed."""
    if IDENTIFIER_RE.match(key):
        return key
    return json.dumps(key, ensure_ascii=False)


class Node:
    """Base class of every renderable syntax node."""

    def render(self, level: int = 0) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()


# Expressions


@dataclass(frozen=True)
class Identifier(Node):
    name: str

    def render(self, level: int = 0) -> str:
        return self.name


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str

    def render(self, level: int = 0) -> str:
        return json.dumps(self.value, ensure_ascii=False)


@dataclass(frozen=True)
class Raw(Node):
    """Source fragment spliced verbatim."""

    code: str

    def render(self, level: int = 0) -> str:
        return self.code


@dataclass(frozen=True)
class MemberExpression(Node):
    object: Node
    property: str

    def render(self, level: int = 0) -> str:
        return f"{self.object.render(level)}.{self.property}"


@dataclass(frozen=True)
class CallExpression(Node):
    callee: Node
    arguments: tuple[Node, ...] = ()

    def render(self, level: int = 0) -> str:
        arguments = ", ".join(argument.render(level) for argument in self.arguments)
        return f"{self.callee.render(level)}({arguments})"


@dataclass(frozen=True)
class ObjectProperty(Node):
    key: str
    value: Node
    shorthand: bool = False

    def render(self, level: int = 0) -> str:
        if self.shorthand:
            return property_key(self.key)
        return f"{property_key(self.key)}: {self.value.render(level)}"


@dataclass(frozen=True)
class ObjectExpression(Node):
    properties: tuple[ObjectProperty, ...] = ()

    def render(self, level: int = 0) -> str:
        if not self.properties:
            return "{}"
        lines = [f"{_pad(level + 1)}{prop.render(level + 1)}," for prop in self.properties]
        return "{\n" + "\n".join(lines) + f"\n{_pad(level)}}}"


@dataclass(frozen=True)
class AsExpression(Node):
    expression: Node
    type: "TypeNode"

    def render(self, level: int = 0) -> str:
        return f"{self.expression.render(level)} as {self.type.render(level)}"


@dataclass(frozen=True)
class Parameter(Node):
    name: str
    annotation: "TypeNode | None" = None

    def render(self, level: int = 0) -> str:
        if self.annotation is None:
            return self.name
        return f"{self.name}: {self.annotation.render(level)}"


@dataclass(frozen=True)
class ArrowFunction(Node):
    """Arrow function with an expression body or a single return block."""

    params: tuple[Parameter, ...]
    body: Node
    block: bool = False

    def render(self, level: int = 0) -> str:
        params = ", ".join(param.render(level) for param in self.params)
        if not self.block:
            return f"({params}) => {self.body.render(level)}"

        if isinstance(self.body, JSXElement):
            returned = (
                f"(\n{_pad(level + 2)}{self.body.render(level + 2)}\n{_pad(level + 1)})"
            )
        else:
            returned = self.body.render(level + 1)
        return f"({params}) => {{\n{_pad(level + 1)}return {returned};\n{_pad(level)}}}"


# Types


class TypeNode(Node):
    """Base class of type annotations."""


@dataclass(frozen=True)
class TypeKeyword(TypeNode):
    name: str

    def render(self, level: int = 0) -> str:
        return self.name


@dataclass(frozen=True)
class TypeReference(TypeNode):
    name: str

    def render(self, level: int = 0) -> str:
        return self.name


@dataclass(frozen=True)
class PropertySignature(Node):
    key: str
    type: TypeNode

    def render(self, level: int = 0) -> str:
        return f"{property_key(self.key)}: {self.type.render(level)}"


@dataclass(frozen=True)
class TypeLiteral(TypeNode):
    members: tuple[PropertySignature, ...] = ()

    def render(self, level: int = 0) -> str:
        if not self.members:
            return "{}"
        lines = [f"{_pad(level + 1)}{member.render(level + 1)};" for member in self.members]
        return "{\n" + "\n".join(lines) + f"\n{_pad(level)}}}"


# JSX


@dataclass(frozen=True)
class JSXAttribute(Node):
    name: str
    value: Node

    def render(self, level: int = 0) -> str:
        return f"{self.name}={{{self.value.render(level)}}}"


@dataclass(frozen=True)
class JSXElement(Node):
    name: str
    attributes: tuple[JSXAttribute, ...] = ()
    children: tuple["JSXElement", ...] = ()
    self_closing: bool = False

    def render(self, level: int = 0) -> str:
        opening = self.name
        if self.attributes:
            opening += " " + " ".join(attribute.render(level) for attribute in self.attributes)

        if self.self_closing and not self.children:
            return f"<{opening} />"
        if not self.children:
            return f"<{opening}></{self.name}>"

        children = "\n".join(
            f"{_pad(level + 1)}{child.render(level + 1)}" for child in self.children
        )
        return f"<{opening}>\n{children}\n{_pad(level)}</{self.name}>"


# Declarations


@dataclass(frozen=True)
class ImportDeclaration(Node):
    """Named imports, or a namespace import when ``namespace`` is set."""

    source: str
    specifiers: tuple[str, ...] = ()
    namespace: str | None = None

    def render(self, level: int = 0) -> str:
        source = json.dumps(self.source, ensure_ascii=False)
        if self.namespace is not None:
            return f"import * as {self.namespace} from {source};"
        return f"import {{ {', '.join(self.specifiers)} }} from {source};"


@dataclass(frozen=True)
class VariableDeclaration(Node):
    name: str
    init: Node
    exported: bool = False

    def render(self, level: int = 0) -> str:
        prefix = "export const" if self.exported else "const"
        return f"{prefix} {self.name} = {self.init.render(level)};"


Declaration = ImportDeclaration | VariableDeclaration


@dataclass
class Module:
    """Ordered top-level declarations of one generated file."""

    declarations: list[Declaration] = field(default_factory=list)

    def render(self) -> str:
        """Render imports one per line, other declarations separated by blank lines."""
        imports = [d.render() for d in self.declarations if isinstance(d, ImportDeclaration)]
        others = [d.render() for d in self.declarations if not isinstance(d, ImportDeclaration)]

        blocks: list[str] = []
        if imports:
            blocks.append("\n".join(imports))
        blocks.extend(others)
        return "\n\n".join(blocks) + "\n"
