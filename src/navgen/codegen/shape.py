"""Shape compiler for open-ended props and params records.

A record value is dispatched by kind, in this order:

- ``str``: string literal / ``string``
- ``bool``, ``int``, ``float``: inline literal / ``boolean``, ``number``
- ``Expression``: verbatim code / type reference
- ``ts.Node``: pre-built syntax, passed through unchanged
- mapping: nested object expression / type literal
- anything else (``None``, lists, ...): dropped, no field emitted
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from navgen.codegen import ts
from navgen.core.tree import Expression

logger = logging.getLogger(__name__)


def compile_value(value: Any) -> ts.Node | None:
    """Compile one record value to an expression, or None to drop it."""
    if isinstance(value, str):
        return ts.StringLiteral(value)
    if isinstance(value, bool):
        return ts.Raw("true" if value else "false")
    if isinstance(value, int | float):
        return ts.Raw(json.dumps(value))
    if isinstance(value, Expression):
        return ts.Raw(value.value)
    if isinstance(value, ts.Node):
        return value
    if isinstance(value, Mapping):
        return to_object_expression(value)
    if value is None:
        return None

    # Unsupported shapes are skipped rather than rejected
    logger.debug(f"Dropping value of unsupported kind {type(value).__name__}")
    return None


def compile_record(record: Mapping[str, Any] | None) -> list[tuple[str, ts.Node]]:
    """Compile every supported entry of a record, keeping key order."""
    if not record:
        return []
    compiled: list[tuple[str, ts.Node]] = []
    for key, value in record.items():
        node = compile_value(value)
        if node is not None:
            compiled.append((key, node))
    return compiled


def to_object_expression(record: Mapping[str, Any]) -> ts.ObjectExpression:
    return ts.ObjectExpression(
        tuple(ts.ObjectProperty(key, node) for key, node in compile_record(record))
    )


def props_to_attributes(record: Mapping[str, Any] | None) -> tuple[ts.JSXAttribute, ...]:
    """Compile a props record into JSX attributes.

    Args:
        record: Props record, possibly None

    Returns:
        One ``key={value}`` attribute per supported entry
    """
    return tuple(ts.JSXAttribute(key, node) for key, node in compile_record(record))


def compile_type(value: Any) -> ts.TypeNode | None:
    """Compile one record value to a type, or None to drop it."""
    if isinstance(value, str):
        return ts.TypeKeyword("string")
    if isinstance(value, bool):
        return ts.TypeKeyword("boolean")
    if isinstance(value, int | float):
        return ts.TypeKeyword("number")
    if isinstance(value, Expression):
        return ts.TypeReference(value.value)
    if isinstance(value, Mapping):
        return _type_literal(value)
    return None


def _type_literal(record: Mapping[str, Any]) -> ts.TypeLiteral:
    members = []
    for key, value in record.items():
        type_node = compile_type(value)
        if type_node is not None:
            members.append(ts.PropertySignature(key, type_node))
    return ts.TypeLiteral(tuple(members))


def annotation_from_record(record: Mapping[str, Any] | Expression | None) -> ts.TypeNode:
    """Build the type annotation for a params record.

    An Expression as the whole record is a type reference; a missing record
    is an empty type literal.
    """
    if isinstance(record, Expression):
        return ts.TypeReference(record.value)
    if record is None:
        return ts.TypeLiteral()
    return _type_literal(record)
