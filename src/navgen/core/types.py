"""Core type definitions."""

from typing import Literal, NewType

# Module specifier as written in an import statement (e.g., "./screens/Home")
# Distinct from filesystem Path to catch type mismatches
ModulePath = NewType("ModulePath", str)

ScreenKind = Literal["Screen", "Navigator"]

BuiltinNavigatorKind = Literal["bottom-tab", "native-stack", "stack"]

# Built-in stack style or a custom (factory symbol, module) pair
NavigatorKind = BuiltinNavigatorKind | tuple[str, str]
