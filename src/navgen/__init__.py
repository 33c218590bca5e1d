"""Navgen - React Navigation code generator.

Compiles declarative navigation trees into navigator components,
typed route helpers and a Graphviz overview.
"""

__version__ = "0.1.0"
