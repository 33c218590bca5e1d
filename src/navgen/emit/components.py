"""Component emitter.

Builds ``navigation.gen.tsx``: one stack constructor and one navigator
component per generated navigator, with every screen, group and nested
navigator rendered as JSX under its stack.
"""

import logging
from collections.abc import Iterable

from navgen.codegen import ts
from navgen.codegen.shape import props_to_attributes
from navgen.core.flatten import FlatTree
from navgen.core.tree import Group, Navigator, Screen

logger = logging.getLogger(__name__)

NAVIGATION_FILENAME = "navigation.gen.tsx"

REQUIRED_IMPORTS = (
    ts.ImportDeclaration("react", namespace="React"),
    ts.ImportDeclaration("./routes.gen", namespace="route"),
)


def build_navigation_module(flat: FlatTree) -> list[ts.Declaration]:
    """Build the declarations of the navigation component module.

    Args:
        flat: Flattened tree

    Returns:
        Imports followed by stack and component declarations
    """
    declarations: list[ts.Declaration] = [*REQUIRED_IMPORTS, *collect_imports(flat)]

    stacks: list[ts.Declaration] = []
    components: list[ts.Declaration] = []
    for navigator in flat.navigators:
        if navigator.is_external:
            continue
        stacks.insert(0, stack_declaration(navigator))
        components.append(component_declaration(navigator))

    logger.debug(f"Built {len(components)} navigator components")
    return [*declarations, *stacks, *components]


def collect_imports(flat: FlatTree) -> list[ts.ImportDeclaration]:
    """Merge every needed named import into one declaration per module.

    Modules keep first-seen order; symbols are deduplicated by name.
    """
    modules: dict[str, list[str]] = {}
    for module, symbol in _import_pairs(flat):
        symbols = modules.setdefault(module, [])
        if symbol not in symbols:
            symbols.append(symbol)

    return [
        ts.ImportDeclaration(module, specifiers=tuple(symbols))
        for module, symbols in modules.items()
    ]


def _import_pairs(flat: FlatTree) -> Iterable[tuple[str, str]]:
    """Yield (module, symbol) pairs in emission order."""
    for navigator in flat.navigators:
        if not navigator.is_external:
            symbol, module = navigator.factory
            yield module, symbol

    for navigator in flat.navigators:
        if navigator.is_external:
            yield navigator.path, navigator.external_symbol  # type: ignore[misc]

    for screen in flat.screens:
        if not screen.is_lazy:
            yield screen.import_path, screen.import_specifier

    for expression in flat.expressions:
        if expression.use is not None:
            symbol, module = expression.use
            yield module, symbol


def stack_declaration(navigator: Navigator) -> ts.VariableDeclaration:
    """``const <Name>Stack = create...Navigator();``"""
    factory, _module = navigator.factory
    return ts.VariableDeclaration(
        navigator.stack_name,
        ts.CallExpression(ts.Identifier(factory)),
    )


def component_declaration(navigator: Navigator) -> ts.VariableDeclaration:
    """``const <Name>Navigator = () => { return (<JSX/>); };``"""
    return ts.VariableDeclaration(
        navigator.component_name,
        ts.ArrowFunction((), navigator_element(navigator), block=True),
        exported=bool(navigator.export),
    )


def navigator_element(navigator: Navigator) -> ts.JSXElement:
    children: list[ts.JSXElement] = []
    for child in navigator.children:
        if isinstance(child, Navigator):
            children.append(screen_element(navigator.child_screen(child)))
        elif isinstance(child, Group):
            children.append(group_element(child))
        else:
            children.append(screen_element(child))

    return ts.JSXElement(
        f"{navigator.stack_name}.Navigator",
        attributes=props_to_attributes(navigator.props),
        children=tuple(children),
    )


def group_element(group: Group) -> ts.JSXElement:
    return ts.JSXElement(
        f"{group.stack_name}.Group",
        attributes=props_to_attributes(group.props),
        children=tuple(screen_element(screen) for screen in group.children),
    )


def screen_element(screen: Screen) -> ts.JSXElement:
    """Self-closing ``<Stack.Screen />`` for a screen.

    User props come first; ``name`` and the component slot are always
    set by the generator.
    """
    if screen.is_lazy:
        get_component = ts.ArrowFunction(
            (),
            ts.MemberExpression(
                ts.CallExpression(
                    ts.Identifier("require"),
                    (ts.StringLiteral(screen.import_path),),
                ),
                screen.import_specifier,
            ),
        )
        component = None
    else:
        get_component = None
        component = ts.Identifier(screen.import_specifier)

    props = {
        **(screen.props or {}),
        "name": ts.MemberExpression(ts.Identifier("route"), screen.route_name),
        "getComponent": get_component,
        "component": component,
    }

    return ts.JSXElement(
        f"{screen.navigator_name}Stack.Screen",
        attributes=props_to_attributes(props),
        self_closing=True,
    )
