"""Route emitter.

Builds ``routes.gen.ts``: a literal route-name constant for every child
navigator and every screen, and a ``to<Screen>`` builder per screen that
produces the nested ``{ screen, params }`` object React Navigation expects
when navigating into nested stacks.
"""

import logging
import re

from navgen.codegen import ts
from navgen.codegen.shape import annotation_from_record
from navgen.core.flatten import FlatTree
from navgen.core.parent import GroupLink
from navgen.core.tree import Navigator, Screen

logger = logging.getLogger(__name__)

ROUTES_FILENAME = "routes.gen.ts"

_PARAMS_SPACING_RE = re.compile(r"\n\n(\s+params: \{)")


def build_routes_module(flat: FlatTree) -> list[ts.Declaration]:
    """Build the declarations of the routes module.

    Order: navigator route constants, screen route constants, then the
    screen route builders.
    """
    navigator_routes = [
        route_constant(navigator.child_screen(child))
        for navigator in flat.navigators
        for child in navigator.children
        if isinstance(child, Navigator)
    ]
    screen_routes = [route_constant(screen) for screen in flat.screens]
    builders = [route_builder(screen) for screen in flat.screens]

    logger.debug(
        f"Built {len(navigator_routes) + len(screen_routes)} route constants "
        f"and {len(builders)} builders"
    )
    return [*navigator_routes, *screen_routes, *builders]


def route_constant(screen: Screen) -> ts.VariableDeclaration:
    """``export const route<Specifier> = "<routeLiteral>";``"""
    return ts.VariableDeclaration(
        screen.route_name,
        ts.StringLiteral(screen.route_literal),
        exported=True,
    )


def route_segments(screen: Screen) -> list[str]:
    """Screen names of each navigation layer, outermost first.

    Each segment is the cumulative concatenation of the names above it.
    Inline groups add no navigation layer, so their segments are elided;
    a reference group collapses the whole path to a single segment.

    Args:
        screen: Screen to navigate to

    Returns:
        Route literals from the outermost layer down to the screen
    """
    route_path = screen.parent.route_path
    names = [link.name for link in route_path] + [screen.name]
    if isinstance(screen.parent, GroupLink) and screen.parent.reference:
        names = ["".join(names)]

    literals: list[str] = []
    for name in (name for name in names if name):
        literals.append(f"{literals[-1]}{name}" if literals else name)

    return [
        literal
        for index, literal in enumerate(literals)
        if not (
            index < len(route_path)
            and isinstance(route_path[index], GroupLink)
            and not route_path[index].reference
        )
    ]


def route_object(segments: list[str], with_params: bool) -> ts.ObjectExpression:
    """Nest ``{ screen, params }`` objects, innermost segment last."""
    if not segments:
        return ts.ObjectExpression()

    innermost = [ts.ObjectProperty("screen", ts.StringLiteral(segments[-1]))]
    if with_params:
        innermost.append(ts.ObjectProperty("params", ts.Identifier("params"), shorthand=True))
    result = ts.ObjectExpression(tuple(innermost))

    for segment in reversed(segments[:-1]):
        result = ts.ObjectExpression(
            (
                ts.ObjectProperty("screen", ts.StringLiteral(segment)),
                ts.ObjectProperty("params", result),
            )
        )
    return result


def route_builder(screen: Screen) -> ts.VariableDeclaration:
    """``export const to<Specifier>`` building the navigation target.

    Screens with params get a one-argument function typed from the params
    record; others get a constant object.
    """
    with_params = screen.params is not None
    target = ts.AsExpression(
        route_object(route_segments(screen), with_params),
        ts.TypeReference("const"),
    )

    init: ts.Node = target
    if with_params:
        init = ts.ArrowFunction(
            (ts.Parameter("params", annotation_from_record(screen.params)),),
            target,
            block=True,
        )

    return ts.VariableDeclaration(f"to{screen.import_specifier}", init, exported=True)


def tidy_params_spacing(source: str) -> str:
    """Remove blank lines the formatter leaves before nested ``params``."""
    return _PARAMS_SPACING_RE.sub(r"\n\1", source)
