"""Constructors for small expression fragments.

Every builder returns new nodes; callers may splice them into a tree
without copying. Nodes carry no source locations, the renderer fills
them in.
"""

import ast
from collections.abc import Sequence

# A dict display entry: ``(None, value)`` is a ``**value`` spread.
ObjectEntry = tuple[ast.expr | None, ast.expr]


def name(identifier: str) -> ast.Name:
    """Build a load-context name."""
    return ast.Name(id=identifier, ctx=ast.Load())


def _as_expr(value: ast.expr | str) -> ast.expr:
    return name(value) if isinstance(value, str) else value


def member_expression(value: ast.expr | str, *attributes: str) -> ast.expr:
    """Build an attribute chain such as ``self.password_service.hash``."""
    node = _as_expr(value)
    for attribute in attributes:
        node = ast.Attribute(value=node, attr=attribute, ctx=ast.Load())
    return node


def subscript_expression(value: ast.expr | str, *keys: str) -> ast.expr:
    """Build a string-keyed subscript chain such as ``args["data"]["password"]``."""
    node = _as_expr(value)
    for key in keys:
        node = ast.Subscript(value=node, slice=ast.Constant(value=key), ctx=ast.Load())
    return node


def call_expression(func: ast.expr | str, *args: ast.expr) -> ast.Call:
    """Build a call with positional arguments only."""
    return ast.Call(func=_as_expr(func), args=list(args), keywords=[])


def await_expression(value: ast.expr) -> ast.Await:
    return ast.Await(value=value)


def conditional_expression(test: ast.expr, body: ast.expr, orelse: ast.expr) -> ast.IfExp:
    """Build ``body if test else orelse``."""
    return ast.IfExp(test=test, body=body, orelse=orelse)


def lambda_expression(parameter: str, body: ast.expr) -> ast.Lambda:
    """Build a single-parameter lambda."""
    return ast.Lambda(
        args=ast.arguments(
            posonlyargs=[],
            args=[ast.arg(arg=parameter, annotation=None)],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=body,
    )


def spread_element(value: ast.expr) -> ObjectEntry:
    return (None, value)


def object_property(key: str, value: ast.expr) -> ObjectEntry:
    return (ast.Constant(value=key), value)


def object_expression(entries: Sequence[ObjectEntry]) -> ast.Dict:
    """Build a dict display from ordered entries.

    Later entries win at runtime, so overrides must follow the spreads
    they shadow.
    """
    return ast.Dict(
        keys=[key for key, _ in entries],
        values=[value for _, value in entries],
    )
