"""Placeholder interpolation over parsed templates.

Templates are regular Python modules whose placeholders are plain
identifiers (``SERVICE``, ``CREATE_ARGS_MAPPING``, ...). Interpolation swaps
those identifiers for replacement nodes, so a placeholder can stand for
anything from a class name to a whole dict display while the result stays
a well-formed tree.
"""

import ast
import copy
import logging
from collections.abc import Iterable, Mapping

from codesynth.interfaces.synthesis import (
    TemplateMalformedError,
    UnmappedRequiredPlaceholderError,
)

logger = logging.getLogger(__name__)

PlaceholderMapping = Mapping[str, ast.expr]


class Interpolator(ast.NodeTransformer):
    """Replaces placeholder identifiers with mapped nodes.

    Expression positions take any replacement expression. Positions that
    can only hold an identifier (definition names, attribute names, import
    aliases, parameters, keywords) require a ``Name`` replacement.
    """

    def __init__(self, mapping: PlaceholderMapping) -> None:
        self._mapping = mapping
        self.replaced: set[str] = set()

    def _identifier(self, current: str, position: str) -> str:
        replacement = self._mapping.get(current)
        if replacement is None:
            return current
        if not isinstance(replacement, ast.Name):
            raise TemplateMalformedError(
                f"Placeholder '{current}' is used as {position} and needs an "
                f"identifier, got {type(replacement).__name__}"
            )
        self.replaced.add(current)
        return replacement.id

    def visit_Name(self, node: ast.Name) -> ast.expr:
        replacement = self._mapping.get(node.id)
        if replacement is None:
            return node
        self.replaced.add(node.id)
        new_node = copy.deepcopy(replacement)
        if isinstance(new_node, ast.Name):
            new_node.ctx = node.ctx
        return ast.copy_location(new_node, node)

    def visit_ClassDef(self, node: ast.ClassDef) -> ast.ClassDef:
        node.name = self._identifier(node.name, "a class name")
        self.generic_visit(node)
        return node

    def visit_FunctionDef(self, node: ast.FunctionDef) -> ast.FunctionDef:
        node.name = self._identifier(node.name, "a function name")
        self.generic_visit(node)
        return node

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> ast.AsyncFunctionDef:
        node.name = self._identifier(node.name, "a function name")
        self.generic_visit(node)
        return node

    def visit_Attribute(self, node: ast.Attribute) -> ast.Attribute:
        self.generic_visit(node)
        node.attr = self._identifier(node.attr, "an attribute name")
        return node

    def visit_alias(self, node: ast.alias) -> ast.alias:
        node.name = self._identifier(node.name, "an imported name")
        if node.asname is not None:
            node.asname = self._identifier(node.asname, "an import alias")
        return node

    def visit_arg(self, node: ast.arg) -> ast.arg:
        node.arg = self._identifier(node.arg, "a parameter name")
        self.generic_visit(node)
        return node

    def visit_keyword(self, node: ast.keyword) -> ast.keyword:
        if node.arg is not None:
            node.arg = self._identifier(node.arg, "a keyword name")
        self.generic_visit(node)
        return node


def interpolate(tree: ast.AST, mapping: PlaceholderMapping) -> ast.AST:
    """Replace every mapped placeholder in ``tree`` in place.

    Placeholders without a mapping entry are left untouched.

    Args:
        tree: The tree to rewrite.
        mapping: Placeholder name to replacement node.

    Returns:
        The rewritten tree (the same object as ``tree``).

    Raises:
        TemplateMalformedError: If a placeholder sits in an identifier-only
            position but maps to a non-identifier expression.
    """
    if not mapping:
        return tree
    interpolator = Interpolator(mapping)
    interpolator.visit(tree)
    logger.debug(f"Interpolated placeholders: {sorted(interpolator.replaced)}")
    return tree


def _identifiers(node: ast.AST) -> Iterable[str]:
    match node:
        case ast.Name(id=identifier):
            yield identifier
        case (
            ast.ClassDef(name=identifier)
            | ast.FunctionDef(name=identifier)
            | ast.AsyncFunctionDef(name=identifier)
        ):
            yield identifier
        case ast.Attribute(attr=identifier):
            yield identifier
        case ast.alias(name=identifier, asname=alias_name):
            yield identifier
            if alias_name is not None:
                yield alias_name
        case ast.arg(arg=identifier):
            yield identifier
        case ast.keyword(arg=identifier) if identifier is not None:
            yield identifier


def find_placeholders(tree: ast.AST, names: Iterable[str]) -> set[str]:
    """Return which of ``names`` still occur as identifiers in ``tree``."""
    wanted = set(names)
    found: set[str] = set()
    for node in ast.walk(tree):
        found.update(identifier for identifier in _identifiers(node) if identifier in wanted)
    return found


def assert_placeholders_resolved(tree: ast.AST, required: Iterable[str]) -> None:
    """Fail if any required placeholder is still present.

    Raises:
        UnmappedRequiredPlaceholderError: If one or more remain.
    """
    remaining = find_placeholders(tree, required)
    if remaining:
        raise UnmappedRequiredPlaceholderError(remaining)
