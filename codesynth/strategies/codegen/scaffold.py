"""Removal of template-only scaffolding.

Templates stay importable and type-checkable on their own thanks to a few
constructs that must not reach generated code:

- ``if TYPE_CHECKING:`` blocks holding stand-ins for placeholder types,
- ``Protocol`` declarations describing placeholder shapes,
- bare module-level annotations (``DELEGATE: Any``) declaring placeholders,
- ``# type: ignore`` markers silencing checkers on placeholder lines.

Stripping runs after the structural mutators, which still rely on the
scaffolded shape of the template.
"""

import ast
import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)

TYPE_CHECKING = "TYPE_CHECKING"
PROTOCOL = "Protocol"
TYPING_MODULES = frozenset({"typing", "typing_extensions", "collections.abc"})


def _is_type_checking_test(test: ast.expr) -> bool:
    match test:
        case ast.Name(id=identifier) | ast.Attribute(attr=identifier):
            return identifier == TYPE_CHECKING
    return False


def remove_type_checking_blocks(module: ast.Module) -> None:
    """Drop top-level ``if TYPE_CHECKING:`` blocks, keeping any ``else`` branch."""
    body: list[ast.stmt] = []
    for statement in module.body:
        if isinstance(statement, ast.If) and _is_type_checking_test(statement.test):
            body.extend(statement.orelse)
            continue
        body.append(statement)
    module.body = body


def _is_protocol(class_def: ast.ClassDef) -> bool:
    for base in class_def.bases:
        match base:
            case ast.Name(id=identifier) | ast.Attribute(attr=identifier):
                if identifier == PROTOCOL:
                    return True
            case ast.Subscript(value=ast.Name(id=identifier) | ast.Attribute(attr=identifier)):
                if identifier == PROTOCOL:
                    return True
    return False


def remove_protocol_declares(module: ast.Module) -> None:
    module.body = [
        statement
        for statement in module.body
        if not (isinstance(statement, ast.ClassDef) and _is_protocol(statement))
    ]


def remove_placeholder_declares(module: ast.Module) -> None:
    """Drop module-level annotations that declare a name without a value."""
    module.body = [
        statement
        for statement in module.body
        if not (isinstance(statement, ast.AnnAssign) and statement.value is None)
    ]


def remove_type_ignore_comments(module: ast.Module) -> None:
    module.type_ignores = []
    for node in ast.walk(module):
        comment = getattr(node, "type_comment", None)
        if comment is not None and comment.startswith("ignore"):
            node.type_comment = None


def _used_names(module: ast.Module) -> set[str]:
    used: set[str] = set()
    for statement in module.body:
        if isinstance(statement, (ast.Import, ast.ImportFrom)):
            continue
        for node in ast.walk(statement):
            if isinstance(node, ast.Name):
                used.add(node.id)
    return used


def remove_unused_typing_imports(
    module: ast.Module,
    modules: Iterable[str] = TYPING_MODULES,
) -> None:
    """Drop names imported from typing modules that nothing references anymore."""
    typing_modules = set(modules)
    used = _used_names(module)
    body: list[ast.stmt] = []
    for statement in module.body:
        if (
            isinstance(statement, ast.ImportFrom)
            and statement.level == 0
            and statement.module in typing_modules
        ):
            statement.names = [
                alias for alias in statement.names if (alias.asname or alias.name) in used
            ]
            if not statement.names:
                continue
        body.append(statement)
    module.body = body


def strip_scaffold(module: ast.Module) -> ast.Module:
    """Remove every scaffold construct from ``module`` in place.

    The target class and all runtime statements are kept.

    Returns:
        The stripped module (the same object).
    """
    remove_type_checking_blocks(module)
    remove_protocol_declares(module)
    remove_placeholder_declares(module)
    remove_type_ignore_comments(module)
    remove_unused_typing_imports(module)
    logger.debug("Template scaffold stripped")
    return module
