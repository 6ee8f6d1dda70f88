"""Import statements between generated modules.

Generated modules refer to each other through relative imports computed
from their destination paths, so a generated tree can be placed under any
source root.
"""

import ast
import logging
import posixpath
from collections.abc import Iterable, Sequence

from codesynth.interfaces.synthesis import PathResolutionError

logger = logging.getLogger(__name__)

PYTHON_SUFFIX = ".py"
PACKAGE_MODULE = "__init__"


def _normalize(path: str) -> str:
    return posixpath.normpath(path.replace("\\", "/"))


def relative_import_path(from_path: str, to_path: str) -> str:
    """Compute the relative import of ``to_path`` from ``from_path``.

    ``src/customer/customer_service.py`` importing
    ``src/customer/base/customer_service_base.py`` gives
    ``.base.customer_service_base``; importing ``src/auth/password_service.py``
    gives ``..auth.password_service``.

    Args:
        from_path: Destination path of the importing module.
        to_path: Destination path of the imported module.

    Returns:
        The dotted relative module reference.

    Raises:
        PathResolutionError: If the paths cannot be related.
    """
    source = _normalize(from_path)
    target = _normalize(to_path)

    if posixpath.isabs(source) != posixpath.isabs(target):
        raise PathResolutionError(from_path, to_path, "paths are not comparable")
    if not source.endswith(PYTHON_SUFFIX) or not target.endswith(PYTHON_SUFFIX):
        raise PathResolutionError(from_path, to_path, "only Python modules can be imported")
    if source == target:
        raise PathResolutionError(from_path, to_path, "a module cannot import itself")

    target_module = target[: -len(PYTHON_SUFFIX)]
    if posixpath.basename(target_module) == PACKAGE_MODULE:
        target_module = posixpath.dirname(target_module) or "."

    relative = posixpath.relpath(target_module, posixpath.dirname(source) or ".")
    parts = [part for part in relative.split("/") if part != "."]

    levels = 0
    while levels < len(parts) and parts[levels] == "..":
        levels += 1
    module_parts = parts[levels:]

    if not all(part.isidentifier() for part in module_parts):
        raise PathResolutionError(from_path, to_path, f"'{relative}' is not a valid module name")

    return "." * (levels + 1) + ".".join(module_parts)


def import_names(names: Iterable[ast.Name | str], source: str) -> ast.ImportFrom:
    """Build ``from <source> import <names>``.

    Leading dots in ``source`` become the relative import level.
    """
    module = source.lstrip(".")
    return ast.ImportFrom(
        module=module or None,
        names=[
            ast.alias(name=item.id if isinstance(item, ast.Name) else item, asname=None)
            for item in names
        ],
        level=len(source) - len(module),
    )


def _bound_name(alias: ast.alias) -> str:
    return alias.asname or alias.name.split(".")[0]


def _imported_names(module: ast.Module) -> set[str]:
    names: set[str] = set()
    for statement in module.body:
        if isinstance(statement, (ast.Import, ast.ImportFrom)):
            names.update(_bound_name(alias) for alias in statement.names)
    return names


def _insertion_index(module: ast.Module) -> int:
    index = 0
    for position, statement in enumerate(module.body):
        if isinstance(statement, (ast.Import, ast.ImportFrom)):
            index = position + 1
    if index == 0 and module.body and ast.get_docstring(module, clean=False) is not None:
        index = 1
    return index


def add_imports(module: ast.Module, imports: Sequence[ast.ImportFrom]) -> None:
    """Add ``from`` imports after the module's existing imports.

    A symbol that is already imported is never imported again. Imports from
    a module that is already imported from are merged into that statement.
    """
    imported = _imported_names(module)
    index = _insertion_index(module)

    for declaration in imports:
        aliases = [alias for alias in declaration.names if _bound_name(alias) not in imported]
        if not aliases:
            logger.debug(f"Skipping import from '{declaration.module}': already imported")
            continue

        existing = next(
            (
                statement
                for statement in module.body
                if isinstance(statement, ast.ImportFrom)
                and statement.module == declaration.module
                and statement.level == declaration.level
            ),
            None,
        )
        if existing is not None:
            existing.names.extend(aliases)
        else:
            module.body.insert(
                index,
                ast.ImportFrom(module=declaration.module, names=aliases, level=declaration.level),
            )
            index += 1

        imported.update(_bound_name(alias) for alias in aliases)
