"""Canonical identifiers derived from an entity type name."""

import ast
import keyword

from codesynth.strategies.codegen.builders import name


def is_valid_identifier(value: str) -> bool:
    """Return True if ``value`` can name a module, class or attribute."""
    return value.isidentifier() and not keyword.iskeyword(value)


def create_service_id(entity_type: str) -> ast.Name:
    return name(f"{entity_type}Service")


def create_service_base_id(entity_type: str) -> ast.Name:
    return name(f"{entity_type}ServiceBase")


def create_find_many_args_id(entity_type: str) -> ast.Name:
    return name(f"FindMany{entity_type}Args")


def create_find_one_args_id(entity_type: str) -> ast.Name:
    return name(f"FindOne{entity_type}Args")


def create_create_args_id(entity_type: str) -> ast.Name:
    return name(f"{entity_type}CreateArgs")


def create_update_args_id(entity_type: str) -> ast.Name:
    return name(f"{entity_type}UpdateArgs")


def create_delete_args_id(entity_type: str) -> ast.Name:
    return name(f"{entity_type}DeleteArgs")
