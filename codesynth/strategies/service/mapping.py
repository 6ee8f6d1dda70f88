"""Substitution mappings for the service templates.

Sensitive fields are hashed on their way to the database. Creation always
hashes the supplied value; updates only hash a value the caller actually
supplied, so omitted fields are neither rehashed nor written.
"""

import ast
from collections.abc import Sequence

from codesynth.interfaces.entity import EntityField
from codesynth.strategies.codegen.builders import (
    ObjectEntry,
    await_expression,
    call_expression,
    conditional_expression,
    lambda_expression,
    member_expression,
    name,
    object_expression,
    object_property,
    spread_element,
    subscript_expression,
)
from codesynth.strategies.codegen.mutators import Collaborator
from codesynth.strategies.codegen.naming import (
    create_create_args_id,
    create_delete_args_id,
    create_find_many_args_id,
    create_find_one_args_id,
    create_service_base_id,
    create_service_id,
    create_update_args_id,
)

ARGS_ID = "args"
DATA_KEY = "data"
TRANSFORM_VALUE_PARAMETER = "value"
TRANSFORM_STRING_FIELD_UPDATE_INPUT = "transform_string_field_update_input"

REQUIRED_PLACEHOLDERS = frozenset(
    {
        "SERVICE",
        "SERVICE_BASE",
        "ENTITY",
        "FIND_MANY_ARGS",
        "FIND_ONE_ARGS",
        "CREATE_ARGS",
        "UPDATE_ARGS",
        "DELETE_ARGS",
        "DELEGATE",
        "CREATE_ARGS_MAPPING",
        "UPDATE_ARGS_MAPPING",
    }
)


def create_mutation_data_mapping(properties: Sequence[ObjectEntry]) -> ast.expr:
    """Wrap data overrides around the original arguments.

    Without overrides the arguments pass through untouched. Otherwise the
    result is ``{**args, "data": {**args["data"], <overrides>}}``; the
    overrides come last so they always win over the spread values.
    """
    if not properties:
        return name(ARGS_ID)
    return object_expression(
        [
            spread_element(name(ARGS_ID)),
            object_property(
                DATA_KEY,
                object_expression(
                    [
                        spread_element(subscript_expression(ARGS_ID, DATA_KEY)),
                        *properties,
                    ]
                ),
            ),
        ]
    )


def create_args_mapping(
    sensitive_fields: Sequence[EntityField],
    collaborator: Collaborator,
) -> ast.expr:
    """``"f": await self._password_service.hash(args["data"]["f"])`` per field."""
    return create_mutation_data_mapping(
        [
            object_property(
                field.name,
                await_expression(
                    call_expression(
                        collaborator.method_expression(),
                        subscript_expression(ARGS_ID, DATA_KEY, field.name),
                    )
                ),
            )
            for field in sensitive_fields
        ]
    )


def _supplied_value(field: EntityField) -> ast.expr:
    return call_expression(
        member_expression(subscript_expression(ARGS_ID, DATA_KEY), "get"),
        ast.Constant(value=field.name),
    )


def _supplied_override(
    field: EntityField,
    collaborator: Collaborator,
    transform_helper: str,
) -> ObjectEntry:
    hashed = object_expression(
        [
            object_property(
                field.name,
                await_expression(
                    call_expression(
                        transform_helper,
                        subscript_expression(ARGS_ID, DATA_KEY, field.name),
                        lambda_expression(
                            TRANSFORM_VALUE_PARAMETER,
                            call_expression(
                                collaborator.method_expression(),
                                name(TRANSFORM_VALUE_PARAMETER),
                            ),
                        ),
                    )
                ),
            )
        ]
    )
    return spread_element(
        conditional_expression(_supplied_value(field), hashed, object_expression([]))
    )


def update_args_mapping(
    sensitive_fields: Sequence[EntityField],
    collaborator: Collaborator,
    transform_helper: str = TRANSFORM_STRING_FIELD_UPDATE_INPUT,
) -> ast.expr:
    """Hash sensitive fields only when the update supplies them.

    Each field contributes a conditional spread, so an omitted field adds
    no key at all::

        **({"f": await helper(
            args["data"]["f"], lambda value: self._password_service.hash(value)
        )} if args["data"].get("f") else {})
    """
    return create_mutation_data_mapping(
        [_supplied_override(field, collaborator, transform_helper) for field in sensitive_fields]
    )


def build_service_mapping(
    entity_name: str,
    entity_type: str,
    sensitive_fields: Sequence[EntityField],
    collaborator: Collaborator,
    transform_helper: str = TRANSFORM_STRING_FIELD_UPDATE_INPUT,
) -> dict[str, ast.expr]:
    """Build the placeholder mapping shared by the service templates."""
    return {
        "SERVICE": create_service_id(entity_type),
        "SERVICE_BASE": create_service_base_id(entity_type),
        "ENTITY": name(entity_type),
        "FIND_MANY_ARGS": create_find_many_args_id(entity_type),
        "FIND_ONE_ARGS": create_find_one_args_id(entity_type),
        "CREATE_ARGS": create_create_args_id(entity_type),
        "UPDATE_ARGS": create_update_args_id(entity_type),
        "DELETE_ARGS": create_delete_args_id(entity_type),
        "DELEGATE": name(entity_name),
        "CREATE_ARGS_MAPPING": create_args_mapping(sensitive_fields, collaborator),
        "UPDATE_ARGS_MAPPING": update_args_mapping(
            sensitive_fields, collaborator, transform_helper
        ),
    }
