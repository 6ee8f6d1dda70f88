"""Unit tests for the service template mappings."""

import ast
import asyncio

import pytest

from codesynth.interfaces.entity import DataType, EntityField
from codesynth.strategies.codegen.mutators import Collaborator
from codesynth.strategies.service.mapping import (
    REQUIRED_PLACEHOLDERS,
    build_service_mapping,
    create_args_mapping,
    create_mutation_data_mapping,
    update_args_mapping,
)

PASSWORD = EntityField("password", DataType.PASSWORD)
PIN = EntityField("pin", DataType.PASSWORD)


class FakePasswordService:
    """Records every hashed value."""

    def __init__(self):
        self.hashed = []

    async def hash(self, value):
        self.hashed.append(value)
        return f"hashed:{value}"


class FakeService:
    def __init__(self):
        self._password_service = FakePasswordService()


async def transform_string_field_update_input(value, transform):
    return await transform(value)


def _compile(expression: ast.expr):
    """Compile a mapping expression into ``async (self, args) -> dict``."""
    source = f"async def mapped(self, args):\n    return {ast.unparse(expression)}\n"
    namespace = {"transform_string_field_update_input": transform_string_field_update_input}
    exec(source, namespace)
    return namespace["mapped"]


@pytest.fixture
def collaborator():
    """Create the password service collaborator."""
    return Collaborator(
        member_name="password_service",
        type_name="PasswordService",
        module_path="src/auth/password_service.py",
    )


# =============================================================================
# Entity Field Tests
# =============================================================================


class TestEntityFields:
    """Test suite for field sensitivity."""

    def test_password_field(self):
        """Test that password fields are sensitive."""
        assert PASSWORD.is_sensitive

    def test_plain_field(self):
        """Test that text fields are not sensitive."""
        field = EntityField("name")

        assert not field.is_sensitive


# =============================================================================
# Create Mapping Tests
# =============================================================================


class TestCreateArgsMapping:
    """Test suite for create_args_mapping."""

    def test_identity_without_sensitive_fields(self, collaborator):
        """Test that arguments pass through untouched."""
        mapping = create_args_mapping([], collaborator)

        assert isinstance(mapping, ast.Name)
        assert mapping.id == "args"

    def test_empty_overrides_are_identity(self):
        """Test the bare mutation mapping."""
        assert ast.unparse(create_mutation_data_mapping([])) == "args"

    def test_rendered_expression(self, collaborator):
        """Test the hashed field override."""
        mapping = create_args_mapping([PASSWORD], collaborator)

        assert ast.unparse(mapping) == (
            "{**args, 'data': {**args['data'], "
            "'password': await self._password_service.hash(args['data']['password'])}}"
        )

    def test_overrides_follow_spread(self, collaborator):
        """Test that every override comes after the spread it shadows."""
        mapping = create_args_mapping([PIN, PASSWORD], collaborator)

        data = mapping.values[1]
        assert data.keys[0] is None
        assert [key.value for key in data.keys[1:]] == ["pin", "password"]

    def test_evaluated_mapping_hashes(self, collaborator):
        """Test that the hashed value replaces the supplied one."""
        mapped = _compile(create_args_mapping([PASSWORD], collaborator))
        service = FakeService()
        args = {"data": {"name": "Ada", "password": "secret"}, "include": {"orders": True}}

        result = asyncio.run(mapped(service, args))

        assert result == {
            "data": {"name": "Ada", "password": "hashed:secret"},
            "include": {"orders": True},
        }
        assert args["data"]["password"] == "secret"


# =============================================================================
# Update Mapping Tests
# =============================================================================


class TestUpdateArgsMapping:
    """Test suite for update_args_mapping."""

    def test_identity_without_sensitive_fields(self, collaborator):
        """Test that arguments pass through untouched."""
        assert ast.unparse(update_args_mapping([], collaborator)) == "args"

    def test_rendered_expression(self, collaborator):
        """Test the conditional spread of the transformed value."""
        mapping = update_args_mapping([PASSWORD], collaborator)

        assert ast.unparse(mapping) == (
            "{**args, 'data': {**args['data'], **({'password': "
            "await transform_string_field_update_input(args['data']['password'], "
            "lambda value: self._password_service.hash(value))} "
            "if args['data'].get('password') else {})}}"
        )

    def test_supplied_value_hashed(self, collaborator):
        """Test that a supplied value is hashed."""
        mapped = _compile(update_args_mapping([PASSWORD], collaborator))
        service = FakeService()

        result = asyncio.run(
            mapped(service, {"where": {"id": 1}, "data": {"password": "new"}})
        )

        assert result == {"where": {"id": 1}, "data": {"password": "hashed:new"}}

    def test_omitted_value_left_out(self, collaborator):
        """Test that a partial update neither hashes nor writes the field."""
        mapped = _compile(update_args_mapping([PASSWORD], collaborator))
        service = FakeService()

        result = asyncio.run(mapped(service, {"where": {"id": 1}, "data": {"name": "Ada"}}))

        assert service._password_service.hashed == []
        assert result == {"where": {"id": 1}, "data": {"name": "Ada"}}
        assert "password" not in result["data"]

    def test_only_supplied_fields_hashed(self, collaborator):
        """Test several sensitive fields where only one is supplied."""
        mapped = _compile(update_args_mapping([PIN, PASSWORD], collaborator))
        service = FakeService()

        result = asyncio.run(mapped(service, {"data": {"pin": "1234"}}))

        assert result == {"data": {"pin": "hashed:1234"}}
        assert service._password_service.hashed == ["1234"]

    def test_custom_transform_helper(self, collaborator):
        """Test that the helper name is configurable."""
        mapping = update_args_mapping([PASSWORD], collaborator, "transform_update")

        assert "await transform_update(" in ast.unparse(mapping)


# =============================================================================
# Service Mapping Tests
# =============================================================================


class TestBuildServiceMapping:
    """Test suite for build_service_mapping."""

    def test_covers_required_placeholders(self, collaborator):
        """Test that every required placeholder is mapped."""
        mapping = build_service_mapping("customer", "Customer", [PASSWORD], collaborator)

        assert set(mapping) == REQUIRED_PLACEHOLDERS

    def test_names(self, collaborator):
        """Test the identifiers derived from the entity."""
        mapping = build_service_mapping("customer", "Customer", [], collaborator)

        assert mapping["SERVICE"].id == "CustomerService"
        assert mapping["SERVICE_BASE"].id == "CustomerServiceBase"
        assert mapping["ENTITY"].id == "Customer"
        assert mapping["DELEGATE"].id == "customer"
        assert mapping["FIND_MANY_ARGS"].id == "FindManyCustomerArgs"
        assert mapping["CREATE_ARGS_MAPPING"].id == "args"
        assert mapping["UPDATE_ARGS_MAPPING"].id == "args"
