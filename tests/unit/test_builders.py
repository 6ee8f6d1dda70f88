"""Unit tests for expression builders and canonical identifiers."""

import ast

import pytest

from codesynth.strategies.codegen.builders import (
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
from codesynth.strategies.codegen.naming import (
    create_create_args_id,
    create_delete_args_id,
    create_find_many_args_id,
    create_find_one_args_id,
    create_service_base_id,
    create_service_id,
    create_update_args_id,
    is_valid_identifier,
)


# =============================================================================
# Naming Tests
# =============================================================================


class TestNaming:
    """Test suite for identifiers derived from entity type names."""

    @pytest.mark.parametrize(
        "factory,expected",
        [
            (create_service_id, "CustomerService"),
            (create_service_base_id, "CustomerServiceBase"),
            (create_find_many_args_id, "FindManyCustomerArgs"),
            (create_find_one_args_id, "FindOneCustomerArgs"),
            (create_create_args_id, "CustomerCreateArgs"),
            (create_update_args_id, "CustomerUpdateArgs"),
            (create_delete_args_id, "CustomerDeleteArgs"),
        ],
    )
    def test_identifier_for_entity_type(self, factory, expected):
        """Test that each factory yields the expected load-context name."""
        identifier = factory("Customer")

        assert isinstance(identifier, ast.Name)
        assert identifier.id == expected
        assert isinstance(identifier.ctx, ast.Load)

    def test_identifiers_are_fresh_nodes(self):
        """Test that repeated calls never return the same node."""
        assert create_service_id("Tag") is not create_service_id("Tag")

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("customer", True),
            ("OrderItem", True),
            ("match", True),
            ("class", False),
            ("None", False),
            ("Order Item", False),
            ("order-item", False),
        ],
    )
    def test_is_valid_identifier(self, value, expected):
        """Test that keywords and non-identifiers are rejected."""
        assert is_valid_identifier(value) is expected


# =============================================================================
# Builder Tests
# =============================================================================


class TestBuilders:
    """Test suite for expression fragment builders."""

    def test_member_expression(self):
        """Test attribute chains built from a root name."""
        node = member_expression("self", "_password_service", "hash")

        assert ast.unparse(node) == "self._password_service.hash"

    def test_member_expression_without_attributes(self):
        """Test that no attributes yields the root name."""
        assert ast.unparse(member_expression("args")) == "args"

    def test_subscript_expression(self):
        """Test string-keyed subscript chains."""
        node = subscript_expression("args", "data", "password")

        assert ast.unparse(node) == "args['data']['password']"

    def test_call_and_await(self):
        """Test a call wrapped in an await."""
        node = await_expression(
            call_expression(member_expression("self", "hasher", "hash"), name("value"))
        )

        assert ast.unparse(node) == "await self.hasher.hash(value)"

    def test_conditional_expression(self):
        """Test a conditional expression."""
        node = conditional_expression(name("flag"), name("a"), name("b"))

        assert ast.unparse(node) == "a if flag else b"

    def test_conditional_spread_is_parenthesized(self):
        """Test that a conditional spread renders as valid dict syntax."""
        node = object_expression(
            [
                spread_element(
                    conditional_expression(
                        name("flag"),
                        object_expression([object_property("a", ast.Constant(value=1))]),
                        object_expression([]),
                    )
                )
            ]
        )

        assert ast.unparse(node) == "{**({'a': 1} if flag else {})}"
        assert eval(ast.unparse(node), {"flag": False}) == {}

    def test_lambda_expression(self):
        """Test a single-parameter lambda."""
        node = lambda_expression("value", call_expression("hash", name("value")))

        assert ast.unparse(node) == "lambda value: hash(value)"

    def test_object_expression_keeps_entry_order(self):
        """Test that spreads and properties keep their order."""
        node = object_expression(
            [
                spread_element(name("args")),
                object_property("data", ast.Constant(value=1)),
            ]
        )

        assert node.keys[0] is None
        assert ast.unparse(node) == "{**args, 'data': 1}"

    def test_later_entries_win_at_runtime(self):
        """Test that an override after a spread wins when evaluated."""
        node = object_expression(
            [
                spread_element(name("source")),
                object_property("password", ast.Constant(value="hashed")),
            ]
        )

        result = eval(ast.unparse(node), {"source": {"password": "plain", "name": "n"}})

        assert result == {"password": "hashed", "name": "n"}
