"""Tests for the SDL fragment parser and wrapped-type resolution."""

import pytest
from graphql import GraphQLInt, GraphQLList, GraphQLNonNull, parse_type, parse_value

from gql_compose import (
    EnumTypeComposer,
    InputTypeComposer,
    InterfaceTypeComposer,
    ObjectTypeComposer,
    ScalarTypeComposer,
    SchemaComposer,
    UnionTypeComposer,
)
from gql_compose.core.configs import Thunk
from gql_compose.core.errors import (
    InvalidArgumentError,
    NameConflictError,
    NotFoundError,
    ParseError,
    UnknownTypeError,
)
from gql_compose.core.sdl import type_node_to_string


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sc():
    return SchemaComposer()


@pytest.fixture
def color_tc(sc):
    return sc.create_type("enum Color { RED GREEN BLUE }")


# =============================================================================
# Wrapped-type strings
# =============================================================================


class TestGetWrapped:
    """Tests for wrapped-type string resolution."""

    def test_list_of_non_null_enum(self, sc, color_tc):
        wrapped = sc.get_wrapped("[Color!]")
        assert isinstance(wrapped, GraphQLList)
        assert isinstance(wrapped.of_type, GraphQLNonNull)
        assert wrapped.of_type.of_type is color_tc.get_type()

    def test_builtin_scalars_skip_registry(self, sc):
        assert sc.get_wrapped("Int") is GraphQLInt
        assert str(sc.get_wrapped("[Int!]!")) == "[Int!]!"

    def test_unknown_inner_name(self, sc):
        with pytest.raises(UnknownTypeError) as exc_info:
            sc.get_wrapped("[Colour!]")
        assert "Colour" in str(exc_info.value)

    def test_malformed_string(self, sc):
        with pytest.raises(ParseError):
            sc.get_wrapped("[Color")

    def test_non_string(self, sc):
        with pytest.raises(InvalidArgumentError):
            sc.get_wrapped(42)

    def test_type_node_to_string(self):
        assert type_node_to_string(parse_type("[[Int!]]!")) == "[[Int!]]!"

    def test_type_node_to_string_rejects_other_nodes(self):
        with pytest.raises(ParseError):
            type_node_to_string(parse_value("42"))


# =============================================================================
# Single definitions
# =============================================================================


class TestCreateType:
    """Tests for single-definition fragments."""

    @pytest.mark.parametrize(
        "sdl, composer_class",
        [
            ("type User { id: ID }", ObjectTypeComposer),
            ("input UserInput { id: ID }", InputTypeComposer),
            ("enum Role { ADMIN }", EnumTypeComposer),
            ("interface Node { id: ID }", InterfaceTypeComposer),
            ("scalar Json", ScalarTypeComposer),
        ],
    )
    def test_each_kind(self, sc, sdl, composer_class):
        composer = sc.create_type(sdl)
        assert isinstance(composer, composer_class)
        assert sc.get_composer(composer.get_type_name()) is composer

    def test_union(self, sc):
        sc.create_type("type A { a: Int }")
        union_tc = sc.create_type("union U = A")
        assert isinstance(union_tc, UnionTypeComposer)

    def test_redefining_builtin_scalar_conflicts(self, sc):
        with pytest.raises(NameConflictError):
            sc.create_type("scalar Int")

    def test_duplicate_name_conflicts(self, sc, color_tc):
        with pytest.raises(NameConflictError):
            sc.create_type("enum Color { CYAN }")
        assert sc.get_composer("Color") is color_tc

    def test_two_definitions_fail(self, sc):
        with pytest.raises(ParseError):
            sc.create_type("type A { a: Int } type B { b: Int }")

    def test_schema_definition_fails(self, sc):
        with pytest.raises(ParseError):
            sc.create_type("schema { query: Query }")

    def test_syntax_error_fails(self, sc):
        with pytest.raises(ParseError):
            sc.create_type("enum Color {")

    def test_non_string_fails(self, sc):
        with pytest.raises(ParseError):
            sc.create_type(None)

    def test_descriptions_and_deprecations(self, sc):
        role_tc = sc.create_type(
            '''
            """Access level"""
            enum Role {
                "Full access"
                ADMIN
                GUEST @deprecated(reason: "Use VIEWER")
                ANON @deprecated
            }
            '''
        )
        assert role_tc.get_description() == "Access level"
        assert role_tc.get_field("ADMIN").description == "Full access"
        assert role_tc.get_field("GUEST").deprecation_reason == "Use VIEWER"
        assert role_tc.get_field("ANON").deprecation_reason == "No longer supported"

    def test_field_args_and_defaults(self, sc):
        query_tc = sc.create_type(
            'type Query { users(first: Int = 10, tags: [String!] = ["a"]): [String] }'
        )
        args = query_tc.get_field_args("users")
        assert args["first"].default_value == 10
        assert args["tags"].type == "[String!]"
        assert args["tags"].default_value == ["a"]


# =============================================================================
# Documents
# =============================================================================


class TestParseTypesFromString:
    """Tests for multi-definition documents and extensions."""

    def test_registers_every_definition(self, sc):
        composers = sc.parse_types_from_string(
            """
            type Query { me: User }
            type User { name: String }
            """
        )
        assert list(composers) == ["Query", "User"]
        assert sc.has("Query") and sc.has("User")

    def test_applies_extensions_after_definitions(self, sc):
        sc.parse_types_from_string(
            """
            extend type Query { world: Int }
            type Query { hello: String }
            enum Color { RED }
            extend enum Color { BLUE }
            interface Node { id: ID! }
            extend type Query implements Node { id: ID! }
            """
        )
        query_tc = sc.get_composer("Query")
        assert query_tc.get_field_names() == ["hello", "world", "id"]
        assert query_tc.has_interface("Node")
        assert sc.get_composer("Color").get_field_names() == ["RED", "BLUE"]

    def test_extend_union_and_input(self, sc):
        sc.parse_types_from_string(
            """
            type A { a: Int }
            type B { b: Int }
            union U = A
            extend union U = B
            input Filter { q: String }
            extend input Filter { limit: Int }
            """
        )
        assert sc.get_composer("U").get_type_names() == ["A", "B"]
        assert sc.get_composer("Filter").get_field_names() == ["q", "limit"]

    def test_extending_unknown_type_fails(self, sc):
        with pytest.raises(NotFoundError):
            sc.parse_types_from_string("extend type Missing { x: Int }")

    def test_extension_kind_mismatch_fails(self, sc):
        with pytest.raises(InvalidArgumentError):
            sc.parse_types_from_string(
                """
                type Query { hello: String }
                extend enum Query { WORLD }
                """
            )

    def test_operations_are_rejected(self, sc):
        with pytest.raises(ParseError):
            sc.parse_types_from_string("query { hello }")

    def test_conflict_registers_nothing(self, sc):
        sc.create_type("type B { b: Int }")
        with pytest.raises(NameConflictError):
            sc.parse_types_from_string("type A { x: Int } type B { y: Int }")
        assert not sc.has("A")
        assert sc.get_composer("B").get_field_names() == ["b"]

    def test_duplicate_definition_registers_nothing(self, sc):
        with pytest.raises(NameConflictError):
            sc.parse_types_from_string("type A { x: Int } type C { c: Int } type A { y: Int }")
        assert sc.type_names() == []

    def test_builtin_scalar_in_document_registers_nothing(self, sc):
        with pytest.raises(NameConflictError):
            sc.parse_types_from_string("type A { x: Int } scalar String")
        assert not sc.has("A")

    def test_bad_extension_target_registers_nothing(self, sc):
        with pytest.raises(NotFoundError):
            sc.parse_types_from_string("type A { x: Int } extend type Missing { y: Int }")
        assert not sc.has("A")

    def test_late_operation_registers_nothing(self, sc):
        with pytest.raises(ParseError):
            sc.parse_types_from_string("type A { x: Int } query { a }")
        assert not sc.has("A")


class TestAddTypeDefs:
    """Tests for deferred registration."""

    def test_definitions_are_built_on_first_read(self, sc):
        names = sc.add_type_defs(
            """
            type Query { favorite: Color }
            enum Color { RED }
            """
        )
        assert names == ["Query", "Color"]
        assert isinstance(sc.registry.peek("Color"), Thunk)

        color_tc = sc.get_composer("Color")
        assert isinstance(color_tc, EnumTypeComposer)
        assert sc.registry.peek("Color") is color_tc

    def test_deferred_references_resolve(self, sc):
        sc.add_type_defs(
            """
            type Query { favorite: Color }
            enum Color { RED }
            """
        )
        query_type = sc.get("Query")
        assert query_type.fields["favorite"].type is sc.get("Color")

    def test_registering_over_deferred_name_conflicts(self, sc):
        sc.add_type_defs("type A { x: Int }")
        with pytest.raises(NameConflictError):
            sc.create_type("type A { y: Int }")
        assert sc.get_composer("A").get_field_names() == ["x"]

    def test_deferring_a_taken_name_conflicts(self, sc, color_tc):
        with pytest.raises(NameConflictError):
            sc.add_type_defs("type Query { ok: Boolean } enum Color { CYAN }")
        assert not sc.has("Query")
        assert sc.get_composer("Color") is color_tc
