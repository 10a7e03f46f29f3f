"""Tests for input, interface and union composers."""

import pytest
from graphql import (
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLInterfaceType,
    GraphQLNonNull,
    GraphQLUnionType,
)

from gql_compose import (
    InputTypeComposer,
    InterfaceTypeComposer,
    SchemaComposer,
    UnionTypeComposer,
)
from gql_compose.core.errors import InvalidArgumentError, NotFoundError, UnknownTypeError


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sc():
    return SchemaComposer()


@pytest.fixture
def filter_tc(sc):
    return sc.create_input_tc(
        """
        input Filter {
            q: String = "all"
            limit: Int!
        }
        """
    )


@pytest.fixture
def search_tc(sc):
    sc.create_object_tc("type User { name: String }")
    sc.create_object_tc("type Post { title: String }")
    return sc.create_union_tc("union SearchResult = User | Post")


# =============================================================================
# Input types
# =============================================================================


class TestInputTypeComposer:
    """Tests for InputTypeComposer."""

    def test_create_from_sdl(self, filter_tc):
        assert isinstance(filter_tc, InputTypeComposer)
        assert filter_tc.get_field("q").default_value == "all"

    def test_materializes_input_object(self, filter_tc):
        gql_type = filter_tc.get_type()
        assert isinstance(gql_type, GraphQLInputObjectType)
        assert gql_type.fields["q"].default_value == "all"
        limit_type = gql_type.fields["limit"].type
        assert isinstance(limit_type, GraphQLNonNull)
        assert limit_type.of_type is GraphQLInt

    def test_get_field_type(self, filter_tc):
        assert str(filter_tc.get_field_type("limit")) == "Int!"

    def test_output_type_is_rejected(self, sc, filter_tc):
        sc.create_object_tc("type User { name: String }")
        filter_tc.set_field("owner", "User")
        with pytest.raises(InvalidArgumentError) as exc_info:
            filter_tc.get_type()
        assert "not an input type" in str(exc_info.value)
        assert exc_info.value.field_name == "owner"

    def test_resolve_key_is_rejected(self, filter_tc):
        with pytest.raises(InvalidArgumentError):
            filter_tc.set_field("page", {"type": "Int", "resolve": lambda *_: 1})

    def test_nested_input_reference(self, sc, filter_tc):
        query_input_tc = sc.create_input_tc({"name": "QueryInput", "fields": {"filter": filter_tc}})
        assert query_input_tc.get_type().fields["filter"].type is filter_tc.get_type()

    def test_unknown_field_type(self, filter_tc):
        filter_tc.set_field("sort", "SortOrder")
        with pytest.raises(UnknownTypeError) as exc_info:
            filter_tc.get_type()
        assert exc_info.value.type_name == "Filter"


# =============================================================================
# Interfaces
# =============================================================================


class TestInterfaceTypeComposer:
    """Tests for InterfaceTypeComposer."""

    def test_create_from_sdl(self, sc):
        node_tc = sc.create_interface_tc("interface Node { id: ID! }")
        assert isinstance(node_tc, InterfaceTypeComposer)
        gql_type = node_tc.get_type()
        assert isinstance(gql_type, GraphQLInterfaceType)
        assert str(gql_type.fields["id"].type) == "ID!"

    def test_resolve_type(self, sc):
        node_tc = sc.create_interface_tc("interface Node { id: ID! }")

        def resolve_type(obj, info, abstract_type):
            return "User"

        node_tc.set_resolve_type(resolve_type)
        assert node_tc.get_resolve_type() is resolve_type
        assert node_tc.get_type().resolve_type is resolve_type

    def test_interface_implementing_interface(self, sc):
        sc.create_interface_tc("interface Node { id: ID! }")
        resource_tc = sc.create_interface_tc("interface Resource implements Node { id: ID! url: String }")
        assert [i.name for i in resource_tc.get_type().interfaces] == ["Node"]

    def test_field_args(self, sc):
        node_tc = sc.create_interface_tc("interface Named { name(upper: Boolean): String }")
        assert node_tc.get_field_arg("name", "upper").type == "Boolean"

    def test_clone_keeps_resolve_type(self, sc):
        def resolve_type(obj, info, abstract_type):
            return "User"

        node_tc = sc.create_interface_tc({"name": "Node", "resolve_type": resolve_type})
        assert node_tc.clone("Entity").get_resolve_type() is resolve_type


# =============================================================================
# Unions
# =============================================================================


class TestUnionTypeComposer:
    """Tests for UnionTypeComposer."""

    def test_create_from_sdl(self, search_tc):
        assert isinstance(search_tc, UnionTypeComposer)
        assert search_tc.get_type_names() == ["User", "Post"]

    def test_materializes_members(self, sc, search_tc):
        gql_type = search_tc.get_type()
        assert isinstance(gql_type, GraphQLUnionType)
        assert [t.name for t in gql_type.types] == ["User", "Post"]
        assert gql_type.types[0] is sc.get("User")

    def test_add_type_is_idempotent(self, sc, search_tc):
        search_tc.add_type(sc.get_composer("User"))
        assert search_tc.get_type_names() == ["User", "Post"]

    def test_add_types(self, sc, search_tc):
        comment_tc = sc.create_object_tc("type Comment { body: String }")
        search_tc.add_types([comment_tc, "Post"])
        assert search_tc.get_type_names() == ["User", "Post", "Comment"]
        assert search_tc.has_type(comment_tc)

    def test_remove_type(self, search_tc):
        search_tc.remove_type("User")
        assert search_tc.get_type_names() == ["Post"]
        assert not search_tc.has_type("User")

    def test_remove_other_types(self, search_tc):
        search_tc.remove_other_types(["User"])
        assert search_tc.get_type_names() == ["User"]

    def test_clear_types(self, search_tc):
        search_tc.clear_types()
        assert search_tc.get_types() == []

    def test_non_object_member_fails(self, sc, search_tc):
        sc.create_enum_tc("enum Flag { ON }")
        search_tc.add_type("Flag")
        with pytest.raises(InvalidArgumentError) as exc_info:
            search_tc.get_type()
        assert exc_info.value.type_name == "SearchResult"

    def test_unregistered_member_fails(self, search_tc):
        search_tc.add_type("Missing")
        with pytest.raises(UnknownTypeError):
            search_tc.get_type()

    def test_members_must_be_a_list(self, search_tc):
        with pytest.raises(InvalidArgumentError):
            search_tc.set_types("User")

    def test_clone_is_independent(self, search_tc):
        copy_tc = search_tc.clone("AnyResult")
        copy_tc.remove_type("Post")
        assert search_tc.get_type_names() == ["User", "Post"]

    def test_clone_without_name_fails(self, search_tc):
        with pytest.raises(InvalidArgumentError):
            search_tc.clone("")

    def test_resolve_type(self, search_tc):
        def resolve_type(obj, info, abstract_type):
            return "Post"

        search_tc.set_resolve_type(resolve_type)
        assert search_tc.get_type().resolve_type is resolve_type

    def test_get_composer_of_missing_member(self, sc, search_tc):
        with pytest.raises(NotFoundError):
            sc.get_composer("Comment")
