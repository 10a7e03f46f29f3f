"""Tests for materialization: cycles, caching, thunks and rollback."""

import logging

import pytest
from graphql import GraphQLList, GraphQLNonNull, GraphQLObjectType

from gql_compose import SchemaComposer
from gql_compose.core.errors import MaterializationError, UnknownTypeError
from gql_compose.core.registry import MaterializationStatus


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sc():
    return SchemaComposer()


@pytest.fixture
def pair(sc):
    """Two object composers that reference each other."""
    a_tc = sc.create_object_tc("A")
    b_tc = sc.create_object_tc("B")
    a_tc.add_fields({"b": b_tc, "name": "String"})
    b_tc.add_fields({"a": "[A!]"})
    return a_tc, b_tc


# =============================================================================
# Cycles
# =============================================================================


class TestCycles:
    """Tests for mutually and self-referencing types."""

    def test_mutual_references_terminate(self, pair):
        a_tc, b_tc = pair
        a_type = a_tc.get_type()
        b_type = a_type.fields["b"].type
        assert isinstance(b_type, GraphQLObjectType)
        assert b_type is b_tc.get_type()

        a_ref = b_type.fields["a"].type
        assert isinstance(a_ref, GraphQLList)
        assert isinstance(a_ref.of_type, GraphQLNonNull)
        assert a_ref.of_type.of_type is a_type

    def test_either_entry_point(self, pair):
        a_tc, b_tc = pair
        b_type = b_tc.get_type()
        a_type = a_tc.get_type()
        assert a_type.fields["b"].type is b_type
        assert b_type.fields["a"].type.of_type.of_type is a_type

    def test_self_reference(self, sc):
        node_tc = sc.create_object_tc("type TreeNode { value: Int children: [TreeNode!]! }")
        node_type = node_tc.get_type()
        assert node_type.fields["children"].type.of_type.of_type.of_type is node_type

    def test_cycle_through_thunks(self, sc):
        person_tc = sc.create_object_tc("Person")
        company_tc = sc.create_object_tc(
            {"name": "Company", "fields": {"ceo": lambda: person_tc}}
        )
        person_tc.set_field("employer", lambda: company_tc.as_non_null())
        company_type = company_tc.get_type()
        person_type = company_type.fields["ceo"].type
        assert person_type.fields["employer"].type.of_type is company_type

    def test_all_records_done_after_materialization(self, sc, pair):
        a_tc, b_tc = pair
        a_tc.get_type()
        for name, composer in (("A", a_tc), ("B", b_tc)):
            record = sc.registry.lookup_materialized(name, composer)
            assert record.status is MaterializationStatus.DONE


# =============================================================================
# Caching and invalidation
# =============================================================================


class TestCaching:
    """Tests for memoized materialization."""

    def test_same_object_until_mutation(self, pair):
        a_tc, _ = pair
        assert a_tc.get_type() is a_tc.get_type()

    def test_mutation_of_referenced_type_rebuilds_referrer(self, pair):
        a_tc, b_tc = pair
        before = a_tc.get_type()
        b_tc.add_fields({"extra": "Int"})
        after = a_tc.get_type()
        assert after is not before
        assert "extra" in after.fields["b"].type.fields

    def test_unrelated_mutation_keeps_snapshot(self, sc, pair):
        a_tc, b_tc = pair
        before = a_tc.get_type()
        sc.create_enum_tc("enum Color { RED }").add_fields({"BLUE": {}})
        assert a_tc.get_type() is before
        assert b_tc.get_type() is before.fields["b"].type

    def test_mutation_inside_cycle_rebuilds_both(self, pair):
        a_tc, b_tc = pair
        a_before = a_tc.get_type()
        b_before = b_tc.get_type()
        a_tc.add_fields({"extra": "Int"})
        b_after = b_tc.get_type()
        assert b_after is not b_before
        assert b_after.fields["a"].type.of_type.of_type is a_tc.get_type()
        assert a_tc.get_type() is not a_before

    def test_version_and_generation_advance(self, sc, pair):
        a_tc, _ = pair
        version = a_tc.version
        generation = sc.registry.generation
        a_tc.set_description("Letter A")
        assert a_tc.version == version + 1
        assert sc.registry.generation > generation

    def test_thunk_invoked_once(self, sc):
        calls = []
        user_tc = sc.create_object_tc("type User { id: ID }")

        def author_type():
            calls.append(1)
            return user_tc

        post_tc = sc.create_object_tc({"name": "Post", "fields": {"author": author_type}})
        post_tc.get_type()
        post_tc.add_fields({"title": "String"})
        post_tc.get_type()
        assert calls == [1]

    def test_thunks_not_invoked_at_registration(self, sc):
        calls = []
        sc.create_object_tc({"name": "Lazy", "fields": {"x": lambda: calls.append(1) or "Int"}})
        assert calls == []


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    """Tests for failing thunks and rollback."""

    def test_raising_thunk_names_type_and_field(self, sc):
        def broken():
            raise RuntimeError("boom")

        broken_tc = sc.create_object_tc({"name": "Broken", "fields": {"bad": broken}})
        with pytest.raises(MaterializationError) as exc_info:
            broken_tc.get_type()
        assert "boom" in str(exc_info.value)
        assert exc_info.value.type_name == "Broken"
        assert exc_info.value.field_name == "bad"

    def test_failed_pass_is_rolled_back(self, sc, caplog):
        def broken():
            raise RuntimeError("boom")

        a_tc = sc.create_object_tc("A")
        b_tc = sc.create_object_tc({"name": "B", "fields": {"bad": broken}})
        a_tc.add_fields({"b": b_tc})

        with caplog.at_level(logging.WARNING, logger="gql_compose.core.materializer"):
            with pytest.raises(MaterializationError) as exc_info:
                a_tc.get_type()
        assert exc_info.value.type_name == "B"
        assert sc.registry.lookup_materialized("A", a_tc) is None
        assert sc.registry.lookup_materialized("B", b_tc) is None
        assert "discarding 2" in caplog.text

    def test_failing_thunk_is_retried_on_next_request(self, sc):
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("not yet")
            return "String"

        flaky_tc = sc.create_object_tc({"name": "Flaky", "fields": {"x": flaky}})
        with pytest.raises(MaterializationError):
            flaky_tc.get_type()
        assert str(flaky_tc.get_type().fields["x"].type) == "String"
        assert len(attempts) == 2

    def test_thunk_returning_non_type(self, sc):
        odd_tc = sc.create_object_tc({"name": "Odd", "fields": {"x": lambda: 3.14}})
        with pytest.raises(MaterializationError) as exc_info:
            odd_tc.get_type()
        assert exc_info.value.field_name == "x"

    def test_unknown_reference_rolls_back(self, sc):
        a_tc = sc.create_object_tc({"name": "A", "fields": {"b": "Missing"}})
        with pytest.raises(UnknownTypeError):
            a_tc.get_type()
        assert sc.registry.lookup_materialized("A", a_tc) is None

    def test_recovers_after_fix(self, sc):
        a_tc = sc.create_object_tc({"name": "A", "fields": {"b": "Missing"}})
        with pytest.raises(UnknownTypeError):
            a_tc.get_type()
        sc.create_object_tc("type Missing { ok: Boolean }")
        assert a_tc.get_type().fields["b"].type.name == "Missing"
