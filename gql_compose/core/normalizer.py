"""Conversion of composer-level configs into graphql-core configs.

Every ``convert_*`` function accepts a config whose ``type`` slot may be a
wrapped-type string, a composer, a graphql-core type or a thunk, and returns
the graphql-core object with a fully resolved type. Field, argument and type
names are only used to annotate errors.
"""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLInputField,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLType,
    is_input_type,
    is_output_type,
)

from .composer import TypeComposer
from .configs import ListOf, NonNullOf, Thunk, coerce_arg, coerce_field, coerce_input_field
from .errors import ComposeError, InvalidArgumentError, MaterializationError

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer


class FieldConfigNormalizer:
    """Resolves type references and converts configs for graphql-core."""

    def __init__(self, sc: "SchemaComposer"):
        self.sc = sc

    def resolve_type(self, ref: Any) -> GraphQLType:
        """Resolve any type reference into a graphql-core type.

        Strings go through the wrapped-type resolver, composers through the
        materializer, and thunks are invoked and their result resolved again.
        A graphql-core type that was materialized from a composer is swapped
        for that composer's current snapshot, so a type handed out earlier
        never ends up next to a rebuilt copy of itself.
        """
        if isinstance(ref, GraphQLType):
            return self._refresh(ref)
        if isinstance(ref, str):
            return self.sc.parser.get_wrapped(ref)
        if isinstance(ref, TypeComposer):
            return ref.get_type()
        if isinstance(ref, NonNullOf):
            inner = self.resolve_type(ref.of_type)
            return inner if isinstance(inner, GraphQLNonNull) else GraphQLNonNull(inner)
        if isinstance(ref, ListOf):
            return GraphQLList(self.resolve_type(ref.of_type))
        if callable(ref):
            return self.resolve_type(self._invoke_thunk(ref))
        raise InvalidArgumentError(
            f"Invalid type reference {type(ref).__name__}. Expected a type name "
            "string, composer, GraphQL type or thunk."
        )

    def _refresh(self, gql_type: GraphQLType) -> GraphQLType:
        if isinstance(gql_type, GraphQLNonNull):
            inner = self._refresh(gql_type.of_type)
            return gql_type if inner is gql_type.of_type else GraphQLNonNull(inner)
        if isinstance(gql_type, GraphQLList):
            inner = self._refresh(gql_type.of_type)
            return gql_type if inner is gql_type.of_type else GraphQLList(inner)
        producer = self.sc.registry.producer_of(gql_type)
        return gql_type if producer is None else producer.get_type()

    @staticmethod
    def _invoke_thunk(thunk: Any) -> Any:
        try:
            value = thunk()
        except MaterializationError:
            raise
        except Exception as error:
            raise MaterializationError(
                f"Type thunk raised {error.__class__.__name__}: {error}"
            ) from error
        if not (isinstance(value, (str, GraphQLType, TypeComposer, Thunk, NonNullOf, ListOf)) or callable(value)):
            raise MaterializationError(
                f"Type thunk resolved to {type(value).__name__}, which is not a type."
            )
        return value

    def _resolve_output_type(self, ref: Any) -> GraphQLType:
        gql_type = self.resolve_type(ref)
        if not is_output_type(gql_type):
            raise InvalidArgumentError(f"Type '{gql_type}' is not an output type.")
        return gql_type

    def _resolve_input_type(self, ref: Any) -> GraphQLType:
        gql_type = self.resolve_type(ref)
        if not is_input_type(gql_type):
            raise InvalidArgumentError(f"Type '{gql_type}' is not an input type.")
        return gql_type

    # -------------------------------------------------------------------------
    # Output fields
    # -------------------------------------------------------------------------

    def convert_output_field_config(
        self, config: Any, field_name: str = "", type_name: str = ""
    ) -> GraphQLField:
        try:
            field = coerce_field(field_name or "<anonymous>", config)
            gql_type = self._resolve_output_type(field.type)
            args = self.convert_arg_config_map(field.args, field_name, type_name)
        except ComposeError as error:
            error.add_context(type_name=type_name, field_name=field_name)
            raise
        return GraphQLField(
            gql_type,
            args=args,
            resolve=field.resolve,
            description=field.description,
            deprecation_reason=field.deprecation_reason,
            extensions=dict(field.extensions),
        )

    def convert_output_field_config_map(
        self, fields: Mapping[str, Any], type_name: str = ""
    ) -> dict[str, GraphQLField]:
        return {
            name: self.convert_output_field_config(config, name, type_name)
            for name, config in _as_mapping(fields, type_name).items()
        }

    # -------------------------------------------------------------------------
    # Arguments
    # -------------------------------------------------------------------------

    def convert_arg_config(
        self, config: Any, arg_name: str = "", field_name: str = "", type_name: str = ""
    ) -> GraphQLArgument:
        try:
            arg = coerce_arg(arg_name or "<anonymous>", config)
            gql_type = self._resolve_input_type(arg.type)
        except ComposeError as error:
            error.add_context(type_name=type_name, field_name=field_name, arg_name=arg_name)
            raise
        return GraphQLArgument(
            gql_type,
            default_value=arg.default_value,
            description=arg.description,
            deprecation_reason=arg.deprecation_reason,
            extensions=dict(arg.extensions),
        )

    def convert_arg_config_map(
        self, args: Mapping[str, Any], field_name: str = "", type_name: str = ""
    ) -> dict[str, GraphQLArgument]:
        return {
            name: self.convert_arg_config(config, name, field_name, type_name)
            for name, config in _as_mapping(args, type_name).items()
        }

    # -------------------------------------------------------------------------
    # Input fields
    # -------------------------------------------------------------------------

    def convert_input_field_config(
        self, config: Any, field_name: str = "", type_name: str = ""
    ) -> GraphQLInputField:
        try:
            field = coerce_input_field(field_name or "<anonymous>", config)
            gql_type = self._resolve_input_type(field.type)
        except ComposeError as error:
            error.add_context(type_name=type_name, field_name=field_name)
            raise
        return GraphQLInputField(
            gql_type,
            default_value=field.default_value,
            description=field.description,
            deprecation_reason=field.deprecation_reason,
            extensions=dict(field.extensions),
        )

    def convert_input_field_config_map(
        self, fields: Mapping[str, Any], type_name: str = ""
    ) -> dict[str, GraphQLInputField]:
        return {
            name: self.convert_input_field_config(config, name, type_name)
            for name, config in _as_mapping(fields, type_name).items()
        }

    # -------------------------------------------------------------------------
    # Named type lists
    # -------------------------------------------------------------------------

    def convert_output_type(self, ref: Any) -> GraphQLObjectType:
        """Resolve a reference that must point at an object type."""
        gql_type = self.resolve_type(ref)
        if not isinstance(gql_type, GraphQLObjectType):
            raise InvalidArgumentError(f"Type '{gql_type}' is not an object type.")
        return gql_type

    def convert_interfaces(self, refs: Iterable[Any], type_name: str = "") -> list[GraphQLInterfaceType]:
        interfaces = []
        for ref in refs:
            try:
                gql_type = self.resolve_type(ref)
                if not isinstance(gql_type, GraphQLInterfaceType):
                    raise InvalidArgumentError(f"Type '{gql_type}' is not an interface type.")
            except ComposeError as error:
                error.add_context(type_name=type_name)
                raise
            interfaces.append(gql_type)
        return interfaces

    def convert_union_types(self, refs: Iterable[Any], type_name: str = "") -> list[GraphQLObjectType]:
        types = []
        for ref in refs:
            try:
                gql_type = self.convert_output_type(ref)
            except ComposeError as error:
                error.add_context(type_name=type_name)
                raise
            types.append(gql_type)
        return types


def _as_mapping(value: Any, type_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidArgumentError(
            f"Expected a config mapping, got {type(value).__name__}.", type_name=type_name or None
        )
    return value
