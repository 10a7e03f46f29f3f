"""Object type composer and the output-field behaviour it shares with interfaces."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Callable

from graphql import GraphQLField, GraphQLObjectType

from .composer import TypedFieldMapComposer, as_name_list, reference_name
from .configs import ArgumentConfig, FieldConfig, coerce_field, wrap_type_reference
from .errors import InvalidArgumentError, NotFoundError

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer


class OutputFieldsComposer(TypedFieldMapComposer):
    """Composer over output fields with arguments, plus implemented interfaces."""

    def __init__(
        self,
        name: str,
        sc: "SchemaComposer",
        fields: Mapping[str, Any] | None = None,
        interfaces: Iterable[Any] | None = None,
        description: str | None = None,
    ):
        super().__init__(name, sc, fields=fields, description=description)
        self._interfaces: list[Any] = self._coerce_interfaces(interfaces or [])

    def _coerce_entry(self, name: str, raw: Any) -> FieldConfig:
        return coerce_field(name, raw)

    def _clone_options(self) -> dict[str, Any]:
        return {"interfaces": list(self._interfaces)}

    # -------------------------------------------------------------------------
    # Field types and args
    # -------------------------------------------------------------------------

    def get_field_type(self, name: str):
        """Return the materialized type of a field."""
        field = self.sc.normalizer.convert_output_field_config(
            self.get_field(name), name, self._name
        )
        return field.type

    def get_field_args(self, name: str) -> dict[str, ArgumentConfig]:
        return dict(self.get_field(name).args)

    def has_field_arg(self, name: str, arg_name: str) -> bool:
        return self.has_field(name) and arg_name in self._fields[name].args

    def get_field_arg(self, name: str, arg_name: str) -> ArgumentConfig:
        args = self.get_field(name).args
        if arg_name not in args:
            raise NotFoundError(
                f"Cannot get arg '{arg_name}' for field '{name}' in type '{self._name}'. "
                "Argument does not exist."
            )
        return args[arg_name]

    def set_field_args(self, name: str, args: Mapping[str, Any]):
        return self.extend_field(name, args=dict(args))

    def add_field_args(self, name: str, new_args: Mapping[str, Any]):
        return self.set_field_args(name, {**self.get_field(name).args, **new_args})

    def remove_field_arg(self, name: str, arg_name_or_names: str | Iterable[str]):
        names = set(as_name_list(arg_name_or_names))
        args = self.get_field(name).args
        return self.set_field_args(name, {k: v for k, v in args.items() if k not in names})

    # -------------------------------------------------------------------------
    # Interfaces
    # -------------------------------------------------------------------------

    def _coerce_interfaces(self, interfaces: Iterable[Any]) -> list[Any]:
        if isinstance(interfaces, (str, Mapping)):
            raise InvalidArgumentError(
                "Interfaces must be given as a list.", type_name=self._name
            )
        return [wrap_type_reference(ref, f"interface of '{self._name}'") for ref in interfaces]

    def get_interfaces(self) -> list[Any]:
        return list(self._interfaces)

    def set_interfaces(self, interfaces: Iterable[Any]):
        self._interfaces = self._coerce_interfaces(interfaces)
        self._touch()
        return self

    def has_interface(self, interface: Any) -> bool:
        name = reference_name(interface)
        return any(
            ref is interface or (name is not None and reference_name(ref) == name)
            for ref in self._interfaces
        )

    def add_interface(self, interface: Any):
        if self.has_interface(interface):
            return self
        return self.set_interfaces([*self._interfaces, interface])

    def remove_interface(self, interface: Any):
        name = reference_name(interface)
        return self.set_interfaces(
            [
                ref
                for ref in self._interfaces
                if not (ref is interface or (name is not None and reference_name(ref) == name))
            ]
        )

    def _complete_fields(self, fields: dict, interfaces: list) -> Callable[[], None]:
        def complete():
            normalizer = self.sc.normalizer
            fields.update(normalizer.convert_output_field_config_map(self._fields, self._name))
            interfaces.extend(normalizer.convert_interfaces(self._interfaces, self._name))

        return complete


class ObjectTypeComposer(OutputFieldsComposer):
    """Mutable builder for a GraphQL object type.

    Fields are ``FieldConfig`` objects whose ``type`` may be a wrapped-type
    string, another composer, a graphql-core type or a thunk, so composers
    can reference each other before either is materialized.

    Example:
        user_tc = sc.create_object_tc("type User { id: ID! name: String }")
        post_tc = sc.create_object_tc({
            "name": "Post",
            "fields": {"title": "String", "author": lambda: user_tc},
        })
        user_tc.set_field("posts", {"type": "[Post!]", "resolve": load_posts})
    """

    kind = "object"
    graphql_class = GraphQLObjectType
    sdl_example = "type MyType { name: String }"

    def __init__(
        self,
        name: str,
        sc: "SchemaComposer",
        fields: Mapping[str, Any] | None = None,
        interfaces: Iterable[Any] | None = None,
        is_type_of: Callable[..., Any] | None = None,
        description: str | None = None,
    ):
        super().__init__(name, sc, fields=fields, interfaces=interfaces, description=description)
        self._is_type_of = is_type_of

    @classmethod
    def from_graphql_type(cls, gql_type: GraphQLObjectType, sc: "SchemaComposer") -> "ObjectTypeComposer":
        try:
            fields: dict[str, GraphQLField] = dict(gql_type.fields)
            interfaces = list(gql_type.interfaces)
        except Exception as error:
            raise InvalidArgumentError(
                f"Cannot import object type '{gql_type.name}': {error}", type_name=gql_type.name
            ) from error
        return cls(
            gql_type.name,
            sc,
            fields=fields,
            interfaces=interfaces,
            is_type_of=gql_type.is_type_of,
            description=gql_type.description,
        )

    def _clone_options(self) -> dict[str, Any]:
        return {**super()._clone_options(), "is_type_of": self._is_type_of}

    def get_is_type_of(self) -> Callable[..., Any] | None:
        return self._is_type_of

    def set_is_type_of(self, is_type_of: Callable[..., Any] | None):
        self._is_type_of = is_type_of
        self._touch()
        return self

    def _build_shell(self):
        fields: dict[str, GraphQLField] = {}
        interfaces: list = []
        gql_type = GraphQLObjectType(
            self._name,
            fields=lambda: fields,
            interfaces=lambda: interfaces,
            is_type_of=self._is_type_of,
            description=self._description,
        )
        return gql_type, self._complete_fields(fields, interfaces)

