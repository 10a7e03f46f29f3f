"""Interface type composer."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Callable

from graphql import GraphQLField, GraphQLInterfaceType

from .errors import InvalidArgumentError
from .object_composer import OutputFieldsComposer

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer


class InterfaceTypeComposer(OutputFieldsComposer):
    """Mutable builder for a GraphQL interface.

    Shares field, argument and interface handling with object composers and
    adds a ``resolve_type`` function choosing the concrete object type.
    """

    kind = "interface"
    graphql_class = GraphQLInterfaceType
    sdl_example = "interface MyInterface { name: String }"

    def __init__(
        self,
        name: str,
        sc: "SchemaComposer",
        fields: Mapping[str, Any] | None = None,
        interfaces: Iterable[Any] | None = None,
        resolve_type: Callable[..., Any] | None = None,
        description: str | None = None,
    ):
        super().__init__(name, sc, fields=fields, interfaces=interfaces, description=description)
        self._resolve_type = resolve_type

    @classmethod
    def from_graphql_type(
        cls, gql_type: GraphQLInterfaceType, sc: "SchemaComposer"
    ) -> "InterfaceTypeComposer":
        try:
            fields: dict[str, GraphQLField] = dict(gql_type.fields)
            interfaces = list(gql_type.interfaces)
        except Exception as error:
            raise InvalidArgumentError(
                f"Cannot import interface type '{gql_type.name}': {error}",
                type_name=gql_type.name,
            ) from error
        return cls(
            gql_type.name,
            sc,
            fields=fields,
            interfaces=interfaces,
            resolve_type=gql_type.resolve_type,
            description=gql_type.description,
        )

    def _clone_options(self) -> dict[str, Any]:
        return {**super()._clone_options(), "resolve_type": self._resolve_type}

    def get_resolve_type(self) -> Callable[..., Any] | None:
        return self._resolve_type

    def set_resolve_type(self, resolve_type: Callable[..., Any] | None):
        self._resolve_type = resolve_type
        self._touch()
        return self

    def _build_shell(self):
        fields: dict[str, GraphQLField] = {}
        interfaces: list = []
        gql_type = GraphQLInterfaceType(
            self._name,
            fields=lambda: fields,
            interfaces=lambda: interfaces,
            resolve_type=self._resolve_type,
            description=self._description,
        )
        return gql_type, self._complete_fields(fields, interfaces)
