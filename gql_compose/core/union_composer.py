"""Union type composer."""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Callable

from graphql import GraphQLObjectType, GraphQLUnionType

from .composer import TypeComposer, as_name_list, reference_name
from .configs import wrap_type_reference
from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer


class UnionTypeComposer(TypeComposer):
    """Mutable builder for a GraphQL union.

    Members are type references (names, object composers, graphql-core
    object types or thunks). ``set_types`` is the single full-replace
    primitive every other member mutation goes through.
    """

    kind = "union"
    graphql_class = GraphQLUnionType
    sdl_example = "union MyUnion = TypeA | TypeB"

    def __init__(
        self,
        name: str,
        sc: "SchemaComposer",
        types: Iterable[Any] | None = None,
        resolve_type: Callable[..., Any] | None = None,
        description: str | None = None,
    ):
        super().__init__(name, sc, description)
        self._types: list[Any] = self._coerce_types(types or [])
        self._resolve_type = resolve_type

    @classmethod
    def from_graphql_type(cls, gql_type: GraphQLUnionType, sc: "SchemaComposer") -> "UnionTypeComposer":
        try:
            types = list(gql_type.types)
        except Exception as error:
            raise InvalidArgumentError(
                f"Cannot import union type '{gql_type.name}': {error}", type_name=gql_type.name
            ) from error
        return cls(
            gql_type.name,
            sc,
            types=types,
            resolve_type=gql_type.resolve_type,
            description=gql_type.description,
        )

    def _coerce_types(self, types: Iterable[Any]) -> list[Any]:
        if isinstance(types, str):
            raise InvalidArgumentError("Union members must be given as a list.", type_name=self._name)
        return [wrap_type_reference(ref, f"member of union '{self._name}'") for ref in types]

    def _matches(self, ref: Any, member: Any) -> bool:
        name = reference_name(member)
        return ref is member or (name is not None and reference_name(ref) == name)

    def get_types(self) -> list[Any]:
        return list(self._types)

    def get_type_names(self) -> list[str]:
        return [name for name in map(reference_name, self._types) if name is not None]

    def has_type(self, member: Any) -> bool:
        return any(self._matches(ref, member) for ref in self._types)

    def set_types(self, types: Iterable[Any]):
        """Completely replace the member list."""
        self._types = self._coerce_types(types)
        self._touch()
        return self

    def add_type(self, member: Any):
        if self.has_type(member):
            return self
        return self.set_types([*self._types, member])

    def add_types(self, members: Iterable[Any]):
        new_members = [m for m in members if not self.has_type(m)]
        return self.set_types([*self._types, *new_members])

    def remove_type(self, member_or_names: Any):
        members = as_name_list(member_or_names) if isinstance(member_or_names, (str, list, tuple)) else [member_or_names]
        return self.set_types(
            [ref for ref in self._types if not any(self._matches(ref, m) for m in members)]
        )

    def remove_other_types(self, member_or_names: Any):
        members = as_name_list(member_or_names) if isinstance(member_or_names, (str, list, tuple)) else [member_or_names]
        return self.set_types(
            [ref for ref in self._types if any(self._matches(ref, m) for m in members)]
        )

    def clear_types(self):
        return self.set_types([])

    def get_resolve_type(self) -> Callable[..., Any] | None:
        return self._resolve_type

    def set_resolve_type(self, resolve_type: Callable[..., Any] | None):
        self._resolve_type = resolve_type
        self._touch()
        return self

    def clone(self, new_name: str) -> "UnionTypeComposer":
        if not new_name:
            raise InvalidArgumentError("You should provide new type name for UnionTypeComposer.clone()")
        return UnionTypeComposer(
            new_name,
            self.sc,
            types=list(self._types),
            resolve_type=self._resolve_type,
            description=self._description,
        )

    def _build_shell(self):
        types: list[GraphQLObjectType] = []
        gql_type = GraphQLUnionType(
            self._name,
            types=lambda: types,
            resolve_type=self._resolve_type,
            description=self._description,
        )

        def complete():
            types.extend(self.sc.normalizer.convert_union_types(self._types, self._name))

        return gql_type, complete
