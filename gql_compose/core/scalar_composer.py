"""Scalar type composer."""

from typing import TYPE_CHECKING, Any, Callable

from graphql import GraphQLScalarType

from .composer import TypeComposer
from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from .scalars import ScalarHandler
    from .schema_composer import SchemaComposer


class ScalarTypeComposer(TypeComposer):
    """Mutable builder for a custom GraphQL scalar.

    Holds the serialize / parse functions graphql-core calls at execution
    time. Unset functions fall back to graphql-core's pass-through defaults.
    """

    kind = "scalar"
    graphql_class = GraphQLScalarType
    sdl_example = "scalar MyScalar"

    def __init__(
        self,
        name: str,
        sc: "SchemaComposer",
        serialize: Callable[[Any], Any] | None = None,
        parse_value: Callable[[Any], Any] | None = None,
        parse_literal: Callable[..., Any] | None = None,
        specified_by_url: str | None = None,
        description: str | None = None,
    ):
        super().__init__(name, sc, description)
        self._serialize = serialize
        self._parse_value = parse_value
        self._parse_literal = parse_literal
        self._specified_by_url = specified_by_url

    @classmethod
    def from_graphql_type(cls, gql_type: GraphQLScalarType, sc: "SchemaComposer") -> "ScalarTypeComposer":
        # Only carry functions overridden on the instance; class defaults stay implicit
        overrides = vars(gql_type)
        return cls(
            gql_type.name,
            sc,
            serialize=overrides.get("serialize"),
            parse_value=overrides.get("parse_value"),
            parse_literal=overrides.get("parse_literal"),
            specified_by_url=gql_type.specified_by_url,
            description=gql_type.description,
        )

    @classmethod
    def from_handler(cls, name: str, handler: "ScalarHandler", sc: "SchemaComposer") -> "ScalarTypeComposer":
        """Build an unregistered scalar composer from a scalar handler."""
        return cls(
            name,
            sc,
            serialize=handler.serialize,
            parse_value=handler.parse_value,
            specified_by_url=getattr(handler, "specified_by_url", None),
            description=getattr(handler, "description", None),
        )

    def get_serialize(self) -> Callable[[Any], Any] | None:
        return self._serialize

    def set_serialize(self, fn: Callable[[Any], Any] | None):
        self._serialize = fn
        self._touch()
        return self

    def get_parse_value(self) -> Callable[[Any], Any] | None:
        return self._parse_value

    def set_parse_value(self, fn: Callable[[Any], Any] | None):
        self._parse_value = fn
        self._touch()
        return self

    def get_parse_literal(self) -> Callable[..., Any] | None:
        return self._parse_literal

    def set_parse_literal(self, fn: Callable[..., Any] | None):
        self._parse_literal = fn
        self._touch()
        return self

    def get_specified_by_url(self) -> str | None:
        return self._specified_by_url

    def set_specified_by_url(self, url: str | None):
        self._specified_by_url = url
        self._touch()
        return self

    def clone(self, new_name: str) -> "ScalarTypeComposer":
        if not new_name:
            raise InvalidArgumentError("You should provide new type name for ScalarTypeComposer.clone()")
        return ScalarTypeComposer(
            new_name,
            self.sc,
            serialize=self._serialize,
            parse_value=self._parse_value,
            parse_literal=self._parse_literal,
            specified_by_url=self._specified_by_url,
            description=self._description,
        )

    def _build_shell(self):
        if self._parse_literal is not None and self._parse_value is None:
            raise InvalidArgumentError(
                "Scalar must provide 'parse_value' together with 'parse_literal'.",
                type_name=self._name,
            )
        gql_type = GraphQLScalarType(
            self._name,
            serialize=self._serialize,
            parse_value=self._parse_value,
            parse_literal=self._parse_literal,
            specified_by_url=self._specified_by_url,
            description=self._description,
        )
        return gql_type, None
