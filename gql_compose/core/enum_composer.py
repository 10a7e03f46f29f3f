"""Enum type composer."""

from typing import TYPE_CHECKING, Any

from graphql import GraphQLEnumType, GraphQLEnumValue

from .composer import FieldMapComposer
from .configs import EnumValueConfig, coerce_enum_value

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer


class EnumTypeComposer(FieldMapComposer):
    """Mutable builder for a GraphQL enum.

    Values are ``EnumValueConfig`` objects keyed by value name. Each value
    carries an internal ``value`` that defaults to its name.

    Example:
        color_tc = sc.create_enum_tc("enum Color { RED GREEN BLUE }")
        color_tc.deprecate_fields("RED")
        color_tc.get_field("RED").deprecation_reason  # "deprecated"
    """

    kind = "enum"
    entry_label = "value"
    graphql_class = GraphQLEnumType
    sdl_example = "enum MyType { KEY1 KEY2 KEY3 }"

    def _coerce_entry(self, name: str, raw: Any) -> EnumValueConfig:
        return coerce_enum_value(name, raw)

    @classmethod
    def from_config(cls, config, sc: "SchemaComposer") -> "EnumTypeComposer":
        options = dict(config)
        if "values" in options:
            options["fields"] = options.pop("values")
        return super().from_config(options, sc)

    @classmethod
    def from_graphql_type(cls, gql_type: GraphQLEnumType, sc: "SchemaComposer") -> "EnumTypeComposer":
        return cls(
            gql_type.name,
            sc,
            fields=dict(gql_type.values),
            description=gql_type.description,
        )

    def get_value_lookup(self) -> dict[Any, str]:
        """Map internal values back to value names; the first name wins."""

        def build() -> dict[Any, str]:
            lookup: dict[Any, str] = {}
            for name, config in self._fields.items():
                try:
                    lookup.setdefault(config.value, name)
                except TypeError:
                    pass  # unhashable internal values cannot be looked up
            return lookup

        return dict(self._derived_view("value_lookup", build))

    def _build_shell(self):
        values = {
            name: GraphQLEnumValue(
                config.value,
                description=config.description,
                deprecation_reason=config.deprecation_reason,
                extensions=dict(config.extensions),
            )
            for name, config in self._fields.items()
        }
        gql_type = GraphQLEnumType(self._name, values, description=self._description)
        return gql_type, None
