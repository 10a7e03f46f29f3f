"""Input object type composer."""

from typing import TYPE_CHECKING, Any

from graphql import GraphQLInputField, GraphQLInputObjectType

from .composer import TypedFieldMapComposer
from .configs import InputFieldConfig, coerce_input_field

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer


class InputTypeComposer(TypedFieldMapComposer):
    """Mutable builder for a GraphQL input object.

    Input fields carry a type and an optional default value; they have no
    arguments and no resolvers.
    """

    kind = "input"
    graphql_class = GraphQLInputObjectType
    sdl_example = "input MyInput { name: String! }"

    def _coerce_entry(self, name: str, raw: Any) -> InputFieldConfig:
        return coerce_input_field(name, raw)

    @classmethod
    def from_graphql_type(
        cls, gql_type: GraphQLInputObjectType, sc: "SchemaComposer"
    ) -> "InputTypeComposer":
        return cls(gql_type.name, sc, fields=dict(gql_type.fields), description=gql_type.description)

    def get_field_type(self, name: str):
        """Return the materialized type of an input field."""
        field = self.sc.normalizer.convert_input_field_config(
            self.get_field(name), name, self._name
        )
        return field.type

    def _build_shell(self):
        fields: dict[str, GraphQLInputField] = {}
        gql_type = GraphQLInputObjectType(
            self._name, fields=lambda: fields, description=self._description
        )

        def complete():
            fields.update(
                self.sc.normalizer.convert_input_field_config_map(self._fields, self._name)
            )

        return gql_type, complete
