"""Schema composer facade.

Owns one type registry together with the SDL parser, the field config
normalizer and the materializer that operate on it, and exposes the
composer factories plus schema assembly.

Example:
    sc = SchemaComposer()
    sc.create_enum_tc("enum Color { RED GREEN BLUE }")
    sc.create_object_tc('''
        type Query {
            favorite: Color
        }
    ''')
    schema = sc.build_schema()
"""

import logging
from typing import Any

from graphql import GraphQLNamedType, GraphQLObjectType, GraphQLSchema, GraphQLType

from .composer import TypeComposer
from .enum_composer import EnumTypeComposer
from .errors import InvalidArgumentError, NameConflictError, NotFoundError
from .input_composer import InputTypeComposer
from .interface_composer import InterfaceTypeComposer
from .materializer import Materializer
from .normalizer import FieldConfigNormalizer
from .object_composer import ObjectTypeComposer
from .registry import BUILTIN_SCALARS, TypeRegistry
from .scalar_composer import ScalarTypeComposer
from .scalars import ScalarHandler, default_scalar_handlers
from .sdl import SDLParser
from .union_composer import UnionTypeComposer

logger = logging.getLogger(__name__)

COMPOSER_CLASSES: tuple[type[TypeComposer], ...] = (
    ObjectTypeComposer,
    InputTypeComposer,
    EnumTypeComposer,
    InterfaceTypeComposer,
    UnionTypeComposer,
    ScalarTypeComposer,
)


class SchemaComposer:
    """Entry point for building a schema from mutable type composers.

    Args:
        registry: Registry to compose into; a fresh one by default.
        default_scalars: Register the DateTime, Date, UUID and JSON scalars.
    """

    def __init__(self, registry: TypeRegistry | None = None, default_scalars: bool = False):
        self.registry = registry if registry is not None else TypeRegistry()
        self.parser = SDLParser(self)
        self.normalizer = FieldConfigNormalizer(self)
        self.materializer = Materializer(self.registry)
        if default_scalars:
            self.add_default_scalars()

    # -------------------------------------------------------------------------
    # Composer factories
    # -------------------------------------------------------------------------

    def create_enum_tc(self, opts: Any) -> EnumTypeComposer:
        return EnumTypeComposer.create(opts, self)

    def create_object_tc(self, opts: Any) -> ObjectTypeComposer:
        return ObjectTypeComposer.create(opts, self)

    def create_input_tc(self, opts: Any) -> InputTypeComposer:
        return InputTypeComposer.create(opts, self)

    def create_interface_tc(self, opts: Any) -> InterfaceTypeComposer:
        return InterfaceTypeComposer.create(opts, self)

    def create_union_tc(self, opts: Any) -> UnionTypeComposer:
        return UnionTypeComposer.create(opts, self)

    def create_scalar_tc(self, opts: Any) -> ScalarTypeComposer:
        return ScalarTypeComposer.create(opts, self)

    def create_type(self, sdl: str) -> TypeComposer:
        """Build and register a composer of whatever kind the SDL defines."""
        return self.parser.create_type(sdl)

    def parse_types_from_string(self, sdl: str) -> dict[str, TypeComposer]:
        return self.parser.parse_types_from_string(sdl)

    def add_type_defs(self, sdl: str) -> list[str]:
        """Register every definition lazily; nothing is built until first read."""
        return self.parser.register_deferred(sdl)

    # -------------------------------------------------------------------------
    # Registry access
    # -------------------------------------------------------------------------

    def add(self, type_or_composer: TypeComposer | GraphQLNamedType) -> str:
        """Register a composer or graphql-core named type under its own name."""
        if isinstance(type_or_composer, TypeComposer):
            name = type_or_composer.get_type_name()
        elif isinstance(type_or_composer, GraphQLNamedType):
            name = type_or_composer.name
        else:
            raise InvalidArgumentError(
                f"Cannot add {type(type_or_composer).__name__}; expected a composer "
                "or a GraphQL named type."
            )
        self.registry.add(name, type_or_composer)
        return name

    def has(self, name: str) -> bool:
        return name in BUILTIN_SCALARS or self.registry.has(name)

    def get(self, name: str) -> GraphQLNamedType:
        """Return the materialized named type for a name."""
        gql_type = self.parser.get_named(name)
        if gql_type is None:
            raise NotFoundError(f"Type with name '{name}' does not exist.")
        return gql_type

    def get_composer(self, name: str) -> TypeComposer:
        """Return the composer for a name.

        A slot holding a plain graphql-core type is replaced by a composer
        built from it, so later edits go through the composer.
        """
        composer = self.registry.get_composer(name)
        if composer is not None:
            return composer
        gql_type = self.registry.get(name)
        if gql_type is None:
            raise NotFoundError(f"Type with name '{name}' does not exist.")
        composer = self._composer_from_graphql_type(gql_type)
        self.registry.set(name, composer)
        return composer

    def _composer_from_graphql_type(self, gql_type: GraphQLNamedType) -> TypeComposer:
        for composer_class in COMPOSER_CLASSES:
            if isinstance(gql_type, composer_class.graphql_class):
                return composer_class.from_graphql_type(gql_type, self)
        raise InvalidArgumentError(
            f"Cannot build a composer for {type(gql_type).__name__} '{gql_type.name}'."
        )

    def remove(self, name: str):
        self.registry.remove(name)

    def get_wrapped(self, type_string: str) -> GraphQLType:
        return self.parser.get_wrapped(type_string)

    def type_names(self) -> list[str]:
        return self.registry.names()

    # -------------------------------------------------------------------------
    # Scalars
    # -------------------------------------------------------------------------

    def add_scalar_handler(self, name: str, handler: ScalarHandler) -> ScalarTypeComposer:
        """Register a custom scalar backed by a handler object."""
        if not isinstance(handler, ScalarHandler):
            raise InvalidArgumentError(
                f"Scalar handler for '{name}' must provide description, serialize "
                "and parse_value."
            )
        composer = ScalarTypeComposer.from_handler(name, handler, self)
        self.add(composer)
        return composer

    def add_default_scalars(self) -> list[str]:
        """Register the built-in custom scalars that are not yet defined."""
        added = []
        for name, handler in default_scalar_handlers().items():
            if not self.registry.has(name):
                self.add_scalar_handler(name, handler)
                added.append(name)
        return added

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    def _root_type(self, name: str | None, *, required: bool) -> GraphQLObjectType | None:
        if not name or not self.registry.has(name):
            if required:
                raise NotFoundError(f"Cannot build schema: root type '{name}' is not registered.")
            return None
        gql_type = self.registry.get(name)
        if not isinstance(gql_type, GraphQLObjectType):
            raise InvalidArgumentError(
                f"Root type '{name}' must be an object type.", type_name=name
            )
        return gql_type

    def build_schema(
        self,
        query: str = "Query",
        mutation: str | None = "Mutation",
        subscription: str | None = None,
    ) -> GraphQLSchema:
        """Materialize every registered type and assemble a GraphQLSchema.

        Raises:
            NotFoundError: The query root type is not registered.
            NameConflictError: Two distinct types share a name.
        """
        query_type = self._root_type(query, required=True)
        mutation_type = self._root_type(mutation, required=False)
        subscription_type = self._root_type(subscription, required=False)
        types = [self.registry.get(name) for name in self.registry.names()]
        try:
            schema = GraphQLSchema(
                query=query_type,
                mutation=mutation_type,
                subscription=subscription_type,
                types=types,
            )
        except TypeError as error:
            raise NameConflictError(f"Cannot build schema: {error}") from error
        logger.debug("Built schema with %d registered type(s)", len(types))
        return schema
