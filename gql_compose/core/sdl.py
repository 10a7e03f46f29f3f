"""SDL fragment parser using graphql-core.

Turns schema-definition-language fragments into composers and resolves
wrapped-type strings (``Type``, ``Type!``, ``[Type]``, ``[Type!]!``) against
the built-in scalars and the registry.
"""

import logging
from typing import TYPE_CHECKING, Any

from graphql import (
    DefinitionNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    GraphQLDeprecatedDirective,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLSpecifiedByDirective,
    GraphQLSyntaxError,
    GraphQLType,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    ScalarTypeExtensionNode,
    TypeDefinitionNode,
    TypeExtensionNode,
    TypeNode,
    Undefined,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    parse,
    parse_type,
    value_from_ast_untyped,
)
from graphql.execution.values import get_directive_values

from .composer import TypeComposer
from .configs import ArgumentConfig, EnumValueConfig, FieldConfig, InputFieldConfig, Thunk
from .enum_composer import EnumTypeComposer
from .errors import (
    InvalidArgumentError,
    NameConflictError,
    NotFoundError,
    ParseError,
    UnknownTypeError,
)
from .input_composer import InputTypeComposer
from .interface_composer import InterfaceTypeComposer
from .object_composer import ObjectTypeComposer
from .registry import BUILTIN_SCALARS
from .scalar_composer import ScalarTypeComposer
from .union_composer import UnionTypeComposer

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer

logger = logging.getLogger(__name__)

EXTENSION_TARGETS: dict[type, type] = {
    ObjectTypeExtensionNode: ObjectTypeComposer,
    InputObjectTypeExtensionNode: InputTypeComposer,
    EnumTypeExtensionNode: EnumTypeComposer,
    InterfaceTypeExtensionNode: InterfaceTypeComposer,
    UnionTypeExtensionNode: UnionTypeComposer,
    ScalarTypeExtensionNode: ScalarTypeComposer,
}

DEFINITION_TARGETS: dict[type, type] = {
    ObjectTypeDefinitionNode: ObjectTypeComposer,
    InputObjectTypeDefinitionNode: InputTypeComposer,
    EnumTypeDefinitionNode: EnumTypeComposer,
    InterfaceTypeDefinitionNode: InterfaceTypeComposer,
    UnionTypeDefinitionNode: UnionTypeComposer,
    ScalarTypeDefinitionNode: ScalarTypeComposer,
}


def type_node_to_string(type_node: TypeNode) -> str:
    """Render a type node back into its wrapped-type string, e.g. ``[Int!]!``."""
    if isinstance(type_node, NonNullTypeNode):
        return f"{type_node_to_string(type_node.type)}!"
    if isinstance(type_node, ListTypeNode):
        return f"[{type_node_to_string(type_node.type)}]"
    if not isinstance(type_node, NamedTypeNode):
        raise ParseError(f"Expected a type node, got {type(type_node).__name__}.")
    return type_node.name.value


def _description(node: Any) -> str | None:
    return node.description.value if node.description else None


def _deprecation_reason(node: Any) -> str | None:
    deprecated = get_directive_values(GraphQLDeprecatedDirective, node)
    return deprecated["reason"] if deprecated else None


class SDLParser:
    """Builds composers from SDL and resolves wrapped-type strings."""

    def __init__(self, sc: "SchemaComposer"):
        self.sc = sc

    @property
    def registry(self):
        return self.sc.registry

    # -------------------------------------------------------------------------
    # Wrapped-type strings
    # -------------------------------------------------------------------------

    def get_named(self, name: str) -> GraphQLNamedType | None:
        """Resolve a bare type name; built-in scalars never hit the registry."""
        builtin = BUILTIN_SCALARS.get(name)
        if builtin is not None:
            return builtin
        return self.registry.get(name)

    def get_wrapped(self, type_string: str) -> GraphQLType:
        """Resolve a wrapped-type string into a graphql-core type.

        Raises:
            ParseError: The string is not a valid type reference.
            UnknownTypeError: The innermost name is not a known type.
        """
        if not isinstance(type_string, str):
            raise InvalidArgumentError(
                f"Expected a type string, got {type(type_string).__name__}."
            )
        try:
            type_node = parse_type(type_string, no_location=True)
        except GraphQLSyntaxError as error:
            raise ParseError(f"Cannot parse type string '{type_string}': {error.message}") from error
        return self._type_from_node(type_node, type_string)

    def _type_from_node(self, type_node: TypeNode, source: str) -> GraphQLType:
        # Unwrap outer-to-inner, re-wrap on the way back out
        if isinstance(type_node, NonNullTypeNode):
            return GraphQLNonNull(self._type_from_node(type_node.type, source))
        if isinstance(type_node, ListTypeNode):
            return GraphQLList(self._type_from_node(type_node.type, source))
        name = type_node.name.value
        named = self.get_named(name)
        if named is None:
            raise UnknownTypeError(f"Cannot resolve type '{name}' referenced by '{source}'.")
        return named

    # -------------------------------------------------------------------------
    # Definitions
    # -------------------------------------------------------------------------

    def parse_definitions(self, sdl: str) -> list[DefinitionNode]:
        """Parse an SDL document into its definition nodes."""
        if not isinstance(sdl, str):
            raise ParseError(f"Expected an SDL string, got {type(sdl).__name__}.")
        try:
            document = parse(sdl, no_location=True)
        except GraphQLSyntaxError as error:
            raise ParseError(f"Cannot parse SDL: {error.message}") from error
        return list(document.definitions)

    def _parse_single_definition(self, sdl: str) -> TypeDefinitionNode:
        definitions = self.parse_definitions(sdl)
        if len(definitions) != 1:
            raise ParseError(
                f"Expected exactly one type definition, got {len(definitions)}."
            )
        node = definitions[0]
        if not isinstance(node, TypeDefinitionNode):
            raise ParseError(
                f"Unsupported definition kind '{node.kind}'. Expected one of "
                "type, input, enum, interface, union or scalar."
            )
        return node

    def build_composer_from_sdl(self, sdl: str) -> TypeComposer:
        """Build a composer from a single-definition fragment without registering it."""
        node = self._parse_single_definition(sdl)
        if node.name.value in BUILTIN_SCALARS:
            raise NameConflictError(
                f"Cannot redefine built-in scalar type '{node.name.value}'."
            )
        return self.build_composer(node)

    def create_type(self, sdl: str) -> TypeComposer:
        """Parse one definition, register its composer and return it."""
        composer = self.build_composer_from_sdl(sdl)
        self.registry.add(composer.get_type_name(), composer)
        return composer

    def parse_types_from_string(self, sdl: str) -> dict[str, TypeComposer]:
        """Build and register every definition of a document.

        ``extend`` definitions are merged into registered composers after all
        plain definitions have been registered. The whole document is checked
        first, so a conflicting name or a bad extension target registers
        nothing.
        """
        type_nodes, extensions = self._split_document(self.parse_definitions(sdl))
        composers = {name: self.build_composer(node) for name, node in type_nodes.items()}
        for name, composer in composers.items():
            self.registry.add(name, composer)
        for node in extensions:
            self.apply_extension(node)
        logger.debug("Parsed %d type(s) and %d extension(s)", len(composers), len(extensions))
        return composers

    def register_deferred(self, sdl: str) -> list[str]:
        """Register definitions lazily; each is built on its first read."""
        type_nodes, extensions = self._split_document(self.parse_definitions(sdl))
        for name, node in type_nodes.items():
            self.registry.add(name, Thunk(lambda node=node: self.build_composer(node)))
        for node in extensions:
            self.apply_extension(node)
        return list(type_nodes)

    def _split_document(
        self, definitions: list[DefinitionNode]
    ) -> tuple[dict[str, TypeDefinitionNode], list[TypeExtensionNode]]:
        """Separate definitions from extensions and reject conflicts up front."""
        type_nodes: dict[str, TypeDefinitionNode] = {}
        extensions: list[TypeExtensionNode] = []
        for node in definitions:
            if isinstance(node, TypeExtensionNode):
                extensions.append(node)
            elif isinstance(node, TypeDefinitionNode):
                name = node.name.value
                if name in BUILTIN_SCALARS:
                    raise NameConflictError(f"Cannot redefine built-in scalar type '{name}'.")
                if name in type_nodes:
                    raise NameConflictError(f"Type '{name}' is defined more than once.")
                if self.registry.has(name):
                    raise NameConflictError(f"Type '{name}' is already registered.")
                type_nodes[name] = node
            else:
                raise ParseError(f"Unsupported definition kind '{node.kind}'.")
        for node in extensions:
            self._check_extension_target(node, type_nodes)
        return type_nodes, extensions

    def _check_extension_target(
        self, node: TypeExtensionNode, type_nodes: dict[str, TypeDefinitionNode]
    ):
        name = node.name.value
        if name in type_nodes:
            target_class = DEFINITION_TARGETS[type(type_nodes[name])]
        else:
            composer = self.registry.get_composer(name)
            if composer is None:
                raise NotFoundError(f"Cannot extend type '{name}': it is not registered.")
            target_class = type(composer)
        if not issubclass(target_class, EXTENSION_TARGETS[type(node)]):
            raise InvalidArgumentError(
                f"Cannot apply {node.kind} to {target_class.kind} type '{name}'.",
                type_name=name,
            )

    def apply_extension(self, node: TypeExtensionNode) -> TypeComposer:
        """Merge an ``extend`` definition into its registered composer."""
        name = node.name.value
        composer = self.registry.get_composer(name)
        if composer is None:
            raise NotFoundError(f"Cannot extend type '{name}': it is not registered.")
        expected = EXTENSION_TARGETS[type(node)]
        if not isinstance(composer, expected):
            raise InvalidArgumentError(
                f"Cannot apply {node.kind} to {composer.kind} type '{name}'.",
                type_name=name,
            )
        if isinstance(node, (ObjectTypeExtensionNode, InterfaceTypeExtensionNode)):
            composer.add_fields(self._build_output_fields(node.fields))
            for interface in node.interfaces or ():
                composer.add_interface(interface.name.value)
        elif isinstance(node, InputObjectTypeExtensionNode):
            composer.add_fields(self._build_input_fields(node.fields))
        elif isinstance(node, EnumTypeExtensionNode):
            composer.add_fields(self._build_enum_values(node.values))
        elif isinstance(node, UnionTypeExtensionNode):
            composer.add_types([t.name.value for t in node.types or ()])
        logger.debug("Extended %s type '%s'", composer.kind, name)
        return composer

    def build_composer(self, node: TypeDefinitionNode) -> TypeComposer:
        """Build an unregistered composer from a definition node."""
        name = node.name.value
        if isinstance(node, ScalarTypeDefinitionNode):
            specified_by = get_directive_values(GraphQLSpecifiedByDirective, node)
            return ScalarTypeComposer(
                name,
                self.sc,
                specified_by_url=specified_by["url"] if specified_by else None,
                description=_description(node),
            )
        if isinstance(node, EnumTypeDefinitionNode):
            return EnumTypeComposer(
                name,
                self.sc,
                fields=self._build_enum_values(node.values),
                description=_description(node),
            )
        if isinstance(node, ObjectTypeDefinitionNode):
            return ObjectTypeComposer(
                name,
                self.sc,
                fields=self._build_output_fields(node.fields),
                interfaces=[i.name.value for i in node.interfaces or ()],
                description=_description(node),
            )
        if isinstance(node, InterfaceTypeDefinitionNode):
            return InterfaceTypeComposer(
                name,
                self.sc,
                fields=self._build_output_fields(node.fields),
                interfaces=[i.name.value for i in node.interfaces or ()],
                description=_description(node),
            )
        if isinstance(node, UnionTypeDefinitionNode):
            return UnionTypeComposer(
                name,
                self.sc,
                types=[t.name.value for t in node.types or ()],
                description=_description(node),
            )
        if isinstance(node, InputObjectTypeDefinitionNode):
            return InputTypeComposer(
                name,
                self.sc,
                fields=self._build_input_fields(node.fields),
                description=_description(node),
            )
        raise ParseError(f"Unsupported definition kind '{node.kind}'.")

    @staticmethod
    def _build_enum_values(value_nodes) -> dict[str, EnumValueConfig]:
        return {
            node.name.value: EnumValueConfig(
                value=node.name.value,
                description=_description(node),
                deprecation_reason=_deprecation_reason(node),
            )
            for node in value_nodes or ()
        }

    @staticmethod
    def _build_args(arg_nodes) -> dict[str, ArgumentConfig]:
        return {
            node.name.value: ArgumentConfig(
                type=type_node_to_string(node.type),
                default_value=value_from_ast_untyped(node.default_value)
                if node.default_value
                else Undefined,
                description=_description(node),
                deprecation_reason=_deprecation_reason(node),
            )
            for node in arg_nodes or ()
        }

    def _build_output_fields(self, field_nodes) -> dict[str, FieldConfig]:
        return {
            node.name.value: FieldConfig(
                type=type_node_to_string(node.type),
                args=self._build_args(node.arguments),
                description=_description(node),
                deprecation_reason=_deprecation_reason(node),
            )
            for node in field_nodes or ()
        }

    @staticmethod
    def _build_input_fields(field_nodes) -> dict[str, InputFieldConfig]:
        return {
            node.name.value: InputFieldConfig(
                type=type_node_to_string(node.type),
                default_value=value_from_ast_untyped(node.default_value)
                if node.default_value
                else Undefined,
                description=_description(node),
                deprecation_reason=_deprecation_reason(node),
            )
            for node in field_nodes or ()
        }
