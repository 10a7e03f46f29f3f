"""Core modules for composing GraphQL schemas."""

from .composer import FieldMapComposer, TypeComposer, TypedFieldMapComposer
from .configs import (
    ArgumentConfig,
    EnumValueConfig,
    FieldConfig,
    InputFieldConfig,
    ListOf,
    NonNullOf,
    Thunk,
)
from .enum_composer import EnumTypeComposer
from .errors import (
    ComposeError,
    InvalidArgumentError,
    MaterializationError,
    NameConflictError,
    NotFoundError,
    ParseError,
    UnknownTypeError,
)
from .input_composer import InputTypeComposer
from .interface_composer import InterfaceTypeComposer
from .materializer import Materializer
from .normalizer import FieldConfigNormalizer
from .object_composer import ObjectTypeComposer
from .registry import MaterializationStatus, TypeRegistry
from .scalar_composer import ScalarTypeComposer
from .scalars import (
    DateHandler,
    DateTimeHandler,
    JSONHandler,
    ScalarHandler,
    UUIDHandler,
    default_scalar_handlers,
)
from .schema_composer import SchemaComposer
from .sdl import SDLParser
from .union_composer import UnionTypeComposer

__all__ = [
    # Schema composer
    "SchemaComposer",
    # Composers
    "TypeComposer",
    "FieldMapComposer",
    "TypedFieldMapComposer",
    "EnumTypeComposer",
    "ObjectTypeComposer",
    "InputTypeComposer",
    "InterfaceTypeComposer",
    "UnionTypeComposer",
    "ScalarTypeComposer",
    # Configs
    "ArgumentConfig",
    "EnumValueConfig",
    "FieldConfig",
    "InputFieldConfig",
    "ListOf",
    "NonNullOf",
    "Thunk",
    # Registry and materialization
    "TypeRegistry",
    "MaterializationStatus",
    "Materializer",
    "FieldConfigNormalizer",
    "SDLParser",
    # Scalars
    "ScalarHandler",
    "DateTimeHandler",
    "DateHandler",
    "UUIDHandler",
    "JSONHandler",
    "default_scalar_handlers",
    # Errors
    "ComposeError",
    "NameConflictError",
    "NotFoundError",
    "ParseError",
    "UnknownTypeError",
    "InvalidArgumentError",
    "MaterializationError",
]
