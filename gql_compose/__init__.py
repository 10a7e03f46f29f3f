"""Mutable GraphQL type-graph builder on top of graphql-core."""

from .core import (
    ComposeError,
    EnumTypeComposer,
    InputTypeComposer,
    InterfaceTypeComposer,
    ObjectTypeComposer,
    ScalarTypeComposer,
    SchemaComposer,
    UnionTypeComposer,
)

__version__ = "0.1.0"

__all__ = [
    "ComposeError",
    "EnumTypeComposer",
    "InputTypeComposer",
    "InterfaceTypeComposer",
    "ObjectTypeComposer",
    "ScalarTypeComposer",
    "SchemaComposer",
    "UnionTypeComposer",
]
