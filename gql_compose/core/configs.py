"""Composer-level configs for enum values, fields, arguments and input fields.

These dataclasses are the mutable-graph counterpart of graphql-core's
``GraphQLEnumValue``, ``GraphQLField``, ``GraphQLArgument`` and
``GraphQLInputField``. Their ``type`` slot holds an unresolved type reference
(wrapped-type string, composer, graphql-core type or thunk) that the
normalizer resolves during materialization.
"""

import copy
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable

from graphql import (
    GraphQLArgument,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLInputField,
    GraphQLType,
    Undefined,
)

from .errors import InvalidArgumentError

NAME_RX = re.compile(r"^[_a-zA-Z][_a-zA-Z0-9]*$")

DEFAULT_DEPRECATION_REASON = "deprecated"

# Read-view bookkeeping keys that never survive a full-map replace
DEPRECATION_MARKERS = ("is_deprecated", "isDeprecated")


def is_valid_name(name: Any) -> bool:
    """Check a type or field name against the GraphQL name grammar."""
    return isinstance(name, str) and NAME_RX.match(name) is not None


class Thunk:
    """Zero-argument deferred value, invoked at most once.

    A thunk that raises caches nothing, so a later call retries it.
    """

    __slots__ = ("_fn", "_resolved", "_value")

    def __init__(self, fn: Callable[[], Any]):
        if not callable(fn):
            raise InvalidArgumentError(f"Thunk expects a callable, got {type(fn).__name__}.")
        self._fn = fn
        self._resolved = False
        self._value: Any = None

    def __call__(self) -> Any:
        if not self._resolved:
            self._value = self._fn()
            self._resolved = True
        return self._value

    @property
    def resolved(self) -> bool:
        return self._resolved

    def __repr__(self) -> str:
        state = repr(self._value) if self._resolved else "pending"
        return f"<Thunk {state}>"


@dataclass(frozen=True)
class NonNullOf:
    """Non-null wrapper over a type reference, resolved at materialization."""
    of_type: Any


@dataclass(frozen=True)
class ListOf:
    """List wrapper over a type reference, resolved at materialization."""
    of_type: Any


@dataclass(frozen=True)
class EnumValueConfig:
    """A single enum value; ``value`` is the internal representation, the value name when unset."""
    value: Any = None
    description: str | None = None
    deprecation_reason: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None


@dataclass(frozen=True)
class ArgumentConfig:
    """An argument of an output field."""
    type: Any
    default_value: Any = Undefined
    description: str | None = None
    deprecation_reason: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None


@dataclass(frozen=True)
class FieldConfig:
    """An output field of an object or interface type."""
    type: Any
    args: dict[str, ArgumentConfig] = field(default_factory=dict)
    resolve: Callable[..., Any] | None = None
    description: str | None = None
    deprecation_reason: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None


@dataclass(frozen=True)
class InputFieldConfig:
    """A field of an input object type."""
    type: Any
    default_value: Any = Undefined
    description: str | None = None
    deprecation_reason: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None


def config_keys(config_cls: type) -> set[str]:
    """Return the settable keys of a config dataclass."""
    return {f.name for f in fields(config_cls)}


def _config_from_mapping(config_cls: type, raw: Mapping, label: str, **defaults: Any):
    data = {k: v for k, v in raw.items() if k not in DEPRECATION_MARKERS}
    unknown = sorted(set(data) - config_keys(config_cls))
    if unknown:
        raise InvalidArgumentError(f"Unknown config keys for {label}: {', '.join(unknown)}.")
    for key, value in defaults.items():
        data.setdefault(key, value)
    if "type" in config_keys(config_cls) and "type" not in data:
        raise InvalidArgumentError(f"Config for {label} must provide a 'type'.")
    return config_cls(**data)


def is_type_reference(value: Any) -> bool:
    """Check whether a value can sit in a config's ``type`` slot."""
    from .composer import TypeComposer  # circular: composers build on configs

    return (
        isinstance(value, (str, GraphQLType, TypeComposer, Thunk, NonNullOf, ListOf))
        or callable(value)
    )


def wrap_type_reference(value: Any, label: str) -> Any:
    """Validate a type reference, turning bare callables into cached thunks."""
    if not is_type_reference(value):
        raise InvalidArgumentError(
            f"Invalid type reference for {label}: {type(value).__name__}. "
            "Expected a type name string, composer, GraphQL type or thunk."
        )
    if callable(value) and not isinstance(value, Thunk):
        return Thunk(value)
    return value


def coerce_enum_value(name: str, raw: Any) -> EnumValueConfig:
    """Convert any accepted enum value description into an EnumValueConfig."""
    label = f"enum value '{name}'"
    if isinstance(raw, EnumValueConfig):
        return raw if raw.value is not None else replace(raw, value=name)
    if isinstance(raw, GraphQLEnumValue):
        return EnumValueConfig(
            value=name if raw.value is None else raw.value,
            description=raw.description,
            deprecation_reason=raw.deprecation_reason,
            extensions=dict(raw.extensions),
        )
    if isinstance(raw, Mapping):
        return coerce_enum_value(name, _config_from_mapping(EnumValueConfig, raw, label))
    raise InvalidArgumentError(
        f"Invalid config for {label}: expected a mapping, EnumValueConfig "
        f"or GraphQLEnumValue, got {type(raw).__name__}."
    )


def coerce_arg(name: str, raw: Any) -> ArgumentConfig:
    """Convert any accepted argument description into an ArgumentConfig."""
    label = f"argument '{name}'"
    if isinstance(raw, ArgumentConfig):
        type_ref = wrap_type_reference(raw.type, label)
        return raw if type_ref is raw.type else replace(raw, type=type_ref)
    if isinstance(raw, GraphQLArgument):
        return ArgumentConfig(
            type=raw.type,
            default_value=raw.default_value,
            description=raw.description,
            deprecation_reason=raw.deprecation_reason,
            extensions=dict(raw.extensions),
        )
    if isinstance(raw, Mapping):
        return coerce_arg(name, _config_from_mapping(ArgumentConfig, raw, label))
    return ArgumentConfig(type=wrap_type_reference(raw, label))


def coerce_arg_map(args: Mapping[str, Any] | None) -> dict[str, ArgumentConfig]:
    if not args:
        return {}
    if not isinstance(args, Mapping):
        raise InvalidArgumentError(f"Field args must be a mapping, got {type(args).__name__}.")
    return {name: coerce_arg(name, raw) for name, raw in args.items()}


def coerce_field(name: str, raw: Any) -> FieldConfig:
    """Convert any accepted output field description into a FieldConfig.

    Accepts a FieldConfig, a mapping of FieldConfig keys, a graphql-core
    GraphQLField, or a bare type reference as shorthand.
    """
    label = f"field '{name}'"
    if isinstance(raw, FieldConfig):
        type_ref = wrap_type_reference(raw.type, label)
        args = coerce_arg_map(raw.args)
        if type_ref is raw.type and args == raw.args:
            return raw
        return replace(raw, type=type_ref, args=args)
    if isinstance(raw, GraphQLField):
        return FieldConfig(
            type=raw.type,
            args=coerce_arg_map(raw.args),
            resolve=raw.resolve,
            description=raw.description,
            deprecation_reason=raw.deprecation_reason,
            extensions=dict(raw.extensions),
        )
    if isinstance(raw, Mapping):
        return coerce_field(name, _config_from_mapping(FieldConfig, raw, label))
    return FieldConfig(type=wrap_type_reference(raw, label))


def coerce_input_field(name: str, raw: Any) -> InputFieldConfig:
    """Convert any accepted input field description into an InputFieldConfig."""
    label = f"input field '{name}'"
    if isinstance(raw, InputFieldConfig):
        type_ref = wrap_type_reference(raw.type, label)
        return raw if type_ref is raw.type else replace(raw, type=type_ref)
    if isinstance(raw, GraphQLInputField):
        return InputFieldConfig(
            type=raw.type,
            default_value=raw.default_value,
            description=raw.description,
            deprecation_reason=raw.deprecation_reason,
            extensions=dict(raw.extensions),
        )
    if isinstance(raw, Mapping):
        return coerce_input_field(name, _config_from_mapping(InputFieldConfig, raw, label))
    return InputFieldConfig(type=wrap_type_reference(raw, label))


def copy_config(config: Any) -> Any:
    """Copy a config so the copy shares no mutable containers with the source.

    Type references (composers, graphql-core types, thunks) stay shared.
    """
    if isinstance(config, EnumValueConfig):
        return copy.deepcopy(config)
    changes: dict[str, Any] = {"extensions": dict(config.extensions)}
    if isinstance(config, FieldConfig):
        changes["args"] = {name: copy_config(arg) for name, arg in config.args.items()}
    return replace(config, **changes)
