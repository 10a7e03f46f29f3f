"""Base classes shared by all type composers.

A composer exclusively owns a canonical, mutable description of one named
type. The graphql-core type handed to consumers is a snapshot produced on
demand by the materializer; composers never patch a snapshot in place.

Field-map composers (enum, object, input, interface) layer every mutation
on a single primitive, ``set_fields``: add, remove, reorder, extend and
deprecate all compute a new full map and pass it to ``set_fields``.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable

from graphql import GraphQLList, GraphQLNamedType, GraphQLNonNull, GraphQLType, get_named_type

from .configs import (
    DEFAULT_DEPRECATION_REASON,
    DEPRECATION_MARKERS,
    ListOf,
    NonNullOf,
    Thunk,
    config_keys,
    copy_config,
    is_valid_name,
)
from .errors import ComposeError, InvalidArgumentError, NotFoundError

if TYPE_CHECKING:
    from .schema_composer import SchemaComposer


def as_name_list(name_or_names: str | Iterable[str]) -> list[str]:
    if isinstance(name_or_names, str):
        return [name_or_names]
    return list(name_or_names)


def reference_name(ref: Any) -> str | None:
    """Return the type name a reference points at, when known statically."""
    if isinstance(ref, str):
        return ref.strip().strip("[]!")
    if isinstance(ref, TypeComposer):
        return ref.get_type_name()
    if isinstance(ref, (NonNullOf, ListOf)):
        return reference_name(ref.of_type)
    if isinstance(ref, GraphQLType):
        named = get_named_type(ref)
        return named.name if named else None
    return None


def make_non_null_reference(ref: Any) -> Any:
    """Wrap a type reference in NonNull without resolving it."""
    if isinstance(ref, str):
        return ref if ref.endswith("!") else f"{ref}!"
    if isinstance(ref, (GraphQLNonNull, NonNullOf)):
        return ref
    if isinstance(ref, GraphQLType):
        return GraphQLNonNull(ref)
    return NonNullOf(ref)


def make_nullable_reference(ref: Any) -> Any:
    """Strip an outer NonNull from a type reference without resolving it."""
    if isinstance(ref, str):
        return ref[:-1] if ref.endswith("!") else ref
    if isinstance(ref, (GraphQLNonNull, NonNullOf)):
        return ref.of_type
    if isinstance(ref, Thunk):
        return Thunk(lambda: make_nullable_reference(ref()))
    return ref


class TypeComposer:
    """Mutable builder for one named type."""

    kind = "named"
    graphql_class: type = GraphQLNamedType
    sdl_example = ""

    def __init__(self, name: str, sc: "SchemaComposer", description: str | None = None):
        if not is_valid_name(name):
            raise InvalidArgumentError(
                f"Invalid type name '{name}'. Names must match /^[_a-zA-Z][_a-zA-Z0-9]*$/."
            )
        self.sc = sc
        self._name = name
        self._description = description
        self._version = 0
        self._derived: dict[str, tuple[int, Any]] = {}

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self._name!r}>"

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def create_temp(cls, opts: Any, sc: "SchemaComposer"):
        """Build a composer without registering it.

        ``opts`` may be a type name, an SDL fragment of the matching kind, a
        config mapping with a ``name`` key, or an existing graphql-core type.
        """
        if isinstance(opts, str):
            if is_valid_name(opts):
                return cls(opts, sc)
            composer = sc.parser.build_composer_from_sdl(opts)
            if not isinstance(composer, cls):
                raise InvalidArgumentError(
                    f"You should provide correct {cls.graphql_class.__name__} type "
                    f"definition. Eg. `{cls.sdl_example}`"
                )
            return composer
        if isinstance(opts, cls.graphql_class):
            return cls.from_graphql_type(opts, sc)
        if isinstance(opts, Mapping):
            return cls.from_config(opts, sc)
        raise InvalidArgumentError(
            f"You should provide {cls.graphql_class.__name__} config, "
            "a type name or an SDL string."
        )

    @classmethod
    def create(cls, opts: Any, sc: "SchemaComposer"):
        """Build a composer and register it under its name."""
        composer = cls.create_temp(opts, sc)
        sc.add(composer)
        return composer

    @classmethod
    def from_config(cls, config: Mapping[str, Any], sc: "SchemaComposer"):
        options = dict(config)
        name = options.pop("name", None)
        if not name:
            raise InvalidArgumentError(f"{cls.__name__} config must provide a 'name'.")
        try:
            return cls(name, sc, **options)
        except TypeError as error:
            raise InvalidArgumentError(f"Invalid {cls.__name__} config: {error}") from error

    @classmethod
    def from_graphql_type(cls, gql_type: GraphQLNamedType, sc: "SchemaComposer"):
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Versioning and derived views
    # -------------------------------------------------------------------------

    @property
    def version(self) -> int:
        return self._version

    def _touch(self):
        self._version += 1
        self._derived.clear()
        self.sc.registry.touch()

    def _derived_view(self, key: str, compute: Callable[[], Any]) -> Any:
        cached = self._derived.get(key)
        if cached is None or cached[0] != self._version:
            cached = (self._version, compute())
            self._derived[key] = cached
        return cached[1]

    # -------------------------------------------------------------------------
    # Name and description
    # -------------------------------------------------------------------------

    def get_type_name(self) -> str:
        return self._name

    def set_type_name(self, name: str):
        """Rename the type; a registered composer moves its registry slot along."""
        if not is_valid_name(name):
            raise InvalidArgumentError(f"Invalid type name '{name}'.")
        if name == self._name:
            return self
        registry = self.sc.registry
        if registry.peek(self._name) is self:
            registry.rename(self._name, name)
        self._name = name
        self._touch()
        return self

    def get_description(self) -> str:
        return self._description or ""

    def set_description(self, description: str | None):
        self._description = description
        self._touch()
        return self

    # -------------------------------------------------------------------------
    # Materialized views
    # -------------------------------------------------------------------------

    def get_type(self) -> GraphQLNamedType:
        """Return the materialized snapshot of the current description."""
        return self.sc.materializer.materialize(self)

    def get_type_plural(self) -> GraphQLList:
        return GraphQLList(self.get_type())

    def get_type_non_null(self) -> GraphQLNonNull:
        return GraphQLNonNull(self.get_type())

    def as_non_null(self) -> NonNullOf:
        """Unresolved ``Type!`` reference for use in field configs."""
        return NonNullOf(self)

    def as_list(self) -> ListOf:
        """Unresolved ``[Type]`` reference for use in field configs."""
        return ListOf(self)

    def _build_shell(self) -> tuple[GraphQLNamedType, Callable[[], None] | None]:
        """Create the graphql-core type and an optional completion step.

        The shell may already be referenced by other types while the
        completion step converts its fields.
        """
        raise NotImplementedError

    def clone(self, new_name: str):
        raise NotImplementedError


class FieldMapComposer(TypeComposer):
    """Composer over an ordered name -> config map."""

    entry_label = "field"

    def __init__(
        self,
        name: str,
        sc: "SchemaComposer",
        fields: Mapping[str, Any] | None = None,
        description: str | None = None,
    ):
        super().__init__(name, sc, description)
        self._fields: dict[str, Any] = self._coerce_map(fields or {})

    def _coerce_entry(self, name: str, raw: Any) -> Any:
        raise NotImplementedError

    def _coerce_map(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        if not isinstance(fields, Mapping):
            raise InvalidArgumentError(
                f"{self.entry_label.capitalize()} map must be a mapping, "
                f"got {type(fields).__name__}.",
                type_name=self._name,
            )
        result = {}
        for name, raw in fields.items():
            if not is_valid_name(name):
                raise InvalidArgumentError(
                    f"Invalid {self.entry_label} name '{name}'.", type_name=self._name
                )
            try:
                result[name] = self._coerce_entry(name, raw)
            except ComposeError as error:
                error.add_context(type_name=self._name, field_name=name)
                raise
        return result

    def _missing(self, action: str, name: str) -> NotFoundError:
        label = self.entry_label
        return NotFoundError(
            f"Cannot {action} {label} '{name}' from {self.kind} type '{self._name}'. "
            f"{label.capitalize()} with such name does not exist."
        )

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    def get_fields(self) -> dict[str, Any]:
        return dict(self._fields)

    def get_field(self, name: str) -> Any:
        try:
            return self._fields[name]
        except KeyError:
            raise self._missing("get", name) from None

    def get_field_names(self) -> list[str]:
        return list(self._fields)

    def has_field(self, name: str) -> bool:
        return name in self._fields

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def set_fields(self, fields: Mapping[str, Any]):
        """Completely replace the field map.

        Entries are coerced to config objects, which drops any stale
        ``is_deprecated`` marker, and derived views are invalidated.
        """
        self._fields = self._coerce_map(fields)
        self._touch()
        return self

    def add_fields(self, new_fields: Mapping[str, Any]):
        """Add new fields or replace existing ones; the right side wins."""
        if not isinstance(new_fields, Mapping):
            raise InvalidArgumentError(
                f"add_fields expects a mapping, got {type(new_fields).__name__}.",
                type_name=self._name,
            )
        return self.set_fields({**self._fields, **new_fields})

    def set_field(self, name: str, config: Any):
        return self.add_fields({name: config})

    def remove_field(self, name_or_names: str | Iterable[str]):
        names = set(as_name_list(name_or_names))
        return self.set_fields({k: v for k, v in self._fields.items() if k not in names})

    def remove_other_fields(self, name_or_names: str | Iterable[str]):
        keep = set(as_name_list(name_or_names))
        return self.set_fields({k: v for k, v in self._fields.items() if k in keep})

    def reorder_fields(self, names: Iterable[str]):
        ordered = {name: self._fields[name] for name in names if name in self._fields}
        rest = {k: v for k, v in self._fields.items() if k not in ordered}
        return self.set_fields({**ordered, **rest})

    def extend_field(self, name: str, partial: Mapping[str, Any] | None = None, **changes: Any):
        """Shallow-merge config keys over an existing field."""
        if name not in self._fields:
            raise self._missing("extend", name)
        updates = {**(partial or {}), **changes}
        previous = self._fields[name]
        for marker in DEPRECATION_MARKERS:
            updates.pop(marker, None)
        unknown = sorted(set(updates) - config_keys(type(previous)))
        if unknown:
            raise InvalidArgumentError(
                f"Cannot extend {self.entry_label} '{name}' with unknown keys: "
                f"{', '.join(unknown)}.",
                type_name=self._name,
                field_name=name,
            )
        return self.set_field(name, replace(previous, **updates))

    def deprecate_fields(self, fields: str | Iterable[str] | Mapping[str, str]):
        """Mark fields deprecated.

        A name or list of names gets the generic reason ``"deprecated"``; a
        mapping supplies a reason per field. Every name is checked before
        anything changes, so a missing name leaves the composer untouched.
        """
        if isinstance(fields, Mapping):
            reasons = dict(fields)
        elif isinstance(fields, (str, list, tuple)):
            reasons = {name: DEFAULT_DEPRECATION_REASON for name in as_name_list(fields)}
        else:
            raise InvalidArgumentError(
                "deprecate_fields expects a name, a list of names or a name -> reason mapping.",
                type_name=self._name,
            )
        for name in reasons:
            if name not in self._fields:
                raise NotFoundError(
                    f"Cannot deprecate non-existent {self.entry_label} '{name}' "
                    f"from {self.kind} type '{self._name}'."
                )
        updated = dict(self._fields)
        for name, reason in reasons.items():
            updated[name] = replace(updated[name], deprecation_reason=reason)
        return self.set_fields(updated)

    # -------------------------------------------------------------------------
    # Cloning
    # -------------------------------------------------------------------------

    def _clone_options(self) -> dict[str, Any]:
        """Kind-specific constructor options copied into a clone."""
        return {}

    def clone(self, new_name: str):
        """Return an unregistered copy under a new name sharing no mutable state."""
        if not new_name:
            raise InvalidArgumentError(
                f"You should provide new type name for {self.__class__.__name__}.clone()"
            )
        return self.__class__(
            new_name,
            self.sc,
            fields={name: copy_config(config) for name, config in self._fields.items()},
            description=self._description,
            **self._clone_options(),
        )


class TypedFieldMapComposer(FieldMapComposer):
    """Field-map composer whose entries carry a ``type`` reference."""

    def _with_field_types(self, names: Iterable[str], wrap: Callable[[Any], Any]):
        updated = dict(self._fields)
        for name in names:
            config = self.get_field(name)
            updated[name] = replace(config, type=wrap(config.type))
        return self.set_fields(updated)

    def make_field_non_null(self, name_or_names: str | Iterable[str]):
        return self._with_field_types(as_name_list(name_or_names), make_non_null_reference)

    def make_field_nullable(self, name_or_names: str | Iterable[str]):
        return self._with_field_types(as_name_list(name_or_names), make_nullable_reference)
