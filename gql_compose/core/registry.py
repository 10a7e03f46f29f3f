"""Registry of named types for a schema composer.

Maps each type name to a slot holding one of:

- a materialized graphql-core named type,
- a still-mutable composer,
- a deferred definition (a ``Thunk`` that builds a composer on first read).

The registry also keeps the materialization memo used to break reference
cycles: per name, the type produced for a composer, the composer version it
was built from, the snapshots of the composers it referenced, and whether
it is still being completed (``PENDING``) or finished (``DONE``). A record
stays valid until its own composer or any composer it reaches changes, so
editing one type leaves snapshots of unrelated types untouched.

Example:
    registry = TypeRegistry()
    registry.set("Color", color_tc)

    registry.has("Color")       # True
    registry.get("Color")       # GraphQLEnumType, materialized on first read
    registry.get("Missing")     # None
"""

import logging
import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from graphql import GraphQLNamedType, specified_scalar_types

from .composer import TypeComposer
from .configs import Thunk, is_valid_name
from .errors import InvalidArgumentError, NameConflictError, NotFoundError

logger = logging.getLogger(__name__)

BUILTIN_SCALARS: dict[str, GraphQLNamedType] = dict(specified_scalar_types)


class MaterializationStatus(Enum):
    PENDING = "pending"
    DONE = "done"


@dataclass
class MaterializedRecord:
    """Memo entry for a composer's materialized type."""
    status: MaterializationStatus
    type: GraphQLNamedType
    composer: TypeComposer
    version: int
    dependencies: list[tuple[TypeComposer, GraphQLNamedType]] = field(default_factory=list)
    verified_generation: int = -1


class TypeRegistry:
    """Single source of truth for type names within one schema composer."""

    def __init__(self):
        self._slots: dict[str, Any] = {}
        self._materialized: dict[str, MaterializedRecord] = {}
        self._producers: "weakref.WeakKeyDictionary[GraphQLNamedType, TypeComposer]" = (
            weakref.WeakKeyDictionary()
        )
        self.generation = 0

    def set(self, name: str, value: Any, *, overwrite: bool = True):
        """Bind a name to a type, composer or deferred definition.

        Never materializes anything. Replacing an existing binding, a
        pending deferred definition included, requires ``overwrite``.

        Raises:
            NameConflictError: The name is a built-in scalar, or it is taken
                and ``overwrite`` is False.
            InvalidArgumentError: Invalid name or slot value.
        """
        if name in BUILTIN_SCALARS:
            raise NameConflictError(
                f"Cannot register type '{name}': it is a built-in scalar type."
            )
        if not is_valid_name(name):
            raise InvalidArgumentError(f"Invalid type name '{name}'.")
        if not isinstance(value, (GraphQLNamedType, TypeComposer, Thunk)):
            raise InvalidArgumentError(
                f"Cannot register {type(value).__name__} as type '{name}'. "
                "Expected a GraphQL named type, a composer or a thunk."
            )

        existing = self._slots.get(name)
        if existing is not None and existing is not value:
            if not overwrite:
                pending = " (pending definition)" if isinstance(existing, Thunk) else ""
                raise NameConflictError(f"Type '{name}' is already registered{pending}.")
            logger.debug("Replacing registered type '%s'", name)
            self._slots[name] = value
            self.invalidate()
            return

        logger.debug("Registering type '%s'", name)
        self._slots[name] = value

    def add(self, name: str, value: Any):
        """Bind a new name; fails on any existing registration."""
        self.set(name, value, overwrite=False)

    def has(self, name: str) -> bool:
        return name in self._slots

    def peek(self, name: str) -> Any:
        """Return the raw slot value without promoting or materializing it."""
        return self._slots.get(name)

    def get(self, name: str) -> GraphQLNamedType | None:
        """Return the materialized type for a name, or None when unknown."""
        value = self._resolve_slot(name)
        if isinstance(value, TypeComposer):
            return value.get_type()
        return value

    def get_composer(self, name: str) -> TypeComposer | None:
        """Return the composer registered under a name, if any."""
        value = self._resolve_slot(name)
        return value if isinstance(value, TypeComposer) else None

    def remove(self, name: str):
        """Delete a registration; later references to the name fail."""
        if name not in self._slots:
            raise NotFoundError(f"Cannot remove type '{name}': it is not registered.")
        del self._slots[name]
        logger.debug("Removed type '%s'", name)
        self.invalidate()

    def rename(self, old_name: str, new_name: str):
        """Move a slot to a new name, keeping its value."""
        value = self._slots.get(old_name)
        if value is None:
            raise NotFoundError(f"Cannot rename type '{old_name}': it is not registered.")
        self.add(new_name, value)
        del self._slots[old_name]
        self.invalidate()

    def names(self) -> list[str]:
        return list(self._slots)

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._slots))

    def __len__(self) -> int:
        return len(self._slots)

    def _resolve_slot(self, name: str) -> Any:
        value = self._slots.get(name)
        if isinstance(value, Thunk):
            logger.debug("Building deferred definition for '%s'", name)
            value = value()
            if not isinstance(value, (GraphQLNamedType, TypeComposer)):
                raise InvalidArgumentError(
                    f"Deferred definition for '{name}' produced {type(value).__name__}.",
                    type_name=name,
                )
            self._slots[name] = value
        return value

    # -------------------------------------------------------------------------
    # Materialization memo
    # -------------------------------------------------------------------------

    def touch(self):
        """Advance the generation after a composer mutation.

        Records stay in the memo; each is checked against composer versions
        on lookup.
        """
        self.generation += 1

    def invalidate(self):
        """Drop every materialized snapshot; called when name bindings change."""
        self.generation += 1
        if self._materialized:
            logger.debug(
                "Invalidating %d materialized type(s), generation %d",
                len(self._materialized),
                self.generation,
            )
            self._materialized.clear()

    def lookup_materialized(self, name: str, composer: TypeComposer) -> MaterializedRecord | None:
        """Return the memo record for a composer if its snapshot is still current."""
        record = self._materialized.get(name)
        if record is None or record.composer is not composer:
            return None
        if record.verified_generation == self.generation:
            return record
        checked: list[MaterializedRecord] = []
        if not self._is_current(record, checked):
            return None
        for visited in checked:
            visited.verified_generation = self.generation
        return record

    def _is_current(self, record: MaterializedRecord, checked: list[MaterializedRecord]) -> bool:
        if record.version != record.composer.version:
            return False
        if record.status is MaterializationStatus.PENDING:
            return True
        if record.verified_generation == self.generation or any(r is record for r in checked):
            return True
        checked.append(record)
        for composer, gql_type in record.dependencies:
            dependency = self._materialized.get(composer.get_type_name())
            if dependency is None or dependency.composer is not composer:
                return False
            if dependency.type is not gql_type:
                return False
            if not self._is_current(dependency, checked):
                return False
        return True

    def producer_of(self, gql_type: GraphQLNamedType) -> TypeComposer | None:
        """Return the composer a graphql-core type was materialized from, if any."""
        return self._producers.get(gql_type)

    def mark_pending(self, name: str, composer: TypeComposer, gql_type: GraphQLNamedType):
        if name in self._materialized:
            # Records verified against the replaced snapshot must be rechecked
            self.generation += 1
        self._materialized[name] = MaterializedRecord(
            status=MaterializationStatus.PENDING,
            type=gql_type,
            composer=composer,
            version=composer.version,
        )
        self._producers[gql_type] = composer

    def mark_done(self, name: str, dependencies: list[tuple[TypeComposer, GraphQLNamedType]] = ()):
        record = self._materialized.get(name)
        if record is not None:
            record.status = MaterializationStatus.DONE
            record.dependencies = list(dependencies)

    def discard_materialized(self, name: str):
        if self._materialized.pop(name, None) is not None:
            self.generation += 1
