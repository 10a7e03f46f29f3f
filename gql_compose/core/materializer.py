"""Materialization of composers into graphql-core types.

Each composer is built in two steps: a shell (the graphql-core named type
whose field, interface and member slots are thunks over containers) and a
completion step that converts the composer's configs into those containers.
The shell is recorded in the registry memo as PENDING before completion, so
a reference cycle that loops back to a type under construction resolves to
the shell instead of recursing.

Every composer reached while completing a type is recorded on its memo
entry together with the snapshot that was used. The registry checks those
entries on lookup, so a snapshot is rebuilt only when something it reaches
has changed.

If anything fails during a top-level materialization, every type recorded
during that pass is dropped from the memo and the error propagates; no
partially completed type stays reachable.
"""

import logging

from graphql import GraphQLError, GraphQLNamedType

from .composer import TypeComposer
from .errors import ComposeError, MaterializationError
from .registry import MaterializationStatus, TypeRegistry

logger = logging.getLogger(__name__)


class Materializer:
    """Turns composers into cached graphql-core types."""

    def __init__(self, registry: TypeRegistry):
        self.registry = registry
        self._depth = 0
        self._pass_names: list[str] = []
        self._dependency_stack: list[list[tuple[TypeComposer, GraphQLNamedType]]] = []

    def materialize(self, composer: TypeComposer) -> GraphQLNamedType:
        """Return the graphql-core type for a composer.

        Repeated calls return the identical object as long as neither the
        composer nor any type it references has changed. A type that is
        still being completed is returned as-is.
        """
        name = composer.get_type_name()
        record = self.registry.lookup_materialized(name, composer)
        if record is not None:
            if record.status is MaterializationStatus.PENDING:
                logger.debug("Reusing in-progress type '%s'", name)
            self._record_dependency(composer, record.type)
            return record.type

        self._depth += 1
        try:
            gql_type = self._build(name, composer)
        except Exception:
            if self._depth == 1:
                self._rollback()
            raise
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._pass_names = []
        self._record_dependency(composer, gql_type)
        return gql_type

    def _record_dependency(self, composer: TypeComposer, gql_type: GraphQLNamedType):
        if self._dependency_stack:
            self._dependency_stack[-1].append((composer, gql_type))

    def _build(self, name: str, composer: TypeComposer) -> GraphQLNamedType:
        try:
            gql_type, complete = composer._build_shell()
        except ComposeError:
            raise
        except (TypeError, ValueError, GraphQLError) as error:
            raise MaterializationError(
                f"Cannot build type '{name}': {error}", type_name=name
            ) from error

        self.registry.mark_pending(name, composer, gql_type)
        self._pass_names.append(name)
        dependencies: list[tuple[TypeComposer, GraphQLNamedType]] = []
        if complete is not None:
            self._dependency_stack.append(dependencies)
            try:
                complete()
            except ComposeError as error:
                error.add_context(type_name=name)
                raise
            except (TypeError, ValueError, GraphQLError) as error:
                raise MaterializationError(
                    f"Cannot complete type '{name}': {error}", type_name=name
                ) from error
            finally:
                self._dependency_stack.pop()
        self.registry.mark_done(name, dependencies)
        logger.debug("Materialized %s type '%s'", composer.kind, name)
        return gql_type

    def _rollback(self):
        if self._pass_names:
            logger.warning(
                "Materialization failed; discarding %d partially built type(s): %s",
                len(self._pass_names),
                ", ".join(self._pass_names),
            )
        for name in self._pass_names:
            self.registry.discard_materialized(name)
