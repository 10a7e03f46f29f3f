"""Custom scalar handlers for composed schemas.

A handler bundles the functions graphql-core calls for a custom scalar:
``serialize`` for outgoing results and ``parse_value`` for incoming
variables. Literal arguments are parsed by graphql-core's default
``parse_literal``, which routes through ``parse_value``.

Example usage:
    from gql_compose import SchemaComposer
    from gql_compose.core.scalars import DateTimeHandler

    sc = SchemaComposer()
    sc.add_scalar_handler("DateTime", DateTimeHandler())

    # Create custom handler
    class MoneyHandler:
        description = "Decimal amount serialized as a string"

        def serialize(self, value):
            return str(value)

        def parse_value(self, value):
            from decimal import Decimal
            return Decimal(value)

    sc.add_scalar_handler("Money", MoneyHandler())
"""

from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from graphql import GraphQLError


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for custom scalar handlers.

    Attributes:
        description: Description attached to the scalar type
    """

    description: str

    def serialize(self, value: Any) -> Any:
        """Convert a Python value to a JSON-serializable result."""
        ...

    def parse_value(self, value: Any) -> Any:
        """Convert an incoming JSON value to its Python type."""
        ...


class DateTimeHandler:
    """Handler for DateTime scalars using ISO 8601 format."""

    description = "Date and time in ISO 8601 format"
    specified_by_url = "https://datatracker.ietf.org/doc/html/rfc3339"

    def serialize(self, value: datetime | str) -> str:
        """Convert datetime to ISO 8601 string."""
        if isinstance(value, str):
            return value
        if not isinstance(value, datetime):
            raise GraphQLError(f"DateTime cannot represent value: {value!r}")
        return value.isoformat()

    def parse_value(self, value: Any) -> datetime:
        """Parse ISO 8601 string to datetime."""
        if not isinstance(value, str):
            raise GraphQLError(f"DateTime cannot represent non-string value: {value!r}")
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as error:
            raise GraphQLError(f"DateTime cannot represent value: {value!r}") from error


class DateHandler:
    """Handler for Date scalars using ISO 8601 date format."""

    description = "Calendar date in ISO 8601 format"

    def serialize(self, value: date | str) -> str:
        """Convert date to ISO 8601 string."""
        if isinstance(value, str):
            return value
        if isinstance(value, datetime):
            return value.date().isoformat()
        if not isinstance(value, date):
            raise GraphQLError(f"Date cannot represent value: {value!r}")
        return value.isoformat()

    def parse_value(self, value: Any) -> date:
        """Parse ISO 8601 date string."""
        if not isinstance(value, str):
            raise GraphQLError(f"Date cannot represent non-string value: {value!r}")
        try:
            return date.fromisoformat(value)
        except ValueError as error:
            raise GraphQLError(f"Date cannot represent value: {value!r}") from error


class UUIDHandler:
    """Handler for UUID scalars."""

    description = "RFC 4122 universally unique identifier"

    def serialize(self, value: UUID | str) -> str:
        """Convert UUID to string."""
        return str(value)

    def parse_value(self, value: Any) -> UUID:
        """Parse string to UUID."""
        if not isinstance(value, str):
            raise GraphQLError(f"UUID cannot represent non-string value: {value!r}")
        try:
            return UUID(value)
        except ValueError as error:
            raise GraphQLError(f"UUID cannot represent value: {value!r}") from error


class JSONHandler:
    """Handler for JSON scalars (pass-through)."""

    description = "Arbitrary JSON value"

    def serialize(self, value: Any) -> Any:
        """JSON values are already serializable."""
        return value

    def parse_value(self, value: Any) -> Any:
        """JSON values are already deserialized."""
        return value


def default_scalar_handlers() -> dict[str, ScalarHandler]:
    """Return the built-in custom scalar handlers keyed by scalar name."""
    return {
        "DateTime": DateTimeHandler(),
        "Date": DateHandler(),
        "UUID": UUIDHandler(),
        "JSON": JSONHandler(),
        "JSONObject": JSONHandler(),
    }
