"""Error taxonomy for type composition and materialization."""


class ComposeError(Exception):
    """Base class for every error raised by gql-compose.

    Carries optional diagnostic context naming the type, field and argument
    that triggered the error.
    """

    def __init__(
        self,
        message: str,
        *,
        type_name: str | None = None,
        field_name: str | None = None,
        arg_name: str | None = None,
    ):
        self.message = message
        self.type_name = type_name
        self.field_name = field_name
        self.arg_name = arg_name
        super().__init__(self._format())

    def _format(self) -> str:
        parts = []
        if self.arg_name:
            parts.append(f"arg '{self.arg_name}'")
        if self.field_name:
            parts.append(f"field '{self.field_name}'")
        if self.type_name:
            parts.append(f"type '{self.type_name}'")
        if not parts:
            return self.message
        return f"{self.message} [{', '.join(parts)}]"

    def add_context(
        self,
        *,
        type_name: str | None = None,
        field_name: str | None = None,
        arg_name: str | None = None,
    ) -> "ComposeError":
        """Fill in context the error does not carry yet.

        Context set closer to the failure wins, so nested conversions keep
        naming the innermost type and field.
        """
        if self.type_name and type_name and self.type_name != type_name:
            return self
        self.type_name = self.type_name or type_name or None
        self.field_name = self.field_name or field_name or None
        self.arg_name = self.arg_name or arg_name or None
        self.args = (self._format(),)
        return self


class NameConflictError(ComposeError):
    """A name collides with a built-in scalar or an existing registration."""


class NotFoundError(ComposeError):
    """A field, value or registry name does not exist."""


class ParseError(ComposeError):
    """An SDL fragment is not exactly one supported declaration."""


class UnknownTypeError(ComposeError):
    """A type name or wrapped-type string cannot be resolved."""


class InvalidArgumentError(ComposeError):
    """Structurally invalid call arguments."""


class MaterializationError(ComposeError):
    """A thunk failed or resolved to an invalid value during materialization."""
