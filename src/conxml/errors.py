"""Deterministic container error contracts."""

from __future__ import annotations

from enum import StrEnum


class ContainerErrorCode(StrEnum):
    """Stable container assembly error codes."""

    VALIDATION_FAILED = "validation_failed"
    UNKNOWN_SCHEMA = "unknown_schema"
    SCHEMA_INCOMPATIBLE = "schema_incompatible"
    SCHEMA_VALIDATION_FAILED = "schema_validation_failed"


class ContainerError(RuntimeError):
    """Container failure with stable deterministic code."""

    def __init__(
        self,
        code: ContainerErrorCode,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create container failure.

        Args:
            code: Stable container error code.
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.data = data or {}


class ContainerValidationError(ContainerError):
    """Raised when the container or one of its messages is invalid."""

    def __init__(self, errors: dict[str, list[str]], full_messages: list[str]) -> None:
        """Create validation failure.

        Args:
            errors: Field name to error messages.
            full_messages: Human-readable messages, one per error.
        """
        super().__init__(
            ContainerErrorCode.VALIDATION_FAILED,
            "\n".join(full_messages),
            data={"errors": errors},
        )
        self.errors = errors


class UnknownSchemaError(ContainerError, ValueError):
    """Raised when a schema id is not known to the registry."""

    def __init__(self, schema_id: str) -> None:
        super().__init__(
            ContainerErrorCode.UNKNOWN_SCHEMA,
            f"Schema {schema_id} is unknown!",
            data={"schema_id": schema_id},
        )
        self.schema_id = schema_id


class SchemaIncompatibleError(ContainerError):
    """Raised when a message cannot satisfy the schema its variant maps to."""

    def __init__(self, schema_id: str) -> None:
        super().__init__(
            ContainerErrorCode.SCHEMA_INCOMPATIBLE,
            f"Incompatible with schema {schema_id}!",
            data={"schema_id": schema_id},
        )
        self.schema_id = schema_id


class SchemaValidationError(ContainerError):
    """Raised when an assembled document fails structural XSD validation."""

    def __init__(self, schema_id: str, errors: list[str]) -> None:
        super().__init__(
            ContainerErrorCode.SCHEMA_VALIDATION_FAILED,
            f"Incompatible with schema {schema_id}: {', '.join(errors)}",
            data={"schema_id": schema_id, "errors": list(errors)},
        )
        self.schema_id = schema_id
        self.errors = list(errors)
