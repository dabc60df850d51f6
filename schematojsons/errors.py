"""Exceptions raised while converting schema nodes to JSON Schema."""

from typing import Optional


class SchemaConversionError(Exception):
    """
    Base exception for all conversion failures.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
    """

    def __init__(self, message: str, context: Optional[str] = None) -> None:
        self.message = message
        self.context = context
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class UnsupportedSchemaError(SchemaConversionError):
    """Raised when no converter exists for a schema kind."""

    def __init__(self, schema_type: str) -> None:
        self.schema_type = schema_type
        super().__init__(f"Unsupported schema: {schema_type}")


class UnsupportedValidationError(SchemaConversionError):
    """Raised when a pipe action has no converter for the owning schema kind."""

    def __init__(self, validation_type: str, schema_type: str) -> None:
        self.validation_type = validation_type
        self.schema_type = schema_type
        super().__init__(f"Unsupported validation `{validation_type}` for schema `{schema_type}`")


class UnsupportedLiteralError(SchemaConversionError):
    """Raised when a value cannot be written as a JSON literal."""

    def __init__(self, value) -> None:
        self.value = value
        super().__init__(f"Unsupported literal value type: {value!r}")


class UnsupportedKeyTypeError(SchemaConversionError):
    """Raised when a record key is not a string schema."""

    def __init__(self, key_type: str) -> None:
        self.key_type = key_type
        super().__init__(f"Unsupported record key type: {key_type}")


class MissingDefinitionError(SchemaConversionError):
    """Raised when the target of a lazy schema is not a named definition."""


class MissingStrategyError(SchemaConversionError):
    """Raised when a date, bigint or undefined schema is met without a strategy."""

    def __init__(self, option: str, subject: str) -> None:
        self.option = option
        super().__init__(f'The "{option}" option must be set to handle {subject}')


class InvalidRequirementError(SchemaConversionError):
    """Raised when a validation requirement has the wrong runtime shape."""


class NoSchemaProvidedError(SchemaConversionError):
    """Raised when neither a main schema nor definitions are given."""

    def __init__(self) -> None:
        super().__init__("No main schema or definitions provided.")
