"""Exceptions raised inside the schema graph engine.

None of these escape the public generation API; the manager catches them
at its boundary and records them in the status report.
"""


class SchemaGraphError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize engine error.

        Args:
            message: Human-readable error description
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class SchemaTypeError(SchemaGraphError):
    """Schema type is not registered or its name is invalid."""

    pass


class GeneratorError(SchemaGraphError):
    """A registered generator failed to produce a schema."""

    pass


class ProviderError(SchemaGraphError):
    """A data provider failed while providing data or pieces."""

    def __init__(
        self, message: str, provider_id: str, cause: Exception | None = None
    ):
        super().__init__(message, cause)
        self.provider_id = provider_id
