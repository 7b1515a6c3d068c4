"""Error and result data structures for the schema validator.

Errors make a schema invalid; warnings are advisory and never affect
validity.
"""

from dataclasses import dataclass, field


@dataclass
class ValidationError:
    """Represents a validation error.

    Contains detailed information about what went wrong during validation,
    including context to help producers fix the issue.
    """

    type: str
    message: str
    property: str | None = None
    help: str | None = None

    def __str__(self) -> str:
        """Return a formatted string representation of the error."""
        parts = [f"{self.type}: {self.message}"]

        if self.property:
            parts.append(f"(property: {self.property})")
        if self.help:
            parts.append(f"Help: {self.help}")

        return " ".join(parts)


@dataclass
class ValidationWarning:
    """Represents a validation warning.

    Similar to ValidationError but for non-critical issues that don't
    prevent validation from succeeding.
    """

    type: str
    message: str
    property: str | None = None
    help: str | None = None

    def __str__(self) -> str:
        """Return a formatted string representation of the warning."""
        parts = [f"{self.type}: {self.message}"]

        if self.property:
            parts.append(f"(property: {self.property})")
        if self.help:
            parts.append(f"Help: {self.help}")

        return " ".join(parts)


@dataclass
class ValidationResult:
    """Complete validation result.

    ``is_valid`` is true iff ``errors`` is empty.
    """

    is_valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        """Number of validation errors."""
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        """Number of validation warnings."""
        return len(self.warnings)

    @property
    def error_messages(self) -> list[str]:
        """Human-readable error messages in order."""
        return [error.message for error in self.errors]

    @property
    def warning_messages(self) -> list[str]:
        """Human-readable warning messages in order."""
        return [warning.message for warning in self.warnings]

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def add_error(self, error: ValidationError) -> None:
        """Add a validation error to the result."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: ValidationWarning) -> None:
        """Add a validation warning to the result."""
        self.warnings.append(warning)

    def extend_errors(self, errors: list[ValidationError]) -> None:
        """Add multiple validation errors to the result."""
        self.errors.extend(errors)
        if errors:
            self.is_valid = False

    def extend_warnings(self, warnings: list[ValidationWarning]) -> None:
        """Add multiple validation warnings to the result."""
        self.warnings.extend(warnings)

    def merge(self, other: "ValidationResult") -> None:
        """Fold another result's errors and warnings into this one."""
        self.extend_errors(other.errors)
        self.extend_warnings(other.warnings)

    def __str__(self) -> str:
        """Return a formatted string representation of the validation result."""
        if self.is_valid:
            status = (
                f"✅ Valid ({self.warning_count} warnings)"
                if self.warnings
                else "✅ Valid"
            )
        else:
            status = (
                f"❌ Invalid ({self.error_count} errors, {self.warning_count} warnings)"
            )

        lines = [status]

        if self.errors:
            lines.append("\nErrors:")
            for error in self.errors:
                lines.append(f"  - {error}")

        if self.warnings:
            lines.append("\nWarnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines)
