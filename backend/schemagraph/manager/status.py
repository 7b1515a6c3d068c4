"""Generation status tracking.

Failures inside the public generation API are never raised; they are
recorded here so they stay observable through the status report.
"""

from dataclasses import dataclass, field
from typing import Any

from ..validation.errors import ValidationResult


@dataclass
class GenerationStatus:
    """Running error and warning tallies for one manager."""

    error_count: int = 0
    warning_count: int = 0
    generations: int = 0
    last_errors: dict[str, str] = field(default_factory=dict)
    provider_errors: dict[str, str] = field(default_factory=dict)
    reference_errors: list[str] = field(default_factory=list)

    def record_validation(self, schema_type: str, result: ValidationResult) -> None:
        """Tally a validation result, remembering the last error per type."""
        self.error_count += result.error_count
        self.warning_count += result.warning_count
        if result.errors:
            self.last_errors[schema_type] = result.errors[-1].message

    def record_error(self, key: str, message: str) -> None:
        self.error_count += 1
        self.last_errors[key] = message

    def record_provider_error(self, provider_id: str, message: str) -> None:
        self.record_error(provider_id, message)
        self.provider_errors[provider_id] = message

    def record_reference_errors(self, errors: list[str]) -> None:
        self.reference_errors = list(errors)
        self.warning_count += len(errors)

    def reset(self) -> None:
        self.error_count = 0
        self.warning_count = 0
        self.generations = 0
        self.last_errors.clear()
        self.provider_errors.clear()
        self.reference_errors.clear()

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "generations": self.generations,
            "last_errors": dict(self.last_errors),
            "provider_errors": dict(self.provider_errors),
            "reference_errors": list(self.reference_errors),
        }
