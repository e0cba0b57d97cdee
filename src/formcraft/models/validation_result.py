"""
Validation result models.

Every expected validation failure resolves to exactly one message per
field. These models carry that message together with the kind of rule
that produced it.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ValidationErrorKind(str, Enum):
    """Kinds of validation failure."""

    REQUIRED = "required"
    LENGTH = "length"
    PATTERN = "pattern"
    RANGE = "range"
    FORMAT = "format"
    OPTION = "option"
    CUSTOM = "custom"


class FieldValidationError(BaseModel):
    """Validation error for a specific field."""

    field_id: str = Field(..., description="Id of the field with the error")
    error_type: ValidationErrorKind = Field(..., description="Kind of validation error")
    message: str = Field(..., description="Human-readable error message")
    expected: Any | None = Field(default=None, description="Expected value/format")
    received: Any | None = Field(default=None, description="Received value")


class ValidationResult(BaseModel):
    """Result of validating a whole form."""

    is_valid: bool = Field(..., description="Whether every field passed")
    errors: dict[str, str] = Field(
        default_factory=dict,
        description="Field id to error message, for failing fields only",
    )
    failures: list[FieldValidationError] = Field(
        default_factory=list, description="Structured failures in field order"
    )

    @property
    def error_count(self) -> int:
        """Get the number of failing fields."""
        return len(self.errors)

    def get_field_error(self, field_id: str) -> FieldValidationError | None:
        """Get the failure recorded for a specific field, if any."""
        for failure in self.failures:
            if failure.field_id == field_id:
                return failure
        return None

    def to_error_dict(self) -> dict[str, str]:
        """Copy of the error map, safe to mutate."""
        return dict(self.errors)
