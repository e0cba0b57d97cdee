"""
Data models for formcraft.

This module contains Pydantic models for:
- Field definitions (discriminated union on ``type``)
- Forms and response records
- Rendered controls
- Validation results
"""

from formcraft.models.field_definitions import (
    BaseField,
    CheckboxField,
    CustomField,
    DateField,
    DropdownField,
    ErrorMessages,
    FieldDefinition,
    NumberField,
    Option,
    RadioField,
    TextareaField,
    TextField,
    ValidationRules,
    get_options,
    new_field_id,
    new_option_id,
    parse_field,
)
from formcraft.models.form import (
    FieldResponse,
    FormDefinition,
    FormSettings,
    ResponseRecord,
)
from formcraft.models.rendering import RenderedControl
from formcraft.models.validation_result import (
    FieldValidationError,
    ValidationErrorKind,
    ValidationResult,
)

__all__ = [
    # Field definitions
    "BaseField",
    "CheckboxField",
    "CustomField",
    "DateField",
    "DropdownField",
    "ErrorMessages",
    "FieldDefinition",
    "NumberField",
    "Option",
    "RadioField",
    "TextareaField",
    "TextField",
    "ValidationRules",
    "get_options",
    "new_field_id",
    "new_option_id",
    "parse_field",
    # Forms and responses
    "FieldResponse",
    "FormDefinition",
    "FormSettings",
    "ResponseRecord",
    # Rendering
    "RenderedControl",
    # Validation
    "FieldValidationError",
    "ValidationErrorKind",
    "ValidationResult",
]
