"""
formcraft: field types, validation and response collection for a form builder.

A registry maps field type tags (text, textarea, dropdown, checkbox,
radio, date, ...) to their renderer, default value, validator and value
transformer. The builder edits an ordered list of field definitions and
the submission flow validates a value map against it.

Simple Usage:
    from formcraft import create_default_registry, FormBuilder, FormSubmission

    registry = create_default_registry()

    builder = FormBuilder(registry)
    name = builder.add_field("text", label="Name", required=True)
    colour = builder.add_field("dropdown", label="Favourite colour")

    submission = FormSubmission(registry, builder.fields, form_id="survey")
    submission.change(name.id, "Ada")
    outcome = submission.submit()
    if outcome.submitted:
        print(outcome.response.to_storage())

Validation only:
    from formcraft import validate_form

    result = validate_form(fields, {"field-1": "ab"}, registry)
    result.is_valid   # False
    result.errors     # {"field-1": "Must be at least 3 characters"}
"""

from formcraft.builder import FormBuilder, array_move
from formcraft.field_types import create_default_registry, register_builtin_types
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
from formcraft.registry import (
    FieldTypeConfig,
    FieldTypeDescriptor,
    FieldTypeRegistry,
    UnknownFieldTypeError,
)
from formcraft.responses import export_responses_csv, resolve_responses
from formcraft.submission import FormSubmission, SubmissionOutcome, collect_response
from formcraft.validation import (
    check_field,
    validate_field,
    validate_field_definition,
    validate_form,
    validate_form_definition,
)

__all__ = [
    # Registry
    "FieldTypeConfig",
    "FieldTypeDescriptor",
    "FieldTypeRegistry",
    "UnknownFieldTypeError",
    "create_default_registry",
    "register_builtin_types",
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
    "parse_field",
    # Forms and responses
    "FieldResponse",
    "FormDefinition",
    "FormSettings",
    "ResponseRecord",
    "RenderedControl",
    # Validation
    "FieldValidationError",
    "ValidationErrorKind",
    "ValidationResult",
    "check_field",
    "validate_field",
    "validate_field_definition",
    "validate_form",
    "validate_form_definition",
    # Surfaces
    "FormBuilder",
    "FormSubmission",
    "SubmissionOutcome",
    "array_move",
    "collect_response",
    # Responses
    "export_responses_csv",
    "resolve_responses",
]

__version__ = "0.1.0"
