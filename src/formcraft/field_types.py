"""
Built-in field types.

Each type is described once here: palette metadata and default
attributes, a renderer, a default value, its own validator and an
optional value transformer. ``register_builtin_types`` adds them all to
a registry; registering twice is harmless.
"""

import re
from typing import Any, Callable

from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError

from formcraft.models.field_definitions import (
    BaseField,
    CheckboxField,
    DateField,
    DropdownField,
    NumberField,
    RadioField,
    TextareaField,
    TextField,
    get_options,
)
from formcraft.models.rendering import RenderedControl
from formcraft.models.validation_result import FieldValidationError, ValidationErrorKind
from formcraft.registry import FieldTypeConfig, FieldTypeDescriptor, FieldTypeRegistry
from formcraft.validation import failure, format_date, is_empty, parse_date, parse_number

_email_adapter: TypeAdapter = TypeAdapter(EmailStr)
_url_adapter: TypeAdapter = TypeAdapter(HttpUrl)
PHONE_PATTERN = re.compile(r"^\+?[0-9()\-.\s]+$")
MIN_PHONE_DIGITS = 7

DEFAULT_CHOICES = [
    {"label": "Option 1", "value": "option1"},
    {"label": "Option 2", "value": "option2"},
]


def _control(
    widget: str,
    field: BaseField,
    value: Any,
    on_change: Callable[[Any], None] | None,
    on_blur: Callable[[], None] | None,
    error: str | None,
    disabled: bool,
    **extra: Any,
) -> RenderedControl:
    return RenderedControl(
        widget=widget,
        field_id=field.id,
        label=field.label,
        value=value,
        required=field.required,
        disabled=disabled,
        placeholder=field.placeholder,
        help_text=field.help_text,
        error=error,
        on_change=on_change,
        on_blur=on_blur,
        **extra,
    )


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if value in (None, "", False):
        return []
    return [value]


def _drop_empty(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [item for item in value if not is_empty(item)]
    return "" if value is None else value


def _check_membership(field: BaseField, selected: list) -> FieldValidationError | None:
    allowed = [option.value for option in get_options(field) or []]
    for item in selected:
        if is_empty(item):
            continue
        if item not in allowed:
            return failure(
                field,
                ValidationErrorKind.OPTION,
                field.messages.option or "Please select a valid option",
                expected=allowed,
                received=item,
            )
    return None


# Text family


def render_text(field, value, on_change=None, on_blur=None, error=None, disabled=False):
    return _control(field.type, field, "" if value is None else value, on_change, on_blur, error, disabled)


def validate_email(value: Any, field: BaseField) -> FieldValidationError | None:
    try:
        _email_adapter.validate_python(str(value).strip())
    except ValidationError:
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            field.messages.type or field.messages.pattern or "Please enter a valid email address",
            expected="email",
            received=value,
        )
    return None


def validate_url(value: Any, field: BaseField) -> FieldValidationError | None:
    try:
        _url_adapter.validate_python(str(value).strip())
    except ValidationError:
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            field.messages.type or "Please enter a valid URL",
            expected="url",
            received=value,
        )
    return None


def validate_tel(value: Any, field: BaseField) -> FieldValidationError | None:
    text = str(value).strip()
    digits = sum(char.isdigit() for char in text)
    if not PHONE_PATTERN.match(text) or digits < MIN_PHONE_DIGITS:
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            field.messages.type or "Please enter a valid phone number",
            expected="tel",
            received=value,
        )
    return None


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else ("" if value is None else value)


# Number


def render_number(field, value, on_change=None, on_blur=None, error=None, disabled=False):
    rules = field.rules
    return _control(
        "number", field, "" if value is None else value, on_change, on_blur, error, disabled,
        min=rules.min, max=rules.max,
    )


def validate_number(value: Any, field: BaseField) -> FieldValidationError | None:
    if parse_number(value) is None:
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            field.messages.type or "Please enter a valid number",
            expected="number",
            received=value,
        )
    return None


def transform_number(value: Any) -> Any:
    number = parse_number(value)
    if number is None:
        return "" if value is None else value
    return int(number) if number.is_integer() else number


# Textarea


def render_textarea(field: TextareaField, value, on_change=None, on_blur=None, error=None, disabled=False):
    return _control(
        "textarea", field, "" if value is None else value, on_change, on_blur, error, disabled,
        rows=field.rows or 3,
    )


# Dropdown


def render_dropdown(field: DropdownField, value, on_change=None, on_blur=None, error=None, disabled=False):
    current = _as_list(value) if field.multiple else ("" if value is None else value)
    return _control(
        "select", field, current, on_change, on_blur, error, disabled,
        options=list(field.options), multiple=field.multiple,
    )


def validate_dropdown(value: Any, field: DropdownField) -> FieldValidationError | None:
    if not field.multiple and isinstance(value, (list, tuple, set)):
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            field.messages.type or "Please select a single option",
            received=value,
        )
    return _check_membership(field, _as_list(value))


# Checkbox


def render_checkbox(field: CheckboxField, value, on_change=None, on_blur=None, error=None, disabled=False):
    if field.is_group:
        return _control(
            "checkboxes", field, _as_list(value), on_change, on_blur, error, disabled,
            options=list(field.options), multiple=True,
        )
    return _control("checkbox", field, bool(value), on_change, on_blur, error, disabled)


def validate_checkbox(value: Any, field: CheckboxField) -> FieldValidationError | None:
    if field.is_group:
        selected = _drop_empty(_as_list(value))
        if field.required and not selected:
            return failure(
                field,
                ValidationErrorKind.REQUIRED,
                field.messages.required or f"{field.display_label} is required",
                received=value,
            )
        return _check_membership(field, selected)
    if field.required and value is not True:
        return failure(
            field,
            ValidationErrorKind.REQUIRED,
            field.messages.required or "This field must be checked",
            received=value,
        )
    return None


def transform_checkbox(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return _drop_empty(value)
    return bool(value)


def _checkbox_initial(field: CheckboxField) -> Any:
    return [] if field.is_group else field.checked


# Radio


def render_radio(field: RadioField, value, on_change=None, on_blur=None, error=None, disabled=False):
    return _control(
        "radio", field, "" if value is None else value, on_change, on_blur, error, disabled,
        options=list(field.options),
    )


def validate_radio(value: Any, field: RadioField) -> FieldValidationError | None:
    if isinstance(value, (list, tuple, set)):
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            field.messages.type or "Please select a single option",
            received=value,
        )
    return _check_membership(field, [value])


# Date


def render_date(field: DateField, value, on_change=None, on_blur=None, error=None, disabled=False):
    rules = field.rules
    return _control(
        "date", field, "" if value is None else value, on_change, on_blur, error, disabled,
        min=field.min_date or rules.min, max=field.max_date or rules.max,
    )


def validate_date(value: Any, field: DateField) -> FieldValidationError | None:
    moment = parse_date(value)
    if moment is None:
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            field.messages.type or "Please enter a valid date",
            expected="date",
            received=value,
        )

    earliest = parse_date(field.min_date) if field.min_date else None
    latest = parse_date(field.max_date) if field.max_date else None
    if earliest is not None and moment < earliest:
        return failure(
            field,
            ValidationErrorKind.RANGE,
            field.messages.min_date or f"Date must be on or after {format_date(earliest)}",
            expected=field.min_date,
            received=value,
        )
    if latest is not None and moment > latest:
        return failure(
            field,
            ValidationErrorKind.RANGE,
            field.messages.max_date or f"Date must be on or before {format_date(latest)}",
            expected=field.max_date,
            received=value,
        )
    return None


BUILTIN_TYPES: list[FieldTypeDescriptor] = [
    FieldTypeDescriptor(
        type="text",
        config=FieldTypeConfig(
            name="Text Input",
            description="A single line text input field",
            default_options={"label": "Text Input", "placeholder": "Enter text"},
        ),
        renderer=render_text,
        transform_value=_strip,
        field_model=TextField,
    ),
    FieldTypeDescriptor(
        type="textarea",
        config=FieldTypeConfig(
            name="Text Area",
            description="A multi-line text input field",
            default_options={"label": "Your message", "placeholder": "Enter text", "rows": 4},
        ),
        renderer=render_textarea,
        transform_value=_strip,
        field_model=TextareaField,
    ),
    FieldTypeDescriptor(
        type="dropdown",
        config=FieldTypeConfig(
            name="Dropdown",
            description="A dropdown select input",
            default_options={"label": "Select an option", "options": DEFAULT_CHOICES, "multiple": False},
        ),
        renderer=render_dropdown,
        default_for_field=lambda field: [] if field.multiple else "",
        validate=validate_dropdown,
        transform_value=_drop_empty,
        value_kind="choice",
        field_model=DropdownField,
    ),
    FieldTypeDescriptor(
        type="checkbox",
        config=FieldTypeConfig(
            name="Checkbox",
            description="A single checkbox, or a group of checkboxes when options are set",
            default_options={"label": "Checkbox", "checked": False},
        ),
        renderer=render_checkbox,
        get_default_value=lambda: False,
        default_for_field=_checkbox_initial,
        validate=validate_checkbox,
        transform_value=transform_checkbox,
        value_kind="boolean",
        field_model=CheckboxField,
    ),
    FieldTypeDescriptor(
        type="radio",
        config=FieldTypeConfig(
            name="Radio Group",
            description="A group of radio buttons",
            default_options={"label": "Select an option", "options": DEFAULT_CHOICES},
        ),
        renderer=render_radio,
        validate=validate_radio,
        transform_value=_drop_empty,
        value_kind="choice",
        field_model=RadioField,
    ),
    FieldTypeDescriptor(
        type="date",
        config=FieldTypeConfig(
            name="Date Input",
            description="A date picker input",
            default_options={"label": "Date"},
        ),
        renderer=render_date,
        validate=validate_date,
        transform_value=_strip,
        value_kind="date",
        field_model=DateField,
    ),
    FieldTypeDescriptor(
        type="email",
        config=FieldTypeConfig(
            name="Email",
            description="An email address input",
            default_options={"label": "Email", "placeholder": "name@example.com"},
        ),
        renderer=render_text,
        validate=validate_email,
        transform_value=_strip,
        field_model=TextField,
    ),
    FieldTypeDescriptor(
        type="url",
        config=FieldTypeConfig(
            name="Website",
            description="A web address input",
            default_options={"label": "Website", "placeholder": "https://"},
        ),
        renderer=render_text,
        validate=validate_url,
        transform_value=_strip,
        field_model=TextField,
    ),
    FieldTypeDescriptor(
        type="tel",
        config=FieldTypeConfig(
            name="Phone",
            description="A phone number input",
            default_options={"label": "Phone number"},
        ),
        renderer=render_text,
        validate=validate_tel,
        transform_value=_strip,
        field_model=TextField,
    ),
    FieldTypeDescriptor(
        type="number",
        config=FieldTypeConfig(
            name="Number",
            description="A numeric input",
            default_options={"label": "Number"},
        ),
        renderer=render_number,
        validate=validate_number,
        transform_value=transform_number,
        value_kind="number",
        field_model=NumberField,
    ),
]


def register_builtin_types(registry: FieldTypeRegistry) -> FieldTypeRegistry:
    """Register every built-in field type; already known tags are skipped."""
    for descriptor in BUILTIN_TYPES:
        registry.register(descriptor.type, descriptor)
    return registry


def create_default_registry() -> FieldTypeRegistry:
    """A fresh registry holding the built-in field types."""
    return register_builtin_types(FieldTypeRegistry())
