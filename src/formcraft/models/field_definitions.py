"""
Field definition models for the form builder.

A field definition is the declarative description of one form input:
its type tag, label, rules and display attributes. It never holds a
submitted value. Definitions are stored as plain dicts with camelCase
keys (``helpText``, ``errorMessages``...) and are modelled here as a
discriminated union on ``type``.
"""

import uuid
from typing import Annotated, Any, Callable, Literal, Union

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter
from pydantic.alias_generators import to_camel

from formcraft.config import get_config


def new_field_id() -> str:
    """Generate a collision-resistant field identifier."""
    return f"{get_config().field_id_prefix}-{uuid.uuid4().hex[:12]}"


def new_option_id() -> str:
    """Generate a collision-resistant option identifier."""
    return uuid.uuid4().hex


class CamelModel(BaseModel):
    """Base model that reads and writes the camelCase storage shape."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class Option(CamelModel):
    """One selectable choice of a dropdown, radio or checkbox group."""

    id: str = Field(default_factory=new_option_id, description="Unique within the parent field")
    label: str = Field(default="", description="Display text")
    value: str = Field(default="", description="Wire value submitted for this choice")


class ValidationRules(CamelModel):
    """
    Rule set attached to a field.

    ``min``/``max`` are numbers for numeric fields and ISO date strings
    for date fields. ``custom_validation`` is a callable returning an
    error string (or None) and is never serialized.
    """

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    min: int | float | str | None = None
    max: int | float | str | None = None
    custom_validation: Callable[[Any], str | None] | None = Field(default=None, exclude=True)


class ErrorMessages(CamelModel):
    """
    Per-rule message overrides.

    ``type`` replaces format failures. Email fields also fall back to
    ``pattern`` for their format message.
    """

    required: str | None = None
    min_length: str | None = None
    max_length: str | None = None
    pattern: str | None = None
    min: str | None = None
    max: str | None = None
    min_date: str | None = None
    max_date: str | None = None
    type: str | None = None
    option: str | None = None
    custom_validation: str | None = None


class BaseField(CamelModel):
    """Attributes shared by every field variant."""

    id: str = Field(default_factory=new_field_id, frozen=True)
    type: str
    label: str = ""
    required: bool = False
    placeholder: str | None = None
    help_text: str | None = None
    description: str | None = None
    default_value: Any = None
    validation: ValidationRules | None = None
    error_messages: ErrorMessages | None = None

    @property
    def rules(self) -> ValidationRules:
        return self.validation or ValidationRules()

    @property
    def messages(self) -> ErrorMessages:
        return self.error_messages or ErrorMessages()

    @property
    def display_label(self) -> str:
        return self.label.strip() or "This field"


class TextField(BaseField):
    """Single line input. ``email``, ``url`` and ``tel`` add a format check."""

    type: Literal["text", "email", "url", "tel"] = "text"


class NumberField(BaseField):
    type: Literal["number"] = "number"


class TextareaField(BaseField):
    type: Literal["textarea"] = "textarea"
    rows: int = 4


class DropdownField(BaseField):
    type: Literal["dropdown"] = "dropdown"
    options: list[Option] = Field(default_factory=list)
    multiple: bool = False


class CheckboxField(BaseField):
    """
    Checkbox field.

    Without ``options`` it is a single boolean toggle; with ``options``
    it is a multi-select group whose value is a list of option values.
    """

    type: Literal["checkbox"] = "checkbox"
    options: list[Option] | None = None
    checked: bool = False

    @property
    def is_group(self) -> bool:
        return self.options is not None


class RadioField(BaseField):
    type: Literal["radio"] = "radio"
    options: list[Option] = Field(default_factory=list)


class DateField(BaseField):
    type: Literal["date"] = "date"
    min_date: str | None = None
    max_date: str | None = None


class CustomField(BaseField):
    """Field of a type registered outside the built-in set. Extra keys are kept."""

    model_config = {"extra": "allow"}


_FIELD_TAGS = {
    "text": "text",
    "email": "text",
    "url": "text",
    "tel": "text",
    "number": "number",
    "textarea": "textarea",
    "dropdown": "dropdown",
    "checkbox": "checkbox",
    "radio": "radio",
    "date": "date",
}


def _field_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    return _FIELD_TAGS.get(kind, "custom")


FieldDefinition = Annotated[
    Union[
        Annotated[TextField, Tag("text")],
        Annotated[NumberField, Tag("number")],
        Annotated[TextareaField, Tag("textarea")],
        Annotated[DropdownField, Tag("dropdown")],
        Annotated[CheckboxField, Tag("checkbox")],
        Annotated[RadioField, Tag("radio")],
        Annotated[DateField, Tag("date")],
        Annotated[CustomField, Tag("custom")],
    ],
    Discriminator(_field_tag),
]

_field_adapter: TypeAdapter = TypeAdapter(FieldDefinition)


def parse_field(data: dict[str, Any] | BaseField) -> BaseField:
    """
    Build the matching field variant from a stored dict.

    Raises:
        pydantic.ValidationError: If the definition is malformed
            (for example it has no ``type``).
    """
    if isinstance(data, BaseField):
        return data
    return _field_adapter.validate_python(data)


def get_options(field: BaseField) -> list[Option] | None:
    """Return the field's option list, or None for types without options."""
    return getattr(field, "options", None)
