"""
Form and response models.

A form exclusively owns its ordered field list. Responses reference
fields by id only, so a stored response may point at a field that has
since been edited or removed.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from formcraft.models.field_definitions import BaseField, CamelModel, FieldDefinition


class FormSettings(CamelModel):
    """Per-form presentation and collection settings."""

    allow_multiple_responses: bool = True
    custom_success_message: str = "Thank you for your response."
    custom_error_message: str = "Please fix the errors below."
    response_limit: int | None = None
    submit_button_text: str = "Submit"
    theme: Literal["light", "dark"] = "light"


class FormDefinition(CamelModel):
    """
    A form: title, settings and the ordered list of field definitions.

    Field order is significant. It is both the render order and the
    column order of exported responses. Storage ids and timestamps are
    attached by the persistence layer.
    """

    id: str | None = None
    title: str = ""
    description: str | None = None
    fields: list[FieldDefinition] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published: bool = False
    created_by: str | None = None
    custom_slug: str | None = None
    settings: FormSettings = Field(default_factory=FormSettings)

    def get_field(self, field_id: str) -> BaseField | None:
        """Look up a field by id; None when the id is not (or no longer) present."""
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def to_storage(self) -> dict[str, Any]:
        """Plain-dict shape handed to the persistence collaborator."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class FieldResponse(CamelModel):
    """One submitted value, keyed by field id."""

    model_config = {"frozen": True}

    field_id: str
    value: Any = ""


class ResponseRecord(CamelModel):
    """The result of one successful submission. Immutable once created."""

    model_config = {"frozen": True}

    id: str | None = None
    form_id: str | None = None
    responses: tuple[FieldResponse, ...] = ()
    submitted_at: datetime | None = None
    metadata: dict[str, Any] | None = None

    def value_for(self, field_id: str, default: Any = None) -> Any:
        for entry in self.responses:
            if entry.field_id == field_id:
                return entry.value
        return default

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
