"""
Framework-neutral render output.

Renderers return a ``RenderedControl``: everything a host UI needs to
draw one input, plus the callbacks bound to it. The callbacks are not
serialized; ``to_ui_schema`` exports the static part in the
react-jsonschema-form ``ui:*`` vocabulary.
"""

from typing import Any, Callable

from pydantic import BaseModel, Field

from formcraft.models.field_definitions import Option


class RenderedControl(BaseModel):
    """One control ready to be drawn by a UI layer."""

    model_config = {"arbitrary_types_allowed": True}

    widget: str = Field(..., description="Widget name: text, email, textarea, select, ...")
    field_id: str = Field(..., description="Id of the rendered field")
    label: str = Field(default="", description="Human-readable label")
    value: Any = Field(default=None, description="Current value")
    required: bool = Field(default=False)
    disabled: bool = Field(default=False)
    placeholder: str | None = Field(default=None)
    help_text: str | None = Field(default=None)
    error: str | None = Field(default=None, description="Error shown next to the control")
    options: list[Option] = Field(default_factory=list)
    multiple: bool = Field(default=False)
    rows: int | None = Field(default=None)
    min: Any | None = Field(default=None)
    max: Any | None = Field(default=None)

    on_change: Callable[[Any], None] | None = Field(default=None, exclude=True)
    on_blur: Callable[[], None] | None = Field(default=None, exclude=True)

    @property
    def invalid(self) -> bool:
        return self.error is not None

    def to_ui_schema(self) -> dict[str, Any]:
        """Export as a UI Schema dict."""
        ui: dict[str, Any] = {"ui:widget": self.widget}
        if self.placeholder:
            ui["ui:placeholder"] = self.placeholder
        if self.help_text:
            ui["ui:help"] = self.help_text
        if self.disabled:
            ui["ui:disabled"] = True

        options: dict[str, Any] = {}
        if self.rows is not None:
            options["rows"] = self.rows
        if self.multiple:
            options["multiple"] = True
        if self.options:
            options["enumOptions"] = [
                {"label": option.label, "value": option.value} for option in self.options
            ]
        if self.min is not None:
            options["min"] = self.min
        if self.max is not None:
            options["max"] = self.max
        if options:
            ui["ui:options"] = options
        return ui
