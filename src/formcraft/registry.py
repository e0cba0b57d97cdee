"""
Field type registry.

The registry is the single place that maps a field type tag to its
behavior: how it renders, what its empty value is, how it validates and
how raw input is normalized. The builder and submission surfaces only
ever talk to a registry instance, never to a concrete field type.

A registry is an ordinary object. Build one with
``formcraft.field_types.create_default_registry()`` (or an empty
``FieldTypeRegistry()``) and pass it to the surfaces that need it.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

from formcraft.models.field_definitions import BaseField, CustomField
from formcraft.models.rendering import RenderedControl
from formcraft.models.validation_result import FieldValidationError, ValidationErrorKind

logger = logging.getLogger("formcraft.registry")

ValueKind = Literal["string", "number", "date", "choice", "boolean"]

Renderer = Callable[..., RenderedControl]
"""``(field, value, on_change, on_blur=None, error=None, disabled=False) -> RenderedControl``"""

Validator = Callable[[Any, BaseField], FieldValidationError | str | None]


class UnknownFieldTypeError(LookupError):
    """Raised when a field type tag is required but was never registered."""

    def __init__(self, type_tag: str):
        super().__init__(f"Unknown field type: {type_tag!r}")
        self.type_tag = type_tag


def _empty_string() -> str:
    return ""


@dataclass(frozen=True)
class FieldTypeConfig:
    """Palette metadata for a field type."""

    name: str
    description: str = ""
    default_options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldTypeDescriptor:
    """Everything the registry knows about one field type."""

    type: str
    config: FieldTypeConfig
    renderer: Renderer
    get_default_value: Callable[[], Any] = _empty_string
    default_for_field: Callable[[BaseField], Any] | None = None
    validate: Validator | None = None
    transform_value: Callable[[Any], Any] | None = None
    value_kind: ValueKind = "string"
    field_model: type[BaseField] = CustomField


class FieldTypeRegistry:
    """
    Catalog of field types, keyed by type tag.

    Registration is idempotent: registering a tag that is already known
    logs a warning and keeps the first descriptor.
    """

    def __init__(self) -> None:
        self._types: dict[str, FieldTypeDescriptor] = {}

    def register(self, type_tag: str, descriptor: FieldTypeDescriptor) -> bool:
        """
        Add a field type.

        Args:
            type_tag: Tag stored in ``FieldDefinition.type``.
            descriptor: Behavior bundle for the tag.

        Returns:
            True if the type was added, False if the tag was already registered.
        """
        if descriptor.type != type_tag:
            raise ValueError(
                f"Descriptor type {descriptor.type!r} does not match tag {type_tag!r}"
            )
        if type_tag in self._types:
            logger.warning(f"Field type '{type_tag}' is already registered")
            return False
        self._types[type_tag] = descriptor
        logger.debug(f"Registered field type '{type_tag}'")
        return True

    def get(self, type_tag: str) -> FieldTypeDescriptor | None:
        return self._types.get(type_tag)

    def require(self, type_tag: str) -> FieldTypeDescriptor:
        """Like ``get`` but raises ``UnknownFieldTypeError`` for unknown tags."""
        try:
            return self._types[type_tag]
        except KeyError:
            raise UnknownFieldTypeError(type_tag) from None

    def get_all(self) -> list[FieldTypeDescriptor]:
        """All descriptors, in registration order."""
        return list(self._types.values())

    def get_config(self, type_tag: str) -> FieldTypeConfig | None:
        descriptor = self._types.get(type_tag)
        return descriptor.config if descriptor else None

    def get_default_value(self, type_tag: str) -> Any:
        descriptor = self._types.get(type_tag)
        return descriptor.get_default_value() if descriptor else ""

    def initial_value(self, field: BaseField) -> Any:
        """
        Seed value for a field: its own ``default_value`` when set, else the
        type default (which may depend on the field, e.g. a multi-select
        dropdown starts as an empty list).
        """
        if field.default_value is not None:
            return copy.deepcopy(field.default_value)
        descriptor = self._types.get(field.type)
        if descriptor is not None and descriptor.default_for_field is not None:
            return descriptor.default_for_field(field)
        return self.get_default_value(field.type)

    def value_kind(self, type_tag: str) -> ValueKind:
        descriptor = self._types.get(type_tag)
        return descriptor.value_kind if descriptor else "string"

    def check(self, type_tag: str, value: Any, field: BaseField) -> FieldValidationError | None:
        """
        Run the type's own validator and return a structured failure.

        Unknown tags and types without a validator pass. A validator that
        returns a bare string is reported as a format failure.
        """
        descriptor = self._types.get(type_tag)
        if descriptor is None or descriptor.validate is None:
            return None
        outcome = descriptor.validate(value, field)
        if not outcome:
            return None
        if isinstance(outcome, FieldValidationError):
            return outcome
        return FieldValidationError(
            field_id=field.id,
            error_type=ValidationErrorKind.FORMAT,
            message=str(outcome),
            received=value,
        )

    def validate(self, type_tag: str, value: Any, field: BaseField) -> str | None:
        """Run the type's own validator; returns an error message or None."""
        failure = self.check(type_tag, value, field)
        return failure.message if failure else None

    def transform_value(self, type_tag: str, value: Any) -> Any:
        descriptor = self._types.get(type_tag)
        if descriptor is None or descriptor.transform_value is None:
            return value
        return descriptor.transform_value(value)

    def render(
        self,
        field: BaseField,
        value: Any,
        on_change: Callable[[Any], None] | None = None,
        on_blur: Callable[[], None] | None = None,
        error: str | None = None,
        disabled: bool = False,
    ) -> RenderedControl:
        """Render a field with its type's renderer (plain text control if unknown)."""
        descriptor = self._types.get(field.type)
        if descriptor is None:
            logger.debug(f"No renderer for field type '{field.type}', using text")
            return RenderedControl(
                widget="text",
                field_id=field.id,
                label=field.label,
                value="" if value is None else value,
                required=field.required,
                disabled=disabled,
                placeholder=field.placeholder,
                help_text=field.help_text,
                error=error,
                on_change=on_change,
                on_blur=on_blur,
            )
        return descriptor.renderer(field, value, on_change, on_blur, error, disabled)

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._types

    def __len__(self) -> int:
        return len(self._types)
