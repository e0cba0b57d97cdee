"""
Submission surface.

Turns a list of field definitions into a value-collection flow: seed
values, track which fields were touched, validate live once a field has
been left, and on submit either surface every error or emit a
normalized ``ResponseRecord``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from formcraft.models.field_definitions import BaseField, parse_field
from formcraft.models.form import FieldResponse, FormDefinition, ResponseRecord
from formcraft.models.rendering import RenderedControl
from formcraft.models.validation_result import ValidationResult
from formcraft.registry import FieldTypeRegistry
from formcraft.validation import validate_field, validate_form

logger = logging.getLogger("formcraft.submission")

SubmitListener = Callable[[ResponseRecord], None]


@dataclass
class SubmissionOutcome:
    """What happened on submit: the validation result and, if valid, the record."""

    validation: ValidationResult
    response: ResponseRecord | None = None

    @property
    def submitted(self) -> bool:
        return self.response is not None


@dataclass
class FormSubmission:
    """
    Value map, touched set and error map for one person filling in a form.

    Usage:
        submission = FormSubmission(registry, form.fields, form_id=form.id)
        submission.change(email_field.id, "someone@example.com")
        submission.blur(email_field.id)
        outcome = submission.submit()
        if outcome.submitted:
            store(outcome.response)
        else:
            show(submission.errors)
    """

    registry: FieldTypeRegistry
    fields: list[BaseField]
    form_id: str | None = None
    on_submit: SubmitListener | None = None
    initial_values: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None

    values: dict[str, Any] = field(default_factory=dict, init=False)
    errors: dict[str, str] = field(default_factory=dict, init=False)
    touched: set[str] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        self.fields = [parse_field(item) for item in self.fields]
        self.reset()

    @classmethod
    def for_form(
        cls,
        registry: FieldTypeRegistry,
        form: FormDefinition,
        on_submit: SubmitListener | None = None,
    ) -> "FormSubmission":
        return cls(registry, list(form.fields), form_id=form.id, on_submit=on_submit)

    def reset(self) -> None:
        """Seed the value map from defaults and forget touched state and errors."""
        self.values = {field.id: self.registry.initial_value(field) for field in self.fields}
        if self.initial_values:
            self.values.update(self.initial_values)
        self.errors = {}
        self.touched = set()

    def _field(self, field_id: str) -> BaseField:
        for candidate in self.fields:
            if candidate.id == field_id:
                return candidate
        raise KeyError(f"Unknown field id: {field_id}")

    def _revalidate(self, target: BaseField) -> str | None:
        error = validate_field(target, self.values.get(target.id), self.registry)
        if error:
            self.errors[target.id] = error
        else:
            self.errors.pop(target.id, None)
        return error

    def change(self, field_id: str, value: Any) -> str | None:
        """
        Record a new value.

        Touched fields are re-validated immediately; for untouched fields
        any stale error is cleared and validation waits for blur or submit.

        Raises:
            KeyError: If ``field_id`` is not a field of this form.
        """
        target = self._field(field_id)
        self.values[field_id] = value
        if field_id in self.touched:
            return self._revalidate(target)
        self.errors.pop(field_id, None)
        return None

    def blur(self, field_id: str) -> str | None:
        """Mark a field as touched and validate it."""
        target = self._field(field_id)
        self.touched.add(field_id)
        return self._revalidate(target)

    def submit(self) -> SubmissionOutcome:
        """
        Validate every field and emit a response record if all pass.

        On failure all fields are marked touched and the error map is
        replaced; nothing is emitted.
        """
        result = validate_form(self.fields, self.values, self.registry)
        self.errors = dict(result.errors)
        if not result.is_valid:
            self.touched = {field.id for field in self.fields}
            logger.info(f"Submission blocked by {result.error_count} invalid field(s)")
            return SubmissionOutcome(validation=result)

        record = ResponseRecord(
            form_id=self.form_id,
            responses=tuple(
                FieldResponse(field_id=field.id, value=self._normalized(field)) for field in self.fields
            ),
            metadata=self.metadata,
        )
        logger.info(f"Form '{self.form_id}' submitted with {len(record.responses)} values")
        if self.on_submit is not None:
            self.on_submit(record)
        return SubmissionOutcome(validation=result, response=record)

    def _normalized(self, target: BaseField) -> Any:
        value = self.registry.transform_value(target.type, self.values.get(target.id))
        return "" if value is None else value

    def render(self, disabled: bool = False) -> list[RenderedControl]:
        """Render every field, in order, bound to ``change`` and ``blur``."""
        controls = []
        for target in self.fields:
            field_id = target.id
            controls.append(
                self.registry.render(
                    target,
                    self.values.get(field_id),
                    on_change=lambda value, field_id=field_id: self.change(field_id, value),
                    on_blur=lambda field_id=field_id: self.blur(field_id),
                    error=self.errors.get(field_id),
                    disabled=disabled,
                )
            )
        return controls


def collect_response(
    registry: FieldTypeRegistry,
    fields: Iterable[BaseField | dict[str, Any]],
    values: dict[str, Any],
    form_id: str | None = None,
) -> SubmissionOutcome:
    """One-shot submit of a complete value map (no touched tracking)."""
    submission = FormSubmission(registry, list(fields), form_id=form_id, initial_values=values)
    return submission.submit()
