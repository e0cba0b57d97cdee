"""
Validation engine.

Decides whether a value satisfies a field's constraints and aggregates
the outcome across a form. Expected failures are return values, never
exceptions, and every failing field gets exactly one message: the first
rule that fails wins.

Order of checks for one field:

1. Empty and optional: pass, no other rule runs.
2. Empty and required: required failure.
3. Generic rules from ``field.validation``: ``min_length``,
   ``max_length``, ``pattern``, ``min``/``max`` and
   ``custom_validation``.
4. The field type's own validator from the registry (format checks,
   option membership, date bounds, checked toggles).

The module also holds the structural checks the builder runs on a field
definition before it is saved or the form is published.
"""

import logging
import math
import re
from datetime import date, datetime, time, timezone
from typing import Any, Iterable, Mapping

from formcraft.config import get_config
from formcraft.models.field_definitions import BaseField, get_options
from formcraft.models.form import FormDefinition
from formcraft.models.validation_result import (
    FieldValidationError,
    ValidationErrorKind,
    ValidationResult,
)
from formcraft.registry import FieldTypeRegistry

logger = logging.getLogger("formcraft.validation")


def is_empty(value: Any) -> bool:
    """
    None, blank strings and empty collections count as "no value".

    A collection whose items are all empty (``["", None]``) is empty too.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return all(is_empty(item) for item in value)
    return False


def _selected_items(value: Any) -> Any:
    """Drop empty entries from multi-valued input; other values pass through."""
    if isinstance(value, (list, tuple, set)):
        return [item for item in value if not is_empty(item)]
    return value


def parse_number(value: Any) -> float | None:
    """Parse a finite number; None when the value is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def parse_date(value: Any) -> datetime | None:
    """
    Parse an ISO date or datetime into a naive UTC instant.

    Date-only values are taken at midnight. Returns None for anything
    that cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except (ValueError, OverflowError):
            return None
    return parsed


def format_date(value: datetime) -> str:
    return value.strftime(get_config().date_display_format)


def failure(
    field: BaseField,
    kind: ValidationErrorKind,
    message: str,
    expected: Any = None,
    received: Any = None,
) -> FieldValidationError:
    return FieldValidationError(
        field_id=field.id,
        error_type=kind,
        message=message,
        expected=expected,
        received=received,
    )


def _length(value: Any) -> int:
    if isinstance(value, (list, tuple, set)):
        return len(value)
    return len(str(value))


def _check_length(field: BaseField, value: Any) -> FieldValidationError | None:
    rules = field.rules
    messages = field.messages
    if rules.min_length is None and rules.max_length is None:
        return None
    counts_items = isinstance(value, (list, tuple, set))
    length = _length(value)

    if rules.min_length is not None and length < rules.min_length:
        if counts_items:
            default = f"Select at least {rules.min_length} options"
        else:
            default = f"Must be at least {rules.min_length} characters"
        return failure(
            field,
            ValidationErrorKind.LENGTH,
            messages.min_length or default,
            expected=rules.min_length,
            received=length,
        )
    if rules.max_length is not None and length > rules.max_length:
        if counts_items:
            default = f"Select at most {rules.max_length} options"
        else:
            default = f"Must be at most {rules.max_length} characters"
        return failure(
            field,
            ValidationErrorKind.LENGTH,
            messages.max_length or default,
            expected=rules.max_length,
            received=length,
        )
    return None


def _check_pattern(field: BaseField, value: Any) -> FieldValidationError | None:
    pattern = field.rules.pattern
    if not pattern:
        return None
    try:
        regex = re.compile(pattern)
    except re.error as e:
        logger.warning(f"Skipping invalid pattern on field '{field.id}': {e}")
        return None

    candidates = value if isinstance(value, (list, tuple, set)) else [value]
    for candidate in candidates:
        if not regex.search(str(candidate)):
            return failure(
                field,
                ValidationErrorKind.PATTERN,
                field.messages.pattern or "Invalid format",
                expected=pattern,
                received=value,
            )
    return None


def _check_number_range(field: BaseField, value: Any) -> FieldValidationError | None:
    rules = field.rules
    messages = field.messages
    number = parse_number(value)
    if number is None:
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            messages.type or "Please enter a valid number",
            expected="number",
            received=value,
        )

    low = parse_number(rules.min) if rules.min is not None else None
    high = parse_number(rules.max) if rules.max is not None else None
    if low is not None and number < low:
        return failure(
            field,
            ValidationErrorKind.RANGE,
            messages.min or f"Value must be at least {rules.min}",
            expected=rules.min,
            received=value,
        )
    if high is not None and number > high:
        return failure(
            field,
            ValidationErrorKind.RANGE,
            messages.max or f"Value must be at most {rules.max}",
            expected=rules.max,
            received=value,
        )
    return None


def _check_date_range(field: BaseField, value: Any) -> FieldValidationError | None:
    rules = field.rules
    messages = field.messages
    moment = parse_date(value)
    if moment is None:
        return failure(
            field,
            ValidationErrorKind.FORMAT,
            messages.type or "Please enter a valid date",
            expected="date",
            received=value,
        )

    low = parse_date(rules.min) if rules.min is not None else None
    high = parse_date(rules.max) if rules.max is not None else None
    if low is not None and moment < low:
        return failure(
            field,
            ValidationErrorKind.RANGE,
            messages.min or f"Date must be on or after {format_date(low)}",
            expected=rules.min,
            received=value,
        )
    if high is not None and moment > high:
        return failure(
            field,
            ValidationErrorKind.RANGE,
            messages.max or f"Date must be on or before {format_date(high)}",
            expected=rules.max,
            received=value,
        )
    return None


def _check_range(
    field: BaseField, value: Any, registry: FieldTypeRegistry
) -> FieldValidationError | None:
    rules = field.rules
    if rules.min is None and rules.max is None:
        return None
    kind = registry.value_kind(field.type)
    if kind == "number":
        return _check_number_range(field, value)
    if kind == "date":
        return _check_date_range(field, value)
    return None


def _check_custom(field: BaseField, value: Any) -> FieldValidationError | None:
    validator = field.rules.custom_validation
    if validator is None:
        return None
    message = validator(value)
    if not message:
        return None
    return failure(
        field,
        ValidationErrorKind.CUSTOM,
        field.messages.custom_validation or message,
        received=value,
    )


def check_field(
    field: BaseField, value: Any, registry: FieldTypeRegistry
) -> FieldValidationError | None:
    """
    Validate one value against one field definition.

    Args:
        field: The field definition.
        value: Candidate value from the value map.
        registry: Registry supplying the type-specific validator.

    Returns:
        The first failure found, or None if the value is valid.
    """
    if is_empty(value):
        if not field.required:
            return None
        return failure(
            field,
            ValidationErrorKind.REQUIRED,
            field.messages.required or f"{field.display_label} is required",
            received=value,
        )

    value = _selected_items(value)
    for check in (_check_length, _check_pattern):
        problem = check(field, value)
        if problem:
            return problem

    problem = _check_range(field, value, registry)
    if problem:
        return problem

    problem = _check_custom(field, value)
    if problem:
        return problem

    return registry.check(field.type, value, field)


def validate_field(field: BaseField, value: Any, registry: FieldTypeRegistry) -> str | None:
    """Validate one value; returns the error message or None."""
    problem = check_field(field, value, registry)
    return problem.message if problem else None


def validate_form(
    fields: Iterable[BaseField],
    values: Mapping[str, Any],
    registry: FieldTypeRegistry,
) -> ValidationResult:
    """
    Validate every field of a form against ``values[field.id]``.

    The error map only holds failing fields and keeps field order.
    """
    errors: dict[str, str] = {}
    failures: list[FieldValidationError] = []

    for field in fields:
        problem = check_field(field, values.get(field.id), registry)
        if problem:
            errors[field.id] = problem.message
            failures.append(problem)

    return ValidationResult(is_valid=not errors, errors=errors, failures=failures)


def _compare_bounds(low: Any, high: Any) -> bool:
    """True when both bounds parse (as numbers or as dates) and low > high."""
    low_number, high_number = parse_number(low), parse_number(high)
    if low_number is not None and high_number is not None:
        return low_number > high_number
    low_date, high_date = parse_date(low), parse_date(high)
    if low_date is not None and high_date is not None:
        return low_date > high_date
    return False


def validate_field_definition(field: BaseField) -> dict[str, str]:
    """
    Structural checks for the field editor.

    Returns an error map keyed by attribute: ``label``, ``options``,
    ``option-<i>-label``, ``option-<i>-value`` and ``validation``.
    """
    errors: dict[str, str] = {}

    if not field.label.strip():
        errors["label"] = "Label is required"

    options = get_options(field)
    if options is not None:
        if not options:
            errors["options"] = "At least one option is required"
        seen: set[str] = set()
        for index, option in enumerate(options):
            if not option.label.strip():
                errors[f"option-{index}-label"] = "Option label is required"
            if not option.value.strip():
                errors[f"option-{index}-value"] = "Option value is required"
            elif option.value in seen:
                errors[f"option-{index}-value"] = "Option values must be unique"
            seen.add(option.value)

    rules = field.rules
    if (
        rules.min_length is not None
        and rules.max_length is not None
        and rules.min_length > rules.max_length
    ):
        errors["validation"] = "Minimum length cannot exceed maximum length"
    elif rules.pattern:
        try:
            re.compile(rules.pattern)
        except re.error as e:
            errors["validation"] = f"Invalid pattern: {e}"

    if "validation" not in errors:
        bounds = [(rules.min, rules.max)]
        if hasattr(field, "min_date"):
            bounds.append((field.min_date, field.max_date))
        for low, high in bounds:
            if low not in (None, "") and high not in (None, "") and _compare_bounds(low, high):
                errors["validation"] = "Minimum cannot exceed maximum"
                break

    return errors


def validate_form_definition(form: FormDefinition) -> dict[str, str]:
    """
    Publish-time check of a whole form.

    Returns an error map keyed by ``title`` and by field id; each field
    reports its first structural problem.
    """
    errors: dict[str, str] = {}
    if not form.title.strip():
        errors["title"] = "Title is required"

    seen: set[str] = set()
    for field in form.fields:
        if field.id in seen:
            errors[field.id] = "Duplicate field id"
            continue
        seen.add(field.id)
        problems = validate_field_definition(field)
        if problems:
            errors[field.id] = next(iter(problems.values()))
    return errors
