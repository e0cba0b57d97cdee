"""
Reading stored responses back against the current form definition.

Fields can be edited or removed after responses were collected, so a
stored ``field_id`` may no longer exist. Lookups here are nullable:
unknown ids get a generic label and their raw value is shown as is.
"""

import csv
import io
from dataclasses import dataclass
from typing import Any, Iterable

from formcraft.config import get_config
from formcraft.models.field_definitions import BaseField
from formcraft.models.form import ResponseRecord


@dataclass(frozen=True)
class ResolvedResponse:
    """One stored value paired with its (possibly missing) field."""

    field_id: str
    label: str
    value: Any
    field: BaseField | None

    @property
    def dangling(self) -> bool:
        return self.field is None


def unknown_field_label(field_id: str) -> str:
    return f"{get_config().unknown_field_label} ({field_id})"


def format_value(value: Any) -> str:
    """Display form of a stored value: lists joined, booleans as Yes/No."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(item) for item in value)
    return str(value)


def resolve_responses(record: ResponseRecord, fields: Iterable[BaseField]) -> list[ResolvedResponse]:
    """Pair each stored entry with the current field definition, in stored order."""
    by_id = {field.id: field for field in fields}
    resolved = []
    for entry in record.responses:
        field = by_id.get(entry.field_id)
        label = field.label if field is not None else unknown_field_label(entry.field_id)
        resolved.append(ResolvedResponse(entry.field_id, label, entry.value, field))
    return resolved


def export_responses_csv(records: Iterable[ResponseRecord], fields: Iterable[BaseField]) -> str:
    """
    Export responses as CSV text.

    Columns: ``Submitted At``, then one column per current field in form
    order, then one column per field id that only exists in old
    responses (first-seen order).
    """
    records = list(records)
    fields = list(fields)
    column_ids = [field.id for field in fields]
    headers = ["Submitted At"] + [field.label for field in fields]

    known = set(column_ids)
    for record in records:
        for entry in record.responses:
            if entry.field_id not in known:
                known.add(entry.field_id)
                column_ids.append(entry.field_id)
                headers.append(unknown_field_label(entry.field_id))

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(headers)
    for record in records:
        values = {entry.field_id: entry.value for entry in record.responses}
        submitted = record.submitted_at.isoformat() if record.submitted_at else ""
        writer.writerow([submitted] + [format_value(values.get(field_id)) for field_id in column_ids])
    return buffer.getvalue()
