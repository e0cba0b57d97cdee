"""
Form builder surface.

Keeps the ordered list of field definitions a user is editing. Every
operation is an immediate in-memory mutation; saving the list is left to
whoever listens on ``on_change``.
"""

import copy
import logging
from typing import Any, Callable, Iterable

from formcraft.models.field_definitions import BaseField, Option, get_options, parse_field
from formcraft.registry import FieldTypeRegistry

logger = logging.getLogger("formcraft.builder")

FieldsListener = Callable[[list[BaseField]], None]

_IMMUTABLE_ATTRIBUTES = {"id", "type"}


def _attribute_names(model: type[BaseField]) -> dict[str, str]:
    """Map both attribute names and camelCase aliases to attribute names."""
    names: dict[str, str] = {}
    for name, info in model.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


def array_move(items: list, from_index: int, to_index: int) -> list:
    """Move one element in place, shifting the others. Returns ``items``."""
    size = len(items)
    if not (-size <= from_index < size) or not (-size <= to_index < size):
        raise IndexError(f"Cannot move index {from_index} to {to_index} in a list of {size}")
    if from_index % size == to_index % size:
        return items
    items.insert(to_index % size, items.pop(from_index))
    return items


class FormBuilder:
    """
    Editable, ordered list of field definitions.

    Usage:
        registry = create_default_registry()
        builder = FormBuilder(registry, on_change=save_fields)

        field = builder.add_field("dropdown")
        builder.update_field(field.id, {"label": "Favourite colour"})
        builder.reorder_fields(0, 2)
        builder.delete_field(field.id)
    """

    def __init__(
        self,
        registry: FieldTypeRegistry,
        fields: Iterable[BaseField | dict[str, Any]] | None = None,
        on_change: FieldsListener | None = None,
    ):
        """
        Initialize the builder.

        Args:
            registry: Registry used to resolve field types and their defaults.
            fields: Existing definitions (models or stored dicts), in order.
            on_change: Called with a copy of the field list after every mutation.
        """
        self.registry = registry
        self.on_change = on_change
        self._fields: list[BaseField] = [parse_field(item) for item in fields or []]
        self._selected_id: str | None = None

    @property
    def fields(self) -> list[BaseField]:
        return list(self._fields)

    @property
    def selected(self) -> BaseField | None:
        return self.get_field(self._selected_id) if self._selected_id else None

    def __len__(self) -> int:
        return len(self._fields)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.fields)

    def _index_of(self, field_id: str) -> int | None:
        for index, field in enumerate(self._fields):
            if field.id == field_id:
                return index
        return None

    def get_field(self, field_id: str) -> BaseField | None:
        index = self._index_of(field_id)
        return self._fields[index] if index is not None else None

    def select_field(self, field_id: str | None) -> BaseField | None:
        """Mark a field as the one open in the editor (None clears the selection)."""
        self._selected_id = field_id if field_id and self._index_of(field_id) is not None else None
        return self.selected

    def add_field(self, type_tag: str, **overrides: Any) -> BaseField:
        """
        Append a new field of a registered type and select it.

        The new field starts from the type's default attributes, gets a
        fresh id, and then takes ``overrides``.

        Raises:
            UnknownFieldTypeError: If ``type_tag`` is not registered.
        """
        descriptor = self.registry.require(type_tag)
        data: dict[str, Any] = {"label": descriptor.config.name}
        data.update(copy.deepcopy(descriptor.config.default_options))
        data.update({key: value for key, value in overrides.items() if key not in _IMMUTABLE_ATTRIBUTES})
        data["type"] = type_tag

        field = descriptor.field_model.model_validate(data)
        self._fields.append(field)
        self._selected_id = field.id
        logger.debug(f"Added {type_tag} field '{field.id}'")
        self._notify()
        return field

    def update_field(self, field_id: str, attributes: dict[str, Any]) -> BaseField | None:
        """
        Merge attributes into a field.

        Keys may use attribute names or their camelCase storage aliases.
        ``id`` and ``type`` are never changed. An unknown id is a no-op
        and returns None.
        """
        index = self._index_of(field_id)
        if index is None:
            logger.debug(f"Ignoring update for unknown field '{field_id}'")
            return None

        current = self._fields[index]
        model = type(current)
        names = _attribute_names(model)
        updates: dict[str, Any] = {}
        for key, value in attributes.items():
            name = names.get(key, key)
            if name in _IMMUTABLE_ATTRIBUTES:
                continue
            updates[name] = value

        data = current.model_dump()
        data.update(updates)
        updated = model.model_validate(data)

        # custom_validation is not part of the dump; carry it over unless replaced
        custom = current.validation.custom_validation if current.validation else None
        if custom is not None and updated.validation is not None and updated.validation.custom_validation is None:
            replaced = updates.get("validation")
            if replaced is None or not _sets_custom(replaced):
                updated.validation.custom_validation = custom

        self._fields[index] = updated
        self._notify()
        return updated

    def delete_field(self, field_id: str) -> bool:
        """Remove a field by id; returns False when the id is unknown."""
        index = self._index_of(field_id)
        if index is None:
            return False
        del self._fields[index]
        if self._selected_id == field_id:
            self._selected_id = None
        logger.debug(f"Deleted field '{field_id}'")
        self._notify()
        return True

    def reorder_fields(self, from_index: int, to_index: int) -> list[BaseField]:
        """
        Move the field at ``from_index`` to ``to_index``.

        Raises:
            IndexError: If either index is out of range.
        """
        array_move(self._fields, from_index, to_index)
        self._notify()
        return self.fields

    def move_field(self, field_id: str, over_id: str) -> list[BaseField]:
        """Drag-and-drop move: put ``field_id`` where ``over_id`` currently is."""
        old_index = self._index_of(field_id)
        new_index = self._index_of(over_id)
        if old_index is None or new_index is None or old_index == new_index:
            return self.fields
        return self.reorder_fields(old_index, new_index)

    def add_option(self, field_id: str, label: str = "", value: str = "") -> Option | None:
        """Append an option to an option-bearing field."""
        field = self.get_field(field_id)
        if field is None or not hasattr(field, "options"):
            return None
        option = Option(label=label, value=value)
        options = list(get_options(field) or [])
        options.append(option)
        self.update_field(field_id, {"options": options})
        return option

    def remove_option(self, field_id: str, option_id: str) -> bool:
        field = self.get_field(field_id)
        options = get_options(field) if field is not None else None
        if not options:
            return False
        remaining = [option for option in options if option.id != option_id]
        if len(remaining) == len(options):
            return False
        self.update_field(field_id, {"options": remaining})
        return True

    def to_storage(self) -> list[dict[str, Any]]:
        """Plain-dict field list for the persistence collaborator."""
        return [
            field.model_dump(by_alias=True, mode="json", exclude_none=True)
            for field in self._fields
        ]

    @classmethod
    def from_storage(
        cls,
        registry: FieldTypeRegistry,
        data: Iterable[dict[str, Any]],
        on_change: FieldsListener | None = None,
    ) -> "FormBuilder":
        return cls(registry, fields=data, on_change=on_change)


def _sets_custom(validation: Any) -> bool:
    if isinstance(validation, dict):
        return validation.get("custom_validation") is not None or validation.get("customValidation") is not None
    return getattr(validation, "custom_validation", None) is not None
