"""
MCP Tool definitions for formcraft.

Exposes the field registry, the builder and the validation engine as
MCP tools. Handlers are plain synchronous functions taking a registry
and the tool arguments and returning JSON-ready dicts.
"""

import logging
from typing import Any, Callable

from pydantic import ValidationError

from formcraft.builder import FormBuilder
from formcraft.models.field_definitions import parse_field
from formcraft.models.form import FormDefinition
from formcraft.registry import FieldTypeRegistry
from formcraft.submission import collect_response
from formcraft.validation import validate_form, validate_form_definition

logger = logging.getLogger("formcraft-mcp")

ToolHandler = Callable[[FieldTypeRegistry, dict[str, Any]], dict[str, Any]]


def list_field_types(registry: FieldTypeRegistry, arguments: dict[str, Any]) -> dict[str, Any]:
    """Palette of registered field types, in registration order."""
    return {
        "fieldTypes": [
            {
                "type": descriptor.type,
                "name": descriptor.config.name,
                "description": descriptor.config.description,
                "defaultOptions": descriptor.config.default_options,
            }
            for descriptor in registry.get_all()
        ]
    }


def create_field(registry: FieldTypeRegistry, arguments: dict[str, Any]) -> dict[str, Any]:
    """New field definition of a registered type, in storage shape."""
    builder = FormBuilder(registry)
    builder.add_field(arguments["type"], **(arguments.get("attributes") or {}))
    return {"field": builder.to_storage()[0]}


def validate_submission(registry: FieldTypeRegistry, arguments: dict[str, Any]) -> dict[str, Any]:
    """Validate a value map against a field list."""
    fields = [parse_field(item) for item in arguments.get("fields", [])]
    result = validate_form(fields, arguments.get("values") or {}, registry)
    return {
        "isValid": result.is_valid,
        "errors": result.errors,
        "failures": [failure.model_dump(mode="json") for failure in result.failures],
    }


def build_response(registry: FieldTypeRegistry, arguments: dict[str, Any]) -> dict[str, Any]:
    """Validate and, if valid, normalize a value map into a response record."""
    outcome = collect_response(
        registry,
        arguments.get("fields", []),
        arguments.get("values") or {},
        form_id=arguments.get("formId"),
    )
    if not outcome.submitted:
        return {"submitted": False, "errors": outcome.validation.errors}
    return {"submitted": True, "response": outcome.response.to_storage()}


def check_form_definition(registry: FieldTypeRegistry, arguments: dict[str, Any]) -> dict[str, Any]:
    """Publish-time structural check of a form definition."""
    form = FormDefinition.model_validate(arguments["form"])
    errors = validate_form_definition(form)
    unknown = [field.id for field in form.fields if field.type not in registry]
    for field_id in unknown:
        errors.setdefault(field_id, "Unknown field type")
    return {"isValid": not errors, "errors": errors}


TOOL_HANDLERS: dict[str, ToolHandler] = {
    "list_field_types": list_field_types,
    "create_field": create_field,
    "validate_submission": validate_submission,
    "build_response": build_response,
    "check_form_definition": check_form_definition,
}


def handle_tool_call(registry: FieldTypeRegistry, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Dispatch a tool call.

    Malformed input (bad field definitions, unknown field types, missing
    arguments) is reported back as ``{"error": ...}``.
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return {"error": f"Unknown tool: {name}"}
    try:
        return handler(registry, arguments)
    except (ValidationError, LookupError, ValueError) as e:
        logger.error(f"Error in {name}: {e}")
        return {"error": str(e)}


_FIELDS_SCHEMA = {
    "type": "array",
    "items": {"type": "object"},
    "description": "Ordered field definitions in storage shape (camelCase keys)",
}


def get_mcp_tools() -> list[dict]:
    """
    Get MCP tool definitions for registration with MCP server.

    Returns list of tool schemas compatible with MCP protocol.
    """
    return [
        {
            "name": "list_field_types",
            "description": "List the field types that can be added to a form, with their default attributes.",
            "inputSchema": {"type": "object", "properties": {}},
        },
        {
            "name": "create_field",
            "description": "Create a new field definition of the given type with a fresh id.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "description": "Field type tag, e.g. text or dropdown"},
                    "attributes": {
                        "type": "object",
                        "description": "Attributes overriding the type defaults (label, required, options...)",
                    },
                },
                "required": ["type"],
            },
        },
        {
            "name": "validate_submission",
            "description": "Validate submitted values against a form's fields. Returns a field id to error message map.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "fields": _FIELDS_SCHEMA,
                    "values": {"type": "object", "description": "Field id to submitted value"},
                },
                "required": ["fields", "values"],
            },
        },
        {
            "name": "build_response",
            "description": "Validate values and, if valid, return the normalized response record.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "formId": {"type": "string"},
                    "fields": _FIELDS_SCHEMA,
                    "values": {"type": "object", "description": "Field id to submitted value"},
                },
                "required": ["fields", "values"],
            },
        },
        {
            "name": "check_form_definition",
            "description": "Check a form definition before publishing: title, labels and options.",
            "inputSchema": {
                "type": "object",
                "properties": {"form": {"type": "object", "description": "Form definition in storage shape"}},
                "required": ["form"],
            },
        },
    ]
