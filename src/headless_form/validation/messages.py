"""
Error messages for validation errors.

Each keyword has a default English message. A schema node can override the
message for any keyword through ``x-jsf-errorMessage``.
"""

from datetime import date
from typing import Any

from headless_form.models.schema import SchemaLike, SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.values import to_display_string, to_json_literal

DEFAULT_RULE_MESSAGE = "The value is not valid"

_TYPE_NAMES = {
    "string": "a string",
    "number": "a number",
    "integer": "an integer",
    "boolean": "a boolean",
    "object": "an object",
    "array": "an array",
    "null": "null",
}


def _type_message(types: list[str]) -> str:
    if len(types) == 1:
        return f"The value must be {_TYPE_NAMES.get(types[0], types[0])}"
    return f"The value must be one of {', '.join(types)}"


def _format_date(value: Any) -> str:
    try:
        return date.fromisoformat(str(value)).strftime("%b %d, %Y")
    except ValueError:
        return str(value)


def _format_message(fmt: str | None) -> str:
    if fmt == "email":
        return "Please enter a valid email address"
    return f"Must be a valid {fmt} format"


def default_message(keyword: str, schema: SchemaLike, value: Any, params: dict[str, Any]) -> str:
    """Build the default message for ``keyword``."""
    node = schema if isinstance(schema, SchemaNode) else SchemaNode()
    presentation = node.presentation or {}

    if keyword == "type":
        return _type_message(params.get("expected") or node.types)
    if keyword == "required":
        if params.get("input_type") == "checkbox":
            return "Please acknowledge this field"
        return "Required field"
    if keyword == "forbidden":
        return "Not allowed"
    if keyword == "const":
        return f"The only accepted value is {to_json_literal(node.const)}."
    if keyword in ("enum", "anyOf", "oneOf"):
        return f"The option {to_json_literal(value)} is not valid."
    if keyword == "not":
        return "The value must not satisfy the provided schema"

    if keyword == "minLength":
        return f"Please insert at least {node.min_length} characters"
    if keyword == "maxLength":
        return f"Please insert up to {node.max_length} characters"
    if keyword == "pattern":
        return "Must have a valid format"
    if keyword == "format":
        return _format_message(node.format)

    if keyword == "minimum":
        return f"Must be greater or equal to {to_display_string(node.minimum)}"
    if keyword == "exclusiveMinimum":
        return f"Must be greater than {to_display_string(node.exclusive_minimum)}"
    if keyword == "maximum":
        return f"Must be smaller or equal to {to_display_string(node.maximum)}"
    if keyword == "exclusiveMaximum":
        return f"Must be smaller than {to_display_string(node.exclusive_maximum)}"
    if keyword == "multipleOf":
        return f"Must be a multiple of {to_display_string(node.multiple_of)}"

    if keyword == "minItems":
        return f"Must have at least {node.min_items} items"
    if keyword == "maxItems":
        return f"Must have at most {node.max_items} items"
    if keyword == "uniqueItems":
        return "Items must be unique"
    if keyword == "contains":
        return "The list does not contain the expected items"
    if keyword == "minContains":
        return f"Must contain at least {node.min_contains} matching items"
    if keyword == "maxContains":
        return f"Must contain at most {node.max_contains} matching items"
    if keyword == "additionalProperties":
        return f'Property "{params.get("property")}" is not allowed'

    if keyword == "minDate":
        return f"The date must be {_format_date(presentation.get('minDate'))} or after."
    if keyword == "maxDate":
        return f"The date must be {_format_date(presentation.get('maxDate'))} or before."
    if keyword == "fileStructure":
        return "Not a valid file."
    if keyword == "maxFileSize":
        return f"File size too large. The limit is {presentation.get('maxFileSize')} KB."
    if keyword == "accept":
        return f"Unsupported file format. The acceptable formats are {presentation.get('accept')}."

    if keyword == "json-logic":
        return params.get("rule_message") or DEFAULT_RULE_MESSAGE

    return f"The value {to_display_string(value)} is not valid"


def make_error(
    keyword: str,
    path: tuple[str | int, ...],
    schema: SchemaLike,
    value: Any,
    **params: Any,
) -> ValidationError:
    """
    Create a ``ValidationError`` with its message.

    The message comes from ``x-jsf-errorMessage[keyword]`` of ``schema`` when
    declared, otherwise from the default table.
    """
    custom = None
    if isinstance(schema, SchemaNode) and schema.error_message:
        custom = schema.error_message.get(keyword)
    message = custom or default_message(keyword, schema, value, params)
    return ValidationError(keyword=keyword, path=tuple(path), message=message, params=params)
