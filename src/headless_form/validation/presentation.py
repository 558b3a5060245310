"""
Checks driven by presentation hints: date bounds and file uploads.
"""

from collections.abc import Mapping
from datetime import date
from typing import Any

from headless_form.models.schema import SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.validation.messages import make_error
from headless_form.values import is_array, is_number

BYTES_PER_KB = 1024


def _parse_date(text: Any) -> date | None:
    if not isinstance(text, str):
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def validate_date_bounds(value: Any, schema: SchemaNode, path: tuple) -> list[ValidationError]:
    if schema.format != "date" or not schema.presentation:
        return []
    current = _parse_date(value)
    if current is None:
        return []

    errors: list[ValidationError] = []
    min_date = _parse_date(schema.presentation.get("minDate"))
    if min_date is not None and current < min_date:
        errors.append(make_error("minDate", path, schema, value, limit=min_date.isoformat()))
    max_date = _parse_date(schema.presentation.get("maxDate"))
    if max_date is not None and current > max_date:
        errors.append(make_error("maxDate", path, schema, value, limit=max_date.isoformat()))
    return errors


def _is_file(entry: Any) -> bool:
    return (
        isinstance(entry, Mapping)
        and isinstance(entry.get("name"), str)
        and is_number(entry.get("size"))
    )


def _accepted_extensions(accept: Any) -> set[str]:
    if isinstance(accept, str):
        parts = accept.split(",")
    elif is_array(accept):
        parts = [str(part) for part in accept]
    else:
        return set()
    return {part.strip().lower().lstrip(".") for part in parts if part.strip()}


def validate_files(value: Any, schema: SchemaNode, path: tuple) -> list[ValidationError]:
    """Validate an uploaded file list: ``[{"name": ..., "size": bytes}, ...]``."""
    if schema.input_type != "file":
        return []
    if not is_array(value) or not all(_is_file(entry) for entry in value):
        return [make_error("fileStructure", path, schema, value)]

    presentation = schema.presentation or {}
    errors: list[ValidationError] = []

    max_size = presentation.get("maxFileSize")
    if is_number(max_size) and any(entry["size"] > max_size * BYTES_PER_KB for entry in value):
        errors.append(make_error("maxFileSize", path, schema, value, limit=max_size))

    extensions = _accepted_extensions(presentation.get("accept"))
    if extensions:
        for entry in value:
            name = entry["name"]
            suffix = name.rsplit(".", 1)[-1].lower() if "." in name else ""
            if suffix not in extensions:
                errors.append(make_error("accept", path, schema, value, file=name))
                break
    return errors
