"""
String keywords: minLength, maxLength, pattern, format.
"""

import functools
from typing import Any

import regex
from jsonschema import FormatChecker

from headless_form.models.schema import SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.validation.messages import make_error

FORMAT_CHECKER = FormatChecker()

_GRAPHEME = regex.compile(r"\X")


def grapheme_length(text: str) -> int:
    """Count user-perceived characters (extended grapheme clusters)."""
    return len(_GRAPHEME.findall(text))


@functools.lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> regex.Pattern:
    return regex.compile(pattern)


def conforms_to_format(value: str, fmt: str) -> bool:
    """Check a string against a JSON Schema ``format``; unknown formats pass."""
    return FORMAT_CHECKER.conforms(value, fmt)


def validate_string(value: Any, schema: SchemaNode, path: tuple) -> list[ValidationError]:
    """Validate string keywords; non-strings are left to the other families."""
    if not isinstance(value, str):
        return []

    errors: list[ValidationError] = []
    length = grapheme_length(value) if (schema.min_length is not None or schema.max_length is not None) else 0

    if schema.min_length is not None and length < schema.min_length:
        errors.append(make_error("minLength", path, schema, value, limit=schema.min_length))
    if schema.max_length is not None and length > schema.max_length:
        errors.append(make_error("maxLength", path, schema, value, limit=schema.max_length))

    if schema.pattern is not None:
        try:
            matched = compile_pattern(schema.pattern).search(value) is not None
        except regex.error:
            matched = False
        if not matched:
            errors.append(make_error("pattern", path, schema, value, pattern=schema.pattern))

    if schema.format is not None and not conforms_to_format(value, schema.format):
        errors.append(make_error("format", path, schema, value, format=schema.format))

    return errors
