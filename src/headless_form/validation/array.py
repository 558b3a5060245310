"""
Array keywords: prefixItems, items, minItems, maxItems, uniqueItems, contains.
"""

from typing import Any

from headless_form.models.schema import SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.paths import child_item
from headless_form.validation.context import ValidationContext
from headless_form.validation.messages import make_error
from headless_form.values import is_array, json_equal


def _has_duplicates(items: list[Any]) -> bool:
    for i, left in enumerate(items):
        for right in items[i + 1:]:
            if json_equal(left, right):
                return True
    return False


def validate_array(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    if not is_array(value):
        return []

    errors: list[ValidationError] = []
    items = list(value)

    prefix = schema.prefix_items or []
    for index, item_schema in enumerate(prefix):
        if index >= len(items):
            break
        errors.extend(ctx.descend(items[index], item_schema, child_item(path, index), ctx))

    if schema.items is not None:
        for index in range(len(prefix), len(items)):
            errors.extend(ctx.descend(items[index], schema.items, child_item(path, index), ctx))

    if schema.min_items is not None and len(items) < schema.min_items:
        errors.append(make_error("minItems", path, schema, value, limit=schema.min_items))
    if schema.max_items is not None and len(items) > schema.max_items:
        errors.append(make_error("maxItems", path, schema, value, limit=schema.max_items))

    if schema.unique_items and _has_duplicates(items):
        errors.append(make_error("uniqueItems", path, schema, value))

    if schema.contains is not None:
        matches = sum(1 for item in items if ctx.is_valid(item, schema.contains))
        min_contains = schema.min_contains if schema.min_contains is not None else 1
        if matches < min_contains:
            keyword = "minContains" if schema.min_contains is not None else "contains"
            errors.append(make_error(keyword, path, schema, value, matches=matches))
        if schema.max_contains is not None and matches > schema.max_contains:
            errors.append(make_error("maxContains", path, schema, value, matches=matches))

    return errors
