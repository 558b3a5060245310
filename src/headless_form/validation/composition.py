"""
Composition keywords: not, allOf, anyOf, oneOf.

``allOf`` reports every member's errors. ``anyOf`` only fails when every
member fails and then reports the member with the fewest failing keywords.
``oneOf`` reports a single error when zero or several members match.
"""

from typing import Any

from headless_form.models.schema import SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.paths import composition_member
from headless_form.validation.context import ValidationContext
from headless_form.validation.messages import make_error


def validate_not(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    if schema.not_ is None:
        return []
    if ctx.is_valid(value, schema.not_, path):
        return [make_error("not", path, schema, value)]
    return []


def validate_all_of(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for index, member in enumerate(schema.all_of or []):
        errors.extend(ctx.descend(value, member, composition_member(path, "allOf", index), ctx))
    return errors


def validate_any_of(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    if not schema.any_of:
        return []

    best: list[ValidationError] | None = None
    for index, member in enumerate(schema.any_of):
        member_errors = ctx.descend(value, member, composition_member(path, "anyOf", index), ctx)
        if not member_errors:
            return []
        if best is None or len(member_errors) < len(best):
            best = member_errors

    if best is None:
        return [make_error("anyOf", path, schema, value)]
    return best


def validate_one_of(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    if not schema.one_of:
        return []

    matches = sum(
        1
        for index, member in enumerate(schema.one_of)
        if ctx.is_valid(value, member, composition_member(path, "oneOf", index))
    )
    if matches == 1:
        return []
    return [make_error("oneOf", path, schema, value, matches=matches)]
