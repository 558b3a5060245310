"""
Object keywords: required, properties, patternProperties, additionalProperties.
"""

from typing import Any

from headless_form.models.schema import SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.paths import child_property
from headless_form.validation.context import ValidationContext
from headless_form.validation.messages import make_error
from headless_form.validation.string import compile_pattern
from headless_form.values import is_missing, is_object


def _property_schema(schema: SchemaNode, name: str):
    if schema.properties and name in schema.properties:
        return schema.properties[name]
    return SchemaNode()


def validate_required(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    errors = []
    for name in schema.required or []:
        field_value = value.get(name)
        absent = name not in value or is_missing(field_value, ctx.options.treat_null_as_undefined)
        if not absent:
            continue
        prop = _property_schema(schema, name)
        input_type = prop.input_type if isinstance(prop, SchemaNode) else None
        errors.append(
            make_error("required", child_property(path, name), prop, None, property=name, input_type=input_type)
        )
    return errors


def validate_object(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    if not is_object(value):
        return []

    errors = validate_required(value, schema, path, ctx)

    properties = schema.properties or {}
    for name, prop_schema in properties.items():
        if name not in value:
            continue
        errors.extend(ctx.descend(value[name], prop_schema, child_property(path, name), ctx))

    matched_by_pattern: set[str] = set()
    for pattern, pattern_schema in (schema.pattern_properties or {}).items():
        compiled = compile_pattern(pattern)
        for name in value:
            if compiled.search(name):
                matched_by_pattern.add(name)
                errors.extend(ctx.descend(value[name], pattern_schema, child_property(path, name), ctx))

    additional = schema.additional_properties
    if additional is not None and additional is not True:
        for name in value:
            if name in properties or name in matched_by_pattern:
                continue
            if additional is False:
                errors.append(make_error("additionalProperties", path, schema, value[name], property=name))
            else:
                errors.extend(ctx.descend(value[name], additional, child_property(path, name), ctx))

    return errors
