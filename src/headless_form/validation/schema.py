"""
Recursive schema validator.

``validate_node`` checks one value against one schema node and recurses
through the keyword families. Errors carry raw schema paths (``properties``,
``items``, composition and conditional markers included); the error
reconciler maps them onto field paths afterwards.

Keyword order at a node: type, const, enum, object, array, string, number,
not, allOf, anyOf, oneOf, if/then/else, rule-keyed conditionals, rule
validations, date bounds, file checks. A type mismatch stops the node.
"""

from typing import Any

from headless_form.logic.interpreter import RuleInterpreter
from headless_form.logic.rules import RuleScope
from headless_form.models.form_options import ValidationOptions
from headless_form.models.schema import SchemaLike, SchemaNode, parse_schema
from headless_form.models.validation_result import ValidationError
from headless_form.tracing import trace_stage
from headless_form.validation.array import validate_array
from headless_form.validation.composition import (
    validate_all_of,
    validate_any_of,
    validate_not,
    validate_one_of,
)
from headless_form.validation.conditions import (
    validate_if_then_else,
    validate_rule_conditionals,
    validate_rule_references,
)
from headless_form.validation.context import ValidationContext
from headless_form.validation.messages import make_error
from headless_form.validation.number import validate_number
from headless_form.validation.object import validate_object
from headless_form.validation.presentation import validate_date_bounds, validate_files
from headless_form.validation.string import validate_string
from headless_form.values import is_array, is_missing, json_equal, matches_type


def _type_matches(value: Any, schema: SchemaNode) -> bool:
    types = schema.types
    if not types:
        return True
    if schema.input_type == "file" and is_array(value):
        # Uploads arrive as file lists whatever the declared type.
        return True
    return any(matches_type(value, type_name) for type_name in types)


def validate_node(value: Any, schema: SchemaLike, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    """Validate ``value`` against ``schema``; ``path`` is the raw schema path of the node."""
    if is_missing(value, ctx.options.treat_null_as_undefined):
        return []

    if schema is True:
        return []
    if schema is False:
        if ctx.options.allow_forbidden_values:
            return []
        return [make_error("forbidden", path, schema, value)]

    ctx = ctx.with_scope(ctx.scope.extend(schema.logic))

    if not _type_matches(value, schema):
        return [make_error("type", path, schema, value, expected=schema.types)]

    errors: list[ValidationError] = []

    if schema.has("const") and not json_equal(value, schema.const):
        errors.append(make_error("const", path, schema, value, expected=schema.const))
    if schema.enum is not None and not any(json_equal(value, option) for option in schema.enum):
        errors.append(make_error("enum", path, schema, value, allowed=list(schema.enum)))

    errors.extend(validate_object(value, schema, path, ctx))
    errors.extend(validate_array(value, schema, path, ctx))
    errors.extend(validate_string(value, schema, path))
    errors.extend(validate_number(value, schema, path))

    errors.extend(validate_not(value, schema, path, ctx))
    errors.extend(validate_all_of(value, schema, path, ctx))
    errors.extend(validate_any_of(value, schema, path, ctx))
    errors.extend(validate_one_of(value, schema, path, ctx))

    errors.extend(validate_if_then_else(value, schema, path, ctx))
    errors.extend(validate_rule_conditionals(value, schema, path, ctx))
    errors.extend(validate_rule_references(value, schema, path, ctx))

    errors.extend(validate_date_bounds(value, schema, path))
    errors.extend(validate_files(value, schema, path))

    return errors


def make_context(
    root_value: Any,
    options: ValidationOptions | None = None,
    interpreter: RuleInterpreter | None = None,
) -> ValidationContext:
    """Build the context for one validation pass over ``root_value``."""
    scope = RuleScope(interpreter or RuleInterpreter(), root_value)
    return ValidationContext(options=options or ValidationOptions(), scope=scope, descend=validate_node)


@trace_stage("validate")
def validate_schema(
    value: Any,
    schema: Any,
    *,
    options: ValidationOptions | None = None,
    interpreter: RuleInterpreter | None = None,
    root_value: Any = None,
) -> list[ValidationError]:
    """
    Validate a value against a (resolved) schema.

    Args:
        value: The value to check.
        schema: A ``SchemaNode``, boolean schema, or raw schema dict.
        options: Legacy validator switches.
        interpreter: Rule interpreter holding custom operators.
        root_value: Whole-form values seen by rules; defaults to ``value``.

    Returns:
        Errors in traversal order; empty when the value is valid.

    Raises:
        RuleEvaluationError: If a rule uses an unknown operator.
        UnknownRuleReferenceError: If a node references an undefined rule.
    """
    node = parse_schema(schema)
    ctx = make_context(value if root_value is None else root_value, options, interpreter)
    return validate_node(value, node, (), ctx)
