"""
Conditionals and rule-driven checks.

Standard ``if``/``then``/``else`` tests the local value against the ``if``
schema. Rule-keyed conditionals from ``x-jsf-logic`` and the named rules in
``x-jsf-logic-validations`` are evaluated against the whole form values, so
they can express cross-field constraints.
"""

import logging
from typing import Any

from headless_form.models.schema import SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.validation.context import ValidationContext
from headless_form.validation.messages import make_error

logger = logging.getLogger(__name__)


def validate_if_then_else(value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext) -> list[ValidationError]:
    if schema.if_ is None:
        return []
    if ctx.is_valid(value, schema.if_, path):
        branch, marker = schema.then, "then"
    else:
        branch, marker = schema.else_, "else"
    if branch is None:
        return []
    return ctx.descend(value, branch, (*path, marker), ctx)


def validate_rule_conditionals(
    value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext
) -> list[ValidationError]:
    if schema.logic is None:
        return []

    errors: list[ValidationError] = []
    for conditional in schema.logic.conditionals():
        if ctx.scope.evaluate_condition(conditional.if_):
            branch, marker = conditional.then, "then"
        else:
            branch, marker = conditional.else_, "else"
        if branch is not None:
            errors.extend(ctx.descend(value, branch, (*path, marker), ctx))
    return errors


def validate_rule_references(
    value: Any, schema: SchemaNode, path: tuple, ctx: ValidationContext
) -> list[ValidationError]:
    """Run every rule named in ``x-jsf-logic-validations`` against the form values."""
    errors: list[ValidationError] = []
    for name in schema.logic_validations or []:
        rule = ctx.scope.get_validation(name)
        if ctx.scope.check_validation(name):
            continue
        if not ctx.silent:
            logger.debug("Rule %s failed at %s", name, path)
        errors.append(make_error("json-logic", path, schema, value, rule=name, rule_message=rule.error_message))
    return errors
