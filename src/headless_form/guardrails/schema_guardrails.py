"""
Schema-setup guardrails.

Run once when a form is created. They reject schemas that could only fail
later: malformed JSON Schema, rule expressions with unknown operators, and
references to validations or computed values that are never declared.
"""

import logging
from typing import Any, Iterator

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, Field

from headless_form.exceptions import SchemaSetupError, UnknownOperatorError, UnknownRuleReferenceError
from headless_form.guardrails.constants import (
    LIST_SUBSCHEMA_FIELDS,
    MAP_SUBSCHEMA_FIELDS,
    SINGLE_SUBSCHEMA_FIELDS,
    VALID_TYPES,
)
from headless_form.logic.interpreter import RuleInterpreter
from headless_form.logic.rules import is_rule_reference_condition
from headless_form.models.schema import SchemaLike, SchemaNode
from headless_form.paths import format_path
from headless_form.resolution.computed import attribute_references

logger = logging.getLogger(__name__)


class SchemaCheckResult(BaseModel):
    """Result of the schema-setup checks."""

    is_valid: bool = Field(..., description="Whether the schema can be used")
    errors: list[str] = Field(default_factory=list, description="List of setup errors")
    warnings: list[str] = Field(default_factory=list, description="List of warnings")


def iter_subschemas(node: SchemaNode) -> Iterator[tuple[tuple, SchemaLike]]:
    """Yield ``(relative path, child)`` for every direct sub-schema of ``node``."""
    for name in SINGLE_SUBSCHEMA_FIELDS:
        child = getattr(node, name)
        if child is not None:
            yield (name.rstrip("_"),), child
    for name in LIST_SUBSCHEMA_FIELDS:
        for index, child in enumerate(getattr(node, name) or []):
            yield (name, index), child
    for name in MAP_SUBSCHEMA_FIELDS:
        for key, child in (getattr(node, name) or {}).items():
            yield (name, key), child


def check_structure(raw: Any) -> list[str]:
    """Check a raw schema against the draft 2020-12 metaschema."""
    if isinstance(raw, SchemaNode):
        raw = raw.to_schema()
    try:
        Draft202012Validator.check_schema(raw)
    except SchemaError as e:
        location = format_path(e.path) or "<root>"
        return [f"Invalid JSON Schema at {location}: {e.message}"]
    return []


class _RuleChecker:
    """Walks a schema and records rule problems."""

    def __init__(self, interpreter: RuleInterpreter):
        self.interpreter = interpreter
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def check_expression(self, expr: Any, where: str) -> None:
        for operator in self.interpreter.find_unknown_operators(expr):
            self.errors.append(f"{UnknownOperatorError(operator)} in {where}")

    def check_reference(self, name: str, known: frozenset[str], kind: str, where: str) -> None:
        if name not in known:
            self.errors.append(f"{UnknownRuleReferenceError(name, kind)} at {where}")

    def walk(self, node: SchemaLike, path: tuple, validations: frozenset[str], computed: frozenset[str]) -> None:
        if isinstance(node, bool):
            return
        where = format_path(path) or "<root>"

        for type_name in node.types:
            if type_name not in VALID_TYPES:
                self.errors.append(f"Invalid type '{type_name}' at {where}")

        for name in node.required or []:
            if node.properties is not None and name not in node.properties:
                self.warnings.append(f"Required field '{name}' at {where} is not in properties")

        logic = node.logic
        if logic is not None:
            validations = validations | frozenset(logic.validations or {})
            computed = computed | frozenset(logic.computed_values or {})
            for name, rule in (logic.validations or {}).items():
                self.check_expression(rule.rule, f'validation "{name}"')
            for name, value in (logic.computed_values or {}).items():
                self.check_expression(value.rule, f'computed value "{name}"')
            for conditional in logic.conditionals():
                condition = conditional.if_
                if is_rule_reference_condition(condition):
                    for name in condition.get("validations") or {}:
                        self.check_reference(name, validations, "validation", where)
                    for name in condition.get("computedValues") or {}:
                        self.check_reference(name, computed, "computed value", where)
                else:
                    self.check_expression(condition, f"x-jsf-logic condition at {where}")
                for marker, branch in (("then", conditional.then), ("else", conditional.else_)):
                    if branch is not None:
                        self.walk(branch, (*path, marker), validations, computed)

        for name in node.logic_validations or []:
            self.check_reference(name, validations, "validation", where)
        for spec in (node.logic_computed_attrs or {}).values():
            for name in attribute_references(spec):
                self.check_reference(name, computed, "computed value", where)

        for relative, child in iter_subschemas(node):
            self.walk(child, (*path, *relative), validations, computed)


def check_schema_setup(
    raw: Any,
    node: SchemaLike,
    interpreter: RuleInterpreter,
    structure: bool = True,
) -> SchemaCheckResult:
    """
    Run every setup check on a schema.

    Args:
        raw: The schema as given by the caller (dict or SchemaNode).
        node: The parsed schema.
        interpreter: Interpreter holding the custom operators of the form.
        structure: Whether to check the draft 2020-12 metaschema.
    """
    errors = check_structure(raw) if structure else []

    checker = _RuleChecker(interpreter)
    checker.walk(node, (), frozenset(), frozenset())
    errors.extend(checker.errors)

    for warning in checker.warnings:
        logger.warning(warning)

    return SchemaCheckResult(is_valid=not errors, errors=errors, warnings=checker.warnings)


def schema_setup_guardrail(
    raw: Any,
    node: SchemaLike,
    interpreter: RuleInterpreter,
    structure: bool = True,
) -> SchemaCheckResult:
    """
    Guardrail run by ``create_headless_form``.

    Raises:
        SchemaSetupError: With the first problem found (and a count of the rest).
    """
    result = check_schema_setup(raw, node, interpreter, structure)
    if not result.is_valid:
        message = result.errors[0]
        if len(result.errors) > 1:
            message += f" (and {len(result.errors) - 1} more)"
        raise SchemaSetupError(message)
    return result
