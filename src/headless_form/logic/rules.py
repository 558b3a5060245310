"""
Named rules declared in ``x-jsf-logic`` blocks.

A ``RuleScope`` binds the rules visible at a schema node to one snapshot of
the form values. Scopes are extended while walking down the schema, so a
block declared on a node is visible to that node and its descendants.
"""

from __future__ import annotations

import logging
from typing import Any

from headless_form.exceptions import UnknownRuleReferenceError
from headless_form.logic.interpreter import RuleInterpreter, truthy
from headless_form.models.schema import ComputedValue, LogicDefinitions, ValidationRule
from headless_form.values import is_object, json_equal

logger = logging.getLogger(__name__)

_REFERENCE_KEYS = frozenset({"validations", "computedValues"})


def is_rule_reference_condition(condition: Any) -> bool:
    """
    Whether a rule-keyed ``if`` names rules instead of being an expression.

    Reference form: ``{"validations": {"is_adult": {"const": True}}}``.
    """
    if not is_object(condition) or not condition:
        return False
    if not set(condition) <= _REFERENCE_KEYS:
        return False
    return all(
        is_object(entries) and all(is_object(check) for check in entries.values())
        for entries in condition.values()
    )


class RuleScope:
    """Rules visible at one schema node, bound to the whole-form values."""

    def __init__(
        self,
        interpreter: RuleInterpreter,
        data: Any,
        validations: dict[str, ValidationRule] | None = None,
        computed_values: dict[str, ComputedValue] | None = None,
    ):
        self.interpreter = interpreter
        self.data = data
        self.validations = dict(validations or {})
        self.computed_values = dict(computed_values or {})
        self._computed_cache: dict[str, Any] = {}

    def extend(self, logic: LogicDefinitions | None) -> RuleScope:
        """Return a scope that also sees the rules declared in ``logic``."""
        if logic is None or (not logic.validations and not logic.computed_values):
            return self
        child = RuleScope(
            self.interpreter,
            self.data,
            {**self.validations, **(logic.validations or {})},
            {**self.computed_values, **(logic.computed_values or {})},
        )
        # Cached results stay valid for names the child does not redefine.
        for name, value in self._computed_cache.items():
            if name not in (logic.computed_values or {}):
                child._computed_cache[name] = value
        return child

    def get_validation(self, name: str) -> ValidationRule:
        try:
            return self.validations[name]
        except KeyError:
            raise UnknownRuleReferenceError(name, "validation") from None

    def get_computed_value(self, name: str) -> ComputedValue:
        try:
            return self.computed_values[name]
        except KeyError:
            raise UnknownRuleReferenceError(name, "computed value") from None

    def check_validation(self, name: str) -> bool:
        """Evaluate the named validation rule against the form values."""
        rule = self.get_validation(name)
        return truthy(self.interpreter.evaluate(rule.rule, self.data))

    def compute(self, name: str) -> Any:
        """Evaluate the named computed value once per scope."""
        if name not in self._computed_cache:
            rule = self.get_computed_value(name)
            value = self.interpreter.evaluate(rule.rule, self.data)
            logger.debug("Computed value %s = %r", name, value)
            self._computed_cache[name] = value
        return self._computed_cache[name]

    def evaluate_condition(self, condition: Any) -> bool:
        """Evaluate a rule-keyed ``if``: an expression or a rule-reference check."""
        if not is_rule_reference_condition(condition):
            return truthy(self.interpreter.evaluate(condition, self.data))

        for name, check in (condition.get("validations") or {}).items():
            outcome = self.check_validation(name)
            if "const" in check and outcome != bool(check["const"]):
                return False
        for name, check in (condition.get("computedValues") or {}).items():
            outcome = self.compute(name)
            if "const" in check and not json_equal(outcome, check["const"]):
                return False
        return True
