"""
Rule expression language for headless-form.

This module contains:
- The JSON-Logic interpreter holding each form's operation table
- Rule scopes binding named validations and computed values to form values
"""

from headless_form.logic.interpreter import (
    BUILTIN_OPERATORS,
    RuleInterpreter,
    is_operation,
    truthy,
)
from headless_form.logic.rules import (
    RuleScope,
    is_rule_reference_condition,
)

__all__ = [
    "RuleInterpreter",
    "RuleScope",
    "BUILTIN_OPERATORS",
    "is_operation",
    "is_rule_reference_condition",
    "truthy",
]
