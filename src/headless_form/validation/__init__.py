"""
Schema validator for headless-form.

This module contains:
- The recursive node validator and its public entry point
- One module per keyword family (string, number, object, array, composition)
- Default error messages and custom message lookup
"""

from headless_form.validation.context import ValidationContext
from headless_form.validation.messages import DEFAULT_RULE_MESSAGE, default_message, make_error
from headless_form.validation.schema import make_context, validate_node, validate_schema
from headless_form.validation.string import grapheme_length

__all__ = [
    "ValidationContext",
    "validate_schema",
    "validate_node",
    "make_context",
    "make_error",
    "default_message",
    "grapheme_length",
    "DEFAULT_RULE_MESSAGE",
]
