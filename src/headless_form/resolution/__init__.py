"""
Conditional schema resolution for headless-form.

This module contains:
- The resolver that collapses if/then/else and rule-keyed conditionals
- Branch merging rules
- Computed attribute evaluation
"""

from headless_form.resolution.computed import apply_computed_attributes, attribute_references, evaluate_attribute
from headless_form.resolution.merge import merge_branch, ordered_union
from headless_form.resolution.resolver import SchemaResolver, resolve_schema

__all__ = [
    "SchemaResolver",
    "resolve_schema",
    "merge_branch",
    "ordered_union",
    "apply_computed_attributes",
    "attribute_references",
    "evaluate_attribute",
]
