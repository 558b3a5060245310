"""
Computed attributes (``x-jsf-logic-computedAttrs``).

Each attribute names the schema keyword it overrides and how to build the
value: the exact name of a computed value (``"minimum": "min_age"``), a
template with ``{{name}}`` placeholders, or a dict of either, which merges
into a dict-valued keyword such as ``x-jsf-errorMessage``.
"""

import re
from typing import Any

from headless_form.exceptions import UnknownRuleReferenceError
from headless_form.logic.rules import RuleScope
from headless_form.models.schema import SchemaNode, field_name_for_key, replace_node
from headless_form.values import is_object, to_display_string

TEMPLATE_PATTERN = re.compile(r"\{\{\s*([^{}\s]+)\s*\}\}")


def template_references(text: str) -> list[str]:
    return TEMPLATE_PATTERN.findall(text)


def attribute_references(spec: Any) -> list[str]:
    """Names of the computed values an attribute spec depends on."""
    if isinstance(spec, str):
        names = template_references(spec)
        return names or [spec]
    if is_object(spec):
        return [name for value in spec.values() for name in attribute_references(value)]
    return []


def evaluate_attribute(spec: Any, scope: RuleScope) -> Any:
    if isinstance(spec, str):
        if spec in scope.computed_values:
            return scope.compute(spec)
        if TEMPLATE_PATTERN.search(spec):
            return TEMPLATE_PATTERN.sub(lambda match: to_display_string(scope.compute(match.group(1))), spec)
        raise UnknownRuleReferenceError(spec, "computed value")
    if is_object(spec):
        return {key: evaluate_attribute(value, scope) for key, value in spec.items()}
    return spec


def _current_value(node: SchemaNode, key: str) -> Any:
    name = field_name_for_key(key)
    if name in SchemaNode.model_fields:
        return getattr(node, name)
    return (node.model_extra or {}).get(key)


def apply_computed_attributes(node: SchemaNode, scope: RuleScope) -> SchemaNode:
    """Return ``node`` with its computed attributes evaluated and spliced in."""
    if not node.logic_computed_attrs:
        return node

    evaluated = {key: evaluate_attribute(spec, scope) for key, spec in node.logic_computed_attrs.items()}

    changes: dict[str, Any] = {}
    for key, value in evaluated.items():
        current = _current_value(node, key)
        if isinstance(value, dict) and isinstance(current, dict):
            value = {**current, **value}
        changes[field_name_for_key(key)] = value

    computed = replace_node(node, **changes)
    computed._computed_attributes = evaluated
    return computed
