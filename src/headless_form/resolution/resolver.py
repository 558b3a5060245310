"""
Conditional schema resolver.

Collapses every conditional in a schema against one snapshot of the form
values and returns the effective schema. The input is never modified: nodes
touched by a merge are copied, untouched subtrees are shared.

At each node, in order:

1. standard ``if``/``then``/``else`` (the ``if`` schema is checked against
   the node's own value with the validator in silent mode)
2. rule-keyed conditionals from ``x-jsf-logic`` (checked against the whole
   form values)
3. computed attributes
4. children: properties and ``prefixItems`` with their own sub-values,
   composition members with the node's value, the ``items`` template
   without values

The ``items`` template keeps its conditionals so the validator can apply
them per element. When the array has elements, the template is also resolved
against each of them and the results are kept as the node's ``rows``.
"""

import logging
from typing import Any

from headless_form.logic.interpreter import RuleInterpreter
from headless_form.logic.rules import RuleScope
from headless_form.models.form_options import ValidationOptions
from headless_form.models.schema import SchemaLike, SchemaNode, parse_schema, replace_node
from headless_form.paths import child_item, child_property, composition_member, format_path
from headless_form.resolution.computed import apply_computed_attributes
from headless_form.resolution.merge import merge_branch, with_unreachable
from headless_form.tracing import trace_stage
from headless_form.validation.context import ValidationContext
from headless_form.validation.schema import validate_node
from headless_form.values import MISSING, is_array, is_missing, is_object

logger = logging.getLogger(__name__)


def _branch_only_properties(chosen: SchemaLike, other: SchemaLike | None) -> dict[str, SchemaLike]:
    if not isinstance(other, SchemaNode) or not other.properties:
        return {}
    reachable = (chosen.properties or {}) if isinstance(chosen, SchemaNode) else {}
    return {
        name: prop
        for name, prop in other.properties.items()
        if prop is not False and name not in reachable
    }


class SchemaResolver:
    """
    Resolves schemas against one set of form values.

    Usage:
        resolver = SchemaResolver({"t": "biz"})
        resolved = resolver.resolve(schema)
    """

    def __init__(
        self,
        values: Any,
        interpreter: RuleInterpreter | None = None,
        options: ValidationOptions | None = None,
    ):
        self.values = values
        self.interpreter = interpreter or RuleInterpreter()
        self.options = options or ValidationOptions()

    def resolve(self, schema: SchemaLike) -> SchemaLike:
        scope = RuleScope(self.interpreter, self.values)
        return self._resolve(schema, self.values, scope, (), template=False)

    def _resolve(self, node: SchemaLike, value: Any, scope: RuleScope, path: tuple, template: bool) -> SchemaLike:
        if isinstance(node, bool):
            return node

        scope = scope.extend(node.logic)
        if not template:
            while True:
                if node.if_ is not None:
                    node = self._collapse_if(node, value, scope, path)
                elif node.logic is not None and node.logic.conditionals():
                    node = self._collapse_rule_conditionals(node, scope, path)
                else:
                    break
                if isinstance(node, bool):
                    return node
                scope = scope.extend(node.logic)

        node = apply_computed_attributes(node, scope)
        return self._resolve_children(node, value, scope, path, template)

    def _merge(self, node: SchemaNode, chosen: SchemaLike | None, other: SchemaLike | None) -> SchemaLike:
        merged = merge_branch(node, chosen)
        if isinstance(merged, bool):
            return merged
        hidden = {
            name: prop
            for name, prop in _branch_only_properties(chosen, other).items()
            if name not in (merged.properties or {})
        }
        return with_unreachable(merged, hidden)

    def _collapse_if(self, node: SchemaNode, value: Any, scope: RuleScope, path: tuple) -> SchemaLike:
        local = value
        if is_missing(local, self.options.treat_null_as_undefined) and node.kind == "object":
            local = {}
        ctx = ValidationContext(options=self.options, scope=scope, descend=validate_node, silent=True)
        passed = ctx.is_valid(local, node.if_, path)
        logger.debug("if at %s %s", format_path(path) or "<root>", "matched: then" if passed else "failed: else")

        chosen, other = (node.then, node.else_) if passed else (node.else_, node.then)
        stripped = replace_node(node, remove=("if_", "then", "else_"))
        return self._merge(stripped, chosen, other)

    def _collapse_rule_conditionals(self, node: SchemaNode, scope: RuleScope, path: tuple) -> SchemaLike:
        conditionals = node.logic.conditionals()
        resolved: SchemaLike = replace_node(node, logic=node.logic.without_conditionals())
        for conditional in conditionals:
            passed = scope.evaluate_condition(conditional.if_)
            logger.debug("x-jsf-logic if at %s %s", format_path(path) or "<root>", "matched" if passed else "failed")
            chosen, other = (conditional.then, conditional.else_) if passed else (conditional.else_, conditional.then)
            resolved = self._merge(resolved, chosen, other)
            if isinstance(resolved, bool):
                break
        return resolved

    def _resolve_children(
        self, node: SchemaNode, value: Any, scope: RuleScope, path: tuple, template: bool
    ) -> SchemaNode:
        changes: dict[str, Any] = {}
        hidden: dict[str, SchemaLike] = {}

        if node.properties:
            properties: dict[str, SchemaLike] = {}
            for name, prop in node.properties.items():
                sub_value = value.get(name, MISSING) if is_object(value) and not template else MISSING
                resolved = self._resolve(prop, sub_value, scope, child_property(path, name), template)
                if resolved is False and isinstance(prop, SchemaNode):
                    hidden[name] = prop
                properties[name] = resolved
            if any(properties[name] is not prop for name, prop in node.properties.items()):
                changes["properties"] = properties

        if node.prefix_items:
            elements = list(value) if is_array(value) and not template else []
            prefix = [
                self._resolve(item, elements[index] if index < len(elements) else MISSING, scope, child_item(path, index), template)
                for index, item in enumerate(node.prefix_items)
            ]
            if any(new is not old for new, old in zip(prefix, node.prefix_items)):
                changes["prefix_items"] = prefix

        rows: list[SchemaLike] | None = None
        if isinstance(node.items, SchemaNode):
            items = self._resolve(node.items, MISSING, scope, (*path, "items"), template=True)
            if items is not node.items:
                changes["items"] = items
            if is_array(value) and value and not template:
                prefix_rows = changes.get("prefix_items", node.prefix_items) or []
                rows = self._resolve_rows(node.items, prefix_rows, list(value), scope, path)

        for name, keyword in (("all_of", "allOf"), ("any_of", "anyOf"), ("one_of", "oneOf")):
            members = getattr(node, name)
            if not members:
                continue
            resolved_members = [
                self._resolve(member, value, scope, composition_member(path, keyword, index), template)
                for index, member in enumerate(members)
            ]
            if any(new is not old for new, old in zip(resolved_members, members)):
                changes[name] = resolved_members

        if not changes and not hidden and rows is None:
            return node
        resolved_node = with_unreachable(replace_node(node, **changes), hidden)
        if rows is not None:
            resolved_node._rows = rows
        return resolved_node

    def _resolve_rows(
        self, items: SchemaNode, prefix: list[SchemaLike], elements: list[Any], scope: RuleScope, path: tuple
    ) -> list[SchemaLike]:
        """The schema of every element: its resolved ``prefixItems`` entry or ``items`` resolved against it."""
        return [
            prefix[index]
            if index < len(prefix)
            else self._resolve(items, element, scope, child_item(path, index), template=False)
            for index, element in enumerate(elements)
        ]


@trace_stage("resolve")
def resolve_schema(
    schema: Any,
    values: Any = None,
    *,
    interpreter: RuleInterpreter | None = None,
    options: ValidationOptions | None = None,
) -> SchemaLike:
    """
    Resolve all conditionals in ``schema`` against ``values``.

    Args:
        schema: A ``SchemaNode``, boolean schema or raw schema dict.
        values: Current form values; ``None`` means an empty form.
        interpreter: Rule interpreter holding custom operators.
        options: Legacy validator switches used for ``if`` checks.

    Returns:
        The resolved schema. Resolving it again with the same values
        returns an equal schema.

    Raises:
        RuleEvaluationError: If a rule uses an unknown operator.
        UnknownRuleReferenceError: If a rule reference has no definition.
    """
    node = parse_schema(schema)
    return SchemaResolver({} if values is None else values, interpreter, options).resolve(node)
