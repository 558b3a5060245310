"""
Merging a conditional branch into the node that declares it.

Branch keywords replace the node's keywords, with a few exceptions that
refine instead of replace: ``properties`` merge key by key (recursively),
``required`` and ``x-jsf-logic-validations`` become ordered unions, and the
dict-valued extensions merge one level deep.
"""

from typing import Any

from headless_form.models.schema import LogicDefinitions, SchemaLike, SchemaNode, replace_node

DICT_MERGED_FIELDS = frozenset({"presentation", "error_message", "layout", "logic_computed_attrs"})
UNION_FIELDS = frozenset({"required", "logic_validations"})


def ordered_union(left: list[Any] | None, right: list[Any] | None) -> list[Any]:
    merged = list(left or [])
    for item in right or []:
        if item not in merged:
            merged.append(item)
    return merged


def _conditional_only(conditional: LogicDefinitions) -> LogicDefinitions:
    return LogicDefinitions(if_=conditional.if_, then=conditional.then, else_=conditional.else_)


def merge_logic(base: LogicDefinitions | None, branch: LogicDefinitions | None) -> LogicDefinitions | None:
    """Named rules and rule-keyed conditionals accumulate, the base's conditionals first."""
    if base is None or branch is None:
        return branch if base is None else base
    changes: dict[str, Any] = {}
    if branch.validations:
        changes["validations"] = {**(base.validations or {}), **branch.validations}
    if branch.computed_values:
        changes["computed_values"] = {**(base.computed_values or {}), **branch.computed_values}
    incoming = branch.conditionals()
    if not incoming:
        return base.model_copy(update=changes)
    # Flattened so nested allOf entries are not collected twice.
    pending = [*base.conditionals(), *incoming]
    changes["all_of"] = [_conditional_only(conditional) for conditional in pending]
    return base.without_conditionals().model_copy(update=changes)


def merge_properties(
    base: dict[str, SchemaLike] | None,
    branch: dict[str, SchemaLike],
) -> tuple[dict[str, SchemaLike], dict[str, SchemaLike]]:
    """
    Merge branch properties into base properties.

    Returns the merged mapping and the base schemas of properties the branch
    turned into the ``false`` schema.
    """
    merged = dict(base or {})
    forced: dict[str, SchemaLike] = {}
    for name, incoming in branch.items():
        current = merged.get(name)
        if incoming is False and isinstance(current, SchemaNode):
            forced[name] = current
            merged[name] = False
        elif isinstance(current, SchemaNode) and isinstance(incoming, SchemaNode):
            merged[name] = merge_branch(current, incoming)
        else:
            merged[name] = incoming
    return merged, forced


def merge_branch(base: SchemaNode, branch: SchemaLike | None) -> SchemaLike:
    """
    Return ``base`` with ``branch`` merged in; neither input is modified.

    A ``true`` (or missing) branch changes nothing; a ``false`` branch makes
    the whole node forbidden.
    """
    if branch is None or branch is True:
        return base
    if branch is False:
        return False

    changes: dict[str, Any] = {}
    forced: dict[str, SchemaLike] = {}

    for name in branch.model_fields_set:
        if name not in SchemaNode.model_fields:
            continue
        incoming = getattr(branch, name)
        current = getattr(base, name)
        if name == "properties" and incoming is not None:
            changes[name], forced = merge_properties(current, incoming)
        elif name in UNION_FIELDS:
            changes[name] = ordered_union(current, incoming)
        elif name in DICT_MERGED_FIELDS and isinstance(current, dict) and isinstance(incoming, dict):
            changes[name] = {**current, **incoming}
        elif name == "logic":
            changes[name] = merge_logic(current, incoming)
        else:
            changes[name] = incoming

    for key, incoming in (branch.model_extra or {}).items():
        changes[key] = incoming

    merged = replace_node(base, **changes)
    merged._unreachable = {**base.unreachable, **branch.unreachable, **forced}
    if branch.computed_attributes:
        merged._computed_attributes = {**(base.computed_attributes or {}), **branch.computed_attributes}
    return merged


def with_unreachable(node: SchemaNode, hidden: dict[str, SchemaLike]) -> SchemaNode:
    """Copy of ``node`` that also records ``hidden`` as unreachable properties."""
    if not hidden:
        return node
    marked = replace_node(node)
    marked._unreachable = {**node.unreachable, **hidden}
    return marked
