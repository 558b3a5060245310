"""
Input type classification.

An explicit ``x-jsf-presentation.inputType`` always wins. Otherwise the
type is inferred from the schema shape, most specific rule first.
"""

from headless_form.models.schema import SchemaLike, SchemaNode

FORMAT_INPUT_TYPES = {
    "email": "email",
    "date": "date",
    "data-url": "file",
}

CONTAINER_INPUT_TYPES = frozenset({"fieldset", "group-array"})


def constant_members(members: list[SchemaLike] | None) -> list[SchemaNode]:
    """Members of a ``oneOf``/``anyOf`` that each declare a ``const``; empty if any does not."""
    if not members:
        return []
    if not all(isinstance(member, SchemaNode) and member.has("const") for member in members):
        return []
    return list(members)


def is_array_node(node: SchemaNode) -> bool:
    return "array" in node.types or node.items is not None or node.prefix_items is not None


def is_object_node(node: SchemaNode) -> bool:
    return "object" in node.types or node.properties is not None


def infer_input_type(node: SchemaNode) -> str:
    """Infer the input type from the schema shape alone."""
    types = node.types

    if is_array_node(node):
        if isinstance(node.items, SchemaNode) and is_object_node(node.items):
            return "group-array"
        return "select"
    if is_object_node(node):
        return "fieldset"
    if "boolean" in types:
        return "checkbox"
    if "number" in types or "integer" in types:
        return "number"
    if node.format in FORMAT_INPUT_TYPES:
        return FORMAT_INPUT_TYPES[node.format]
    if constant_members(node.one_of):
        return "radio"
    if node.enum is not None or constant_members(node.any_of):
        return "select"
    return "text"


def get_input_type(node: SchemaNode) -> str:
    return node.input_type or infer_input_type(node)
