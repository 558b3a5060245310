"""
Field tree builder.

Turns a resolved schema into the list of ``FormField`` descriptors of its
root object. Object properties become ``fieldset`` fields and arrays of
objects become ``group-array`` fields, both with child fields. A
``group-array`` also lists the fields of each existing row in
``row_fields``, built from the element schemas the resolver derived for
those rows.

Visibility: a property is visible when its resolved schema is reachable.
Properties the resolver recorded as unreachable (declared only in a branch
that was not merged, or forced to ``false``) are emitted with
``is_visible=False`` so a UI can keep its layout stable.
"""

import logging
from typing import Any, Callable

from headless_form.exceptions import SchemaSetupError
from headless_form.fields.input_type import CONTAINER_INPUT_TYPES, get_input_type, is_object_node
from headless_form.fields.options import build_async_options, extract_options
from headless_form.layout import is_valid_layout_config
from headless_form.models.field import FormField
from headless_form.models.schema import SchemaLike, SchemaNode, parse_schema, replace_node
from headless_form.paths import format_path
from headless_form.resolution.merge import merge_branch
from headless_form.tracing import trace_stage

logger = logging.getLogger(__name__)

# Presentation keys turned into dedicated field attributes.
_PRESENTATION_ATTRIBUTES = {
    "description": "description",
    "accept": "accept",
    "maxFileSize": "max_file_size",
    "minDate": "min_date",
    "maxDate": "max_date",
}
_RESERVED_PRESENTATION_KEYS = frozenset(
    {"inputType", "asyncOptions", "name", "type", "required", "isVisible", "fields", "options"}
)
_CONSTRAINT_ATTRIBUTES = (
    "format",
    "pattern",
    "min_length",
    "max_length",
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "multiple_of",
    "min_items",
    "max_items",
)


def _conditional_branches(node: SchemaNode) -> list[SchemaNode]:
    branches: list[SchemaLike | None] = [node.then, node.else_]
    if node.logic is not None:
        for conditional in node.logic.conditionals():
            branches.extend([conditional.then, conditional.else_])
    return [branch for branch in branches if isinstance(branch, SchemaNode)]


def object_view(node: SchemaNode) -> SchemaNode:
    """
    The object as a form sees it.

    ``allOf`` members all apply, so their properties and ``required`` lists
    are folded into the view. Properties that only appear inside conditional
    branches still present in the node (``items`` templates) are unreachable.
    """
    members = [member for member in node.all_of or [] if isinstance(member, SchemaNode)]

    branch_properties: dict[str, SchemaLike] = {}
    for source in (node, *members):
        for branch in _conditional_branches(source):
            for name, prop in (branch.properties or {}).items():
                if prop is not False:
                    branch_properties.setdefault(name, prop)

    view: SchemaLike = node
    for member in members:
        merged = merge_branch(view, member)
        if isinstance(merged, SchemaNode):
            view = merged

    properties = view.properties or {}
    hidden = {name: prop for name, prop in branch_properties.items() if name not in properties}
    if hidden:
        view = replace_node(view)
        view._unreachable = {**hidden, **node.unreachable, **view.unreachable}
    return view


def order_names(order: list[str] | None, names: list[str], path: tuple = ()) -> list[str]:
    """Apply ``x-jsf-order``; names it omits follow in declaration order."""
    if not order:
        return names
    where = format_path(path) or "<root>"
    unknown = [name for name in order if name not in names]
    if unknown:
        logger.warning("x-jsf-order at %s lists unknown properties: %s", where, ", ".join(unknown))
    omitted = [name for name in names if name not in order]
    if omitted:
        logger.warning("x-jsf-order at %s omits properties: %s", where, ", ".join(omitted))
    return [name for name in order if name in names] + omitted


class FieldBuilder:
    """
    Builds ``FormField`` trees from resolved schemas.

    Usage:
        builder = FieldBuilder(strict_input_type=True, async_loaders={"countries": load_countries})
        fields = builder.build(resolved_schema)
    """

    def __init__(
        self,
        strict_input_type: bool = False,
        async_loaders: dict[str, Callable[..., Any]] | None = None,
    ):
        self.strict_input_type = strict_input_type
        self.async_loaders = dict(async_loaders or {})

    def build(self, schema: SchemaLike, order: list[str] | None = None) -> list[FormField]:
        """Build the fields of the root object; ``order`` overrides the root ``x-jsf-order``."""
        if not isinstance(schema, SchemaNode):
            return []
        return self._build_fields(object_view(schema), (), order)

    def _build_fields(self, view: SchemaNode, path: tuple, order: list[str] | None = None) -> list[FormField]:
        properties = view.properties or {}
        unreachable = view.unreachable
        required = set(view.required or [])

        names = list(properties) + [name for name in unreachable if name not in properties]
        names = order_names(order if order is not None else view.order, names, path)

        fields: list[FormField] = []
        for name in names:
            prop = properties.get(name)
            if isinstance(prop, SchemaNode):
                fields.append(self._build_field(name, prop, name in required, True, (*path, name)))
            elif prop is True:
                fields.append(self._build_field(name, SchemaNode(), name in required, True, (*path, name)))
            elif isinstance(unreachable.get(name), SchemaNode):
                fields.append(self._build_field(name, unreachable[name], False, False, (*path, name)))
        return fields

    def _input_type(self, node: SchemaNode, path: tuple) -> str:
        input_type = get_input_type(node)
        if self.strict_input_type and node.input_type is None and input_type not in CONTAINER_INPUT_TYPES:
            raise SchemaSetupError(
                f'Strict input type is enabled but field "{format_path(path)}" '
                "has no x-jsf-presentation.inputType"
            )
        return input_type

    def _build_field(self, name: str, node: SchemaNode, required: bool, visible: bool, path: tuple) -> FormField:
        input_type = self._input_type(node, path)
        presentation = dict(node.presentation or {})
        if node.layout is not None and not is_valid_layout_config(node.layout):
            logger.warning("Invalid x-jsf-layout on field %s", format_path(path))

        attrs: dict[str, Any] = {
            "name": name,
            "label": node.title,
            "description": node.description,
            "input_type": input_type,
            "type": input_type,
            "json_type": node.type,
            "required": required,
            "is_visible": visible,
            "error_message": node.error_message,
            "computed_attributes": node.computed_attributes,
            "layout": node.layout,
        }
        for attribute in _CONSTRAINT_ATTRIBUTES:
            attrs[attribute] = getattr(node, attribute)
        if node.has("default"):
            attrs["default"] = node.default
        if node.has("const"):
            attrs["const"] = node.const
        if input_type == "checkbox":
            attrs["checkbox_value"] = node.const if node.has("const") else True

        for key, value in presentation.items():
            if key in _RESERVED_PRESENTATION_KEYS:
                continue
            if key == "accept" and isinstance(value, (list, tuple)):
                value = ",".join(str(part) for part in value)
            attrs[_PRESENTATION_ATTRIBUTES.get(key, key)] = value

        async_options = build_async_options(node, self.async_loaders)
        if async_options is not None:
            attrs["async_options"] = async_options
        else:
            attrs["options"] = extract_options(node)

        children = self._build_children(node, input_type, path)
        if children is not None:
            attrs["fields"] = children
        if input_type == "group-array" and node.rows is not None:
            attrs["row_fields"] = [
                self._build_fields(object_view(row), (*path, index)) if isinstance(row, SchemaNode) else []
                for index, row in enumerate(node.rows)
            ]

        return FormField(**attrs)

    def _build_children(self, node: SchemaNode, input_type: str, path: tuple) -> list[FormField] | None:
        if is_object_node(node) and node.properties is not None:
            return self._build_fields(object_view(node), path)
        if input_type == "group-array" and isinstance(node.items, SchemaNode):
            # The first existing row stands in for the template.
            first = node.rows[0] if node.rows else None
            return self._build_fields(object_view(first if isinstance(first, SchemaNode) else node.items), path)
        return None


@trace_stage("build")
def build_fields(
    schema: Any,
    *,
    strict_input_type: bool = False,
    async_loaders: dict[str, Callable[..., Any]] | None = None,
    order: list[str] | None = None,
) -> list[FormField]:
    """
    Build the field tree of a resolved schema.

    Raises:
        SchemaSetupError: If ``strict_input_type`` is set and a field lacks an inputType.
    """
    return FieldBuilder(strict_input_type, async_loaders).build(parse_schema(schema), order)
