"""
Static options and async option configuration for choice fields.
"""

from typing import Any, Callable

from headless_form.fields.input_type import constant_members
from headless_form.models.field import AsyncOptions, FieldOption
from headless_form.models.schema import SchemaNode
from headless_form.values import is_object, to_display_string


def _option_from_member(member: SchemaNode) -> FieldOption:
    label = member.title if member.title is not None else to_display_string(member.const)
    extra: dict[str, Any] = {}
    if member.description is not None:
        extra["description"] = member.description
    extra.update(member.presentation or {})
    extra.pop("label", None)
    extra.pop("value", None)
    return FieldOption(label=label, value=member.const, **extra)


def extract_options(node: SchemaNode) -> list[FieldOption] | None:
    """
    Options from ``enum`` or from constant ``oneOf``/``anyOf`` members.

    Arrays take their options from the ``items`` schema (multi-select).
    """
    if isinstance(node.items, SchemaNode) and not node.properties:
        return extract_options(node.items)

    if node.enum is not None:
        return [FieldOption(label=to_display_string(value), value=value) for value in node.enum]
    for members in (node.one_of, node.any_of):
        constants = constant_members(members)
        if constants:
            return [_option_from_member(member) for member in constants]
    return None


def build_async_options(
    node: SchemaNode,
    async_loaders: dict[str, Callable[..., Any]] | None = None,
) -> AsyncOptions | None:
    """
    Read ``x-jsf-presentation.asyncOptions`` and attach the registered loader.

    The loader is only attached, never called.
    """
    config = (node.presentation or {}).get("asyncOptions")
    if not is_object(config):
        return None
    async_options = AsyncOptions.model_validate(dict(config))
    loader = (async_loaders or {}).get(async_options.id)
    if loader is not None:
        async_options = async_options.model_copy(update={"loader": loader})
    return async_options
