"""
Schema models for headless forms.

``SchemaNode`` mirrors a JSON Schema (draft 2020-12) node plus the
``x-jsf-*`` extension keywords. Keywords the core interprets are explicit
fields; anything else lands in the extension bag (``model_extra``) and is
carried through untouched.

Nodes are treated as immutable values: the resolver never edits a node in
place, it derives new nodes with ``replace_node`` and shares every untouched
child by reference.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

NodeKind = Literal["object", "array", "scalar", "composition", "conditional"]


class ValidationRule(BaseModel):
    """A named boolean rule referenced through ``x-jsf-logic-validations``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    rule: Any = Field(..., description="Rule expression that must be truthy")
    error_message: str | None = Field(
        default=None,
        alias="errorMessage",
        description="Message reported when the rule is falsy",
    )


class ComputedValue(BaseModel):
    """A named rule whose result is spliced into schema attributes."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    rule: Any = Field(..., description="Rule expression producing the value")


class LogicDefinitions(BaseModel):
    """
    Contents of an ``x-jsf-logic`` block.

    Besides named validations and computed values the block may hold a
    rule-keyed conditional (``if``/``then``/``else``) and an ``allOf`` list of
    further rule-keyed conditionals.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    validations: dict[str, ValidationRule] | None = None
    computed_values: dict[str, ComputedValue] | None = Field(default=None, alias="computedValues")
    if_: Any = Field(default=None, alias="if")
    then: SchemaLike | None = None
    else_: SchemaLike | None = Field(default=None, alias="else")
    all_of: list[LogicDefinitions] | None = Field(default=None, alias="allOf")

    @property
    def has_condition(self) -> bool:
        return "if_" in self.model_fields_set and self.if_ is not None

    def conditionals(self) -> list[LogicDefinitions]:
        """This block (when it has an ``if``) followed by the ``allOf`` conditionals, depth first."""
        found = [self] if self.has_condition else []
        for entry in self.all_of or []:
            found.extend(entry.conditionals())
        return found

    def without_conditionals(self) -> LogicDefinitions:
        """Copy keeping only the named rules."""
        stripped = self.model_copy(update={"if_": None, "then": None, "else_": None, "all_of": None})
        stripped.model_fields_set.difference_update({"if_", "then", "else_", "all_of"})
        return stripped


class SchemaNode(BaseModel):
    """A JSON Schema node with ``x-jsf-*`` extensions."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    # Annotations
    type: str | list[str] | None = None
    title: str | None = None
    description: str | None = None
    default: Any = None
    const: Any = None
    enum: list[Any] | None = None
    format: str | None = None

    # String keywords
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    pattern: str | None = None

    # Number keywords
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: int | float | None = Field(default=None, alias="exclusiveMaximum")
    multiple_of: int | float | None = Field(default=None, alias="multipleOf")

    # Object keywords
    properties: dict[str, SchemaLike] | None = None
    required: list[str] | None = None
    additional_properties: SchemaLike | None = Field(default=None, alias="additionalProperties")
    pattern_properties: dict[str, SchemaLike] | None = Field(default=None, alias="patternProperties")

    # Array keywords
    items: SchemaLike | None = None
    prefix_items: list[SchemaLike] | None = Field(default=None, alias="prefixItems")
    min_items: int | None = Field(default=None, alias="minItems")
    max_items: int | None = Field(default=None, alias="maxItems")
    unique_items: bool | None = Field(default=None, alias="uniqueItems")
    contains: SchemaLike | None = None
    min_contains: int | None = Field(default=None, alias="minContains")
    max_contains: int | None = Field(default=None, alias="maxContains")

    # Composition and conditionals
    all_of: list[SchemaLike] | None = Field(default=None, alias="allOf")
    any_of: list[SchemaLike] | None = Field(default=None, alias="anyOf")
    one_of: list[SchemaLike] | None = Field(default=None, alias="oneOf")
    not_: SchemaLike | None = Field(default=None, alias="not")
    if_: SchemaLike | None = Field(default=None, alias="if")
    then: SchemaLike | None = None
    else_: SchemaLike | None = Field(default=None, alias="else")

    # Extensions
    order: list[str] | None = Field(default=None, alias="x-jsf-order")
    presentation: dict[str, Any] | None = Field(default=None, alias="x-jsf-presentation")
    layout: dict[str, Any] | None = Field(default=None, alias="x-jsf-layout")
    error_message: dict[str, str] | None = Field(default=None, alias="x-jsf-errorMessage")
    logic: LogicDefinitions | None = Field(default=None, alias="x-jsf-logic")
    logic_validations: list[str] | None = Field(default=None, alias="x-jsf-logic-validations")
    logic_computed_attrs: dict[str, Any] | None = Field(default=None, alias="x-jsf-logic-computedAttrs")

    # Set by the resolver: shapes of properties that exist in the schema but are
    # unreachable for the current values, the evaluated computed attributes, and
    # the element schema resolved against each array element.
    _unreachable: dict[str, SchemaLike] = PrivateAttr(default_factory=dict)
    _computed_attributes: dict[str, Any] | None = PrivateAttr(default=None)
    _rows: list[SchemaLike] | None = PrivateAttr(default=None)

    def has(self, name: str) -> bool:
        """Whether keyword field ``name`` was given (``const: null`` counts)."""
        return name in self.model_fields_set

    @property
    def types(self) -> list[str]:
        if self.type is None:
            return []
        if isinstance(self.type, str):
            return [self.type]
        return list(self.type)

    @property
    def input_type(self) -> str | None:
        if self.presentation:
            return self.presentation.get("inputType")
        return None

    @property
    def kind(self) -> NodeKind:
        """The tagged variant this node belongs to."""
        types = self.types
        if self.properties is not None or "object" in types:
            return "object"
        if self.items is not None or self.prefix_items is not None or "array" in types:
            return "array"
        if self.if_ is not None or (self.logic is not None and self.logic.has_condition):
            return "conditional"
        if self.all_of or self.any_of or self.one_of or self.not_ is not None:
            return "composition"
        return "scalar"

    @property
    def unreachable(self) -> dict[str, SchemaLike]:
        return self._unreachable

    @property
    def computed_attributes(self) -> dict[str, Any] | None:
        return self._computed_attributes

    @property
    def rows(self) -> list[SchemaLike] | None:
        return self._rows

    def to_schema(self) -> dict[str, Any]:
        """Dump back to a plain JSON Schema dict using the original keyword names."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="python")


SchemaLike = Union[SchemaNode, bool]

LogicDefinitions.model_rebuild()
SchemaNode.model_rebuild()


def parse_schema(raw: Any) -> SchemaLike:
    """Turn a JSON Schema dict (or boolean schema) into a ``SchemaNode``."""
    if isinstance(raw, (SchemaNode, bool)):
        return raw
    return SchemaNode.model_validate(raw)


def replace_node(node: SchemaNode, remove: tuple[str, ...] = (), **changes: Any) -> SchemaNode:
    """
    Derive a new node from ``node``.

    ``changes`` are keyword fields (by Python name) or extension keys to set;
    ``remove`` names keyword fields to unset. Children that are not changed
    are shared with the original node, and resolver bookkeeping is kept.
    """
    copied = node.model_copy(update=changes)
    for name in remove:
        if name in SchemaNode.model_fields:
            setattr(copied, name, None)
            copied.model_fields_set.discard(name)
    copied._unreachable = dict(node._unreachable)
    copied._computed_attributes = node._computed_attributes
    copied._rows = node._rows
    return copied


def field_name_for_key(key: str) -> str:
    """Map a JSON keyword (``minLength``) to its ``SchemaNode`` field (``min_length``)."""
    return _ALIAS_TO_FIELD.get(key, key)


_ALIAS_TO_FIELD = {
    (info.alias or name): name for name, info in SchemaNode.model_fields.items()
}
