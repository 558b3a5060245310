"""
Field models for the generated form.

A ``FormField`` describes one input of the form in a UI-agnostic way. The
tree is rebuilt from the resolved schema on every pipeline run and handed to
the caller as a snapshot.
"""

from __future__ import annotations

from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FieldType = Literal[
    "text",
    "number",
    "select",
    "file",
    "radio",
    "group-array",
    "email",
    "date",
    "checkbox",
    "fieldset",
    "money",
    "country",
    "textarea",
    "hidden",
    "autocomplete",
]

FIELD_TYPES: tuple[str, ...] = FieldType.__args__


class FieldOption(BaseModel):
    """A label/value pair built from ``enum`` or constant ``oneOf``/``anyOf`` members."""

    model_config = ConfigDict(extra="allow")

    label: str = Field(..., description="Human-readable label")
    value: Any = Field(..., description="Value submitted when the option is chosen")


class AsyncOptions(BaseModel):
    """
    Async option configuration carried from ``x-jsf-presentation.asyncOptions``.

    ``loader`` is the caller-supplied function registered under ``id``. The
    form never calls it; a UI layer does.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(..., description="Identity of the loader")
    params: dict[str, Any] | None = Field(default=None, description="Parameters passed to the loader")
    dependencies: list[str] | None = Field(
        default=None,
        description="Field names whose change should reload the options",
    )
    searchable: bool = Field(default=False, description="Whether search is enabled")
    paginated: bool = Field(default=False, description="Whether pagination is enabled")
    debounce_ms: int = Field(default=300, description="Debounce time for search in milliseconds")
    loader: Callable[..., Any] | None = Field(default=None, exclude=True, repr=False)


class FormField(BaseModel):
    """
    A single field of the form.

    Presentation keys without a dedicated attribute are kept as extra
    attributes so UI layers can read them directly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    name: str = Field(..., description="Property name")
    label: str | None = Field(default=None, description="Human-readable label (schema title)")
    description: str | None = Field(default=None, description="Help text")
    input_type: str = Field(..., description="Input classification")
    type: str = Field(..., description="Deprecated alias of input_type")
    json_type: str | list[str] | None = Field(default=None, description="Declared JSON Schema type")
    required: bool = Field(default=False)
    is_visible: bool = Field(default=True)

    # Constraints
    format: str | None = None
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = None
    exclusive_maximum: int | float | None = None
    multiple_of: int | float | None = None
    min_items: int | None = None
    max_items: int | None = None
    default: Any = None
    const: Any = None
    checkbox_value: Any = None
    accept: str | None = None
    max_file_size: int | float | None = None
    min_date: str | None = None
    max_date: str | None = None

    # Choices
    options: list[FieldOption] | None = None
    async_options: AsyncOptions | None = None

    # Nesting and extensions
    fields: list[FormField] | None = None
    row_fields: list[list[FormField]] | None = Field(
        default=None,
        description="Child fields of each existing group-array row, resolved against that row",
    )
    error_message: dict[str, str] | None = None
    computed_attributes: dict[str, Any] | None = None
    layout: dict[str, Any] | None = None

    def get_field(self, name: str) -> FormField | None:
        """Find a direct child field by name."""
        for child in self.fields or []:
            if child.name == name:
                return child
        return None

    def to_dict(self) -> dict[str, Any]:
        """Export with camelCase keys, omitting unset attributes."""
        return self.model_dump(by_alias=True, exclude_none=True)


FormField.model_rebuild()


def find_field(fields: list[FormField], path: tuple[Any, ...] | list[Any]) -> FormField | None:
    """
    Locate the field addressed by a field path.

    Integer segments address rows of a ``group-array`` field. They resolve to
    that row's fields when the row exists and to the row template otherwise,
    so ``("items", 2, "email")`` finds the ``email`` child of row 2.
    """
    current: FormField | None = None
    siblings = fields
    for segment in path:
        if isinstance(segment, int) and not isinstance(segment, bool):
            if current is None or current.input_type != "group-array":
                return None
            if current.row_fields is not None and 0 <= segment < len(current.row_fields):
                siblings = current.row_fields[segment]
            continue
        current = next((f for f in siblings if f.name == segment), None)
        if current is None:
            return None
        siblings = current.fields or []
    return current
