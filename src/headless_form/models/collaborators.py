"""
Interfaces of the collaborators that sit around the form core.

The core only carries their configuration: it never calls an async option
loader, never generates CSS and never rewrites a schema after the fact.
"""

from typing import Any, Awaitable, Callable, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AsyncOptionsPaginationInfo(BaseModel):
    """Pagination state exchanged with an async option loader."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int = Field(..., description="Current page number")
    total_pages: int | None = Field(default=None, description="Total number of pages")
    has_more: bool | None = Field(default=None, description="Whether more pages exist")


class AsyncOptionsLoaderContext(BaseModel):
    """What a UI layer passes to a loader."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    search: str | None = Field(default=None, description="Current search query")
    pagination: AsyncOptionsPaginationInfo | None = None
    form_values: dict[str, Any] = Field(default_factory=dict, description="Current form values")
    signal: Any = Field(default=None, description="Cancellation carrier, never interpreted")


class AsyncOptionsLoaderResult(BaseModel):
    """What a loader returns."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    options: list[dict[str, Any]] = Field(default_factory=list)
    pagination: AsyncOptionsPaginationInfo | None = None


AsyncOptionsLoader = Callable[[AsyncOptionsLoaderContext], Awaitable[AsyncOptionsLoaderResult]]


class ModifyWarning(BaseModel):
    """Non-fatal notice produced while modifying a schema."""

    type: str
    message: str
    meta: dict[str, Any] | None = None


class ModifyResult(BaseModel):
    schema_: dict[str, Any] = Field(..., alias="schema")
    warnings: list[ModifyWarning] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class SchemaModifier(Protocol):
    """Rewrites an unresolved schema before it reaches ``create_headless_form``."""

    def __call__(self, schema: dict[str, Any], config: dict[str, Any]) -> ModifyResult: ...


class LayoutStyleGenerator(Protocol):
    """Turns ``x-jsf-layout`` hints into style properties."""

    def __call__(self, layout: dict[str, Any]) -> dict[str, str]: ...
