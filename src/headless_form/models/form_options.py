"""
Options accepted by ``create_headless_form``.

Both snake_case names and the camelCase names used in schema-driven form
tooling (``initialValues``, ``legacyOptions`` ...) are accepted.
"""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LegacyOptions(BaseModel):
    """Switches that restore documented v0 behaviours of the validator."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    treat_null_as_undefined: bool | None = Field(
        default=None,
        description="Treat None like an absent value (also for 'required')",
    )
    allow_forbidden_values: bool | None = Field(
        default=None,
        description="Accept any value against the 'false' schema",
    )


class CreateHeadlessFormOptions(BaseModel):
    """Options for building a form from a schema."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    initial_values: Any = Field(default=None, description="Values used for the first resolution pass")
    legacy_options: LegacyOptions = Field(default_factory=LegacyOptions)
    strict_input_type: bool | None = Field(
        default=None,
        description="Require x-jsf-presentation.inputType on every property",
    )
    custom_json_logic_ops: dict[str, Callable[..., Any]] = Field(
        default_factory=dict,
        description="Extra rule operators, name -> function",
    )
    async_loaders: dict[str, Callable[..., Any]] = Field(
        default_factory=dict,
        description="Async option loaders, loader id -> function",
    )


class ValidationOptions(BaseModel):
    """Effective validator switches after merging options with config defaults."""

    model_config = ConfigDict(frozen=True)

    treat_null_as_undefined: bool = False
    allow_forbidden_values: bool = False
