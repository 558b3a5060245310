"""
Validation result models.

``ValidationError`` is the raw record produced by the validator, addressed
with a schema path. ``FormErrors`` is the nested message structure handed to
the caller, addressed like the field tree.
"""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FormErrors = dict[str, Union[str, "FormErrors", list[Union["FormErrors", None]]]]


class ValidationError(BaseModel):
    """A single keyword violation found by the validator."""

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., description="Failing keyword, e.g. 'required' or 'json-logic'")
    path: tuple[str | int, ...] = Field(
        default=(),
        description="Schema-tree path of the failing location",
    )
    message: str = Field(..., description="Human-readable error message")
    params: dict[str, Any] = Field(default_factory=dict, description="Keyword parameters")


class ValidationResult(BaseModel):
    """Outcome of ``HeadlessForm.handle_validation``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    form_errors: dict[str, Any] | None = Field(
        default=None,
        description="Nested error messages keyed like the field tree, None when valid",
    )
    errors: list[ValidationError] = Field(
        default_factory=list,
        description="Raw validator errors in traversal order",
        exclude=True,
    )

    @property
    def is_valid(self) -> bool:
        return not self.form_errors

    @property
    def error_count(self) -> int:
        """Number of raw validator errors."""
        return len(self.errors)

    def get_errors_for(self, keyword: str) -> list[ValidationError]:
        """Get all raw errors reported for ``keyword``."""
        return [e for e in self.errors if e.keyword == keyword]
