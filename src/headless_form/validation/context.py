"""
Shared state for one validation pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable

from headless_form.logic.rules import RuleScope
from headless_form.models.form_options import ValidationOptions
from headless_form.models.schema import SchemaLike
from headless_form.models.validation_result import ValidationError

NodeValidator = Callable[[Any, SchemaLike, tuple, "ValidationContext"], list[ValidationError]]


@dataclass(frozen=True)
class ValidationContext:
    """
    Options and rule scope threaded through the recursive validator.

    ``descend`` is the node validator itself; keyword families call it to
    validate sub-values without importing the dispatcher.
    """

    options: ValidationOptions
    scope: RuleScope
    descend: NodeValidator
    silent: bool = field(default=False)

    @property
    def root_value(self) -> Any:
        return self.scope.data

    def with_scope(self, scope: RuleScope) -> ValidationContext:
        if scope is self.scope:
            return self
        return replace(self, scope=scope)

    def as_silent(self) -> ValidationContext:
        if self.silent:
            return self
        return replace(self, silent=True)

    def is_valid(self, value: Any, schema: SchemaLike, path: tuple = ()) -> bool:
        """Pass/fail check used by conditions and compositions; errors are discarded."""
        return not self.descend(value, schema, path, self.as_silent())
