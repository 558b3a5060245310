"""
Data models for headless-form.

This module contains Pydantic models for:
- The annotated JSON Schema (input)
- Form fields and options (output)
- Validation errors and results
- Form options and collaborator interfaces
"""

from headless_form.models.schema import (
    ComputedValue,
    LogicDefinitions,
    SchemaLike,
    SchemaNode,
    ValidationRule,
    parse_schema,
    replace_node,
)
from headless_form.models.field import (
    FIELD_TYPES,
    AsyncOptions,
    FieldOption,
    FieldType,
    FormField,
    find_field,
)
from headless_form.models.validation_result import (
    FormErrors,
    ValidationError,
    ValidationResult,
)
from headless_form.models.form_options import (
    CreateHeadlessFormOptions,
    LegacyOptions,
    ValidationOptions,
)
from headless_form.models.collaborators import (
    AsyncOptionsLoader,
    AsyncOptionsLoaderContext,
    AsyncOptionsLoaderResult,
    AsyncOptionsPaginationInfo,
    LayoutStyleGenerator,
    ModifyResult,
    ModifyWarning,
    SchemaModifier,
)

__all__ = [
    # Schema input
    "SchemaNode",
    "SchemaLike",
    "LogicDefinitions",
    "ValidationRule",
    "ComputedValue",
    "parse_schema",
    "replace_node",
    # Field output
    "FormField",
    "FieldOption",
    "AsyncOptions",
    "FieldType",
    "FIELD_TYPES",
    "find_field",
    # Validation
    "ValidationError",
    "ValidationResult",
    "FormErrors",
    # Options
    "CreateHeadlessFormOptions",
    "LegacyOptions",
    "ValidationOptions",
    # Collaborators
    "AsyncOptionsLoader",
    "AsyncOptionsLoaderContext",
    "AsyncOptionsLoaderResult",
    "AsyncOptionsPaginationInfo",
    "LayoutStyleGenerator",
    "ModifyResult",
    "ModifyWarning",
    "SchemaModifier",
]
