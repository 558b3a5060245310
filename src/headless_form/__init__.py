"""
headless-form: UI-agnostic forms from annotated JSON Schema.

Give it a JSON Schema with x-jsf-* extensions and get back the form's fields
and a validation function. Conditionals (if/then/else and JSON-Logic rules)
are resolved against the current values, so required flags, visibility and
constraints always match what the user has entered.

Simple Usage:
    from headless_form import create_headless_form

    form = create_headless_form(schema, initial_values={"type": "biz"})

    for field in form.fields:
        print(field.name, field.input_type, field.required, field.is_visible)

    result = form.handle_validation({"type": "biz"})
    print(result.form_errors)  # {"company": "Required field"} or None

Lower-level Usage:
    from headless_form import resolve_schema, validate_schema, build_fields, reconcile_errors

    resolved = resolve_schema(schema, values)
    errors = validate_schema(values, resolved)
    form_errors = reconcile_errors(errors)
    fields = build_fields(resolved)

Custom rule operators:
    form = create_headless_form(schema, {"customJsonLogicOps": {"is_even": lambda n: n % 2 == 0}})

Tracing:
    from headless_form.tracing import setup_tracing

    # Log stage timings and branch decisions to stderr
    setup_tracing(console=True, verbose=True)

    # Or append to a file
    setup_tracing(file_path="headless_form.log")
"""

from headless_form.orchestrator import (
    HeadlessForm,
    create_headless_form,
)
from headless_form.resolution import resolve_schema
from headless_form.validation import validate_schema
from headless_form.fields import build_fields
from headless_form.errors import reconcile_errors
from headless_form.logic import RuleInterpreter
from headless_form.models import (
    AsyncOptions,
    CreateHeadlessFormOptions,
    FieldOption,
    FormErrors,
    FormField,
    LegacyOptions,
    SchemaNode,
    ValidationError,
    ValidationResult,
)
from headless_form.exceptions import (
    HeadlessFormError,
    OperatorCollisionError,
    RuleEvaluationError,
    SchemaSetupError,
    UnknownOperatorError,
    UnknownRuleReferenceError,
)
from headless_form.tracing import (
    setup_tracing,
    disable_tracing,
    enable_tracing,
)

__all__ = [
    # Main interface
    "HeadlessForm",
    "create_headless_form",
    # Pipeline stages
    "resolve_schema",
    "validate_schema",
    "build_fields",
    "reconcile_errors",
    "RuleInterpreter",
    # Models
    "SchemaNode",
    "FormField",
    "FieldOption",
    "AsyncOptions",
    "ValidationError",
    "ValidationResult",
    "FormErrors",
    "CreateHeadlessFormOptions",
    "LegacyOptions",
    # Errors
    "HeadlessFormError",
    "SchemaSetupError",
    "UnknownRuleReferenceError",
    "RuleEvaluationError",
    "UnknownOperatorError",
    "OperatorCollisionError",
    # Tracing
    "setup_tracing",
    "disable_tracing",
    "enable_tracing",
]

__version__ = "0.1.0"
