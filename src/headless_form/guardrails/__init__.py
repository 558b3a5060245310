"""
Guardrails for headless-form.

Setup checks run once when a form is created.
"""

from headless_form.guardrails.schema_guardrails import (
    SchemaCheckResult,
    check_schema_setup,
    check_structure,
    schema_setup_guardrail,
)

__all__ = [
    "SchemaCheckResult",
    "check_schema_setup",
    "check_structure",
    "schema_setup_guardrail",
]
