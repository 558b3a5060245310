"""
Error reconciliation for headless-form.

Turns raw validator errors into the nested ``FormErrors`` structure shaped
like the field tree.
"""

from headless_form.errors.reconciler import ROOT_KEY, assign_message, reconcile_errors

__all__ = [
    "reconcile_errors",
    "assign_message",
    "ROOT_KEY",
]
