"""
Exception hierarchy for headless-form.

Schema-setup problems are fatal and reported once when the form is created.
Rule-evaluation problems are programmer misconfiguration and propagate out of
``handle_validation``. Invalid form values never raise: they are collected as
``ValidationError`` records instead.
"""


class HeadlessFormError(Exception):
    """Base class for every error raised by headless-form."""


class SchemaSetupError(HeadlessFormError):
    """The schema (or the options given with it) cannot be turned into a form."""


class UnknownRuleReferenceError(SchemaSetupError):
    """A node references a validation or computed value that is not declared."""

    def __init__(self, name: str, kind: str = "validation"):
        self.name = name
        self.kind = kind
        super().__init__(f'Unknown {kind} rule "{name}" referenced in schema')


class RuleEvaluationError(HeadlessFormError):
    """A rule expression could not be evaluated."""


class UnknownOperatorError(RuleEvaluationError):
    """A rule expression uses an operator that is neither built in nor registered."""

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f'Unrecognized operation "{operator}"')


class OperatorCollisionError(SchemaSetupError, RuleEvaluationError):
    """A custom operator tries to replace a built-in operator."""

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f'Custom operation "{operator}" shadows a built-in operation')
