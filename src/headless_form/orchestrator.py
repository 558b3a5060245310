"""
Headless form orchestrator.

This is the main entry point of headless-form. Give it a JSON Schema and it
returns the form's fields plus a ``handle_validation`` function that checks
values and returns errors shaped like the field tree.

Every run resolves the schema against the current values first, then both
validates and builds fields from that same resolved schema.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from headless_form.config import get_config
from headless_form.errors import reconcile_errors
from headless_form.exceptions import RuleEvaluationError, SchemaSetupError
from headless_form.fields import build_fields
from headless_form.guardrails import schema_setup_guardrail
from headless_form.logic import RuleInterpreter
from headless_form.models.field import FormField
from headless_form.models.form_options import CreateHeadlessFormOptions, ValidationOptions
from headless_form.models.schema import SchemaLike, SchemaNode, parse_schema
from headless_form.models.validation_result import ValidationResult
from headless_form.resolution import resolve_schema
from headless_form.tracing import traced_operation
from headless_form.validation import validate_schema

logger = logging.getLogger(__name__)


@dataclass
class FormSettings:
    """Options of a form after merging with config defaults."""

    validation: ValidationOptions = field(default_factory=ValidationOptions)
    strict_input_type: bool = False
    async_loaders: dict[str, Callable[..., Any]] = field(default_factory=dict)
    custom_operations: dict[str, Callable[..., Any]] = field(default_factory=dict)


def _coerce_options(options: Any, overrides: dict[str, Any]) -> CreateHeadlessFormOptions:
    if isinstance(options, CreateHeadlessFormOptions):
        data = {name: getattr(options, name) for name in options.model_fields_set}
    else:
        data = dict(options or {})
    data.update(overrides)
    try:
        return CreateHeadlessFormOptions.model_validate(data)
    except PydanticValidationError as e:
        raise SchemaSetupError(f"Invalid options: {e}") from e


def _settle(options: CreateHeadlessFormOptions) -> FormSettings:
    config = get_config()
    legacy = options.legacy_options

    def pick(value: bool | None, default: bool) -> bool:
        return default if value is None else value

    return FormSettings(
        validation=ValidationOptions(
            treat_null_as_undefined=pick(legacy.treat_null_as_undefined, config.treat_null_as_undefined),
            allow_forbidden_values=pick(legacy.allow_forbidden_values, config.allow_forbidden_values),
        ),
        strict_input_type=pick(options.strict_input_type, config.strict_input_type),
        async_loaders=dict(options.async_loaders),
        custom_operations=dict(options.custom_json_logic_ops),
    )


class HeadlessForm:
    """
    A form built from an annotated JSON Schema.

    Usage:
        form = HeadlessForm(schema, {"initialValues": {"type": "biz"}})

        if form.is_error:
            print(form.error)

        for field in form.fields:
            print(field.name, field.input_type, field.is_visible)

        result = form.handle_validation({"type": "biz"})
        result.form_errors  # {"company": "Required field"}
    """

    def __init__(self, schema: Any, options: Any = None, **overrides: Any):
        """
        Initialize the form.

        Setup problems do not raise: they set ``is_error`` and ``error``, and
        ``handle_validation`` re-raises them.

        Args:
            schema: JSON Schema dict (or ``SchemaNode``) with x-jsf-* extensions.
            options: ``CreateHeadlessFormOptions`` or a dict with the same keys
                (camelCase or snake_case).
            overrides: Individual options, e.g. ``strict_input_type=True``.
        """
        self.fields: list[FormField] = []
        self.is_error = False
        self.error: str | None = None
        self.layout: dict[str, Any] | None = None

        self._schema: SchemaLike = False
        self._interpreter: RuleInterpreter | None = None
        self._settings = FormSettings()
        self._setup_error: Exception | None = None

        try:
            self._setup(schema, options, overrides)
        except (SchemaSetupError, RuleEvaluationError) as e:
            logger.error("Schema setup failed: %s", e)
            self.fields = []
            self.is_error = True
            self.error = str(e)
            self._setup_error = e

    def _setup(self, raw_schema: Any, options: Any, overrides: dict[str, Any]) -> None:
        with traced_operation("setup"):
            form_options = _coerce_options(options, overrides)
            self._settings = _settle(form_options)
            self._interpreter = RuleInterpreter(self._settings.custom_operations)

            try:
                self._schema = parse_schema(raw_schema)
            except PydanticValidationError as e:
                raise SchemaSetupError(f"Invalid schema: {e}") from e

            schema_setup_guardrail(
                raw_schema,
                self._schema,
                self._interpreter,
                structure=get_config().check_schema_structure,
            )

            if isinstance(self._schema, SchemaNode):
                self.layout = self._schema.layout

            _, self.fields = self._run(form_options.initial_values)

    def _run(self, values: Any) -> tuple[SchemaLike, list[FormField]]:
        resolved = resolve_schema(
            self._schema,
            values,
            interpreter=self._interpreter,
            options=self._settings.validation,
        )
        try:
            fields = build_fields(
                resolved,
                strict_input_type=self._settings.strict_input_type,
                async_loaders=self._settings.async_loaders,
            )
        except PydanticValidationError as e:
            raise SchemaSetupError(f"Invalid field definition: {e}") from e
        return resolved, fields

    def handle_validation(self, values: Any) -> ValidationResult:
        """
        Validate form values.

        The field list is rebuilt from the schema resolved against ``values``.

        Args:
            values: Current form values.

        Returns:
            ValidationResult whose ``form_errors`` is None when the values are valid.

        Raises:
            SchemaSetupError: If the form could not be set up.
            RuleEvaluationError: If a rule uses an operator nobody registered.
        """
        if self._setup_error is not None:
            raise self._setup_error

        values = {} if values is None else values
        with traced_operation("handle_validation"):
            resolved, self.fields = self._run(values)
            errors = validate_schema(
                values,
                resolved,
                options=self._settings.validation,
                interpreter=self._interpreter,
            )
            form_errors = reconcile_errors(errors)

        if form_errors:
            logger.debug("Validation found %d error(s)", len(errors))
        return ValidationResult(form_errors=form_errors, errors=errors)


def create_headless_form(schema: Any, options: Any = None, **overrides: Any) -> HeadlessForm:
    """
    Create a headless form from a JSON Schema.

    Args:
        schema: JSON Schema dict with x-jsf-* extensions.
        options: Form options (``initialValues``, ``legacyOptions``,
            ``strictInputType``, ``customJsonLogicOps``, ``asyncLoaders``).
        overrides: Individual options as keyword arguments.

    Returns:
        HeadlessForm with ``fields``, ``is_error``, ``error``, ``layout`` and
        ``handle_validation``.

    Example:
        >>> form = create_headless_form({"type": "object", "properties": {"name": {"type": "string"}}})
        >>> [f.name for f in form.fields]
        ['name']
    """
    return HeadlessForm(schema, options, **overrides)
