"""
Error path reconciler.

Maps validator errors (schema paths) onto the nested ``FormErrors``
structure (field paths). Objects become dicts keyed by property name, arrays
become lists aligned with the value, ``None`` marking rows without errors.

When several errors address the same location only the first one is kept;
errors arrive in validator traversal order, depth first and in keyword
order within a node.

Errors about the root value itself (a root ``additionalProperties: false``
rejecting an undeclared key, a root ``not`` or ``oneOf``) have no field to
attach to. They are stored under the ``""`` key, the one entry of
``FormErrors`` that does not correspond to a field of the field tree.
"""

import logging
from typing import Any, Iterable

from headless_form.models.validation_result import FormErrors, ValidationError
from headless_form.paths import Segment, format_path, is_index, schema_path_to_field_path
from headless_form.tracing import trace_stage

logger = logging.getLogger(__name__)

ROOT_KEY = ""


def _get(container: Any, segment: Segment) -> Any:
    if isinstance(container, list):
        return container[segment] if is_index(segment) and segment < len(container) else None
    return container.get(segment)


def _set(container: Any, segment: Segment, value: Any) -> None:
    if isinstance(container, list):
        container.extend([None] * (segment + 1 - len(container)))
        container[segment] = value
    else:
        container[segment] = value


def _fits(container: Any, segment: Segment) -> bool:
    """Lists only take indices; dicts take any segment."""
    return not isinstance(container, list) or is_index(segment)


def assign_message(tree: FormErrors, path: tuple[Segment, ...], message: str) -> bool:
    """
    Store ``message`` at ``path`` unless that location is already taken.

    Returns whether the message was stored.
    """
    if not path:
        if ROOT_KEY in tree:
            return False
        tree[ROOT_KEY] = message
        return True

    container: Any = tree
    for index, segment in enumerate(path[:-1]):
        if not _fits(container, segment):
            return False
        child = _get(container, segment)
        if child is None:
            child = [] if is_index(path[index + 1]) else {}
            _set(container, segment, child)
        elif isinstance(child, str):
            # A message already covers this whole subtree.
            return False
        container = child

    last = path[-1]
    if not _fits(container, last) or _get(container, last) is not None:
        return False
    _set(container, last, message)
    return True


@trace_stage("reconcile")
def reconcile_errors(errors: Iterable[ValidationError]) -> FormErrors | None:
    """
    Build the nested error messages for a list of validator errors.

    Returns ``None`` when there are no errors.

    Example:
        >>> error = ValidationError(keyword="required", path=("properties", "c"), message="Required field")
        >>> reconcile_errors([error])
        {'c': 'Required field'}
    """
    form_errors: FormErrors = {}
    for error in errors:
        field_path = schema_path_to_field_path(error.path)
        if not assign_message(form_errors, field_path, error.message):
            logger.debug("Dropped %s error at %s: location already has an error", error.keyword, format_path(field_path))
    return form_errors or None
