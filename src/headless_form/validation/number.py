"""
Number keywords: minimum, maximum, exclusive bounds, multipleOf.
"""

import math
from typing import Any

from headless_form.models.schema import SchemaNode
from headless_form.models.validation_result import ValidationError
from headless_form.validation.messages import make_error
from headless_form.values import is_number

MULTIPLE_OF_TOLERANCE = 1e-9


def is_multiple_of(value: int | float, divisor: int | float) -> bool:
    """``value`` is a multiple of ``divisor`` up to floating-point noise (0.3 / 0.1)."""
    if divisor == 0:
        return False
    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    quotient = value / divisor
    if not math.isfinite(quotient):
        return False
    return math.isclose(quotient, round(quotient), rel_tol=MULTIPLE_OF_TOLERANCE, abs_tol=MULTIPLE_OF_TOLERANCE)


def validate_number(value: Any, schema: SchemaNode, path: tuple) -> list[ValidationError]:
    if not is_number(value):
        return []

    errors: list[ValidationError] = []
    if schema.minimum is not None and value < schema.minimum:
        errors.append(make_error("minimum", path, schema, value, limit=schema.minimum))
    if schema.exclusive_minimum is not None and value <= schema.exclusive_minimum:
        errors.append(make_error("exclusiveMinimum", path, schema, value, limit=schema.exclusive_minimum))
    if schema.maximum is not None and value > schema.maximum:
        errors.append(make_error("maximum", path, schema, value, limit=schema.maximum))
    if schema.exclusive_maximum is not None and value >= schema.exclusive_maximum:
        errors.append(make_error("exclusiveMaximum", path, schema, value, limit=schema.exclusive_maximum))
    if schema.multiple_of is not None and not is_multiple_of(value, schema.multiple_of):
        errors.append(make_error("multipleOf", path, schema, value, multiple_of=schema.multiple_of))
    return errors
