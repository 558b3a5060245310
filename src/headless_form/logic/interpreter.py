"""
Rule expression interpreter.

Rules are JSON-Logic expressions evaluated by the ``json_logic`` package.
``RuleInterpreter`` owns the operation table handed to it: the library's
built-ins plus the custom operators of one form. The library's global table
is never modified, so forms with different custom operators can coexist.
"""

import logging
import math
from typing import Any, Callable, Iterator

from json_logic import jsonLogic
from json_logic.builtins import BUILTINS as operations

from headless_form.exceptions import OperatorCollisionError, RuleEvaluationError, UnknownOperatorError
from headless_form.values import MISSING, is_array, is_object, to_json_literal

logger = logging.getLogger(__name__)

# Evaluated by the library itself rather than through its operation table.
LAZY_OPERATORS = frozenset({
    "if", "?:", "and", "or",
    "map", "filter", "reduce", "all", "some", "none",
    "var", "missing", "missing_some",
})

# Numeric helpers the library does not ship.
NUMERIC_OPERATIONS: dict[str, Callable[..., Any]] = {
    "round": round,
    "floor": math.floor,
    "ceil": math.ceil,
    "abs": abs,
}

BUILTIN_OPERATORS = frozenset(operations) | frozenset(NUMERIC_OPERATIONS) | LAZY_OPERATORS


def is_operation(expr: Any) -> bool:
    """An operation is a dict with exactly one string key."""
    return is_object(expr) and len(expr) == 1 and isinstance(next(iter(expr)), str)


def split_operation(expr: Any) -> tuple[str, list[Any]]:
    """Return ``(operator, operands)`` for an operation dict."""
    operator_name, operands = next(iter(expr.items()))
    if not is_array(operands):
        operands = [operands]
    return operator_name, list(operands)


def truthy(value: Any) -> bool:
    """JSON-Logic truthiness: empty lists are falsy, objects are always truthy."""
    if value is MISSING or value is None:
        return False
    if is_array(value):
        return len(value) > 0
    if is_object(value):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


class RuleInterpreter:
    """
    Per-form operation table plus evaluator for rule expressions.

    Usage:
        interpreter = RuleInterpreter({"is_even": lambda n: n % 2 == 0})
        interpreter.evaluate({"is_even": [{"var": "age"}]}, {"age": 18})  # True
    """

    def __init__(self, custom_operations: dict[str, Callable[..., Any]] | None = None):
        """
        Initialize the interpreter.

        Args:
            custom_operations: Extra operators, name -> function. Functions
                receive the evaluated operands as positional arguments.

        Raises:
            OperatorCollisionError: If a custom name shadows a built-in operator.
        """
        self._custom: dict[str, Callable[..., Any]] = {}
        self._operations: dict[str, Callable[..., Any]] = {**operations, **NUMERIC_OPERATIONS}
        for name, func in (custom_operations or {}).items():
            self.register_operation(name, func)

    def register_operation(self, name: str, func: Callable[..., Any]) -> None:
        """Register a custom operator."""
        if name in BUILTIN_OPERATORS:
            raise OperatorCollisionError(name)
        if not callable(func):
            raise TypeError(f'Custom operation "{name}" is not callable')
        self._custom[name] = func
        self._operations[name] = func
        logger.debug("Registered custom operation %s", name)

    @property
    def custom_operators(self) -> frozenset[str]:
        return frozenset(self._custom)

    def is_known(self, name: str) -> bool:
        return name in BUILTIN_OPERATORS or name in self._custom

    def evaluate(self, expr: Any, data: Any = None) -> Any:
        """
        Evaluate ``expr`` against ``data``.

        Lists are evaluated element-wise and any non-operation value is a
        literal.

        Raises:
            UnknownOperatorError: If the expression uses an unregistered operator.
            RuleEvaluationError: If the library or a custom operator fails.
        """
        if is_array(expr):
            return [self.evaluate(item, data) for item in expr]
        if not is_operation(expr):
            return expr

        unknown = self.find_unknown_operators(expr)
        if unknown:
            raise UnknownOperatorError(unknown[0])
        try:
            return jsonLogic(expr, data, self._operations)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise RuleEvaluationError(f"Cannot evaluate rule {to_json_literal(expr)}: {e}") from e

    def is_truthy(self, expr: Any, data: Any = None) -> bool:
        """Evaluate ``expr`` and apply rule truthiness to the result."""
        return truthy(self.evaluate(expr, data))

    def iter_operators(self, expr: Any) -> Iterator[str]:
        """Yield every operator name used in ``expr``, depth first."""
        if is_array(expr):
            for item in expr:
                yield from self.iter_operators(item)
            return
        if not is_operation(expr):
            return
        operator_name, operands = split_operation(expr)
        yield operator_name
        for operand in operands:
            yield from self.iter_operators(operand)

    def find_unknown_operators(self, expr: Any) -> list[str]:
        """List the operators in ``expr`` this interpreter cannot evaluate."""
        unknown: list[str] = []
        for name in self.iter_operators(expr):
            if not self.is_known(name) and name not in unknown:
                unknown.append(name)
        return unknown
