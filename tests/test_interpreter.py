"""Tests for the rule expression interpreter and rule scopes."""

import pytest
from headless_form.exceptions import (
    OperatorCollisionError,
    RuleEvaluationError,
    SchemaSetupError,
    UnknownOperatorError,
    UnknownRuleReferenceError,
)
from headless_form.logic import BUILTIN_OPERATORS, RuleInterpreter, RuleScope, is_rule_reference_condition, truthy
from headless_form.models.schema import LogicDefinitions


@pytest.fixture
def interpreter():
    return RuleInterpreter()


class TestDataAccess:
    """Tests for var, missing and missing_some."""

    def test_var(self, interpreter):
        """Test dotted variable lookup."""
        data = {"a": {"b": [10, 20]}}
        assert interpreter.evaluate({"var": "a.b.1"}, data) == 20
        assert interpreter.evaluate({"var": ["a.c", "fallback"]}, data) == "fallback"
        assert interpreter.evaluate({"var": "nope"}, data) is None

    def test_var_empty_path(self, interpreter):
        """Test that an empty path returns the whole context."""
        assert interpreter.evaluate({"var": ""}, 5) == 5

    def test_missing(self, interpreter):
        """Test listing absent keys."""
        data = {"a": 1, "b": "", "c": None}
        assert interpreter.evaluate({"missing": ["a", "b", "c", "d"]}, data) == ["b", "c", "d"]

    def test_missing_some(self, interpreter):
        """Test the minimum-present variant."""
        assert interpreter.evaluate({"missing_some": [1, ["a", "b"]]}, {"a": 1}) == []
        assert interpreter.evaluate({"missing_some": [2, ["a", "b"]]}, {"a": 1}) == ["b"]


class TestOperators:
    """Tests for built-in operators."""

    def test_equality(self, interpreter):
        """Test loose and strict equality."""
        assert interpreter.evaluate({"==": [1, "1"]}) is True
        assert interpreter.evaluate({"===": [1, "1"]}) is False
        assert interpreter.evaluate({"==": [None, None]}) is True
        assert interpreter.evaluate({"!=": ["a", "b"]}) is True

    def test_comparisons_with_absent_values(self, interpreter):
        """Test that absent variables never satisfy a lower bound."""
        assert interpreter.evaluate({">=": [{"var": "age"}, 18]}, {}) is False

    def test_between(self, interpreter):
        """Test three-argument comparisons."""
        assert interpreter.evaluate({"<": [1, 2, 3]}) is True
        assert interpreter.evaluate({"<=": [1, 1, 0]}) is False

    def test_logic(self, interpreter):
        """Test and/or/not and their short-circuit results."""
        assert interpreter.evaluate({"and": [True, "a", 3]}) == 3
        assert interpreter.evaluate({"and": [True, 0, 3]}) == 0
        assert interpreter.evaluate({"or": [False, "", "x"]}) == "x"
        assert interpreter.evaluate({"!": [[]]}) is True
        assert interpreter.evaluate({"!!": ["0"]}) is True

    def test_if(self, interpreter):
        """Test chained if/elseif/else."""
        rule = {"if": [{"<": [{"var": "t"}, 0]}, "freezing", {"<": [{"var": "t"}, 20]}, "cold", "warm"]}
        assert interpreter.evaluate(rule, {"t": -5}) == "freezing"
        assert interpreter.evaluate(rule, {"t": 10}) == "cold"
        assert interpreter.evaluate(rule, {"t": 30}) == "warm"

    def test_arithmetic(self, interpreter):
        """Test numeric operators."""
        assert interpreter.evaluate({"+": [1, "2", 3.0]}) == 6
        assert interpreter.evaluate({"-": [5]}) == -5
        assert interpreter.evaluate({"*": [2, 2.5]}) == 5
        assert interpreter.evaluate({"/": [7, 2]}) == 3.5
        assert interpreter.evaluate({"%": [7, 3]}) == 1
        assert interpreter.evaluate({"max": [1, 9, 3]}) == 9
        assert interpreter.evaluate({"min": [4, 2]}) == 2
        assert interpreter.evaluate({"floor": [{"var": "x"}]}, {"x": 2.7}) == 2
        assert interpreter.evaluate({"ceil": [2.1]}) == 3
        assert interpreter.evaluate({"abs": [-4]}) == 4
        assert interpreter.evaluate({"round": [2.4]}) == 2

    def test_strings(self, interpreter):
        """Test string operators."""
        assert interpreter.evaluate({"cat": ["I love ", "pie", 1]}) == "I love pie1"
        assert interpreter.evaluate({"substr": ["jsonlogic", 4]}) == "logic"
        assert interpreter.evaluate({"substr": ["jsonlogic", -5]}) == "logic"
        assert interpreter.evaluate({"substr": ["jsonlogic", 1, 3]}) == "son"
        assert interpreter.evaluate({"in": ["Spring", "Springfield"]}) is True
        assert interpreter.evaluate({"in": ["b", ["a", "b"]]}) is True

    def test_arrays(self, interpreter):
        """Test array operators."""
        data = {"items": [1, 2, 3, 4]}
        assert interpreter.evaluate({"merge": [[1], 2, [3, 4]]}) == [1, 2, 3, 4]
        assert interpreter.evaluate({"map": [{"var": "items"}, {"*": [{"var": ""}, 2]}]}, data) == [2, 4, 6, 8]
        assert interpreter.evaluate({"filter": [{"var": "items"}, {">": [{"var": ""}, 2]}]}, data) == [3, 4]
        reduce_rule = {"reduce": [{"var": "items"}, {"+": [{"var": "current"}, {"var": "accumulator"}]}, 0]}
        assert interpreter.evaluate(reduce_rule, data) == 10

    def test_quantifiers(self, interpreter):
        """Test all/some/none."""
        positive = {">": [{"var": ""}, 0]}
        assert interpreter.evaluate({"all": [[1, 2], positive]}) is True
        assert interpreter.evaluate({"all": [[], positive]}) is False
        assert interpreter.evaluate({"some": [[-1, 2], positive]}) is True
        assert interpreter.evaluate({"none": [[-1, -2], positive]}) is True

    def test_literals(self, interpreter):
        """Test that non-operations evaluate to themselves."""
        assert interpreter.evaluate(5) == 5
        assert interpreter.evaluate({"a": 1, "b": 2}) == {"a": 1, "b": 2}
        assert interpreter.evaluate([1, {"var": "x"}], {"x": 2}) == [1, 2]


class TestTruthiness:
    """Tests for rule truthiness."""

    def test_truthy_values(self):
        """Test the truthiness table."""
        assert truthy([]) is False
        assert truthy([0]) is True
        assert truthy({}) is True
        assert truthy("") is False
        assert truthy("0") is True
        assert truthy(0) is False
        assert truthy(None) is False


class TestCustomOperations:
    """Tests for registering custom operators."""

    def test_custom_operation(self):
        """Test that custom operators receive evaluated operands."""
        interpreter = RuleInterpreter({"is_even": lambda n: n % 2 == 0})
        assert interpreter.evaluate({"is_even": [{"var": "n"}]}, {"n": 4}) is True
        assert interpreter.is_known("is_even")
        assert interpreter.custom_operators == frozenset({"is_even"})

    def test_operations_stay_per_interpreter(self):
        """Test that custom operators do not leak into other interpreters."""
        RuleInterpreter({"double": lambda n: n * 2})
        other = RuleInterpreter()
        assert not other.is_known("double")
        assert "double" not in BUILTIN_OPERATORS
        with pytest.raises(UnknownOperatorError):
            other.evaluate({"double": [2]})

    def test_failing_operation(self):
        """Test that errors inside an operator become rule evaluation errors."""
        interpreter = RuleInterpreter({"as_int": lambda text: int(text)})
        with pytest.raises(RuleEvaluationError) as exc_info:
            interpreter.evaluate({"as_int": ["abc"]})
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_collision(self):
        """Test that built-in operators cannot be replaced."""
        with pytest.raises(OperatorCollisionError) as exc_info:
            RuleInterpreter({"+": lambda a, b: a})
        assert isinstance(exc_info.value, SchemaSetupError)

    def test_not_callable(self):
        """Test rejecting a non-callable operator."""
        with pytest.raises(TypeError):
            RuleInterpreter({"nope": 3})

    def test_unknown_operator(self, interpreter):
        """Test that unknown operators raise."""
        with pytest.raises(UnknownOperatorError) as exc_info:
            interpreter.evaluate({"frobnicate": [1]})
        assert str(exc_info.value) == 'Unrecognized operation "frobnicate"'

    def test_find_unknown_operators(self, interpreter):
        """Test static operator scanning."""
        expr = {"and": [{"foo": [1]}, {"if": [{"bar": []}, {"foo": 2}, 3]}]}
        assert interpreter.find_unknown_operators(expr) == ["foo", "bar"]
        assert interpreter.find_unknown_operators({"var": "a"}) == []


class TestRuleScope:
    """Tests for RuleScope."""

    def _scope(self, interpreter, data):
        logic = LogicDefinitions.model_validate({
            "validations": {"adult": {"rule": {">=": [{"var": "age"}, 18]}}},
            "computedValues": {"next_age": {"rule": {"+": [{"var": "age"}, 1]}}},
        })
        return RuleScope(interpreter, data).extend(logic)

    def test_check_validation(self, interpreter):
        """Test evaluating named validations."""
        assert self._scope(interpreter, {"age": 20}).check_validation("adult") is True
        assert self._scope(interpreter, {"age": 10}).check_validation("adult") is False

    def test_compute(self, interpreter):
        """Test evaluating computed values."""
        assert self._scope(interpreter, {"age": 20}).compute("next_age") == 21

    def test_unknown_reference(self, interpreter):
        """Test referencing an undeclared rule."""
        scope = self._scope(interpreter, {})
        with pytest.raises(UnknownRuleReferenceError) as exc_info:
            scope.get_validation("missing_rule")
        assert exc_info.value.name == "missing_rule"
        with pytest.raises(UnknownRuleReferenceError):
            scope.compute("missing_value")

    def test_extend_keeps_outer_rules(self, interpreter):
        """Test that nested scopes see outer rules."""
        scope = self._scope(interpreter, {"age": 20})
        inner = scope.extend(LogicDefinitions.model_validate({"validations": {"ok": {"rule": True}}}))
        assert inner.check_validation("adult") is True
        assert inner.check_validation("ok") is True
        assert "ok" not in scope.validations
        assert scope.extend(None) is scope

    def test_evaluate_condition(self, interpreter):
        """Test expression and reference conditions."""
        scope = self._scope(interpreter, {"age": 20})
        assert scope.evaluate_condition({"==": [{"var": "age"}, 20]}) is True
        assert scope.evaluate_condition({"validations": {"adult": {"const": True}}}) is True
        assert scope.evaluate_condition({"validations": {"adult": {"const": False}}}) is False
        assert scope.evaluate_condition({"computedValues": {"next_age": {"const": 21}}}) is True

    def test_reference_condition_detection(self):
        """Test telling references from expressions."""
        assert is_rule_reference_condition({"validations": {"adult": {"const": True}}})
        assert not is_rule_reference_condition({"var": "age"})
        assert not is_rule_reference_condition({})
