"""
Shared pytest fixtures for the axis resolver test suite.

This module provides fixtures that are automatically available to all test files:
- An evaluator for render-time expressions, used to check that the deferred
  path produces the same value as the immediate path
- Small factories for field definitions and resolution contexts
"""

import math
from collections.abc import Callable
from typing import Any

import pytest

from axis_resolver.context import build_context
from axis_resolver.expr import BinaryOp, Call, Conditional, Const, SignalRef, UnaryOp
from axis_resolver.types import FieldDef

# ============================================================================
# EXPRESSION EVALUATION
# ============================================================================


def _to_text(value: Any) -> str:
    """String conversion as the renderer performs it for ``+``."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _plus(left: Any, right: Any) -> Any:
    if isinstance(left, str) or isinstance(right, str):
        return _to_text(left) + _to_text(right)
    return left + right


def _remainder(left: Any, right: Any) -> Any:
    result = math.fmod(left, right)
    return int(result) if isinstance(left, int) and isinstance(right, int) else result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equals(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


_BINARY_OPS: dict[str, Callable[[Any, Any], Any]] = {
    "+": _plus,
    "/": lambda left, right: left / right,
    "%": _remainder,
    "<": lambda left, right: left < right,
    "<=": lambda left, right: left <= right,
    "===": _strict_equals,
}

_CALLS: dict[str, Callable[..., Any]] = {
    "ceil": math.ceil,
    "floor": math.floor,
}


def evaluate_expression(value: Any, env: dict[str, Any]) -> Any:
    """Evaluate *value* with signals bound from *env*.

    Literals are returned unchanged, so the same helper applies to both the
    immediate and the deferred result of a resolver.
    """
    if isinstance(value, SignalRef):
        return env[value.signal]
    if isinstance(value, Const):
        return value.value
    if isinstance(value, UnaryOp):
        assert value.op == "!"
        return not evaluate_expression(value.operand, env)
    if isinstance(value, BinaryOp):
        left = evaluate_expression(value.left, env)
        if value.op == "&&":
            return left and evaluate_expression(value.right, env)
        if value.op == "||":
            return left or evaluate_expression(value.right, env)
        return _BINARY_OPS[value.op](left, evaluate_expression(value.right, env))
    if isinstance(value, Conditional):
        branch = value.then if evaluate_expression(value.test, env) else value.otherwise
        return evaluate_expression(branch, env)
    if isinstance(value, Call):
        return _CALLS[value.name](*(evaluate_expression(arg, env) for arg in value.args))
    return value


@pytest.fixture
def evaluate() -> Callable[..., Any]:
    """
    Evaluate a resolver result with the given signal bindings.

    Example:
        evaluate(default_label_align(SignalRef("a"), "bottom", "x"), a=45)
    """

    def _evaluate(value: Any, **env: Any) -> Any:
        return evaluate_expression(value, env)

    return _evaluate


# ============================================================================
# CONTEXT FIXTURES
# ============================================================================


@pytest.fixture
def quantitative_field() -> FieldDef:
    """A plain continuous field."""
    return FieldDef(field="price", type="quantitative")


@pytest.fixture
def nominal_field() -> FieldDef:
    """A plain categorical field."""
    return FieldDef(field="category", type="nominal")


@pytest.fixture
def make_context() -> Callable[..., Any]:
    """
    Factory for resolution contexts with sensible defaults.

    Defaults to an x axis over a quantitative field on a linear scale with a
    point mark; keyword arguments override any of them.
    """

    def _make(
        channel: str = "x",
        field_def: Any = None,
        axis: Any = None,
        *,
        scale_type: str = "linear",
        mark: str = "point",
        **kwargs: Any,
    ):
        if field_def is None:
            field_def = FieldDef(field="price", type="quantitative")
        return build_context(
            channel, field_def, axis, scale_type=scale_type, mark=mark, **kwargs
        )

    return _make
