"""Value-or-expression algebra for render-time expressions.

Axis properties are either known at resolve time (plain Python literals) or
only known at render time, in which case the renderer receives an expression
in its own expression language instead of a value.  This module provides
both halves:

- :class:`Expr` and its node types form a small expression tree that renders
  to renderer expression text via ``.signal``.  :class:`SignalRef` is the
  opaque leaf handed to us by the chart-assembly stage (``{"signal": ...}``).
- The combinators (:func:`add`, :func:`mod`, :func:`lt`, :func:`iff`,
  :func:`cond`, ...) are the *single* vocabulary that case-analysis code is
  written in.  Each combinator has two instantiations selected per call:

  * every operand is a literal → the Python operation runs immediately and a
    literal comes back;
  * any operand is an :class:`Expr` → a node is emitted and the decision is
    deferred to the renderer.

  Boolean combinators fold literal operands (``and_(False, e)`` is ``False``,
  ``iff(True, e)`` is ``e``), so mixed literal/dynamic inputs produce the
  smallest expression that still encodes the same comparisons.

Rendering notes:
    Binary and conditional nodes are always fully parenthesised.  A
    :class:`SignalRef` is emitted bare when its text is a plain (dotted)
    identifier and parenthesised otherwise, so ``SignalRef("a + b")`` keeps
    its meaning inside ``((a + b) % 360)``.

Numeric semantics:
    :func:`mod` follows the renderer's remainder semantics (the sign follows
    the dividend, like ``math.fmod``) on the literal path as well, so both
    instantiations agree step by step, not just on the final result.
"""

from __future__ import annotations

import json
import math
import operator
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import reduce
from typing import Any

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

#: Functions that may be evaluated immediately when every argument is a
#: literal.  Anything else (``datetime``, ``utc``, ...) always stays deferred.
_FOLDABLE_CALLS: dict[str, Callable[..., Any]] = {
    "ceil": math.ceil,
    "floor": math.floor,
}


# ---------------------------------------------------------------------------
# Expression tree
# ---------------------------------------------------------------------------


class Expr:
    """Base class for every render-time expression value."""

    def render(self) -> str:
        """Return the expression text for use as an operand."""
        raise NotImplementedError

    def to_dict(self) -> dict[str, str]:
        """Return the renderer's wire form: ``{"signal": "<expression>"}``."""
        return {"signal": self.signal}  # type: ignore[attr-defined]

    def __str__(self) -> str:
        return self.signal  # type: ignore[attr-defined]


class _Node(Expr):
    """Synthesised node; ``signal`` is its rendered text."""

    @property
    def signal(self) -> str:
        return self.render()


@dataclass(frozen=True)
class SignalRef(Expr):
    """Opaque dynamic reference supplied by the chart-assembly stage.

    Attributes:
        signal: Expression text in the renderer's language, e.g. ``"width"``
                or ``"labelAngle * 2"``.  Never parsed or evaluated here.
    """

    signal: str

    def render(self) -> str:
        if _IDENTIFIER_RE.match(self.signal):
            return self.signal
        return f"({self.signal})"


@dataclass(frozen=True)
class Const(_Node):
    """A literal embedded in an expression."""

    value: Any

    def render(self) -> str:
        return format_literal(self.value)


@dataclass(frozen=True)
class BinaryOp(_Node):
    op: str
    left: Expr
    right: Expr

    def render(self) -> str:
        return f"({self.left.render()} {self.op} {self.right.render()})"


@dataclass(frozen=True)
class UnaryOp(_Node):
    op: str
    operand: Expr

    def render(self) -> str:
        return f"({self.op}{self.operand.render()})"


@dataclass(frozen=True)
class Call(_Node):
    name: str
    args: tuple[Expr, ...]

    def render(self) -> str:
        return f"{self.name}({', '.join(arg.render() for arg in self.args)})"


@dataclass(frozen=True)
class Conditional(_Node):
    test: Expr
    then: Expr
    otherwise: Expr

    def render(self) -> str:
        return f"({self.test.render()} ? {self.then.render()} : {self.otherwise.render()})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_signal_ref(value: Any) -> bool:
    """Return ``True`` for any render-time expression value."""
    return isinstance(value, Expr)


def coerce_signal(value: Any) -> Any:
    """Turn a ``{"signal": ...}`` / ``{"expr": ...}`` mapping into a :class:`SignalRef`.

    Any other value (including existing :class:`Expr` instances) is returned
    unchanged.
    """
    if isinstance(value, Mapping) and len(value) == 1:
        text = value.get("signal", value.get("expr"))
        if isinstance(text, str):
            return SignalRef(text)
    return value


def lift(value: Any) -> Expr:
    """Wrap a literal as a :class:`Const`; expressions pass through."""
    return value if isinstance(value, Expr) else Const(value)


def format_literal(value: Any) -> str:
    """Render a Python literal in renderer syntax (``None`` → ``null``)."""
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value)


def _remainder(a: Any, b: Any) -> Any:
    result = math.fmod(a, b)
    if isinstance(a, int) and isinstance(b, int):
        return int(result)
    return result


def _binary(op: str, fn: Callable[[Any, Any], Any], a: Any, b: Any) -> Any:
    if not is_signal_ref(a) and not is_signal_ref(b):
        return fn(a, b)
    return BinaryOp(op, lift(a), lift(b))


# ---------------------------------------------------------------------------
# Arithmetic and comparison combinators
# ---------------------------------------------------------------------------


def add(a: Any, b: Any) -> Any:
    return _binary("+", operator.add, a, b)


def div(a: Any, b: Any) -> Any:
    return _binary("/", operator.truediv, a, b)


def mod(a: Any, b: Any) -> Any:
    return _binary("%", _remainder, a, b)


def lt(a: Any, b: Any) -> Any:
    return _binary("<", operator.lt, a, b)


def le(a: Any, b: Any) -> Any:
    return _binary("<=", operator.le, a, b)


def eq(a: Any, b: Any) -> Any:
    """Strict equality (``===``)."""
    return _binary("===", operator.eq, a, b)


def call(name: str, *args: Any) -> Any:
    """Function call; folded only for the pure numeric helpers in ``_FOLDABLE_CALLS``."""
    if name in _FOLDABLE_CALLS and not any(is_signal_ref(arg) for arg in args):
        return _FOLDABLE_CALLS[name](*args)
    return Call(name, tuple(lift(arg) for arg in args))


# ---------------------------------------------------------------------------
# Boolean combinators
# ---------------------------------------------------------------------------


def and_(*operands: Any) -> Any:
    """Logical AND; a literal ``False`` operand decides the result outright."""
    pending: list[Expr] = []
    for operand in operands:
        if is_signal_ref(operand):
            pending.append(operand)
        elif not operand:
            return False
    if not pending:
        return True
    return reduce(lambda left, right: BinaryOp("&&", left, right), pending)


def or_(*operands: Any) -> Any:
    """Logical OR; a literal ``True`` operand decides the result outright."""
    pending: list[Expr] = []
    for operand in operands:
        if is_signal_ref(operand):
            pending.append(operand)
        elif operand:
            return True
    if not pending:
        return False
    return reduce(lambda left, right: BinaryOp("||", left, right), pending)


def not_(a: Any) -> Any:
    if is_signal_ref(a):
        return UnaryOp("!", a)
    return not a


def iff(a: Any, b: Any) -> Any:
    """Boolean agreement: true when *a* and *b* are both true or both false."""
    if not is_signal_ref(a) and not is_signal_ref(b):
        return bool(a) == bool(b)
    if not is_signal_ref(a):
        return b if a else not_(b)
    if not is_signal_ref(b):
        return a if b else not_(a)
    return BinaryOp("===", a, b)


def cond(test: Any, then: Any, otherwise: Any) -> Any:
    """Ternary ``test ? then : otherwise``."""
    if not is_signal_ref(test):
        return then if test else otherwise
    return Conditional(test, lift(then), lift(otherwise))


def between(low: Any, value: Any, high: Any, *, inclusive: bool) -> Any:
    """``low < value < high`` (or ``<=`` on both ends when *inclusive*)."""
    compare = le if inclusive else lt
    return and_(compare(low, value), compare(value, high))
