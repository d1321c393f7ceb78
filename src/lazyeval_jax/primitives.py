"""Root-scope operators, functions and constants, on top of ``jax.numpy``."""

from __future__ import annotations

import math
import operator
import os
from typing import Callable, Final

import jax.numpy as jnp

from .values import as_jax_array, is_scalar

_USE_SCALAR_FAST_PATH: Final[bool] = os.environ.get("LAZYEVAL_JAX_DISABLE_SCALAR_FAST_PATH", "0") != "1"


def _all_scalar(args: tuple[object, ...]) -> bool:
    return _USE_SCALAR_FAST_PATH and all(is_scalar(arg) for arg in args)


def _binary(name: str, scalar_op: Callable[[object, object], object], array_op: Callable[[object, object], object]):
    def apply(left, right):
        if _all_scalar((left, right)):
            return scalar_op(left, right)
        return array_op(as_jax_array(left), as_jax_array(right))

    apply.__name__ = name
    apply.__qualname__ = name
    return apply


def _unary(name: str, scalar_op: Callable[[object], object], array_op: Callable[[object], object]):
    def apply(value):
        if _all_scalar((value,)):
            return scalar_op(value)
        return array_op(as_jax_array(value))

    apply.__name__ = name
    apply.__qualname__ = name
    return apply


def _by_arity(name: str, unary, binary):
    def apply(*args):
        if len(args) == 1:
            return unary(*args)
        if len(args) == 2:
            return binary(*args)
        raise TypeError(f"{name!r} takes 1 or 2 arguments but {len(args)} were given")

    apply.__name__ = name
    apply.__qualname__ = name
    return apply


def _logical_and(left, right):
    return bool(left) and bool(right)


def _logical_or(left, right):
    return bool(left) or bool(right)


def _logical_not(value):
    return not bool(value)


_add = _binary("add", operator.add, jnp.add)
_sub = _binary("subtract", operator.sub, jnp.subtract)
_neg = _unary("negative", operator.neg, jnp.negative)
_pos = _unary("positive", operator.pos, jnp.positive)


def _length(value) -> int:
    if is_scalar(value) and not isinstance(value, str):
        return 1
    if isinstance(value, (str, tuple, list)):
        return len(value)
    return int(as_jax_array(value).size)


def _combine(*values):
    if not values:
        return jnp.asarray([])
    return jnp.concatenate([jnp.atleast_1d(as_jax_array(value)) for value in values])


def _ifelse(condition, when_true, when_false):
    if _all_scalar((condition,)):
        return when_true if condition else when_false
    return jnp.where(as_jax_array(condition), as_jax_array(when_true), as_jax_array(when_false))


def _round(value, digits=0):
    return jnp.round(as_jax_array(value), int(digits))


def _reduction(name: str, reduce_op: Callable[[object], object]):
    def apply(*values):
        if not values:
            raise TypeError(f"{name!r} expects at least one argument")
        return reduce_op(_combine(*values))

    apply.__name__ = name
    apply.__qualname__ = name
    return apply


def _elementwise(name: str, array_op: Callable[[object], object]):
    def apply(value):
        return array_op(as_jax_array(value))

    apply.__name__ = name
    apply.__qualname__ = name
    return apply


OPERATORS: Final[dict[str, Callable[..., object]]] = {
    "+": _by_arity("+", _pos, _add),
    "-": _by_arity("-", _neg, _sub),
    "*": _binary("multiply", operator.mul, jnp.multiply),
    "/": _binary("divide", operator.truediv, jnp.true_divide),
    "%": _binary("mod", operator.mod, jnp.mod),
    "^": _binary("power", operator.pow, jnp.power),
    "==": _binary("equal", operator.eq, jnp.equal),
    "!=": _binary("not_equal", operator.ne, jnp.not_equal),
    "<": _binary("less", operator.lt, jnp.less),
    "<=": _binary("less_equal", operator.le, jnp.less_equal),
    ">": _binary("greater", operator.gt, jnp.greater),
    ">=": _binary("greater_equal", operator.ge, jnp.greater_equal),
    "&": _binary("logical_and", _logical_and, jnp.logical_and),
    "|": _binary("logical_or", _logical_or, jnp.logical_or),
    "!": _unary("logical_not", _logical_not, jnp.logical_not),
}

FUNCTIONS: Final[dict[str, Callable[..., object]]] = {
    "abs": _unary("abs", abs, jnp.abs),
    "sqrt": _elementwise("sqrt", jnp.sqrt),
    "exp": _elementwise("exp", jnp.exp),
    "log": _elementwise("log", jnp.log),
    "floor": _elementwise("floor", jnp.floor),
    "ceil": _elementwise("ceil", jnp.ceil),
    "round": _round,
    "sum": _reduction("sum", jnp.sum),
    "mean": _reduction("mean", jnp.mean),
    "min": _reduction("min", jnp.min),
    "max": _reduction("max", jnp.max),
    "length": _length,
    "c": _combine,
    "ifelse": _ifelse,
}

CONSTANTS: Final[dict[str, object]] = {
    "pi": math.pi,
    "inf": math.inf,
    "nan": math.nan,
}

PRIMITIVES: Final[dict[str, object]] = {**OPERATORS, **FUNCTIONS, **CONSTANTS}
