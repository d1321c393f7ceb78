"""Evaluation of lazy values against overrides and their captured scope."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Final

from .ast import Call, Expr, Literal, Symbol
from .coerce import as_lazy
from .deparse import deparse
from .errors import ApplyError, LazyEvalError, UnboundName, classify_host_exception
from .lazy import LazyValue
from .scope import Scope

logger = logging.getLogger(__name__)

_MISSING: Final = object()


def _resolve(name: str, scope: Scope, overrides: Mapping[str, object] | None) -> object:
    if overrides is not None:
        value = overrides.get(name, _MISSING)
        if value is not _MISSING:
            return value
    owner = scope.find_scope(name)
    if owner is None:
        raise UnboundName(name)
    return owner.bindings[name]


def _apply_callable(func_value: object, args: list[object], *, operator: str) -> object:
    if not callable(func_value):
        raise ApplyError(operator, f"{type(func_value).__name__} object is not callable", category="type")
    try:
        return func_value(*args)
    except LazyEvalError:
        raise
    except Exception as err:
        logger.debug("host call %r failed with %s: %s", operator, type(err).__name__, err)
        raise classify_host_exception(operator, err) from err


def _eval_expr(expr: Expr, scope: Scope, overrides: Mapping[str, object] | None) -> object:
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, Symbol):
        return _resolve(expr.name, scope, overrides)

    if isinstance(expr, Call):
        if isinstance(expr.func, Symbol):
            operator = expr.func.name
            func_value = _resolve(operator, scope, overrides)
        else:
            operator = deparse(expr.func)
            func_value = _eval_expr(expr.func, scope, overrides)
        args = [_eval_expr(arg, scope, overrides) for arg in expr.args]
        return _apply_callable(func_value, args, operator=operator)

    if isinstance(expr, LazyValue):
        # Spliced subtree: its own scope, the caller's overrides still first.
        return _eval_expr(expr.expression, expr.scope, overrides)

    raise TypeError(f"Unsupported expression node: {type(expr)!r}")


def evaluate(value: LazyValue, overrides: Mapping[str, object] | None = None) -> object:
    """Evaluate ``value``, resolving names in ``overrides`` before its scope chain."""
    if not isinstance(value, LazyValue):
        raise TypeError(f"evaluate() expects a LazyValue, not {type(value).__name__}; use lazy_eval() to coerce")
    if overrides is not None and not isinstance(overrides, Mapping):
        raise TypeError(f"overrides must be a mapping, not {type(overrides).__name__}")
    return _eval_expr(value.expression, value.scope, overrides)


def lazy_eval(value: object, overrides: Mapping[str, object] | None = None) -> object:
    """Coerce ``value`` with ``as_lazy`` and evaluate it."""
    return evaluate(as_lazy(value), overrides)


def evaluate_dots(values: Mapping[str, LazyValue], overrides: Mapping[str, object] | None = None) -> dict[str, object]:
    return {name: evaluate(as_lazy(item), overrides) for name, item in values.items()}
