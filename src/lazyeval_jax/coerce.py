"""Normalization of heterogeneous inputs into lazy values."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Final

from .ast import Expr, is_expression
from .deparse import deparse
from .errors import CoercionError, SourceParseError
from .lazy import LazyValue
from .parser import parse
from .scope import ROOT_SCOPE, Scope

_PARSE_CACHE_MAX: Final[int] = max(1, int(os.environ.get("LAZYEVAL_JAX_PARSE_CACHE_MAX", "512")))


@lru_cache(maxsize=_PARSE_CACHE_MAX)
def _parse_cached(source: str) -> Expr:
    return parse(source)


def parse_source(source: str) -> Expr:
    """Parse source text, reporting failures as ``SourceParseError``."""
    try:
        return _parse_cached(source)
    except SyntaxError as err:
        raise SourceParseError.from_syntax_error(source, err) from err


def _describe(value: object) -> str:
    text = repr(value)
    if len(text) > 60:
        text = text[:57] + "..."
    return f"{type(value).__name__} {text}"


def as_lazy(value: object, scope: Scope | None = None) -> LazyValue:
    """Coerce ``value`` into a ``LazyValue``.

    Accepted inputs form a closed set:

    - a ``LazyValue``, returned unchanged;
    - an ``(expression, Scope)`` pair, or an expression with ``scope=``;
    - a bare expression node, bound to the root scope;
    - source text, parsed and bound to ``scope`` or the root scope.

    Anything else raises ``CoercionError``.
    """
    if scope is not None and not isinstance(scope, Scope):
        raise CoercionError(_describe(scope), f"scope must be a Scope, not {type(scope).__name__}")

    if isinstance(value, LazyValue):
        return value

    if isinstance(value, tuple) and len(value) == 2 and is_expression(value[0]) and isinstance(value[1], Scope):
        expression, pair_scope = value
        return LazyValue(expression, pair_scope)

    if is_expression(value):
        return LazyValue(value, ROOT_SCOPE if scope is None else scope)

    if isinstance(value, str):
        return LazyValue(parse_source(value), ROOT_SCOPE if scope is None else scope)

    raise CoercionError(_describe(value))


def as_lazy_dots(values: Mapping[str, object] | Sequence[object], scope: Scope | None = None) -> dict[str, LazyValue]:
    """Coerce a mapping or a sequence of inputs; sequence items are named by their expression."""
    if isinstance(values, Mapping):
        return {str(name): as_lazy(item, scope) for name, item in values.items()}
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise CoercionError(_describe(values), f"Cannot coerce {_describe(values)} to lazy dots")
    out: dict[str, LazyValue] = {}
    for item in values:
        coerced = as_lazy(item, scope)
        out[deparse(coerced.expression)] = coerced
    return out
