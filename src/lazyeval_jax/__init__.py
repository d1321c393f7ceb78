"""lazyeval-jax public API."""

from .ast import Call, Expr, Literal, Symbol, symbols
from .coerce import as_lazy, as_lazy_dots
from .deparse import deparse
from .errors import (
    ApplyError,
    CoercionError,
    EvalError,
    InterpolationError,
    LazyEvalError,
    SourceParseError,
    UnboundName,
)
from .evaluator import evaluate, evaluate_dots, lazy_eval
from .interp import interp
from .lazy import LazyValue, Promise, capture, capture_dots, common_scope, lazy, promise
from .parser import ParseError, parse
from .scope import ROOT_SCOPE, Scope
from .values import columns

__all__ = [
    "capture",
    "as_lazy",
    "evaluate",
    "interp",
    "LazyValue",
    "Promise",
    "promise",
    "lazy",
    "capture_dots",
    "common_scope",
    "as_lazy_dots",
    "lazy_eval",
    "evaluate_dots",
    "Scope",
    "ROOT_SCOPE",
    "Symbol",
    "Literal",
    "Call",
    "Expr",
    "symbols",
    "parse",
    "deparse",
    "columns",
    "ParseError",
    "LazyEvalError",
    "CoercionError",
    "SourceParseError",
    "EvalError",
    "UnboundName",
    "ApplyError",
    "InterpolationError",
]
