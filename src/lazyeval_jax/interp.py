"""Quasiquotation: splice lazy values and literals into a template."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from .ast import Call, Expr, Literal, Symbol, is_expression
from .coerce import as_lazy
from .errors import InterpolationError
from .lazy import LazyValue
from .scope import Scope
from .values import validate_literal

logger = logging.getLogger(__name__)


def _as_node(name: str, value: object, template_scope: Scope) -> Expr:
    if isinstance(value, LazyValue):
        if value.scope is template_scope:
            return value.expression
        return value
    if is_expression(value):
        return value
    try:
        validate_literal(value, where=f"substitution {name!r}")
    except TypeError as err:
        raise InterpolationError(name, value, str(err)) from err
    return Literal(value)


def _substitute(expr: Expr, nodes: Mapping[str, Expr]) -> Expr:
    if isinstance(expr, Symbol):
        return nodes.get(expr.name, expr)

    if isinstance(expr, Call):
        func = _substitute(expr.func, nodes)
        args = tuple(_substitute(arg, nodes) for arg in expr.args)
        if func is expr.func and all(new is old for new, old in zip(args, expr.args)):
            return expr
        return Call(func=func, args=args)

    # Literals and subtrees already pinned to their own scope stay as they are.
    return expr


def interp(template: object, substitutions: Mapping[str, object] | None = None, /, **named: object) -> LazyValue:
    """Replace placeholder names in ``template`` and return a new lazy value.

    ``template`` is anything ``as_lazy`` accepts. Each placeholder becomes:

    - the substituted lazy value, kept as a nested node so names inside it
      still resolve against the scope it was captured in;
    - the node itself, for a bare expression;
    - a literal, for any other value.

    The result keeps the template's scope.
    """
    base = as_lazy(template)
    values: dict[str, object] = {}
    if substitutions is not None:
        if not isinstance(substitutions, Mapping):
            raise TypeError(f"substitutions must be a mapping, not {type(substitutions).__name__}")
        values.update(substitutions)
    values.update(named)

    nodes = {str(name): _as_node(str(name), value, base.scope) for name, value in values.items()}
    logger.debug(
        "interp splicing %s into template with %d nested scope(s)",
        sorted(nodes),
        sum(1 for node in nodes.values() if isinstance(node, LazyValue)),
    )
    return LazyValue(_substitute(base.expression, nodes), base.scope)
