"""Lazy values and capture of unevaluated argument bindings."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Final

from .ast import Expr, Literal, Symbol, is_expression
from .deparse import deparse
from .scope import ROOT_SCOPE, Scope

logger = logging.getLogger(__name__)

_UNFORCED: Final = object()


@dataclass(frozen=True, eq=False)
class LazyValue:
    """An expression paired with the scope it was written in."""

    expression: Expr
    scope: Scope = ROOT_SCOPE

    def __post_init__(self) -> None:
        if not (is_expression(self.expression) or isinstance(self.expression, LazyValue)):
            raise TypeError(f"LazyValue expression must be an expression node, not {type(self.expression).__name__}")
        if not isinstance(self.scope, Scope):
            raise TypeError(f"LazyValue scope must be a Scope, not {type(self.scope).__name__}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LazyValue):
            return NotImplemented
        return self.scope is other.scope and self.expression == other.expression

    def __hash__(self) -> int:
        return hash((LazyValue, self.expression, id(self.scope)))

    def __repr__(self) -> str:
        return f"<lazy {deparse(self.expression)} in {self.scope!r}>"


@dataclass(frozen=True, eq=False)
class Promise:
    """A pending argument binding: what the caller wrote and where.

    ``forwarded_from`` links a relay's binding to the binding it merely passed
    along; the chain is fixed at construction, so it cannot loop. Only the
    forced value is recorded afterwards.
    """

    expression: Expr
    scope: Scope = ROOT_SCOPE
    forwarded_from: "Promise | None" = None
    _value: object = field(default=_UNFORCED, repr=False)

    def __post_init__(self) -> None:
        if not is_expression(self.expression):
            raise TypeError(f"Promise expression must be an expression node, not {type(self.expression).__name__}")
        if not isinstance(self.scope, Scope):
            raise TypeError(f"Promise scope must be a Scope, not {type(self.scope).__name__}")
        if self.forwarded_from is not None and not isinstance(self.forwarded_from, Promise):
            raise TypeError("forwarded_from must be a Promise or None")

    @classmethod
    def of_value(cls, value: object) -> "Promise":
        """A binding that was evaluated before anyone asked for its expression."""
        return cls(Literal(value), ROOT_SCOPE, _value=value)

    @property
    def is_forced(self) -> bool:
        return self._value is not _UNFORCED

    @property
    def value(self) -> object:
        if self._value is _UNFORCED:
            raise ValueError("Promise has not been forced")
        return self._value

    def forward(self, name: str, scope: Scope | None = None) -> "Promise":
        """Pass this binding on unevaluated, as argument ``name`` of the relay.

        ``scope`` is the relay's own scope; by default the calling Python
        frame is captured.
        """
        if scope is None:
            scope = _caller_scope()
        return Promise(Symbol(name), scope, forwarded_from=self)

    def force(self) -> object:
        if self._value is _UNFORCED:
            from .evaluator import evaluate

            if self.forwarded_from is not None:
                value = self.forwarded_from.force()
            else:
                value = evaluate(LazyValue(self.expression, self.scope))
            object.__setattr__(self, "_value", value)
        return self._value


def _caller_scope(depth: int = 2) -> Scope:
    frame = inspect.currentframe()
    try:
        for _ in range(depth):
            if frame is None:
                break
            frame = frame.f_back
        if frame is None:
            return ROOT_SCOPE
        return Scope.from_frame(frame)
    finally:
        del frame


def _as_tree(source: str | Expr) -> Expr:
    if isinstance(source, str):
        from .coerce import parse_source

        return parse_source(source)
    if is_expression(source):
        return source
    raise TypeError(f"Expected source text or an expression node, not {type(source).__name__}")


def promise(source: str | Expr, scope: Scope | None = None) -> Promise:
    """Build the binding for an argument written as ``source``.

    Without ``scope`` the calling Python frame is captured.
    """
    tree = _as_tree(source)
    if scope is None:
        scope = _caller_scope()
    return Promise(tree, scope)


def lazy(source: str | Expr, scope: Scope | None = None) -> LazyValue:
    """Capture ``source`` together with the scope it is written in.

    Without ``scope`` the calling Python frame is captured.
    """
    tree = _as_tree(source)
    if scope is None:
        scope = _caller_scope()
    return LazyValue(tree, scope)


def capture(binding: Promise, *, follow_forwards: bool = True) -> LazyValue:
    """Turn an argument binding into a lazy value.

    Forwarded bindings are chased back to the frame where the expression
    was written, so names resolve there rather than in any relay. A binding
    that was already forced captures as a literal of its value.
    """
    if not isinstance(binding, Promise):
        raise TypeError(f"capture() expects a Promise, not {type(binding).__name__}")

    if binding.is_forced:
        return LazyValue(Literal(binding.value), ROOT_SCOPE)

    frame = binding
    hops = 0
    if follow_forwards:
        while frame.forwarded_from is not None:
            frame = frame.forwarded_from
            hops += 1
    if hops:
        logger.debug("capture followed %d forwarded binding(s) to %r", hops, frame.scope)
    return LazyValue(frame.expression, frame.scope)


def capture_dots(*bindings: Promise, **named: Promise) -> dict[str, LazyValue]:
    """Capture several bindings; positional ones are named by their expression."""
    out: dict[str, LazyValue] = {}
    for binding in bindings:
        captured = capture(binding)
        out[deparse(captured.expression)] = captured
    for name, binding in named.items():
        out[name] = capture(binding)
    return out


def common_scope(values: Iterable[LazyValue] | Mapping[str, LazyValue]) -> Scope:
    """The scope all ``values`` share, or the root scope when they disagree."""
    items = values.values() if isinstance(values, Mapping) else values
    scope: Scope | None = None
    for value in items:
        if scope is None:
            scope = value.scope
        elif value.scope is not scope:
            return ROOT_SCOPE
    return ROOT_SCOPE if scope is None else scope
