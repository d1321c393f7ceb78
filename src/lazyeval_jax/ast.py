"""Expression tree nodes: symbols, literals and calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .values import literal_equal, literal_hash

if TYPE_CHECKING:
    from .lazy import LazyValue


@dataclass(frozen=True)
class Symbol:
    name: str


@dataclass(frozen=True, eq=False)
class Literal:
    value: object

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return literal_equal(self.value, other.value)

    def __hash__(self) -> int:
        return hash((Literal, literal_hash(self.value)))


@dataclass(frozen=True)
class Call:
    func: "Expr"
    args: tuple["Expr", ...] = ()


# A LazyValue embedded in a tree pins that subtree to its own scope.
Expr = Union[Symbol, Literal, Call, "LazyValue"]


def is_expression(value: object) -> bool:
    return isinstance(value, (Symbol, Literal, Call))


def symbols(expr: Expr, *, functions: bool = False) -> tuple[str, ...]:
    """Names referenced by ``expr`` in first-seen order.

    Names in call-head position are only included when ``functions`` is true.
    Subtrees pinned to their own scope are included too.
    """
    seen: dict[str, None] = {}

    def walk(node: object, *, head: bool = False) -> None:
        if isinstance(node, Symbol):
            if functions or not head:
                seen.setdefault(node.name, None)
            return
        if isinstance(node, Call):
            walk(node.func, head=True)
            for arg in node.args:
                walk(arg)
            return
        inner = getattr(node, "expression", None)
        if inner is not None:
            walk(inner, head=head)

    walk(expr)
    return tuple(seen)
