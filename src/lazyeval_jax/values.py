"""Literal value model and column-table helpers."""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from enum import Enum

import jax.numpy as jnp


class LiteralKind(str, Enum):
    NULL = "null"
    LOGICAL = "logical"
    NUMBER = "number"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    SEQUENCE = "sequence"


def is_array(value: object) -> bool:
    return isinstance(value, jnp.ndarray)


def is_scalar(value: object) -> bool:
    """Plain Python scalars: the values the operator fast path accepts."""
    if is_array(value):
        return False
    return isinstance(value, (numbers.Number, str))


def literal_kind(value: object) -> LiteralKind | None:
    if value is None:
        return LiteralKind.NULL
    if isinstance(value, bool):
        return LiteralKind.LOGICAL
    if is_array(value):
        return LiteralKind.ARRAY
    if isinstance(value, numbers.Number):
        return LiteralKind.NUMBER
    if isinstance(value, str):
        return LiteralKind.STRING
    if isinstance(value, bytes):
        return LiteralKind.BYTES
    if isinstance(value, (tuple, list)):
        return LiteralKind.SEQUENCE
    return None


def validate_literal(value: object, *, where: str = "literal") -> None:
    kind = literal_kind(value)
    if kind is None:
        raise TypeError(f"{where} has unsupported literal type {type(value).__name__}")
    if kind is LiteralKind.SEQUENCE:
        for idx, item in enumerate(value):
            validate_literal(item, where=f"{where}[{idx}]")


def literal_equal(left: object, right: object) -> bool:
    """Equality that treats arrays by shape and contents instead of element-wise."""
    if is_array(left) or is_array(right):
        if not (is_array(left) and is_array(right)):
            return False
        return left.shape == right.shape and bool(jnp.array_equal(left, right))
    if isinstance(left, (tuple, list)) and isinstance(right, (tuple, list)):
        if type(left) is not type(right) or len(left) != len(right):
            return False
        return all(literal_equal(a, b) for a, b in zip(left, right))
    if type(left) is not type(right) and (isinstance(left, bool) or isinstance(right, bool)):
        return False
    return bool(left == right)


def literal_hash(value: object) -> int:
    """Hash consistent with ``literal_equal``: equal literals hash equal."""
    if isinstance(value, bool):
        return hash((LiteralKind.LOGICAL, value))
    if is_array(value):
        return hash((LiteralKind.ARRAY, tuple(value.shape)))
    if isinstance(value, (tuple, list)):
        return hash((type(value), tuple(literal_hash(item) for item in value)))
    try:
        # Numbers hash by value, so 1 and 1.0 agree.
        return hash(value)
    except TypeError:
        return hash(("unhashable", literal_kind(value)))


def as_jax_array(value: object):
    if isinstance(value, jnp.ndarray):
        return value
    return jnp.asarray(value)


def columns(table: Mapping[str, object]) -> dict[str, object]:
    """Convert a column table into a mapping of name to ``jax.numpy`` array.

    Scalars are kept as 0-d arrays so the result can be passed as
    ``overrides`` and every column broadcasts like the others.
    """
    out: dict[str, object] = {}
    for name, column in table.items():
        if not isinstance(name, str):
            raise TypeError(f"Column names must be str, not {type(name).__name__}")
        out[name] = as_jax_array(column)
    return out
