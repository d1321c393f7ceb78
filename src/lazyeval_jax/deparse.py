"""Render expression trees back to source text."""

from __future__ import annotations

import math
import re
from typing import Final

from .ast import Call, Expr, Literal, Symbol
from .parser import CALL_BINDING_POWER, INFIX_OPERATORS, PREFIX_OPERATORS
from .values import is_array

_IDENT_RE: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")
_RESERVED: Final[set[str]] = {"True", "False", "None"}
_ATOM_POWER: Final[int] = CALL_BINDING_POWER + 10

_STRING_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _quote_name(name: str) -> str:
    if _IDENT_RE.match(name) and name not in _RESERVED:
        return name
    escaped = name.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def _quote_string(text: str) -> str:
    out: list[str] = []
    for ch in text:
        if ch in _STRING_ESCAPES:
            out.append(_STRING_ESCAPES[ch])
        elif not ch.isprintable():
            code = ord(ch)
            out.append(f"\\x{code:02x}" if code < 0x100 else f"\\u{code:04x}" if code < 0x10000 else f"\\U{code:08x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _format_number(value) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
    return repr(value)


def _format_literal(value: object) -> str:
    if value is None or isinstance(value, bool):
        return repr(value)
    if isinstance(value, str):
        return _quote_string(value)
    if is_array(value):
        if value.ndim == 0:
            return _format_literal(value.item())
        return "c(" + ", ".join(_format_literal(item) for item in value.tolist()) + ")"
    if isinstance(value, (tuple, list)):
        return "c(" + ", ".join(_format_literal(item) for item in value) + ")"
    if isinstance(value, (int, float)):
        return _format_number(value)
    return repr(value)


def _unwrap(expr: object) -> object:
    # Subtrees pinned to another scope render as their expression.
    while not isinstance(expr, (Symbol, Literal, Call)) and hasattr(expr, "expression"):
        expr = expr.expression
    return expr


def _operator_form(expr: object) -> tuple[str, str] | None:
    if not isinstance(expr, Call) or not isinstance(expr.func, Symbol):
        return None
    op = expr.func.name
    if len(expr.args) == 2 and op in INFIX_OPERATORS:
        return ("infix", op)
    if len(expr.args) == 1 and op in PREFIX_OPERATORS:
        return ("prefix", op)
    return None


def _power(expr: object) -> int:
    expr = _unwrap(expr)
    form = _operator_form(expr)
    if form is None:
        if isinstance(expr, Literal) and isinstance(expr.value, (int, float)) and not isinstance(expr.value, bool):
            if expr.value < 0:
                return PREFIX_OPERATORS["-"]
        return _ATOM_POWER
    kind, op = form
    if kind == "infix":
        return INFIX_OPERATORS[op][0]
    return PREFIX_OPERATORS[op]


def _wrap(text: str, needed: bool) -> str:
    return f"({text})" if needed else text


def deparse(expr: Expr) -> str:
    expr = _unwrap(expr)

    if isinstance(expr, Literal):
        return _format_literal(expr.value)

    if isinstance(expr, Symbol):
        return _quote_name(expr.name)

    if isinstance(expr, Call):
        form = _operator_form(expr)
        if form is not None and form[0] == "infix":
            op = form[1]
            bp, assoc = INFIX_OPERATORS[op]
            left, right = expr.args
            left_power = _power(left)
            right_power = _power(right)
            left_text = _wrap(deparse(left), left_power < bp or (left_power == bp and assoc == "right"))
            right_text = _wrap(deparse(right), right_power < bp or (right_power == bp and assoc == "left"))
            return f"{left_text} {op} {right_text}"

        if form is not None:
            op = form[1]
            (operand,) = expr.args
            operand_text = _wrap(deparse(operand), _power(operand) < PREFIX_OPERATORS[op])
            if operand_text.startswith(op) or (op == "-" and operand_text.startswith("-")):
                operand_text = f"({operand_text})"
            return f"{op}{operand_text}"

        func_text = deparse(expr.func)
        if _power(expr.func) < _ATOM_POWER or isinstance(_unwrap(expr.func), Literal):
            func_text = f"({func_text})"
        args_text = ", ".join(deparse(arg) for arg in expr.args)
        return f"{func_text}({args_text})"

    raise TypeError(f"Unsupported expression node: {type(expr)!r}")
