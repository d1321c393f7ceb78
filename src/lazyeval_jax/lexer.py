"""Tokenization for the infix expression language."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


_SINGLE_TOKENS = {
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
}

_OP_ALIASES = {
    "**": "^",
    "&&": "&",
    "||": "|",
}

_TWO_CHAR_OPS = ("==", "!=", "<=", ">=", "**", "&&", "||")
_ONE_CHAR_OPS = set("+-*/%^<>!&|")

_KEYWORDS = {"True", "False", "None"}

_NUMBER_RE = re.compile(
    r"""
    ^
    (?:
        (?P<int>[0-9]+)
      |
        (?P<float>(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+\-]?[0-9]+)?|[0-9]+[eE][+\-]?[0-9]+)
    )
    $
    """,
    re.VERBOSE,
)


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident_continue(ch: str) -> bool:
    return ch == "_" or ch == "." or ch.isalnum()


def _scan_digits_and_underscores(source: str, start: int) -> int:
    i = start
    while i < len(source) and (source[i].isdigit() or source[i] == "_"):
        i += 1
    return i


def _scan_number(source: str, start: int) -> tuple[str, int]:
    i = start
    if source[i] == ".":
        i += 1
        frac_start = i
        i = _scan_digits_and_underscores(source, i)
        if i == frac_start:
            raise SyntaxError(f"Invalid numeric literal {source[start:i]!r} at index {start}")
    else:
        i = _scan_digits_and_underscores(source, i)
        if i < len(source) and source[i] == "." and not (i + 1 < len(source) and _is_ident_start(source[i + 1])):
            i += 1
            i = _scan_digits_and_underscores(source, i)

    if i < len(source) and source[i] in {"e", "E"}:
        i += 1
        if i < len(source) and source[i] in {"-", "+"}:
            i += 1
        exp_start = i
        i = _scan_digits_and_underscores(source, i)
        if i == exp_start:
            raise SyntaxError(f"Invalid numeric literal {source[start:i]!r} at index {start}")

    return source[start:i], i


def parse_number_text(text: str, pos: int) -> int | float:
    cleaned = text.replace("_", "")
    m = _NUMBER_RE.match(cleaned)
    if not m:
        raise SyntaxError(f"Invalid numeric literal {text!r} at index {pos}")
    if m.group("int") is not None:
        return int(cleaned)
    return float(cleaned)


def _parse_escaped_codepoint(source: str, start: int) -> tuple[str, int]:
    if start >= len(source):
        raise SyntaxError("Escape sequence is incomplete at end of input")

    esc = source[start]
    if esc == "n":
        return "\n", start + 1
    if esc == "r":
        return "\r", start + 1
    if esc == "t":
        return "\t", start + 1
    if esc == "0":
        return "\0", start + 1
    if esc == "\\":
        return "\\", start + 1
    if esc == '"':
        return '"', start + 1
    if esc == "'":
        return "'", start + 1
    if esc == "`":
        return "`", start + 1

    widths = {"x": 2, "u": 4, "U": 8}
    if esc in widths:
        hex_end = start + 1 + widths[esc]
        if hex_end > len(source):
            raise SyntaxError(f"Incomplete \\{esc} escape at index {start - 1}")
        digits = source[start + 1 : hex_end]
        if not all(ch in "0123456789abcdefABCDEF" for ch in digits):
            raise SyntaxError(f"Invalid \\{esc} escape at index {start - 1}")
        try:
            return chr(int(digits, 16)), hex_end
        except ValueError as exc:
            raise SyntaxError(f"Invalid \\{esc} escape at index {start - 1}") from exc

    raise SyntaxError(f"Unknown escape sequence \\{esc} at index {start - 1}")


def _scan_quoted(source: str, start: int, *, what: str) -> tuple[str, int]:
    quote = source[start]
    i = start + 1
    out: list[str] = []
    while i < len(source):
        ch = source[i]
        if ch == quote:
            return "".join(out), i + 1
        if ch == "\\":
            escaped, end = _parse_escaped_codepoint(source, i + 1)
            out.append(escaped)
            i = end
            continue
        out.append(ch)
        i += 1
    raise SyntaxError(f"Unterminated {what} at index {start}")


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    i = 0

    while i < len(source):
        ch = source[i]

        if ch.isspace():
            i += 1
            continue

        if ch == "#":
            while i < len(source) and source[i] not in {"\n", "\r"}:
                i += 1
            continue

        if ch in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[ch], ch, i, i + 1))
            i += 1
            continue

        two = source[i : i + 2]
        if two in _TWO_CHAR_OPS:
            tokens.append(Token("OP", _OP_ALIASES.get(two, two), i, i + 2))
            i += 2
            continue

        if ch == "." and i + 1 < len(source) and source[i + 1].isdigit():
            text, end = _scan_number(source, i)
            tokens.append(Token("NUMBER", text, i, end))
            i = end
            continue

        if ch in _ONE_CHAR_OPS:
            tokens.append(Token("OP", ch, i, i + 1))
            i += 1
            continue

        if ch in {'"', "'"}:
            value, end = _scan_quoted(source, i, what="string literal")
            tokens.append(Token("STRING", value, i, end))
            i = end
            continue

        if ch == "`":
            value, end = _scan_quoted(source, i, what="quoted name")
            if not value:
                raise SyntaxError(f"Empty quoted name at index {i}")
            tokens.append(Token("NAME", value, i, end))
            i = end
            continue

        if ch.isdigit():
            text, end = _scan_number(source, i)
            tokens.append(Token("NUMBER", text, i, end))
            i = end
            continue

        if _is_ident_start(ch):
            start = i
            i += 1
            while i < len(source) and _is_ident_continue(source[i]):
                i += 1
            ident = source[start:i]
            kind = "KEYWORD" if ident in _KEYWORDS else "NAME"
            tokens.append(Token(kind, ident, start, i))
            continue

        raise SyntaxError(f"Unexpected character {ch!r} at index {i}")

    tokens.append(Token("EOF", "", len(source), len(source)))
    return tokens
