"""Pratt parser for the infix expression language."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .ast import Call, Expr, Literal, Symbol
from .lexer import Token, parse_number_text, tokenize

# Binding power and associativity per infix operator, lowest first.
INFIX_OPERATORS: Final[dict[str, tuple[int, str]]] = {
    "|": (10, "left"),
    "&": (20, "left"),
    "==": (30, "left"),
    "!=": (30, "left"),
    "<": (30, "left"),
    "<=": (30, "left"),
    ">": (30, "left"),
    ">=": (30, "left"),
    "+": (40, "left"),
    "-": (40, "left"),
    "*": (50, "left"),
    "/": (50, "left"),
    "%": (50, "left"),
    "^": (70, "right"),
}

PREFIX_OPERATORS: Final[dict[str, int]] = {
    "!": 25,
    "-": 60,
    "+": 60,
}

CALL_BINDING_POWER: Final[int] = 80

_KEYWORD_VALUES: Final[dict[str, object]] = {
    "True": True,
    "False": False,
    "None": None,
}


class ParseError(SyntaxError):
    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected_text}{found_text}"


@dataclass
class _Parser:
    tokens: list[Token]
    index: int = 0

    def parse_expression_only(self) -> Expr:
        if self._peek().kind == "EOF":
            self._error(message="Empty expression", expected=("expression",))
        expr = self._parse_expression(0)
        self._expect("EOF")
        return expr

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def _expect(self, kind: str) -> Token:
        tok = self._peek()
        if tok.kind != kind:
            self._error(tok, expected=(kind,))
        return self._advance()

    def _error(self, tok: Token | None = None, *, message: str | None = None, expected: tuple[str, ...] = ()) -> None:
        token = tok if tok is not None else self._peek()
        detail = message if message is not None else "Unexpected token"
        normalized_expected = tuple(dict.fromkeys(expected))
        if token.kind == "EOF":
            found = "EOF"
        elif token.text:
            found = f"{token.kind}({token.text})"
        else:
            found = token.kind
        raise ParseError(detail, token.pos, token.end, expected=normalized_expected, found=found)

    def _match(self, kind: str) -> bool:
        if self._peek().kind == kind:
            self._advance()
            return True
        return False

    def _parse_expression(self, min_bp: int) -> Expr:
        left = self._parse_prefix()

        while True:
            tok = self._peek()
            if tok.kind != "OP":
                break
            spec = INFIX_OPERATORS.get(tok.text)
            if spec is None:
                self._error(tok, message=f"Unknown infix operator {tok.text!r}")
            bp, assoc = spec
            if bp < min_bp:
                break
            self._advance()
            right = self._parse_expression(bp + 1 if assoc == "left" else bp)
            left = Call(func=Symbol(tok.text), args=(left, right))

        return left

    def _parse_prefix(self) -> Expr:
        tok = self._peek()
        if tok.kind == "OP" and tok.text in PREFIX_OPERATORS:
            self._advance()
            operand = self._parse_expression(PREFIX_OPERATORS[tok.text])
            return Call(func=Symbol(tok.text), args=(operand,))
        return self._parse_postfix(self._parse_atom())

    def _parse_postfix(self, expr: Expr) -> Expr:
        while self._peek().kind == "LPAREN":
            self._advance()
            args: list[Expr] = []
            if not self._match("RPAREN"):
                while True:
                    args.append(self._parse_expression(0))
                    if self._match("RPAREN"):
                        break
                    self._expect_any(("COMMA", "RPAREN"))
            expr = Call(func=expr, args=tuple(args))
        return expr

    def _expect_any(self, kinds: tuple[str, ...]) -> Token:
        tok = self._peek()
        if tok.kind not in kinds:
            self._error(tok, expected=kinds)
        return self._advance()

    def _parse_atom(self) -> Expr:
        tok = self._peek()

        if tok.kind == "NUMBER":
            self._advance()
            try:
                value = parse_number_text(tok.text, tok.pos)
            except SyntaxError as exc:
                raise ParseError(str(exc), tok.pos, tok.end, found=f"NUMBER({tok.text})") from exc
            return Literal(value)

        if tok.kind == "STRING":
            self._advance()
            return Literal(tok.text)

        if tok.kind == "KEYWORD":
            self._advance()
            return Literal(_KEYWORD_VALUES[tok.text])

        if tok.kind == "NAME":
            self._advance()
            return Symbol(tok.text)

        if tok.kind == "LPAREN":
            self._advance()
            inner = self._parse_expression(0)
            self._expect("RPAREN")
            return inner

        self._error(tok, expected=("NUMBER", "STRING", "NAME", "KEYWORD", "LPAREN"))
        raise AssertionError("unreachable")


def parse(source: str) -> Expr:
    tokens = tokenize(source)
    parser = _Parser(tokens=tokens)
    return parser.parse_expression_only()
