from __future__ import annotations

import unittest

from lazyeval_jax.ast import Call, Literal, Symbol
from lazyeval_jax.lexer import tokenize
from lazyeval_jax.parser import ParseError, parse


def _op(name: str, *args) -> Call:
    return Call(func=Symbol(name), args=tuple(args))


class ParserExpressionSyntaxTests(unittest.TestCase):
    def test_multiplication_binds_tighter_than_addition(self) -> None:
        expr = parse("1 + 2 * 3")
        self.assertEqual(expr, _op("+", Literal(1), _op("*", Literal(2), Literal(3))))

    def test_subtraction_is_left_associative(self) -> None:
        expr = parse("a - b - c")
        self.assertEqual(expr, _op("-", _op("-", Symbol("a"), Symbol("b")), Symbol("c")))

    def test_power_is_right_associative(self) -> None:
        expr = parse("2 ^ 3 ^ 2")
        self.assertEqual(expr, _op("^", Literal(2), _op("^", Literal(3), Literal(2))))

    def test_unary_minus_binds_looser_than_power(self) -> None:
        expr = parse("-x ^ 2")
        self.assertEqual(expr, _op("-", _op("^", Symbol("x"), Literal(2))))

        expr = parse("2 ^ -1")
        self.assertEqual(expr, _op("^", Literal(2), _op("-", Literal(1))))

    def test_not_binds_looser_than_comparison(self) -> None:
        expr = parse("!x > 5")
        self.assertEqual(expr, _op("!", _op(">", Symbol("x"), Literal(5))))

    def test_and_binds_tighter_than_or(self) -> None:
        expr = parse("a | b & c")
        self.assertEqual(expr, _op("|", Symbol("a"), _op("&", Symbol("b"), Symbol("c"))))

    def test_comparison_binds_tighter_than_and(self) -> None:
        expr = parse("mpg > 30 & cyl == 4")
        self.assertEqual(
            expr,
            _op("&", _op(">", Symbol("mpg"), Literal(30)), _op("==", Symbol("cyl"), Literal(4))),
        )

    def test_operator_aliases(self) -> None:
        self.assertEqual(parse("x ** 2"), parse("x ^ 2"))
        self.assertEqual(parse("a && b"), parse("a & b"))
        self.assertEqual(parse("a || b"), parse("a | b"))

    def test_call_with_arguments(self) -> None:
        expr = parse("f(x, 1)")
        self.assertIsInstance(expr, Call)
        assert isinstance(expr, Call)
        self.assertEqual(expr.func, Symbol("f"))
        self.assertEqual(expr.args, (Symbol("x"), Literal(1)))

    def test_empty_call_and_chained_call(self) -> None:
        self.assertEqual(parse("f()"), Call(func=Symbol("f"), args=()))
        expr = parse("f(x)(y)")
        self.assertEqual(expr, Call(func=Call(func=Symbol("f"), args=(Symbol("x"),)), args=(Symbol("y"),)))

    def test_parentheses_override_precedence(self) -> None:
        expr = parse("(1 + 2) * 3")
        self.assertEqual(expr, _op("*", _op("+", Literal(1), Literal(2)), Literal(3)))

    def test_numeric_literal_forms(self) -> None:
        expr = parse("1_000")
        self.assertIsInstance(expr, Literal)
        assert isinstance(expr, Literal)
        self.assertEqual(expr.value, 1000)
        self.assertIsInstance(expr.value, int)

        self.assertEqual(parse("2.5e-1"), Literal(0.25))
        self.assertEqual(parse(".5"), Literal(0.5))
        self.assertEqual(parse("3."), Literal(3.0))
        self.assertEqual(parse("1e3"), Literal(1000.0))

    def test_string_literals_and_escapes(self) -> None:
        self.assertEqual(parse('"a\\nb"'), Literal("a\nb"))
        self.assertEqual(parse("'it\\'s'"), Literal("it's"))
        self.assertEqual(parse('"\\x41\\u00e9"'), Literal("Aé"))

    def test_keywords_are_literals(self) -> None:
        self.assertEqual(parse("True"), Literal(True))
        self.assertEqual(parse("False"), Literal(False))
        self.assertEqual(parse("None"), Literal(None))

    def test_backtick_quoted_names(self) -> None:
        expr = parse("`miles per gallon` > 30")
        self.assertEqual(expr, _op(">", Symbol("miles per gallon"), Literal(30)))

    def test_dotted_identifiers_are_single_names(self) -> None:
        self.assertEqual(parse("my.value + 1"), _op("+", Symbol("my.value"), Literal(1)))

    def test_comments_are_ignored(self) -> None:
        self.assertEqual(parse("x + 1 # trailing note"), parse("x + 1"))

    def test_missing_operand_reports_eof(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("1 +")
        self.assertEqual(ctx.exception.found, "EOF")
        self.assertEqual(ctx.exception.start, 3)
        self.assertIn("NAME", ctx.exception.expected)

    def test_unclosed_paren_expects_rparen(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("(1 + 2")
        self.assertEqual(ctx.exception.expected, ("RPAREN",))

    def test_trailing_comma_in_call_is_rejected(self) -> None:
        with self.assertRaises(ParseError):
            parse("f(1,)")

    def test_juxtaposed_terms_are_rejected(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("a b")
        self.assertEqual(ctx.exception.found, "NAME(b)")

    def test_empty_source_is_rejected(self) -> None:
        with self.assertRaises(ParseError) as ctx:
            parse("   ")
        self.assertIn("Empty expression", str(ctx.exception))

    def test_prefix_only_operator_in_infix_position(self) -> None:
        with self.assertRaises(ParseError):
            parse("a ! b")

    def test_tokenizer_rejects_unknown_characters(self) -> None:
        with self.assertRaises(SyntaxError):
            tokenize("x = 1")
        with self.assertRaises(SyntaxError):
            tokenize('"open')

    def test_token_spans(self) -> None:
        tokens = tokenize("ab >= 1")
        self.assertEqual([tok.kind for tok in tokens], ["NAME", "OP", "NUMBER", "EOF"])
        self.assertEqual((tokens[1].pos, tokens[1].end), (3, 5))
        self.assertEqual(tokens[1].text, ">=")


if __name__ == "__main__":
    unittest.main()
