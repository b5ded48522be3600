"""
Test suite for the pylox parser.

Tests cover:
- Precedence and associativity of every operator tier
- Cursor primitives (peek, previous, advance, check, match, consume)
- Error reporting and panic-mode synchronization
- The nesting depth guard
- Expression node invariants
"""

import io
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from pylox.lexer.lexer import tokenize_string
from pylox.lexer.tokens import Token, TokenType
from pylox.lexer.errors import ErrorReporter
from pylox.parser.parser import DEFAULT_MAX_DEPTH, Parser, parse_string
from pylox.parser.ast_nodes import Expr, ExprType, ExprVisitor, Literal, Grouping, Unary, Binary
from pylox.parser.errors import ParseError, SyntaxErrorRecovery
from pylox.parser.printer import AstPrinter


def make_token(token_type: TokenType, lexeme: str, literal=None, line: int = 1) -> Token:
    return Token(token_type, lexeme, literal, line)


class ParserTestCase(unittest.TestCase):

    def setUp(self):
        self.reporter = ErrorReporter()
        self.printer = AstPrinter()

    def make_parser(self, source: str, **kwargs) -> Parser:
        tokens = tokenize_string(source, self.reporter)
        return Parser(tokens, self.reporter, **kwargs)

    def parse_one(self, source: str) -> str:
        expr = self.make_parser(source).parse()
        self.assertIsNotNone(expr, f"failed to parse {source!r}: {self.reporter.diagnostics}")
        return self.printer.print(expr)


class TestPrecedence(ParserTestCase):
    """Test cases for operator precedence and associativity."""

    def test_factor_binds_tighter_than_term(self):
        tokens = tokenize_string("1 + 2 * 3", self.reporter)
        expr = Parser(tokens, self.reporter).parse()

        expected = Binary(
            Literal(1.0),
            tokens[1],
            Binary(Literal(2.0), tokens[3], Literal(3.0)),
        )
        self.assertEqual(expr, expected)
        self.assertEqual(self.printer.print(expr), "(+ 1.0 (* 2.0 3.0))")

    def test_binary_operators_are_left_associative(self):
        self.assertEqual(self.parse_one("8 - 4 - 2"), "(- (- 8.0 4.0) 2.0)")
        self.assertEqual(self.parse_one("1 / 2 * 3"), "(* (/ 1.0 2.0) 3.0)")
        self.assertEqual(self.parse_one("1 == 2 != 3"), "(!= (== 1.0 2.0) 3.0)")
        self.assertEqual(self.parse_one("1 < 2 < 3"), "(< (< 1.0 2.0) 3.0)")

    def test_tiers_from_loosest_to_tightest(self):
        self.assertEqual(self.parse_one("1 < 2 == true"), "(== (< 1.0 2.0) true)")
        self.assertEqual(self.parse_one("1 + 2 >= 3"), "(>= (+ 1.0 2.0) 3.0)")
        self.assertEqual(self.parse_one("-1 * 2"), "(* (- 1.0) 2.0)")
        self.assertEqual(self.parse_one("!true == false"), "(== (! true) false)")

    def test_unary_is_right_recursive(self):
        tokens = tokenize_string("- - 5", self.reporter)
        expr = Parser(tokens, self.reporter).parse()

        self.assertEqual(expr, Unary(tokens[0], Unary(tokens[1], Literal(5.0))))
        self.assertEqual(self.parse_one("!!false"), "(! (! false))")

    def test_grouping_overrides_precedence(self):
        self.assertEqual(self.parse_one("(1 + 2) * 3"), "(* (group (+ 1.0 2.0)) 3.0)")
        self.assertEqual(self.parse_one("((1))"), "(group (group 1.0))")

    def test_literals(self):
        self.assertEqual(self.parse_one("nil"), "nil")
        self.assertEqual(self.parse_one("true"), "true")
        self.assertEqual(self.parse_one('"a" + "b"'), "(+ a b)")

        expr = self.make_parser("false").parse()
        self.assertIs(expr.value, False)

    def test_parse_stops_after_one_expression(self):
        parser = self.make_parser("1 + 2; 3")
        expr = parser.parse()

        self.assertEqual(self.printer.print(expr), "(+ 1.0 2.0)")
        self.assertEqual(parser.peek().type, TokenType.SEMICOLON)
        self.assertFalse(self.reporter.had_error)


class TestCursor(ParserTestCase):
    """Test cases for the token cursor primitives."""

    def test_peek_and_check_do_not_move(self):
        parser = self.make_parser("1 + 2")

        self.assertEqual(parser.peek(), parser.peek())
        self.assertTrue(parser.check(TokenType.NUMBER))
        self.assertTrue(parser.check(TokenType.NUMBER))
        self.assertFalse(parser.check(TokenType.PLUS))
        self.assertEqual(parser.current, 0)

    def test_check_is_false_at_end(self):
        parser = Parser([make_token(TokenType.EOF, "")])

        self.assertFalse(parser.check(TokenType.EOF))
        self.assertTrue(parser.is_at_end())

    def test_match_only_consumes_on_success(self):
        parser = self.make_parser("1 + 2")

        self.assertFalse(parser.match(TokenType.PLUS, TokenType.MINUS))
        self.assertEqual(parser.current, 0)

        self.assertTrue(parser.match(TokenType.STRING, TokenType.NUMBER))
        self.assertEqual(parser.current, 1)
        self.assertEqual(parser.previous().lexeme, "1")

    def test_advance_stops_at_eof(self):
        parser = self.make_parser("1")

        one = parser.advance()
        self.assertEqual(one.lexeme, "1")
        self.assertTrue(parser.is_at_end())

        # At the end the cursor stays put and the last consumed token comes back
        self.assertEqual(parser.advance(), one)
        self.assertEqual(parser.advance(), one)
        self.assertEqual(parser.current, 1)
        self.assertEqual(parser.previous(), one)

    def test_advance_on_empty_stream(self):
        parser = Parser([make_token(TokenType.EOF, "")])

        self.assertEqual(parser.advance().type, TokenType.EOF)
        self.assertEqual(parser.current, 0)

    def test_previous_before_any_advance(self):
        parser = self.make_parser("1")

        with self.assertRaises(IndexError):
            parser.previous()

    def test_consume(self):
        parser = self.make_parser("( 1")

        token = parser.consume(TokenType.LEFT_PAREN, "Expect '('.")
        self.assertEqual(token.type, TokenType.LEFT_PAREN)

        with self.assertRaises(ParseError) as ctx:
            parser.consume(TokenType.RIGHT_PAREN, "Expect ')'.")

        self.assertEqual(ctx.exception.token.lexeme, "1")
        self.assertEqual(parser.current, 1)
        self.assertEqual(len(self.reporter.diagnostics), 1)
        self.assertEqual(str(self.reporter.diagnostics[0]), "[line 1] Error at '1': Expect ')'.")

    def test_rejects_unterminated_token_list(self):
        with self.assertRaises(ValueError):
            Parser([])
        with self.assertRaises(ValueError):
            Parser([make_token(TokenType.NUMBER, "1", 1.0)])
        with self.assertRaises(ValueError):
            Parser([make_token(TokenType.EOF, "")], max_depth=0)


class TestErrors(ParserTestCase):
    """Test cases for error reporting and recovery."""

    def test_missing_operand(self):
        parser = self.make_parser("*")

        self.assertIsNone(parser.parse())
        self.assertEqual(len(self.reporter.diagnostics), 1)
        diagnostic = self.reporter.diagnostics[0]
        self.assertEqual(str(diagnostic), "[line 1] Error at '*': Expect expression.")
        self.assertEqual(diagnostic.code, "P001")
        self.assertTrue(diagnostic.suggestions)

    def test_unclosed_grouping(self):
        parser = self.make_parser("(1 + 2")

        self.assertIsNone(parser.parse())
        diagnostic = self.reporter.diagnostics[0]
        self.assertEqual(str(diagnostic), "[line 1] Error at end: Expect ')' after expression.")
        self.assertEqual(diagnostic.code, "P003")
        self.assertTrue(parser.is_at_end())

    def test_empty_input(self):
        parser = self.make_parser("")

        self.assertIsNone(parser.parse())
        self.assertEqual(str(self.reporter.diagnostics[0]), "[line 1] Error at end: Expect expression.")
        self.assertEqual(parser.current, 0)

    def test_error_line_is_offending_token_line(self):
        self.make_parser("1 +\n\n*").parse()

        self.assertEqual(self.reporter.diagnostics[0].line, 3)

    def test_each_error_reported_once(self):
        stream = io.StringIO()
        reporter = ErrorReporter(stream=stream)

        parse_string("1 + ;", reporter)

        self.assertEqual(stream.getvalue(), "[line 1] Error at ';': Expect expression.\n")
        self.assertEqual(len(reporter.diagnostics), 1)

    def test_synchronize_after_terminator(self):
        parser = self.make_parser("(1 + ; 2 * 3;")

        self.assertIsNone(parser.parse())
        self.assertEqual(parser.current, 4)
        self.assertEqual(parser.peek().lexeme, "2")

        expr = parser.parse()
        self.assertEqual(self.printer.print(expr), "(* 2.0 3.0)")
        self.assertEqual(len(self.reporter.diagnostics), 1)

    def test_synchronize_before_statement_keyword(self):
        parser = self.make_parser("1 + * 2 var")

        self.assertIsNone(parser.parse())
        self.assertEqual(parser.peek().type, TokenType.VAR)

    def test_synchronize_on_hand_built_tokens(self):
        tokens = [
            make_token(TokenType.NUMBER, "1", 1.0),
            make_token(TokenType.PLUS, "+"),
            make_token(TokenType.SEMICOLON, ";"),
            make_token(TokenType.NUMBER, "2", 2.0),
            make_token(TokenType.EOF, ""),
        ]
        parser = Parser(tokens, self.reporter)

        self.assertIsNone(parser.parse())
        self.assertEqual(parser.current, 3)
        self.assertEqual(parser.parse(), Literal(2.0))

    def test_synchronize_never_passes_eof(self):
        tokens = tokenize_string("1 + 2", self.reporter)
        end = len(tokens) - 1

        self.assertEqual(SyntaxErrorRecovery.synchronize_to_statement_boundary(tokens, 0), end)
        self.assertEqual(SyntaxErrorRecovery.synchronize_to_statement_boundary(tokens, end), end)

    def test_statement_keyword_is_not_an_expression(self):
        result = parse_string("print 1;", self.reporter)

        diagnostic = result.diagnostics[0]
        self.assertEqual(str(diagnostic), "[line 1] Error at 'print': Expect expression.")
        self.assertTrue(any("begins a statement" in s for s in diagnostic.suggestions))


class TestParseAll(ParserTestCase):
    """Test cases for parsing whole inputs."""

    def test_multiple_units(self):
        result = parse_string("1 + 2 * 3;\n-4;\n(5)", self.reporter)

        self.assertTrue(result.ok)
        self.assertEqual(
            [self.printer.print(e) for e in result.expressions],
            ["(+ 1.0 (* 2.0 3.0))", "(- 4.0)", "(group 5.0)"],
        )

    def test_collects_every_independent_error(self):
        result = parse_string("1 +; (2; 3 * 4;", self.reporter)

        self.assertTrue(result.had_error)
        self.assertEqual(
            [str(d) for d in result.diagnostics],
            [
                "[line 1] Error at ';': Expect expression.",
                "[line 1] Error at ';': Expect ')' after expression.",
            ],
        )
        self.assertEqual([self.printer.print(e) for e in result.expressions], ["(* 3.0 4.0)"])

    def test_missing_semicolon(self):
        result = parse_string("1 2", self.reporter)

        self.assertEqual(str(result.diagnostics[0]), "[line 1] Error at '2': Expect ';' after expression.")
        self.assertEqual(result.diagnostics[0].code, "P004")

    def test_scanner_errors_are_included(self):
        result = parse_string("1 @ + 2;", self.reporter)

        self.assertEqual([d.code for d in result.diagnostics], ["L001"])
        self.assertEqual([self.printer.print(e) for e in result.expressions], ["(+ 1.0 2.0)"])
        self.assertTrue(result.had_error)

    def test_empty_input(self):
        result = parse_string("", self.reporter)

        self.assertEqual(result.expressions, [])
        self.assertTrue(result.ok)

    def test_shared_reporter_keeps_results_separate(self):
        first = parse_string("*;", self.reporter)
        second = parse_string("1;", self.reporter)
        third = parse_string("1 @ 2;", self.reporter)

        self.assertEqual([d.code for d in first.diagnostics], ["P001"])
        self.assertEqual(second.diagnostics, [])
        self.assertTrue(second.ok)
        self.assertEqual([d.code for d in third.diagnostics], ["L001", "P004"])
        self.assertEqual(len(self.reporter.diagnostics), 3)

    def test_parse_all_ignores_earlier_reports(self):
        self.make_parser("*").parse()
        result = self.make_parser("1; 2;").parse_all()

        self.assertEqual(result.diagnostics, [])
        self.assertTrue(self.reporter.had_error)


class TestNestingLimit(ParserTestCase):
    """Test cases for the nesting depth guard."""

    def test_moderate_nesting_is_fine(self):
        source = "(" * 50 + "1" + ")" * 50
        self.assertIsNotNone(self.make_parser(source).parse())

    def test_deep_grouping_is_reported(self):
        source = "(" * 200 + "1" + ")" * 200
        result = parse_string(source, self.reporter)

        self.assertEqual(result.expressions, [])
        self.assertEqual(len(result.diagnostics), 1)
        self.assertEqual(result.diagnostics[0].message, "Expression nesting too deep.")
        self.assertEqual(result.diagnostics[0].code, "P005")

    def test_deep_unary_chain_is_reported(self):
        result = parse_string("-" * 200 + "1", self.reporter)

        self.assertEqual([d.code for d in result.diagnostics], ["P005"])

    def test_default_limit_is_inclusive(self):
        at_limit = "(" * DEFAULT_MAX_DEPTH + "1" + ")" * DEFAULT_MAX_DEPTH
        over_limit = "(" * (DEFAULT_MAX_DEPTH + 1) + "1" + ")" * (DEFAULT_MAX_DEPTH + 1)

        self.assertIsNotNone(self.make_parser(at_limit).parse())
        self.assertFalse(self.reporter.had_error)

        self.assertIsNone(self.make_parser(over_limit).parse())
        self.assertEqual([d.code for d in self.reporter.diagnostics], ["P005"])

    def test_mixed_grouping_and_unary_at_limit(self):
        half = DEFAULT_MAX_DEPTH // 2
        source = "(-" * half + "1" + ")" * half

        self.assertIsNotNone(self.make_parser(source).parse())
        self.assertFalse(self.reporter.had_error)

    def test_custom_limit(self):
        self.assertIsNotNone(self.make_parser("(((1)))", max_depth=3).parse())
        self.assertIsNotNone(self.make_parser("- - - 1", max_depth=3).parse())
        self.assertFalse(self.reporter.had_error)

        self.assertIsNone(self.make_parser("((((1))))", max_depth=3).parse())
        self.assertIsNone(self.make_parser("- - - - 1", max_depth=3).parse())
        self.assertEqual(len(self.reporter.diagnostics), 2)

    def test_interpreter_recursion_limit_is_reported(self):
        # A limit far above what the interpreter stack allows
        source = "(" * 5000 + "1" + ")" * 5000 + "; 2;"
        parser = self.make_parser(source, max_depth=100000)

        self.assertIsNone(parser.parse())
        self.assertEqual([d.code for d in self.reporter.diagnostics], ["P005"])
        self.assertEqual(parser._depth, 0)
        self.assertEqual(parser.parse(), Literal(2.0))

    def test_interpreter_recursion_limit_in_parse_all(self):
        source = "(" * 5000 + "1" + ")" * 5000 + "; 2;"
        result = self.make_parser(source, max_depth=100000).parse_all()

        self.assertEqual([d.code for d in result.diagnostics], ["P005"])
        self.assertEqual(result.expressions, [Literal(2.0)])

    def test_depth_resets_after_error(self):
        parser = self.make_parser("((1 +; ((2))", max_depth=3)

        self.assertIsNone(parser.parse())
        self.assertEqual(parser._depth, 0)
        self.assertIsNotNone(parser.parse())


class TestNodes(unittest.TestCase):
    """Test cases for expression node invariants."""

    def test_operator_must_fit_node(self):
        bang = make_token(TokenType.BANG, "!")
        plus = make_token(TokenType.PLUS, "+")

        with self.assertRaises(ValueError):
            Binary(Literal(1.0), bang, Literal(2.0))
        with self.assertRaises(ValueError):
            Unary(plus, Literal(1.0))

        Unary(bang, Literal(True))
        Binary(Literal(1.0), plus, Literal(2.0))

    def test_literal_equality_respects_value_type(self):
        self.assertNotEqual(Literal(True), Literal(1.0))
        self.assertNotEqual(Literal(False), Literal(0.0))
        self.assertNotEqual(Literal(None), Literal(False))
        self.assertEqual(Literal(1.0), Literal(1.0))
        self.assertEqual(len({Literal(True), Literal(1.0)}), 2)

    def test_trees_distinguish_true_from_one(self):
        plus = make_token(TokenType.PLUS, "+")

        self.assertNotEqual(
            Binary(Literal(True), plus, Literal(2.0)),
            Binary(Literal(1.0), plus, Literal(2.0)),
        )
        self.assertNotEqual(Grouping(Literal(False)), Grouping(Literal(0.0)))

    def test_nodes_are_immutable(self):
        literal = Literal(1.0)
        with self.assertRaises(AttributeError):
            literal.value = 2.0

    def test_children_and_types(self):
        minus = make_token(TokenType.MINUS, "-")
        left = Literal(1.0)
        right = Grouping(Literal(2.0))
        expr = Binary(left, minus, right)

        self.assertEqual(expr.children(), [left, right])
        self.assertEqual(right.children(), [Literal(2.0)])
        self.assertEqual(left.children(), [])
        self.assertEqual(expr.node_type, ExprType.BINARY)
        self.assertIsInstance(expr, Expr)

    def test_visitor_must_handle_every_node(self):
        class Incomplete(ExprVisitor):
            def visit_literal(self, expr):
                return expr.value

        with self.assertRaises(TypeError):
            Incomplete()


if __name__ == '__main__':
    unittest.main()
