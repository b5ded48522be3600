"""
pylox Recursive Descent Parser

One parsing method per precedence tier, loosest first:

    expression  -> equality
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | primary
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | "(" expression ")"

Precedence is encoded by call order and left associativity by the loop in
each binary tier. A syntax error is reported once, raised as ParseError,
and caught at `parse` / `parse_all`, which resynchronize to the next
statement boundary and carry on.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..lexer.tokens import (
    Token, TokenType, EQUALITY_OPERATORS, COMPARISON_OPERATORS,
    TERM_OPERATORS, FACTOR_OPERATORS, UNARY_OPERATORS
)
from ..lexer.errors import Diagnostic, ErrorReporter
from .ast_nodes import Expr, Literal, Grouping, Unary, Binary
from .errors import (
    ParseError, SyntaxErrorRecovery, create_expected_expression_error,
    create_missing_token_error, create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)

# Maximum number of nested groupings / prefix operators in one expression.
# A grouping level costs eleven Python frames (expression down to primary),
# so 64 levels stay well under CPython's default recursion limit of 1000.
DEFAULT_MAX_DEPTH = 64


@dataclass
class ParseResult:
    """Trees parsed from one input plus every diagnostic reported for it."""
    expressions: List[Expr] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def had_error(self) -> bool:
        return any(d.severity == "error" for d in self.diagnostics)

    @property
    def ok(self) -> bool:
        return not self.had_error


class Parser:
    """
    Lox expression parser.

    Holds a cursor over an EOF-terminated token list. A Parser is owned by a
    single caller for the duration of one input; it is not thread-safe.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        reporter: Optional[ErrorReporter] = None,
        max_depth: int = DEFAULT_MAX_DEPTH
    ):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the lexer, ending with an EOF token
            reporter: Collector that receives one diagnostic per syntax error
            max_depth: Nesting limit for groupings and prefix operators

        Raises:
            ValueError: If the token list is empty or not EOF-terminated
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token stream must end with an EOF token")
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")

        self.tokens = tokens
        self.current = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.max_depth = max_depth
        self.errors: List[ParseError] = []
        self._depth = 0

    # Entry points

    def parse(self) -> Optional[Expr]:
        """
        Parse one expression starting at the cursor.

        Returns:
            The expression tree, or None if it was malformed. In that case the
            error has been reported and the cursor moved to the next statement
            boundary, so calling parse() again continues with the next unit.
        """
        try:
            return self.expression()
        except ParseError as e:
            self._recover(e)
        except RecursionError:
            self._recover(self._report(create_nesting_too_deep_error(self.peek(), self.max_depth)))
        return None

    def parse_all(self) -> ParseResult:
        """
        Parse `;`-separated expressions until the end of input.

        Malformed units are reported and skipped; every well-formed unit
        ends up in the result. Only diagnostics reported during this call
        are included, even when the reporter is shared with earlier inputs.
        """
        expressions = []
        first_diagnostic = len(self.reporter.diagnostics)

        while not self.is_at_end():
            try:
                expressions.append(self._expression_unit())
            except ParseError as e:
                self._recover(e)
            except RecursionError:
                self._recover(self._report(create_nesting_too_deep_error(self.peek(), self.max_depth)))

        return ParseResult(expressions, self.reporter.diagnostics[first_diagnostic:])

    def _expression_unit(self) -> Expr:
        """unit -> expression ( ";" | EOF )"""
        expr = self.expression()
        if not self.is_at_end():
            self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return expr

    # Grammar

    def expression(self) -> Expr:
        """
        Parse a full expression.

        Raises:
            ParseError: If the tokens at the cursor do not form an expression
        """
        with self._nested():
            return self._equality()

    def _equality(self) -> Expr:
        return self._left_associative(self._comparison, EQUALITY_OPERATORS)

    def _comparison(self) -> Expr:
        return self._left_associative(self._term, COMPARISON_OPERATORS)

    def _term(self) -> Expr:
        return self._left_associative(self._factor, TERM_OPERATORS)

    def _factor(self) -> Expr:
        return self._left_associative(self._unary, FACTOR_OPERATORS)

    def _left_associative(self, operand: Callable[[], Expr], operators: Sequence[TokenType]) -> Expr:
        """Parse `operand ( op operand )*`, folding each new operand onto the left."""
        expr = operand()

        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)

        return expr

    def _unary(self) -> Expr:
        if self.match(*UNARY_OPERATORS):
            operator = self.previous()
            with self._nested():
                right = self._unary()
            return Unary(operator, right)

        return self._primary()

    def _primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self._report(create_expected_expression_error(self.peek()))

    @contextmanager
    def _nested(self):
        # The outermost expression is level 0; max_depth counts what nests inside it
        if self._depth > self.max_depth:
            raise self._report(create_nesting_too_deep_error(self.peek(), self.max_depth))
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    # Error handling

    def _report(self, error: ParseError) -> ParseError:
        """Hand the error's diagnostic to the reporter and return it for raising."""
        self.reporter.report(error.diagnostic)
        return error

    def _recover(self, error: ParseError) -> None:
        # A RecursionError can unwind without running every _nested exit
        self._depth = 0
        self.errors.append(error)
        self.synchronize()

    def synchronize(self) -> None:
        """Discard tokens until the cursor sits at a likely statement start."""
        start = self.current
        self.current = SyntaxErrorRecovery.synchronize_to_statement_boundary(
            self.tokens, self.current
        )
        logger.debug("Synchronized from token %d to %d (%s)", start, self.current, self.peek())

    # Cursor primitives

    def peek(self) -> Token:
        """Return current token without consuming."""
        return self.tokens[self.current]

    def previous(self) -> Token:
        """
        Return the most recently consumed token.

        Raises:
            IndexError: If nothing has been consumed yet
        """
        if self.current == 0:
            raise IndexError("no token has been consumed yet")
        return self.tokens[self.current - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        """
        Consume the current token and return it.

        At EOF the cursor stays put and the last consumed token is returned
        again (the EOF token itself when nothing has been consumed).
        """
        if not self.is_at_end():
            self.current += 1
        elif self.current == 0:
            return self.peek()
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def match(self, *token_types: TokenType) -> bool:
        """Consume the current token if it matches any of the given types."""
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        """
        Consume token of expected type or report and raise.

        Raises:
            ParseError: If the current token is not of `token_type`
        """
        if self.check(token_type):
            return self.advance()

        raise self._report(create_missing_token_error(token_type, self.peek(), message))


def parse_string(source: str, reporter: Optional[ErrorReporter] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH) -> ParseResult:
    """
    Convenience function to scan and parse a source string.

    Scanner and parser diagnostics for this source both end up in the
    result (and in `reporter`, when one is given).
    """
    from ..lexer import tokenize_string

    if reporter is None:
        reporter = ErrorReporter()

    first_diagnostic = len(reporter.diagnostics)
    tokens = tokenize_string(source, reporter)
    result = Parser(tokens, reporter, max_depth=max_depth).parse_all()
    result.diagnostics = reporter.diagnostics[first_diagnostic:]
    return result


def parse_file(filepath: str, reporter: Optional[ErrorReporter] = None,
               max_depth: int = DEFAULT_MAX_DEPTH) -> ParseResult:
    """
    Convenience function to scan and parse a source file.

    Raises:
        OSError: If the file cannot be read
    """
    from ..lexer import tokenize_file

    if reporter is None:
        reporter = ErrorReporter()

    first_diagnostic = len(reporter.diagnostics)
    tokens = tokenize_file(filepath, reporter)
    result = Parser(tokens, reporter, max_depth=max_depth).parse_all()
    result.diagnostics = reporter.diagnostics[first_diagnostic:]
    return result
