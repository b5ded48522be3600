"""
Error handling for the pylox parser.

Provides the ParseError signal, the panic-mode recovery utilities that
find the next statement boundary, and factory helpers that attach error
codes, help text and suggestions to common syntax errors.
"""

from typing import Optional, List

from ..lexer.tokens import Token, TokenType, BINARY_OPERATORS
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Raised when a grammar production cannot match at the current token.

    By the time it is raised its diagnostic has already been handed to the
    error reporter; the parser catches it at the nearest recovery point.
    """

    def __init__(
        self,
        message: str,
        token: Token,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.token = token
        where = " at end" if token.type == TokenType.EOF else f" at '{token.lexeme}'"
        self.diagnostic = Diagnostic(
            message=message,
            line=token.line,
            severity="error",
            where=where,
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    Provides the synchronization strategy used to continue parsing after a
    syntax error, so several errors can be collected in a single pass.
    """

    # A token of this type ends a statement; the token after it starts a new one
    STATEMENT_TERMINATORS = frozenset({
        TokenType.SEMICOLON,
    })

    # Keywords that begin a new declaration or statement
    STATEMENT_KEYWORDS = frozenset({
        TokenType.CLASS,
        TokenType.FUN,
        TokenType.VAR,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.RETURN,
    })

    @staticmethod
    def is_statement_boundary(previous: Token, current: Token) -> bool:
        """True if `current` plausibly starts a new statement."""
        return (previous.type in SyntaxErrorRecovery.STATEMENT_TERMINATORS or
                current.type in SyntaxErrorRecovery.STATEMENT_KEYWORDS)

    @staticmethod
    def synchronize_to_statement_boundary(tokens: List[Token], current_pos: int) -> int:
        """
        Synchronize parser to the next likely statement boundary.

        Always skips the token at `current_pos` (the one that caused the
        error), then stops right after a terminator or right before a
        statement keyword. Never moves past the EOF token.

        Returns the position to resume parsing from.
        """
        end = len(tokens) - 1

        if current_pos < end:
            current_pos += 1

        while current_pos < end:
            if SyntaxErrorRecovery.is_statement_boundary(tokens[current_pos - 1], tokens[current_pos]):
                return current_pos
            current_pos += 1

        return current_pos

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        token_suggestions = {
            TokenType.SEMICOLON: ["Add a semicolon ';' to end the expression"],
            TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
            TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
        }

        return list(token_suggestions.get(expected, []))

    @staticmethod
    def suggest_expression_fix(found: Token) -> List[str]:
        """Suggest fixes when a token cannot start an expression."""
        if found.type == TokenType.EOF:
            return ["Complete the expression before the end of input"]
        if found.type in BINARY_OPERATORS:
            return [f"Operator '{found.lexeme}' is missing its left operand"]
        if found.type == TokenType.RIGHT_PAREN:
            return ["Remove the unmatched ')' or add an expression inside the parentheses"]
        if found.type in SyntaxErrorRecovery.STATEMENT_KEYWORDS:
            return [f"'{found.lexeme}' begins a statement, not an expression"]
        return []


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Expected expression",
    "P002": "Expected token not found",
    "P003": "Unclosed delimiter",
    "P004": "Missing statement terminator",
    "P005": "Expression nesting too deep",
}


# Helper functions for creating common parser errors

def create_expected_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    found_str = "end of input" if found.type == TokenType.EOF else f"'{found.lexeme}'"

    return ParseError(
        "Expect expression.",
        found,
        code="P001",
        help_text=f"The parser expected a literal, a unary operator or '(' here, but found {found_str}.",
        suggestions=SyntaxErrorRecovery.suggest_expression_fix(found)
    )


def create_missing_token_error(expected: TokenType, found: Token, message: str) -> ParseError:
    """Create an error for an expected token that is not present."""
    if expected == TokenType.RIGHT_PAREN:
        code = "P003"
    elif expected == TokenType.SEMICOLON:
        code = "P004"
    else:
        code = "P002"

    found_str = "end of input" if found.type == TokenType.EOF else found.type.name

    return ParseError(
        message,
        found,
        code=code,
        help_text=f"The parser expected to see {expected.name} at this position, but found {found_str} instead.",
        suggestions=SyntaxErrorRecovery.suggest_missing_token(expected)
    )


def create_nesting_too_deep_error(found: Token, max_depth: int) -> ParseError:
    """Create an error for expressions nested beyond the parser's limit."""
    return ParseError(
        "Expression nesting too deep.",
        found,
        code="P005",
        help_text=f"Expressions may nest at most {max_depth} levels deep.",
        suggestions=["Split the expression into smaller parts"]
    )
