"""
pylox lexer - turns Lox source text into a token list.

Single pass over the source with one character of lookahead (two for
number fractions). Bad characters and unterminated strings are reported
and skipped so one run surfaces every scanning error.
"""

import logging
from typing import List, Optional

from .tokens import Token, TokenType, KEYWORDS, SINGLE_CHAR_TOKENS, TWO_CHAR_TOKENS
from .errors import (
    ErrorReporter, ScanError, create_unexpected_character_error,
    create_unterminated_string_error
)

logger = logging.getLogger(__name__)


class Lexer:
    """
    Lox lexical analyzer.

    Converts source code text into a list of tokens terminated by a
    single EOF token.
    """

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            reporter: Collector for scanning diagnostics (a private one is
                created when omitted)
        """
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.start = 0
        self.pos = 0
        self.line = 1
        self.tokens: List[Token] = []
        self.errors: List[ScanError] = []

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens including the EOF token
        """
        self.start = 0
        self.pos = 0
        self.line = 1
        self.tokens = []
        self.errors.clear()

        while not self._is_at_end():
            self.start = self.pos
            try:
                self._scan_token()
            except ScanError as e:
                # The offending character has already been consumed
                self.errors.append(e)
                self.reporter.report(e.diagnostic)

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        logger.debug("Scanned %d tokens (%d errors)", len(self.tokens), len(self.errors))

        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[char])
        elif char in TWO_CHAR_TOKENS:
            single, double = TWO_CHAR_TOKENS[char]
            self._add_token(double if self._match("=") else single)
        elif char == "/":
            if self._match("/"):
                # Line comment runs to end of line
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)
        elif char in " \r\t":
            pass
        elif char == "\n":
            self.line += 1
        elif char == '"':
            self._string()
        elif self._is_digit(char):
            self._number()
        elif self._is_identifier_start(char):
            self._identifier()
        else:
            raise create_unexpected_character_error(char, self.line)

    def _string(self):
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == "\n":
                self.line += 1
            self._advance()

        if self._is_at_end():
            raise create_unterminated_string_error(self.line)

        self._advance()  # Closing quote

        value = self.source[self.start + 1:self.pos - 1]
        self._add_token(TokenType.STRING, value)

    def _number(self):
        while self._is_digit(self._peek()):
            self._advance()

        # A fraction needs at least one digit after the dot
        if self._peek() == "." and self._is_digit(self._peek_next()):
            self._advance()
            while self._is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, float(self.source[self.start:self.pos]))

    def _identifier(self):
        while self._is_identifier_continue(self._peek()):
            self._advance()

        text = self.source[self.start:self.pos]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _add_token(self, token_type: TokenType, literal=None):
        lexeme = self.source[self.start:self.pos]
        self.tokens.append(Token(token_type, lexeme, literal, self.line))

    @staticmethod
    def _is_digit(char: str) -> bool:
        return "0" <= char <= "9"

    @staticmethod
    def _is_identifier_start(char: str) -> bool:
        return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"

    def _is_identifier_continue(self, char: str) -> bool:
        return self._is_identifier_start(char) or self._is_digit(char)

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return "\0"
        return self.source[self.pos + 1]

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0


def tokenize_string(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Scanning errors go to `reporter`; the returned list is always
    EOF-terminated so it can be handed straight to the parser.
    """
    return Lexer(source, reporter).tokenize()


def tokenize_file(filepath: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        OSError: If the file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, reporter)
