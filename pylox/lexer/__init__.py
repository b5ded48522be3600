"""
pylox Lexer Package

Scanner for Lox source text. Produces the immutable, EOF-terminated token
list consumed by the parser.

Key Features:
- Full Lox token set (punctuation, operators, literals, keywords)
- Multi-line strings and line comments
- Error recovery: bad characters are reported and skipped
- Line tracking for diagnostics
"""

from .tokens import Token, TokenType
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import Diagnostic, ErrorReporter, ScanError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "Diagnostic",
    "ErrorReporter",
    "ScanError",
    "tokenize_string",
    "tokenize_file",
]
