"""
pylox Package

A Lox expression front end: scanner, recursive descent parser with
panic-mode error recovery, AST printer and the variable store used by
an evaluator.

Architecture:
    pylox/
    ├── lexer/           # Tokenization and lexical analysis
    ├── parser/          # Syntax analysis, AST, recovery, printing
    ├── runtime/         # Variable store and runtime errors
    └── cli.py           # Command-line driver
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, ErrorReporter, Diagnostic
from .parser import Parser, ParseResult, ParseError, AstPrinter, parse_string, parse_file
from .runtime import Environment, LoxRuntimeError

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "AstPrinter",
    "Environment",

    # Data
    "Token",
    "TokenType",
    "ParseResult",
    "Diagnostic",
    "ErrorReporter",

    # Errors
    "ParseError",
    "LoxRuntimeError",

    # Convenience
    "parse_string",
    "parse_file",

    # Version info
    "__version__",
    "__license__",
]
