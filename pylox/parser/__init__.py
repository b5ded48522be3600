"""
pylox Parser Package

Recursive descent parser for Lox expressions with panic-mode error
recovery. Produces immutable expression trees.

Key Features:
- One parsing method per precedence tier (precedence climbing)
- Left-associative binary operators, right-recursive prefix operators
- Error recovery and synchronization to statement boundaries
- Diagnostics collected through an explicit ErrorReporter
"""

from .ast_nodes import Expr, ExprType, ExprVisitor, Literal, Grouping, Unary, Binary
from .parser import Parser, ParseResult, DEFAULT_MAX_DEPTH, parse_string, parse_file
from .errors import ParseError, SyntaxErrorRecovery
from .printer import AstPrinter

__all__ = [
    # Core parser
    "Parser",
    "ParseResult",
    "DEFAULT_MAX_DEPTH",
    "parse_string",
    "parse_file",

    # AST nodes
    "Expr", "ExprType", "ExprVisitor",
    "Literal", "Grouping", "Unary", "Binary",
    "AstPrinter",

    # Error handling
    "ParseError", "SyntaxErrorRecovery",
]
