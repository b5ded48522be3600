"""
Runtime error handling for pylox.

Errors raised while a program runs (as opposed to while it is parsed).
They propagate to the caller instead of being recovered from.
"""

from typing import Optional, List

from ..lexer.tokens import Token
from ..lexer.errors import Diagnostic


class LoxRuntimeError(Exception):
    """
    Exception raised when a running program does something invalid.

    Carries the token that caused it for line information.
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
        self.diagnostic = Diagnostic(
            message=message,
            line=token.line,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return f"{self.message}\n[line {self.token.line}]"


RUNTIME_ERROR_CODES = {
    "R001": "Undefined variable",
}


def create_undefined_variable_error(name: Token) -> LoxRuntimeError:
    """Create an error for reading or assigning a name that was never defined."""
    return LoxRuntimeError(
        f"Undefined variable '{name.lexeme}'.",
        name,
        code="R001",
        help_text="Variables must be declared with 'var' before they are used or assigned.",
        suggestions=[f"Declare it first: var {name.lexeme} = ...;"]
    )
