"""
Variable store for pylox programs.

A flat mapping from variable name to value. Declaring always succeeds;
reading or reassigning a name that was never declared fails.
"""

from typing import Any, Dict

from ..lexer.tokens import Token
from .errors import create_undefined_variable_error


class Environment:
    """Flat name-to-value mapping with fail-fast lookup and reassignment."""

    def __init__(self):
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any) -> None:
        """Bind `name`, overwriting any previous binding."""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Look up the value bound to the token's lexeme.

        Raises:
            LoxRuntimeError: If the name was never defined
        """
        if name.lexeme in self.values:
            return self.values[name.lexeme]

        raise create_undefined_variable_error(name)

    def assign(self, name: Token, value: Any) -> None:
        """
        Rebind an existing name. Assignment never declares.

        Raises:
            LoxRuntimeError: If the name was never defined
        """
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return

        raise create_undefined_variable_error(name)

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)
