"""
Diagnostics and error handling shared by the scanner and the parser.

Provides the Diagnostic record, the ErrorReporter that collects
diagnostics for one run, and the scanner's own error type.
"""

import logging
from typing import Optional, List, TextIO
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Diagnostic:
    """A single error or warning tied to a source line."""
    message: str
    line: int
    severity: str = "error"  # "error", "warning"
    where: str = ""          # " at 'x'", " at end", or "" for scanner errors
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        return f"[line {self.line}] {self.severity.capitalize()}{self.where}: {self.message}"

    def render(self) -> str:
        """Render the diagnostic with its help text and suggestions."""
        result = str(self)
        if self.code:
            result += f" [{self.code}]"
        result += "\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class ErrorReporter:
    """
    Collects the diagnostics produced while scanning and parsing one input.

    `had_error` is the flag callers check before handing a tree to anything
    that would evaluate it. An optional text stream receives every diagnostic
    as it is reported.
    """

    def __init__(self, stream: Optional[TextIO] = None, verbose: bool = False):
        self.stream = stream
        self.verbose = verbose
        self.diagnostics: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        logger.debug("Reported %s", diagnostic)
        if self.stream is not None:
            text = diagnostic.render() if self.verbose else f"{diagnostic}\n"
            self.stream.write(text)

    @property
    def had_error(self) -> bool:
        return any(d.severity == "error" for d in self.diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    def reset(self) -> None:
        """Forget everything reported so far (used between REPL lines)."""
        self.diagnostics.clear()


class ScanError(Exception):
    """
    Exception raised when the scanner cannot turn a lexeme into a token.

    The scanner catches it, records it and keeps scanning.
    """

    def __init__(
        self,
        message: str,
        line: int,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.line = line
        self.diagnostic = Diagnostic(
            message=message,
            line=line,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Unexpected character",
    "L002": "Unterminated string literal",
}


def create_unexpected_character_error(char: str, line: int) -> ScanError:
    """Create an error for a character that cannot start any token."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in Lox source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    suggestions = []
    if char in "&|":
        suggestions.append(f"Use the keyword '{'and' if char == '&' else 'or'}' for logical operators")

    return ScanError(
        "Unexpected character.",
        line,
        code="L001",
        help_text=help_text,
        suggestions=suggestions
    )


def create_unterminated_string_error(line: int) -> ScanError:
    """Create an error for a string literal that runs to the end of input."""
    return ScanError(
        "Unterminated string.",
        line,
        code="L002",
        help_text='String literals must be closed with a matching " quote.',
        suggestions=['Add a closing " quote']
    )
