"""
Error handling for the MyPL lexer.

Provides the diagnostic record shared by the lexer and parser, the common
exception base class, and helpers for the lexical errors the lexer raises.
There is no error recovery: the first error ends the parse.

Author: xwest
"""

from typing import Optional
from dataclasses import dataclass
from enum import Enum

from .tokens import SourceLocation


class ErrorCategory(Enum):
    """Kind of front-end failure."""
    LEXER = "lexer"
    SYNTAX = "syntax"


@dataclass(frozen=True)
class Diagnostic:
    """A single error report with its source location."""
    category: ErrorCategory
    message: str
    location: SourceLocation
    code: Optional[str] = None
    help_text: Optional[str] = None

    def __str__(self) -> str:
        result = f"{self.category.name} error: {self.message}\n"
        result += f"  --> {self.location}"

        if self.help_text:
            result += f"\n  help: {self.help_text}"

        return result


class MyPLError(Exception):
    """
    Base class for every error raised by the MyPL front end.

    Carries a Diagnostic; category, message, filename, line and column are
    exposed directly for callers that format their own output.
    """

    category = ErrorCategory.LEXER

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            category=self.category,
            message=message,
            location=location,
            code=code,
            help_text=help_text
        )

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def filename(self) -> str:
        return self.diagnostic.location.filename

    @property
    def line(self) -> int:
        return self.diagnostic.location.line

    @property
    def column(self) -> int:
        return self.diagnostic.location.column

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexerError(MyPLError):
    """Raised when the character stream does not form a valid token."""

    category = ErrorCategory.LEXER


# Common error codes for categorization
LEXER_ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
    "L003": "Invalid numeric literal",
    "L004": "Invalid character literal",
    "L005": "Incomplete operator",
}


# Helper functions for creating common errors

def create_invalid_character_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that starts no token."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid in MyPL source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(char):04X}) is not allowed."

    return LexerError(
        message=f"unknown token '{char}'",
        location=location,
        code="L001",
        help_text=help_text
    )


def create_unterminated_string_error(location: SourceLocation) -> LexerError:
    """Create an error for a string literal that reaches end of line."""
    return LexerError(
        message="unterminated string literal, expecting '\"'",
        location=location,
        code="L002",
        help_text="String literals must be closed with '\"' on the same line."
    )


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for a malformed numeric literal."""
    return LexerError(
        message=f"invalid numeric literal '{lexeme}'",
        location=location,
        code="L003",
        help_text=reason
    )


def create_invalid_char_error(reason: str, location: SourceLocation) -> LexerError:
    """Create an error for a malformed character literal."""
    return LexerError(
        message=f"invalid character literal: {reason}",
        location=location,
        code="L004",
        help_text="Character literals hold exactly one character, e.g. 'a'."
    )


def create_incomplete_operator_error(found: str, location: SourceLocation) -> LexerError:
    """Create an error for '!' not followed by '='."""
    shown = repr(found) if found else "end of input"
    return LexerError(
        message=f"expecting '=' after '!', found {shown}",
        location=location,
        code="L005",
        help_text="'!' is only valid as part of the '!=' operator; use 'not' for negation."
    )
