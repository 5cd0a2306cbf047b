"""
MyPL Lexer Package

Implements a hand-written, pull-based lexical analyzer for MyPL.

Key Features:
- One token per next_token() call, one character of lookahead
- '#' line comments, single-line string literals with backslash escapes
- Int and double literals, reserved-word lookup
- Line/column accurate lexical errors

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import ErrorCategory, Diagnostic, MyPLError, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "ErrorCategory",
    "Diagnostic",
    "MyPLError",
    "LexerError",
    "tokenize_string",
    "tokenize_file",
]
