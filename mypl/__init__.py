"""
MyPL Front End Package

Lexer and recursive descent parser for MyPL, a small imperative language,
producing an immutable Abstract Syntax Tree for later compiler stages.

Architecture:
    mypl/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST generation
    ├── printer.py       # AST -> source pretty printer
    └── cli.py           # Command line driver

Author: xwest
License: MIT
"""

from .version import __version__

__author__ = "xwest"
__email__ = "xwest@users.noreply.github.com"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, MyPLError, LexerError, ErrorCategory
from .parser import Parser, ParseError, Program, ASTVisitor, parse_string, parse_file
from .printer import Printer, print_program

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Printer",
    "Token",
    "TokenType",
    "Program",
    "ASTVisitor",

    # Errors
    "MyPLError",
    "LexerError",
    "ParseError",
    "ErrorCategory",

    # Convenience functions
    "parse_string",
    "parse_file",
    "print_program",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
