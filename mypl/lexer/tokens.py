"""
Token definitions for the MyPL lexer.

This module defines all token types supported by MyPL, including:
- Literal values (int, double, bool, char, string)
- Identifiers, keywords and primitive type names
- Punctuation and operators
- The end-of-stream marker

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    """
    Enumeration of all token types in MyPL.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOS = auto()                    # End of stream

    # ========================================================================
    # Literals
    # ========================================================================
    INT_VAL = auto()                # 42
    DOUBLE_VAL = auto()             # 3.14
    BOOL_VAL = auto()               # true, false
    CHAR_VAL = auto()               # 'a'
    STRING_VAL = auto()             # "hello"

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    ID = auto()                     # variable_name

    # Declaration keywords
    TYPE = auto()                   # type
    FUN = auto()                    # fun
    VAR = auto()                    # var

    # Control flow keywords
    IF = auto()                     # if
    THEN = auto()                   # then
    ELSEIF = auto()                 # elseif
    ELSE = auto()                   # else
    END = auto()                    # end
    WHILE = auto()                  # while
    FOR = auto()                    # for
    TO = auto()                     # to
    DO = auto()                     # do
    RETURN = auto()                 # return

    # Value keywords
    NEW = auto()                    # new
    NIL = auto()                    # nil

    # Logical / arithmetic keywords
    NOT = auto()                    # not
    NEG = auto()                    # neg
    AND = auto()                    # and
    OR = auto()                     # or

    # Primitive type names
    INT = auto()                    # int
    DOUBLE = auto()                 # double
    BOOL = auto()                   # bool
    CHAR = auto()                   # char
    STRING = auto()                 # string

    # ========================================================================
    # Punctuation
    # ========================================================================
    COMMA = auto()                  # ,
    LPAREN = auto()                 # (
    RPAREN = auto()                 # )
    COLON = auto()                  # :
    DOT = auto()                    # .
    ASSIGN = auto()                 # =

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    MODULO = auto()                 # %
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS = auto()                   # <
    LESS_EQUAL = auto()             # <=
    GREATER = auto()                # >
    GREATER_EQUAL = auto()          # >=


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and pointing editors at the offending character.
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the MyPL language.

    Holds the token type, the lexeme (source text; for string and char
    literals the text between the quotes) and the 1-based line and column
    where the lexeme starts.
    """
    type: TokenType
    lexeme: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.type.name}({self.lexeme!r}) at {self.line}:{self.column}"

    @property
    def kind(self) -> TokenType:
        return self.type

    def location(self, filename: str = "<unknown>") -> SourceLocation:
        return SourceLocation(filename, self.line, self.column)

    @property
    def is_literal(self) -> bool:
        """Check if this token is a primitive literal value."""
        return self.type in LITERAL_TYPES

    @property
    def is_operator(self) -> bool:
        """Check if this token is a binary operator."""
        return self.type in OPERATOR_TYPES


# Lookup tables used by the lexer and parser

RESERVED_WORDS = {
    # Declarations
    "type": TokenType.TYPE,
    "fun": TokenType.FUN,
    "var": TokenType.VAR,

    # Control flow
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "elseif": TokenType.ELSEIF,
    "else": TokenType.ELSE,
    "end": TokenType.END,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "to": TokenType.TO,
    "do": TokenType.DO,
    "return": TokenType.RETURN,

    # Values
    "new": TokenType.NEW,
    "nil": TokenType.NIL,
    "true": TokenType.BOOL_VAL,
    "false": TokenType.BOOL_VAL,

    # Logical / arithmetic
    "not": TokenType.NOT,
    "neg": TokenType.NEG,
    "and": TokenType.AND,
    "or": TokenType.OR,

    # Primitive types
    "int": TokenType.INT,
    "double": TokenType.DOUBLE,
    "bool": TokenType.BOOL,
    "char": TokenType.CHAR,
    "string": TokenType.STRING,
}

# Characters that always form a token on their own
SINGLE_CHAR_TOKENS = {
    ",": TokenType.COMMA,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ":": TokenType.COLON,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,
}

# First character -> (type alone, type when followed by '=')
# '!' has no single-character form
EQUALS_SUFFIX_TOKENS = {
    "=": (TokenType.ASSIGN, TokenType.EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
    "!": (None, TokenType.NOT_EQUAL),
}

LITERAL_TYPES = frozenset({
    TokenType.INT_VAL, TokenType.DOUBLE_VAL, TokenType.BOOL_VAL,
    TokenType.CHAR_VAL, TokenType.STRING_VAL,
})

PRIMITIVE_TYPES = frozenset({
    TokenType.INT, TokenType.DOUBLE, TokenType.BOOL,
    TokenType.CHAR, TokenType.STRING,
})

OPERATOR_TYPES = frozenset({
    TokenType.PLUS, TokenType.MINUS, TokenType.MULTIPLY, TokenType.DIVIDE,
    TokenType.MODULO, TokenType.AND, TokenType.OR, TokenType.EQUAL,
    TokenType.NOT_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
    TokenType.GREATER, TokenType.GREATER_EQUAL,
})
