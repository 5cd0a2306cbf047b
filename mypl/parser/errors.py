"""
Error handling for the MyPL parser.

Syntax errors share the Diagnostic record of the lexer errors and differ only
in their category. The parser stops at the first error; there is no
resynchronization.

Author: xwest
"""

from typing import Optional, Union

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import ErrorCategory, MyPLError


class ParseError(MyPLError):
    """
    Exception raised when the token stream violates the grammar.

    Keeps the offending token for callers that want more than its position.
    """

    category = ErrorCategory.SYNTAX

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        super().__init__(message, location, code=code, help_text=help_text)
        self.token = token


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Invalid declaration",
    "P003": "Invalid data type",
    "P004": "Invalid expression",
}

TOKEN_DESCRIPTIONS = {
    TokenType.EOS: "end of input",
    TokenType.ID: "identifier",
    TokenType.COMMA: "','",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.COLON: "':'",
    TokenType.DOT: "'.'",
    TokenType.ASSIGN: "'='",
}


def describe_token_type(token_type: TokenType) -> str:
    """Human-readable name for an expected token type."""
    if token_type in TOKEN_DESCRIPTIONS:
        return TOKEN_DESCRIPTIONS[token_type]
    return f"'{token_type.name.lower()}'"


def describe_found(token: Token) -> str:
    if token.type == TokenType.EOS:
        return describe_token_type(TokenType.EOS)
    return f"'{token.lexeme}'"


# Helper functions for creating common parser errors

def create_unexpected_token_error(
    expected: Union[TokenType, str],
    found: Token,
    filename: str = "<unknown>",
    code: str = "P001"
) -> ParseError:
    """Create an error for a token that does not fit the grammar here."""
    expected_str = describe_token_type(expected) if isinstance(expected, TokenType) else expected

    return ParseError(
        message=f"expecting {expected_str}, found {describe_found(found)}",
        location=found.location(filename),
        token=found,
        code=code
    )
