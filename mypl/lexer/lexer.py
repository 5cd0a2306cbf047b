"""
MyPL Lexer - turns a character stream into tokens

Pull based: the parser asks for one token at a time with next_token().
The lexer keeps a single character of lookahead and never buffers tokens.

Author: xwest
"""

import logging
from io import StringIO
from typing import List, TextIO, Union

from .tokens import (
    Token, TokenType, SourceLocation, RESERVED_WORDS, SINGLE_CHAR_TOKENS,
    EQUALS_SUFFIX_TOKENS
)
from .errors import (
    create_invalid_character_error, create_unterminated_string_error,
    create_invalid_number_error, create_invalid_char_error,
    create_incomplete_operator_error
)

logger = logging.getLogger(__name__)


def _is_digit(char: str) -> bool:
    # str.isdigit() also accepts superscripts and other Unicode digits
    return '0' <= char <= '9' if char else False


def _is_letter(char: str) -> bool:
    return ('a' <= char <= 'z' or 'A' <= char <= 'Z') if char else False


def _is_word_char(char: str) -> bool:
    return _is_letter(char) or _is_digit(char) or char == '_'


class Lexer:
    """
    MyPL lexical analyzer.

    Reads a text stream left to right and produces one Token per call to
    next_token(), skipping whitespace and '#' comments. Once the stream is
    exhausted every further call returns an EOS token at the same position.
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<unknown>"):
        """
        Initialize the lexer.

        Args:
            source: Source code string or a readable text stream. A stream is
                borrowed, never closed by the lexer.
            filename: Name of source file for error reporting
        """
        if isinstance(source, str):
            source = StringIO(source)
        self.stream = source
        self.filename = filename
        self.line = 1
        self.column = 1
        self._lookahead = self.stream.read(1)

    def next_token(self) -> Token:
        """
        Return the next token in the stream, advancing past it.

        Raises:
            LexerError: If the characters at the current position do not
                form a valid token
        """
        self._skip_whitespace_and_comments()

        line = self.line
        column = self.column
        current_char = self._peek()

        if current_char == '':
            return Token(TokenType.EOS, "", line, column)

        if current_char in SINGLE_CHAR_TOKENS:
            self._read()
            return Token(SINGLE_CHAR_TOKENS[current_char], current_char, line, column)

        if current_char == '.':
            self._read()
            if _is_digit(self._peek()):
                raise create_invalid_number_error(
                    '.' + self._peek(),
                    self._location(line, column),
                    "A double literal must start with a digit, e.g. 0.5"
                )
            return Token(TokenType.DOT, '.', line, column)

        if current_char in EQUALS_SUFFIX_TOKENS:
            return self._tokenize_operator(line, column)

        if current_char == "'":
            return self._tokenize_character(line, column)

        if current_char == '"':
            return self._tokenize_string(line, column)

        if _is_digit(current_char):
            return self._tokenize_number(line, column)

        if _is_letter(current_char):
            return self._tokenize_word(line, column)

        raise create_invalid_character_error(current_char, self._location(line, column))

    def tokenize(self) -> List[Token]:
        """
        Tokenize the rest of the stream.

        Returns:
            List of tokens ending with the EOS token
        """
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOS:
                return tokens

    def _tokenize_operator(self, line: int, column: int) -> Token:
        """Tokenize '=', '<', '>' and '!' with an optional trailing '='."""
        first = self._read()
        alone, with_equals = EQUALS_SUFFIX_TOKENS[first]

        if self._peek() == '=':
            self._read()
            return Token(with_equals, first + '=', line, column)

        if alone is None:
            raise create_incomplete_operator_error(self._peek(), self._location(line, column))

        return Token(alone, first, line, column)

    def _tokenize_character(self, line: int, column: int) -> Token:
        """Tokenize a character literal: exactly one character between quotes."""
        self._read()  # Skip opening quote

        current_char = self._peek()
        if current_char == "'":
            raise create_invalid_char_error("empty character literal ''", self._location(line, column))
        if current_char in ('', '\n'):
            raise create_invalid_char_error("expecting a character after \"'\"", self._location(line, column))

        value = self._read()

        if self._peek() != "'":
            raise create_invalid_char_error("expecting closing \"'\"", self._location(line, column))
        self._read()  # Skip closing quote

        return Token(TokenType.CHAR_VAL, value, line, column)

    def _tokenize_string(self, line: int, column: int) -> Token:
        """Tokenize a string literal, which must close on the same line."""
        self._read()  # Skip opening quote

        value_parts = []

        while self._peek() != '"':
            if self._peek() in ('', '\n'):
                raise create_unterminated_string_error(self._location(line, column))

            if self._peek() == '\\':
                # The escaped character is kept as written, even a quote
                value_parts.append(self._read())
                if self._peek() in ('', '\n'):
                    continue
            value_parts.append(self._read())

        self._read()  # Skip closing quote

        return Token(TokenType.STRING_VAL, ''.join(value_parts), line, column)

    def _tokenize_number(self, line: int, column: int) -> Token:
        """Tokenize an int literal (digits) or a double literal (digits.digits)."""
        lexeme = self._read_digits()
        token_type = TokenType.INT_VAL

        if self._peek() == '.':
            lexeme += self._read()
            if not _is_digit(self._peek()):
                raise create_invalid_number_error(
                    lexeme,
                    self._location(line, column),
                    "A '.' in a number must be followed by at least one digit"
                )
            lexeme += self._read_digits()
            token_type = TokenType.DOUBLE_VAL

            if self._peek() == '.':
                raise create_invalid_number_error(
                    lexeme + '.',
                    self._location(line, column),
                    "A double literal contains a single '.'"
                )

        if _is_word_char(self._peek()):
            while _is_word_char(self._peek()):
                lexeme += self._read()
            raise create_invalid_number_error(
                lexeme,
                self._location(line, column),
                "Numbers cannot be followed directly by letters; identifiers must start with a letter"
            )

        return Token(token_type, lexeme, line, column)

    def _tokenize_word(self, line: int, column: int) -> Token:
        """Tokenize a reserved word or an identifier."""
        lexeme = self._read()
        while _is_word_char(self._peek()):
            lexeme += self._read()

        token_type = RESERVED_WORDS.get(lexeme, TokenType.ID)
        return Token(token_type, lexeme, line, column)

    def _read_digits(self) -> str:
        digits = ''
        while _is_digit(self._peek()):
            digits += self._read()
        return digits

    def _skip_whitespace_and_comments(self):
        """Skip whitespace and '#' comments, which run to the end of the line."""
        while True:
            current_char = self._peek()

            if current_char.isspace():
                self._read()
                continue

            if current_char == '#':
                while self._peek() not in ('', '\n'):
                    self._read()
                continue

            break

    def _read(self) -> str:
        """Consume one character, updating line/column. Returns '' at end."""
        char = self._lookahead
        if char == '':
            return char

        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        self._lookahead = self.stream.read(1)
        return char

    def _peek(self) -> str:
        """Return the next character without consuming it ('' at end)."""
        return self._lookahead

    def _location(self, line: int, column: int) -> SourceLocation:
        return SourceLocation(self.filename, line, column)


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens ending with EOS

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Args:
        filepath: Path to source file

    Returns:
        List of tokens ending with EOS

    Raises:
        LexerError: If lexing fails
        IOError: If file cannot be read
    """
    logger.debug("Tokenizing %s", filepath)
    with open(filepath, 'r', encoding='utf-8') as f:
        tokens = Lexer(f, filepath).tokenize()

    logger.debug("Read %d tokens from %s", len(tokens), filepath)
    return tokens
