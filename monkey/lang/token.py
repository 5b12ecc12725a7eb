"""Lexical units of the Monkey language.

A Token is an immutable value: its type, plus a payload for the variants that carry one (identifier name, integer value,
string value, boolean value, or the message of an ILLEGAL token). Source offsets are kept for error diagnosis only and
never take part in equality.
"""

from dataclasses import dataclass, field
from enum import Enum


class TokenType(Enum):
    """Closed set of token kinds. The value of each operator/delimiter/keyword member is its source spelling."""
    EOF = "<eof>"
    ILLEGAL = "<illegal>"

    # identifiers + literals
    IDENT = "<ident>"
    INT = "<int>"
    STRING = "<string>"
    BOOL = "<bool>"

    # operators
    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"

    # delimiters
    COMMA = ","
    SEMICOLON = ";"
    COLON = ":"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    # keywords
    FUNCTION = "fn"
    LET = "let"
    IF = "if"
    ELSE = "else"
    RETURN = "return"

    def __str__(self):
        return self.value


ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\"": "\"", "\\": "\\"}


def escape(value):
    """Inverse of the lexer's escape decoding: renders value as the body of a string literal."""
    unescapes = {char: "\\" + key for key, char in ESCAPES.items()}
    return "".join(unescapes.get(char, char) for char in value)


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: object = None
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    def __str__(self):
        """Source spelling of this token. Re-lexing it yields an equal token."""
        if self.type in (TokenType.IDENT, TokenType.INT, TokenType.ILLEGAL):
            return str(self.value)
        elif self.type is TokenType.STRING:
            return f"\"{escape(self.value)}\""
        elif self.type is TokenType.BOOL:
            return "true" if self.value else "false"
        elif self.type is TokenType.EOF:
            return ""
        return self.type.value

    def __repr__(self):
        if self.value is None:
            return f"Token({self.type.name})"
        return f"Token({self.type.name}, {self.value!r})"
