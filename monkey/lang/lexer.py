"""Lexical analysis for the Monkey language: converts source text into Tokens, one at a time.

The lexer never raises. Anything it cannot make sense of (an unknown character, an unterminated string, a numeral that
does not fit in 64 bits) becomes an ILLEGAL token carrying a message, and the parser decides what to do with it.
"""

import string

from monkey.lang.token import ESCAPES, Token, TokenType


class Lexer:
    """Single forward pass over source. Call next_token until it returns an EOF token (which it keeps returning)."""
    WHITESPACE = " \t\r\n"
    DIGITS = string.digits
    LETTERS = string.ascii_letters + "_"

    INT_MAX = 2 ** 63 - 1

    KEYWORDS = {
        "fn": (TokenType.FUNCTION, None),
        "let": (TokenType.LET, None),
        "if": (TokenType.IF, None),
        "else": (TokenType.ELSE, None),
        "return": (TokenType.RETURN, None),
        "true": (TokenType.BOOL, True),
        "false": (TokenType.BOOL, False),
    }

    # two-character operators are found by peeking one character past the first
    DOUBLES = {"==": TokenType.EQ, "!=": TokenType.NOT_EQ}
    SINGLES = {token_type.value: token_type for token_type in TokenType if len(token_type.value) == 1}

    def __init__(self, source):
        self.source = source
        self.pos = 0

    @property
    def char(self):
        """Current character, or "" at end of input."""
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def peek_char(self):
        """Character after the current one, or "" at end of input."""
        return self.source[self.pos + 1] if self.pos + 1 < len(self.source) else ""

    def next_token(self):
        """Returns the next Token in source."""
        while self.char and self.char in Lexer.WHITESPACE:
            self.pos += 1

        start = self.pos
        char = self.char

        if not char:
            return Token(TokenType.EOF, start=start, end=start)
        elif char in Lexer.LETTERS:
            return self._read_word()
        elif char in Lexer.DIGITS:
            return self._read_number()
        elif char == "\"":
            return self._read_string()
        elif char + self.peek_char() in Lexer.DOUBLES:
            self.pos += 2
            return Token(Lexer.DOUBLES[char + self.source[start + 1]], start=start, end=self.pos)
        elif char in Lexer.SINGLES:
            self.pos += 1
            return Token(Lexer.SINGLES[char], start=start, end=self.pos)

        self.pos += 1
        return Token(TokenType.ILLEGAL, f"unexpected character '{char}'", start, self.pos)

    def _read_run(self, chars):
        """Consumes the maximal run of chars starting at the current character and returns it."""
        start = self.pos
        while self.char and self.char in chars:
            self.pos += 1
        return self.source[start:self.pos]

    def _read_word(self):
        start = self.pos
        word = self._read_run(Lexer.LETTERS + Lexer.DIGITS)

        token_type, value = Lexer.KEYWORDS.get(word, (TokenType.IDENT, word))
        return Token(token_type, value, start, self.pos)

    def _read_number(self):
        start = self.pos
        numeral = self._read_run(Lexer.DIGITS)

        value = int(numeral)
        if value > Lexer.INT_MAX:
            return Token(TokenType.ILLEGAL, f"number too large to fit in 64 bits: {numeral}", start, self.pos)
        return Token(TokenType.INT, value, start, self.pos)

    def _read_string(self):
        start = self.pos
        self.pos += 1  # opening quote

        chars = []
        while self.char and self.char != "\"":
            if self.char == "\\" and self.peek_char():
                self.pos += 1
                chars.append(ESCAPES.get(self.char, self.char))
            else:
                chars.append(self.char)
            self.pos += 1

        if not self.char:
            return Token(TokenType.ILLEGAL, "unterminated string literal", start, self.pos)

        self.pos += 1  # closing quote
        return Token(TokenType.STRING, "".join(chars), start, self.pos)

    def __iter__(self):
        """Yields tokens up to (but not including) EOF."""
        token = self.next_token()
        while token.type is not TokenType.EOF:
            yield token
            token = self.next_token()


def tokenize(source):
    """Returns every token in source, ending with the EOF token."""
    lexer = Lexer(source)
    return list(lexer) + [lexer.next_token()]
