"""Lexical analysis for acalc: turns source text into a lazy stream of tokens.

The grammar of tokens can be defined as

```
<integer>  ::= <digit> <digit>*    ; ASCII digits only, longest match
<operator> ::= "+"
<blank>    ::= space | tab | newline | carriage return    ; separates tokens, never tokenized
```

Any other character is an error. The lexer is fail-stop: once it has raised an UnexpectedCharacter, it will not
produce any more tokens, whatever is left of the text. The span of an UnexpectedCharacter covers all the UTF-8
bytes of the offending character: one byte for ASCII, up to four otherwise, so a diagnostic never splits a character.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from acalc.lang.error import Source, Span, UnexpectedCharacter
from acalc.pure.byte_chars import ByteChars


DIGITS = "0123456789"
OPERATORS = "+"
BLANKS = " \t\n\r"


class Token(ABC):
    """Superclass for all tokens. Tokens compare by content: two tokens with different spans but the same text are
    equal.
    """
    span: Span

    @property
    @abstractmethod
    def text(self):
        """Source text of this token."""

    def __str__(self):
        return self.text


@dataclass(frozen=True)
class Integer(Token):
    """Non-negative integer literal, kept as text. Conversion to a number happens during evaluation."""
    literal: str
    span: Span = field(default=None, compare=False)

    @property
    def text(self):
        return self.literal


@dataclass(frozen=True)
class Operator(Token):
    """Binary operator symbol."""
    symbol: str
    span: Span = field(default=None, compare=False)

    @property
    def text(self):
        return self.symbol


class Lexer:
    """Lazily tokenizes text. Not restartable: create a new Lexer for another pass over the same text."""

    def __init__(self, text, name="<stdin>"):
        self.source = Source(name, text)
        self.chars = ByteChars(text)
        self.halted = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.halted:
            raise StopIteration

        try:
            return self.lex_next()
        except UnexpectedCharacter:
            self.halted = True
            raise

    def lex_next(self):
        """Returns the next token. Raises StopIteration at end of text and UnexpectedCharacter on bad input."""
        for char in self.chars:
            start = self.chars.bytes - len(char.encode("utf-8"))

            if char in DIGITS:
                return self.integer(char, start)
            elif char in OPERATORS:
                return Operator(char, Span(start, 1))
            elif char not in BLANKS:
                raise UnexpectedCharacter(char, self.source, Span(start, self.chars.bytes - start))

        raise StopIteration

    def integer(self, first_digit, start):
        """Greedily consumes the digits following first_digit. The first non-digit is left for the next token."""
        literal = first_digit
        while self.chars.peek() is not None and self.chars.peek() in DIGITS:
            literal += next(self.chars)

        return Integer(literal, Span(start, self.chars.bytes - start))


def lex(text, name="<stdin>"):
    """Returns a lazy token stream over text. name is only used for error messages."""
    return Lexer(text, name)
