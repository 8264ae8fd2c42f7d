"""Syntax tree generation for acalc. Consumes tokens and lazily produces one syntax tree per expression.

The grammar is

```
<expr> ::= <integer>                        ; "leaf"
         | <integer> <operator> <integer>   ; "operation"
```

There is only one operator, so there is no precedence to climb: an operation is always an operator over two leaves.
Errors are not recovered from. After raising, the parser produces nothing more.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from acalc.lang.error import GenericException, Source, Span, UnexpectedEndOfInput, UnexpectedToken
from acalc.pure.lexical import Integer, Operator


class Symbol(Enum):
    """Closed set of operators understood past the lexer."""
    PLUS = "+"


@dataclass(frozen=True)
class LeafToken:
    """Token that can stand as a leaf of a syntax tree. Only integer literals can."""
    literal: str
    span: Span = field(default=None, compare=False)

    @classmethod
    def narrow(cls, token):
        """Returns token as a LeafToken, or None if token cannot be a leaf."""
        if isinstance(token, Integer):
            return cls(token.literal, token.span)
        return None

    def __str__(self):
        return self.literal


@dataclass(frozen=True)
class OperatorToken:
    """Token that can join two subtrees."""
    symbol: Symbol
    span: Span = field(default=None, compare=False)

    @classmethod
    def narrow(cls, token):
        """Returns token as an OperatorToken, or None if token is not a known operator."""
        if isinstance(token, Operator):
            try:
                return cls(Symbol(token.symbol), token.span)
            except ValueError:
                return None
        return None

    def __str__(self):
        return self.symbol.value


class SyntaxTree(ABC):
    """Superclass for syntax tree nodes. Trees own their children: nodes are never shared."""

    @property
    @abstractmethod
    def span(self):
        """Bytes of the source covered by this tree."""

    @property
    @abstractmethod
    def expr(self):
        """Text of this tree, normalized to single spaces."""


@dataclass(frozen=True)
class Leaf(SyntaxTree):
    token: LeafToken

    @property
    def span(self):
        return self.token.span

    @property
    def expr(self):
        return str(self.token)


@dataclass(frozen=True)
class Operation(SyntaxTree):
    operator: OperatorToken
    left: SyntaxTree
    right: SyntaxTree

    @property
    def span(self):
        if self.left.span is None or self.right.span is None:
            return self.operator.span
        return Span.cover(self.left.span, self.right.span)

    @property
    def expr(self):
        return f"{self.left.expr} {self.operator} {self.right.expr}"


class Parser:
    """Lazily builds syntax trees from tokens. source is only used for error messages."""

    def __init__(self, tokens, source=None):
        self.tokens = iter(tokens)
        self.source = source if source is not None else Source.unknown()
        self.halted = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.halted:
            raise StopIteration

        try:
            return self.parse_next()
        except GenericException:
            self.halted = True
            raise

    def _pull(self):
        return next(self.tokens, None)

    def _unexpected(self, token):
        return UnexpectedToken(token, self.source, token.span)

    def parse_next(self):
        """Returns the next tree. Raises StopIteration if there are no tokens left."""
        token = self._pull()
        if token is None:
            raise StopIteration

        left = LeafToken.narrow(token)
        if left is None:
            raise self._unexpected(token)  # e.g., + 3

        return self.leaf_or_operation(left)

    def leaf_or_operation(self, left):
        token = self._pull()
        if token is None:
            return Leaf(left)

        operator = OperatorToken.narrow(token)
        if operator is None:
            raise self._unexpected(token)  # e.g., 3 3

        return self.operation_right_operand(left, operator)

    def operation_right_operand(self, left, operator):
        token = self._pull()
        if token is None:
            # e.g., 3 + (end of input)
            span = Span(operator.span.end, 0) if operator.span is not None else None
            raise UnexpectedEndOfInput(self.source, span)

        right = LeafToken.narrow(token)
        if right is None:
            raise self._unexpected(token)  # e.g., 3 + +

        return Operation(operator, Leaf(left), Leaf(right))


def parse(tokens, source=None):
    """Returns a lazy syntax tree stream over tokens."""
    return Parser(tokens, source)
