"""Evaluation of syntax trees into numbers. Every value is a signed 32-bit integer: literals that do not fit are
rejected, and so are sums that do not fit (overflow is checked, never wrapped).
"""

import re
from abc import ABC
from dataclasses import dataclass

from acalc.lang.error import ArithmeticOverflow, GenericException, InvalidNumber, Source
from acalc.pure.syntax import Leaf, Operation, Symbol


I32_MIN = -2 ** 31
I32_MAX = 2 ** 31 - 1

LITERAL = re.compile(r"[0-9]+")


class Value(ABC):
    """Superclass for results of evaluation."""


@dataclass(frozen=True)
class I32(Value):
    number: int

    def __post_init__(self):
        if not I32_MIN <= self.number <= I32_MAX:
            raise ValueError(f"{self.number} does not fit in 32 bits")

    def __repr__(self):
        return f"I32({self.number})"

    def __str__(self):
        return str(self.number)


def checked_add(left, right):
    """Returns left + right, or None if the sum does not fit in 32 bits."""
    total = left.number + right.number
    if not I32_MIN <= total <= I32_MAX:
        return None
    return I32(total)


OPERATIONS = {
    Symbol.PLUS: checked_add,
}


class Evaluator:
    """Lazily reduces syntax trees to values, one value per tree. source is only used for error messages."""

    def __init__(self, trees, source=None):
        self.trees = iter(trees)
        self.source = source if source is not None else Source.unknown()
        self.halted = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.halted:
            raise StopIteration

        try:
            return self.eval_tree(next(self.trees))
        except GenericException:
            self.halted = True
            raise

    def eval_tree(self, tree):
        if isinstance(tree, Leaf):
            return self.leaf(tree)
        elif isinstance(tree, Operation):
            return self.operation(tree)
        raise GenericException("cannot evaluate '{}'", repr(tree), internal=True)

    def leaf(self, tree):
        """Parses tree's literal into an I32."""
        literal = tree.token.literal
        significant = literal.lstrip("0")
        if not LITERAL.fullmatch(literal) or len(significant) > len(str(I32_MAX)):
            raise InvalidNumber(literal, self.source, tree.span)

        number = int(significant or "0")
        if number > I32_MAX:
            raise InvalidNumber(literal, self.source, tree.span)
        return I32(number)

    def operation(self, tree):
        """Evaluates left operand, then right operand, then applies the operator."""
        left = self.eval_tree(tree.left)
        right = self.eval_tree(tree.right)

        try:
            apply = OPERATIONS[tree.operator.symbol]
        except KeyError:
            raise GenericException("no evaluation rule for '{}'", str(tree.operator), internal=True)

        result = apply(left, right)
        if result is None:
            raise ArithmeticOverflow(tree.expr, self.source, tree.span)
        return result


def evaluate(trees, source=None):
    """Returns a lazy value stream over trees."""
    return Evaluator(trees, source)
