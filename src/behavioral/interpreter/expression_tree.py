"""
Interpreter (Behavioral)

Intent:
    Represent a small arithmetic language as a tree of objects and evaluate
    a sentence of that language by walking the tree.

When to use:
    - The grammar is small and stable.
    - Sentences are naturally expressed as nested sub-expressions.
    - Efficiency is not the primary concern.

Participants:
    - Expression (abstract): the closed set of node shapes.
    - Terminal expression: Literal.
    - Non-terminal expressions: Sum, Product.
    - Client: builds the tree bottom-up and asks for `evaluate(root)`.

Notes:
    - Nodes are frozen: a tree never changes after construction, so evaluation
      has no side effects and is deterministic.
    - A node can only reference nodes that already exist, so trees are acyclic.
    - Integers are Python ints (arbitrary precision): results never wrap or
      saturate.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Callable, List, Tuple, TypeVar

__all__ = [
    "Expression",
    "Literal",
    "Sum",
    "Product",
    "evaluate",
    "render",
    "depth",
]

T = TypeVar("T")


class Expression:
    """Base type for the closed expression variant (Literal | Sum | Product)."""

    __slots__ = ()

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True, slots=True)
class Literal(Expression):
    """Integer leaf.

    :ivar value: The integer this leaf evaluates to.
    """
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Literal value must be an int, got {type(self.value).__name__}")


def _check_operands(node: Expression, left: object, right: object) -> None:
    for side, child in (("left", left), ("right", right)):
        if not isinstance(child, Expression):
            raise TypeError(
                f"{type(node).__name__}.{side} must be an Expression, got {type(child).__name__}"
            )


@dataclass(frozen=True, slots=True)
class Sum(Expression):
    """Addition of two sub-expressions.

    :ivar left: Left operand.
    :ivar right: Right operand.
    """
    left: Expression
    right: Expression

    def __post_init__(self) -> None:
        _check_operands(self, self.left, self.right)


@dataclass(frozen=True, slots=True)
class Product(Expression):
    """Multiplication of two sub-expressions.

    :ivar left: Left operand.
    :ivar right: Right operand.
    """
    left: Expression
    right: Expression

    def __post_init__(self) -> None:
        _check_operands(self, self.left, self.right)


def _fold(node: Expression, on_literal: Callable[[int], T], on_sum: Callable[[T, T], T],
          on_product: Callable[[T, T], T], action: str) -> T:
    # Post-order walk over an explicit stack; `ready` marks an operator whose
    # operand results are already on `results`.
    results: List[T] = []
    stack: List[Tuple[object, bool]] = [(node, False)]
    while stack:
        current, ready = stack.pop()
        match current:
            case Literal(value=value):
                results.append(on_literal(value))
            case Sum(left=left, right=right) | Product(left=left, right=right) if not ready:
                stack.append((current, True))
                stack.append((right, False))
                stack.append((left, False))
            case Sum():
                right_result = results.pop()
                results.append(on_sum(results.pop(), right_result))
            case Product():
                right_result = results.pop()
                results.append(on_product(results.pop(), right_result))
            case _:
                raise TypeError(f"Cannot {action} {type(current).__name__}")
    return results.pop()


def evaluate(node: Expression) -> int:
    """Evaluate an expression tree.

    Each sub-expression is evaluated eagerly, once per parent evaluation. The
    walk uses an explicit stack, so tree depth is bounded only by memory.

    :param node: Root of the tree.
    :return: The integer value of the expression.
    :raises TypeError: If `node` is not one of the expression variants.
    """
    return _fold(node, lambda value: value, operator.add, operator.mul, "evaluate")


def render(node: Expression) -> str:
    """Render a tree as fully parenthesized infix text, e.g. ``((3 + 5) * 2)``.

    :param node: Root of the tree.
    :return: Infix representation.
    :raises TypeError: If `node` is not one of the expression variants.
    """
    return _fold(
        node,
        str,
        lambda left, right: f"({left} + {right})",
        lambda left, right: f"({left} * {right})",
        "render",
    )


def depth(node: Expression) -> int:
    """Height of the tree; a single Literal has depth 1."""
    def taller(left: int, right: int) -> int:
        return 1 + max(left, right)

    return _fold(node, lambda _: 1, taller, taller, "measure")
