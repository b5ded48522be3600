"""
Abstract Syntax Tree node definitions for Lox expressions.

The node set is closed: Literal, Grouping, Unary and Binary. Every node
is an immutable dataclass that owns its children and keeps no reference
to its parent, so trees compare structurally and can be shared freely.
Consumers dispatch through ExprVisitor, which declares one abstract
method per node type.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Union

from ..lexer.tokens import Token, BINARY_OPERATORS, UNARY_OPERATORS


LiteralValue = Union[float, str, bool, None]


class ExprType(Enum):
    """Enumeration of all expression node types."""
    LITERAL = "Literal"
    GROUPING = "Grouping"
    UNARY = "Unary"
    BINARY = "Binary"


class ExprVisitor(ABC):
    """Visitor interface for expression trees, one method per node type."""

    @abstractmethod
    def visit_literal(self, expr: 'Literal') -> Any:
        pass

    @abstractmethod
    def visit_grouping(self, expr: 'Grouping') -> Any:
        pass

    @abstractmethod
    def visit_unary(self, expr: 'Unary') -> Any:
        pass

    @abstractmethod
    def visit_binary(self, expr: 'Binary') -> Any:
        pass


class Expr(ABC):
    """Base class for all expression nodes."""

    node_type: ExprType

    @abstractmethod
    def accept(self, visitor: ExprVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""

    @abstractmethod
    def children(self) -> List['Expr']:
        """Get the direct sub-expressions."""


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    """Number, string, boolean or nil literal."""
    value: LiteralValue

    node_type = ExprType.LITERAL

    def __eq__(self, other: object) -> bool:
        # bool is an int subclass, so `true` would otherwise equal `1`
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_literal(self)

    def children(self) -> List[Expr]:
        return []


@dataclass(frozen=True)
class Grouping(Expr):
    """Parenthesized expression, kept distinct from its contents."""
    expression: Expr

    node_type = ExprType.GROUPING

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_grouping(self)

    def children(self) -> List[Expr]:
        return [self.expression]


@dataclass(frozen=True)
class Unary(Expr):
    """Prefix operation: `!right` or `-right`."""
    operator: Token
    right: Expr

    node_type = ExprType.UNARY

    def __post_init__(self):
        if self.operator.type not in UNARY_OPERATORS:
            raise ValueError(f"'{self.operator.lexeme}' is not a unary operator")

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_unary(self)

    def children(self) -> List[Expr]:
        return [self.right]


@dataclass(frozen=True)
class Binary(Expr):
    """Infix arithmetic, comparison or equality operation."""
    left: Expr
    operator: Token
    right: Expr

    node_type = ExprType.BINARY

    def __post_init__(self):
        if self.operator.type not in BINARY_OPERATORS:
            raise ValueError(f"'{self.operator.lexeme}' is not a binary operator")

    def accept(self, visitor: ExprVisitor) -> Any:
        return visitor.visit_binary(self)

    def children(self) -> List[Expr]:
        return [self.left, self.right]
