"""
Syntax tree nodes.

Each node calls back into a visitor: ``Binary.accept(v)`` calls
``v.visit_binary_expr(node)``, ``While.accept(v)`` calls
``v.visit_while_stmt(node)``. The visitor base classes declare every
method abstract, so a visitor that misses a node kind can't be created.
Nodes are frozen; the tree is never modified once the parser returns it.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Any, Optional

from .tokens import Token


class ExprVisitor(ABC):
    @abstractmethod
    def visit_assign_expr(self, expr: 'Assign'): ...

    @abstractmethod
    def visit_binary_expr(self, expr: 'Binary'): ...

    @abstractmethod
    def visit_call_expr(self, expr: 'Call'): ...

    @abstractmethod
    def visit_grouping_expr(self, expr: 'Grouping'): ...

    @abstractmethod
    def visit_literal_expr(self, expr: 'Literal'): ...

    @abstractmethod
    def visit_logical_expr(self, expr: 'Logical'): ...

    @abstractmethod
    def visit_unary_expr(self, expr: 'Unary'): ...

    @abstractmethod
    def visit_variable_expr(self, expr: 'Variable'): ...


class StmtVisitor(ABC):
    @abstractmethod
    def visit_block_stmt(self, stmt: 'Block'): ...

    @abstractmethod
    def visit_break_stmt(self, stmt: 'Break'): ...

    @abstractmethod
    def visit_expression_stmt(self, stmt: 'Expression'): ...

    @abstractmethod
    def visit_function_stmt(self, stmt: 'Function'): ...

    @abstractmethod
    def visit_if_stmt(self, stmt: 'If'): ...

    @abstractmethod
    def visit_print_stmt(self, stmt: 'Print'): ...

    @abstractmethod
    def visit_return_stmt(self, stmt: 'Return'): ...

    @abstractmethod
    def visit_var_stmt(self, stmt: 'Var'): ...

    @abstractmethod
    def visit_while_stmt(self, stmt: 'While'): ...


class Expr(ABC):
    @abstractmethod
    def accept(self, visitor: ExprVisitor): ...


class Stmt(ABC):
    @abstractmethod
    def accept(self, visitor: StmtVisitor): ...


# --- Expressions ---

@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_assign_expr(self)


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_binary_expr(self)


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token # Closing paren, for error lines.
    arguments: List[Expr]

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_call_expr(self)


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_grouping_expr(self)


@dataclass(frozen=True)
class Literal(Expr):
    value: Any

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_literal_expr(self)


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_logical_expr(self)


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_unary_expr(self)


@dataclass(frozen=True)
class Variable(Expr):
    name: Token

    def accept(self, visitor: ExprVisitor):
        return visitor.visit_variable_expr(self)


# --- Statements ---

@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_block_stmt(self)


@dataclass(frozen=True)
class Break(Stmt):
    keyword: Token

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_break_stmt(self)


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_expression_stmt(self)


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_function_stmt(self)


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_if_stmt(self)


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_print_stmt(self)


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_return_stmt(self)


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_var_stmt(self)


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt

    def accept(self, visitor: StmtVisitor):
        return visitor.visit_while_stmt(self)
