from typing import List, Union

from . import ast_nodes as ast
from . import objects


Part = Union[str, ast.Expr, ast.Stmt]


class AstPrinter(ast.ExprVisitor, ast.StmtVisitor):
    """
    Renders a parsed program as s-expressions, one top-level statement per
    line: ``var x = 1 + 2;`` prints as ``(var x (+ 1 2))``. Blocks and
    function bodies put each inner statement on its own indented line.
    """
    INDENT = "  "

    def print_program(self, statements: List[ast.Stmt]) -> str:
        return "\n".join(self._show(stmt) for stmt in statements)

    # --- Statements ---

    def visit_block_stmt(self, stmt: ast.Block) -> str:
        return self._nested("(block", stmt.statements, ")")

    def visit_break_stmt(self, stmt: ast.Break) -> str:
        return "(break)"

    def visit_expression_stmt(self, stmt: ast.Expression) -> str:
        return self._sexp("expr_stmt", stmt.expression)

    def visit_function_stmt(self, stmt: ast.Function) -> str:
        params = ", ".join(param.lexeme for param in stmt.params)
        return self._nested(f"(fun {stmt.name.lexeme}({params}) {{", stmt.body, "})")

    def visit_if_stmt(self, stmt: ast.If) -> str:
        if stmt.else_branch is None:
            return self._sexp("if", stmt.condition, stmt.then_branch)
        return self._sexp("if", stmt.condition, stmt.then_branch, "else", stmt.else_branch)

    def visit_print_stmt(self, stmt: ast.Print) -> str:
        return self._sexp("print", stmt.expression)

    def visit_return_stmt(self, stmt: ast.Return) -> str:
        return self._sexp("return", *self._present(stmt.value))

    def visit_var_stmt(self, stmt: ast.Var) -> str:
        return self._sexp("var", stmt.name.lexeme, *self._present(stmt.initializer))

    def visit_while_stmt(self, stmt: ast.While) -> str:
        return self._sexp("while", stmt.condition, stmt.body)

    # --- Expressions ---

    def visit_assign_expr(self, expr: ast.Assign) -> str:
        return self._sexp("assign", expr.name.lexeme, expr.value)

    def visit_binary_expr(self, expr: ast.Binary) -> str:
        return self._sexp(expr.operator.lexeme, expr.left, expr.right)

    def visit_call_expr(self, expr: ast.Call) -> str:
        return self._sexp("call", expr.callee, *expr.arguments)

    def visit_grouping_expr(self, expr: ast.Grouping) -> str:
        return self._sexp("group", expr.expression)

    def visit_literal_expr(self, expr: ast.Literal) -> str:
        if isinstance(expr.value, str):
            return f'"{expr.value}"'
        return objects.stringify(expr.value)

    def visit_logical_expr(self, expr: ast.Logical) -> str:
        return self._sexp(expr.operator.lexeme, expr.left, expr.right)

    def visit_unary_expr(self, expr: ast.Unary) -> str:
        return self._sexp(expr.operator.lexeme, expr.right)

    def visit_variable_expr(self, expr: ast.Variable) -> str:
        return expr.name.lexeme

    # --- Formatting ---

    def _show(self, part: Part) -> str:
        return part if isinstance(part, str) else part.accept(self)

    def _sexp(self, head: str, *parts: Part) -> str:
        return "(" + " ".join([head, *(self._show(part) for part in parts)]) + ")"

    def _nested(self, opener: str, statements: List[ast.Stmt], closer: str) -> str:
        body = [self.INDENT + line
                for stmt in statements
                for line in self._show(stmt).splitlines()]
        return "\n".join([opener, *body, closer])

    @staticmethod
    def _present(node):
        return () if node is None else (node,)
