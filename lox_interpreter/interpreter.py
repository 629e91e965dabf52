from typing import List, Any

from . import ast_nodes as ast
from . import objects
from .tokens import TokenType
from .errors import LoxRuntimeError, InternalError
from .environment import Environment
from .callables import LoxCallable, LoxFunction, NATIVES
from .signals import BREAK, BreakLoop, Completion, ReturnValue


BINARY_OPERATORS = {
    TokenType.MINUS: objects.sub,
    TokenType.SLASH: objects.div,
    TokenType.STAR: objects.mul,
    TokenType.PLUS: objects.add,
    TokenType.GREATER: objects.greater,
    TokenType.GREATER_EQUAL: objects.greater_eq,
    TokenType.LESS: objects.less,
    TokenType.LESS_EQUAL: objects.less_eq,
    TokenType.BANG_EQUAL: objects.neq,
    TokenType.EQUAL_EQUAL: objects.eq,
}


class Interpreter(ast.ExprVisitor, ast.StmtVisitor):
    """
    Executes a parsed program by walking its tree.

    Statement visitors return a Completion (None, BreakLoop or ReturnValue);
    expression visitors return a value. Runtime errors are raised as
    LoxRuntimeError and stop the whole program.
    """
    def __init__(self):
        self.globals = Environment()
        self.environment = self.globals
        # Loops entered since the innermost function call began.
        self._loop_depth = 0
        self._function_depth = 0

        for native in NATIVES:
            self.globals.define(native.name, native)

    def interpret(self, statements: List[ast.Stmt]) -> bool:
        """
        Runs the statements in order. The first runtime error is reported
        and ends the run: the rest are skipped and the result is False.
        Globals persist across calls.
        """
        self._loop_depth = 0
        self._function_depth = 0
        try:
            for statement in statements:
                completion = self._execute(statement)
                if completion is not None:
                    raise InternalError(f"{completion!r} reached the top level.")
        except LoxRuntimeError as error:
            error.report()
            return False

        return True

    def _execute(self, stmt: ast.Stmt) -> Completion:
        return stmt.accept(self)

    def _evaluate(self, expr: ast.Expr) -> Any:
        return expr.accept(self)

    def execute_block(self, statements: List[ast.Stmt], environment: Environment) -> Completion:
        """
        Runs statements against the given environment, then puts the previous
        environment back, whatever happened. The block's environment may
        outlive this call if a closure captured it.
        """
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                completion = self._execute(statement)
                if completion is not None:
                    return completion
            return None
        finally:
            self.environment = previous

    def execute_function_body(self, body: List[ast.Stmt], environment: Environment) -> Completion:
        """Runs a function body. Loops outside the function can't be broken from inside it."""
        outer_loop_depth = self._loop_depth
        self._loop_depth = 0
        self._function_depth += 1
        try:
            return self.execute_block(body, environment)
        finally:
            self._function_depth -= 1
            self._loop_depth = outer_loop_depth

    # --- Statements ---

    def visit_expression_stmt(self, stmt: ast.Expression) -> Completion:
        self._evaluate(stmt.expression)
        return None

    def visit_print_stmt(self, stmt: ast.Print) -> Completion:
        value = self._evaluate(stmt.expression)
        print(objects.stringify(value))
        return None

    def visit_var_stmt(self, stmt: ast.Var) -> Completion:
        value = None
        if stmt.initializer is not None:
            value = self._evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)
        return None

    def visit_block_stmt(self, stmt: ast.Block) -> Completion:
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if_stmt(self, stmt: ast.If) -> Completion:
        if objects.is_truthy(self._evaluate(stmt.condition)):
            return self._execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self._execute(stmt.else_branch)
        return None

    def visit_while_stmt(self, stmt: ast.While) -> Completion:
        self._loop_depth += 1
        try:
            while objects.is_truthy(self._evaluate(stmt.condition)):
                completion = self._execute(stmt.body)
                if isinstance(completion, BreakLoop):
                    break
                if completion is not None:
                    return completion
        finally:
            self._loop_depth -= 1
        return None

    def visit_break_stmt(self, stmt: ast.Break) -> Completion:
        if self._loop_depth == 0:
            raise LoxRuntimeError(stmt.keyword, "Cannot break outside of a loop.")
        return BREAK

    def visit_function_stmt(self, stmt: ast.Function) -> Completion:
        function = LoxFunction(stmt, self.environment)
        self.environment.define(stmt.name.lexeme, function)
        return None

    def visit_return_stmt(self, stmt: ast.Return) -> Completion:
        if self._function_depth == 0:
            raise LoxRuntimeError(stmt.keyword, "Cannot return from top-level code.")

        value = None
        if stmt.value is not None:
            value = self._evaluate(stmt.value)

        return ReturnValue(value)

    # --- Expressions ---

    def visit_binary_expr(self, expr: ast.Binary) -> Any:
        left = self._evaluate(expr.left)
        right = self._evaluate(expr.right)
        op_type = expr.operator.token_type

        operation = BINARY_OPERATORS.get(op_type)
        if operation is None:
            raise InternalError(f"Unknown binary operator '{expr.operator.lexeme}'.")

        result = operation(left, right)
        if result is objects.ARITHMETIC_ERROR:
            if op_type == TokenType.PLUS:
                raise LoxRuntimeError(expr.operator, "Operands must be two numbers or strings.")
            raise LoxRuntimeError(expr.operator, "Operands must be numbers.")
        if result is objects.COMPARISON_ERROR:
            if op_type in (TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL):
                raise LoxRuntimeError(
                    expr.operator,
                    f"Cannot compare {objects.type_name(left)} with {objects.type_name(right)}."
                )
            raise LoxRuntimeError(expr.operator, "Operands must be numbers.")

        return result

    def visit_grouping_expr(self, expr: ast.Grouping) -> Any:
        return self._evaluate(expr.expression)

    def visit_literal_expr(self, expr: ast.Literal) -> Any:
        return expr.value

    def visit_unary_expr(self, expr: ast.Unary) -> Any:
        right = self._evaluate(expr.right)

        if expr.operator.token_type == TokenType.MINUS:
            # Negating anything but a number gives nil rather than an error.
            if isinstance(right, float):
                return -right
            return None
        if expr.operator.token_type == TokenType.BANG:
            return not objects.is_truthy(right)

        raise InternalError(f"Unknown unary operator '{expr.operator.lexeme}'.")

    def visit_variable_expr(self, expr: ast.Variable) -> Any:
        return self.environment.get(expr.name)

    def visit_assign_expr(self, expr: ast.Assign) -> Any:
        value = self._evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_logical_expr(self, expr: ast.Logical) -> Any:
        left = self._evaluate(expr.left)
        # 'or' stops at a truthy left operand, 'and' at a falsey one.
        stop_when = expr.operator.token_type == TokenType.OR
        if objects.is_truthy(left) == stop_when:
            return left
        return self._evaluate(expr.right)

    def visit_call_expr(self, expr: ast.Call) -> Any:
        callee = self._evaluate(expr.callee)
        arguments = [self._evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        return callee.call(self, arguments)
