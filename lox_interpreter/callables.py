import time
from abc import ABC, abstractmethod
from typing import List, Any, Callable, TYPE_CHECKING

from . import ast_nodes as ast
from .environment import Environment
from .errors import InternalError
from .signals import ReturnValue

if TYPE_CHECKING:
    from .interpreter import Interpreter


class LoxCallable(ABC):
    """Anything a call expression can invoke. Values compare by identity."""
    name: str

    @abstractmethod
    def arity(self) -> int: ...

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        """Runs the callable. The interpreter has already checked the argument count."""

    def __str__(self) -> str:
        return "<native fn>"


class NativeFunction(LoxCallable):
    def __init__(self, name: str, arity: int, func: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.func = func

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.func(*arguments)


def clock() -> float:
    return time.time()


NATIVES = [
    NativeFunction("clock", 0, clock),
]


class LoxFunction(LoxCallable):
    """
    A ``fun`` declaration paired with the environment it was declared in.

    Each call gets a fresh scope whose parent is that captured environment,
    never the caller's, so a function sees the variables around its
    declaration and keeps them alive after the declaring block has exited.
    """
    def __init__(self, declaration: ast.Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure
        self.name = declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        scope = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            scope.define(param.lexeme, argument)

        completion = interpreter.execute_function_body(self.declaration.body, scope)
        if completion is None:
            return None
        if isinstance(completion, ReturnValue):
            return completion.value

        raise InternalError(f"{completion!r} escaped the body of '{self.name}'.")

    def __str__(self) -> str:
        return f"<fn {self.name}>"
