from typing import Dict, Any, Optional

from .tokens import Token
from .errors import LoxRuntimeError

class Environment:
    """
    One lexical scope: its own bindings plus a link to the enclosing scope.

    Scopes are shared, not copied. A closure keeps a reference to the scope
    it was defined in, so that scope lives on after its block has exited.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing: Optional['Environment'] = enclosing

    def define(self, name: str, value: Any):
        """
        Binds a name in this scope, replacing any previous binding of the
        same name here. Enclosing scopes are left untouched.
        """
        self.values[name] = value

    def get(self, name: Token) -> Any:
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        """
        Overwrites the nearest existing binding of a name. Assignment never
        creates a binding.
        """
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
