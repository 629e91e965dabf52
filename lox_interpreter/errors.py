import sys
from typing import Optional

from .tokens import Token, TokenType


class LoxError(Exception):
    """Base class for every error a Lox program can be told about."""
    def __init__(self, line: int, message: str, token: Optional[Token] = None):
        self.line = line
        self.message = message
        self.token = token
        super().__init__(self.message)

    def location(self) -> str:
        if self.token is None:
            return ""
        if self.token.token_type == TokenType.EOF:
            return " at end"
        return f" at '{self.token.lexeme}'"

    def report(self):
        """Reports the error to stderr."""
        print(f"[Line {self.line}] Error{self.location()}: {self.message}", file=sys.stderr)


class ScanError(LoxError):
    """An unexpected character, unterminated string or block comment."""
    pass


class ParseError(LoxError):
    """A syntax error, raised by the parser and caught at the next statement boundary."""
    def __init__(self, token: Token, message: str):
        super().__init__(token.line, message, token)


class LoxRuntimeError(LoxError):
    """Custom exception for reporting runtime errors."""
    def __init__(self, token: Token, message: str):
        super().__init__(token.line, message, token)

    def report(self):
        print(f"[Line {self.line}] RuntimeError{self.location()}: {self.message}", file=sys.stderr)


class InternalError(RuntimeError):
    """
    Raised when the interpreter's own contracts are broken, e.g. an error
    sentinel about to be printed. Never reported as a Lox error.
    """
    pass
