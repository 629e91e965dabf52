from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    # Punctuation and single-character operators.
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # Operators that may take a trailing '='.
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    AND = auto()
    BREAK = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


@dataclass(frozen=True)
class Token:
    """
    One lexeme from the source. ``literal`` holds the parsed value for
    NUMBER (a float) and STRING (the text between the quotes) tokens and is
    None for everything else.
    """
    token_type: TokenType
    lexeme: str
    literal: Optional[Any]
    line: int


# class, super and this are reserved though nothing parses them yet.
KEYWORD_TYPES = (
    TokenType.AND, TokenType.BREAK, TokenType.CLASS, TokenType.ELSE,
    TokenType.FALSE, TokenType.FOR, TokenType.FUN, TokenType.IF,
    TokenType.NIL, TokenType.OR, TokenType.PRINT, TokenType.RETURN,
    TokenType.SUPER, TokenType.THIS, TokenType.TRUE, TokenType.VAR,
    TokenType.WHILE,
)

keywords = {token_type.name.lower(): token_type for token_type in KEYWORD_TYPES}
