from typing import List, Any, Optional, Tuple

from .tokens import Token, TokenType, keywords
from .errors import ScanError


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# char -> (token alone, token when followed by '=')
EQUALS_SUFFIX_TOKENS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

WHITESPACE = (' ', '\r', '\t')


class Lexer:
    """
    Turns source text into tokens, one lexeme at a time: ``start`` marks the
    first character of the lexeme being scanned and ``current`` the next
    character to read.

    Errors are reported and collected as they are found and scanning
    continues, so a single pass reports every lexical error in the source.
    """
    def __init__(self, source: str):
        self.source: str = source
        self.tokens: List[Token] = []
        self.errors: List[ScanError] = []
        self.start: int = 0
        self.current: int = 0
        self.line: int = 1

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def scan_tokens(self) -> List[Token]:
        """Returns every token in the source, ending with a single EOF token."""
        while not self._is_at_end():
            self.start = self.current
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def _scan_token(self):
        char = self._advance()

        if char in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[char])
        elif char in EQUALS_SUFFIX_TOKENS:
            alone, with_equals = EQUALS_SUFFIX_TOKENS[char]
            self._add_token(with_equals if self._match('=') else alone)
        elif char == '/':
            self._slash()
        elif char in WHITESPACE:
            pass
        elif char == '\n':
            self.line += 1
        elif char == '"':
            self._string()
        elif self._is_digit(char):
            self._number()
        elif self._is_alpha(char):
            self._identifier()
        else:
            self._error(f"Unexpected character '{char}'.")

    # --- Lexeme scanners ---

    def _slash(self):
        if self._match('/'):
            # Line comment: skip to the newline, which is scanned normally.
            while self._peek() != '\n' and not self._is_at_end():
                self._advance()
        elif self._match('*'):
            self._block_comment()
        else:
            self._add_token(TokenType.SLASH)

    def _block_comment(self):
        """Skips a /* ... */ comment. Comments nest: each inner /* needs its own */."""
        depth = 1
        while depth > 0:
            if self._is_at_end():
                self._error("Unterminated block comment.")
                return

            char = self._advance()
            if char == '\n':
                self.line += 1
            elif char == '/' and self._match('*'):
                depth += 1
            elif char == '*' and self._match('/'):
                depth -= 1

    def _string(self):
        while not self._is_at_end() and self._peek() != '"':
            if self._advance() == '\n':
                self.line += 1

        if self._is_at_end():
            self._error("Unterminated string.")
            return

        self._advance()
        self._add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def _number(self):
        self._skip_digits()

        # A '.' only belongs to the number when a digit follows it.
        if self._peek() == '.' and self._is_digit(self._peek_next()):
            self._advance()
            self._skip_digits()

        self._add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def _identifier(self):
        while self._is_alpha_numeric(self._peek()):
            self._advance()

        text = self.source[self.start:self.current]
        self._add_token(keywords.get(text, TokenType.IDENTIFIER))

    # --- Cursor helpers ---

    def _is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def _advance(self) -> str:
        char = self.source[self.current]
        self.current += 1
        return char

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self._peek() != expected:
            return False
        self.current += 1
        return True

    def _peek(self) -> str:
        return self._char_at(self.current)

    def _peek_next(self) -> str:
        return self._char_at(self.current + 1)

    def _char_at(self, index: int) -> str:
        if index >= len(self.source):
            return '\0'
        return self.source[index]

    def _skip_digits(self):
        while self._is_digit(self._peek()):
            self._advance()

    def _add_token(self, token_type: TokenType, literal: Any = None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, text, literal, self.line))

    def _error(self, message: str):
        error = ScanError(self.line, message)
        error.report()
        self.errors.append(error)

    @staticmethod
    def _is_digit(char: str) -> bool:
        return '0' <= char <= '9'

    @staticmethod
    def _is_alpha(char: str) -> bool:
        return ('a' <= char <= 'z') or ('A' <= char <= 'Z') or char == '_'

    @classmethod
    def _is_alpha_numeric(cls, char: str) -> bool:
        return cls._is_alpha(char) or cls._is_digit(char)


def scan(source: str) -> Tuple[List[Token], Optional[ScanError]]:
    """Scans source text, returning the tokens and the first error, if any."""
    lexer = Lexer(source)
    tokens = lexer.scan_tokens()
    return tokens, (lexer.errors[0] if lexer.errors else None)
