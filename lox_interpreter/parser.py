from typing import Callable, List, Optional, Tuple, Type

from .tokens import Token, TokenType
from .errors import ParseError
from . import ast_nodes as ast


MAX_ARGUMENTS = 255

KEYWORD_LITERALS = {
    TokenType.FALSE: False,
    TokenType.TRUE: True,
    TokenType.NIL: None,
}

# Tokens that can only begin a statement; panic mode resumes in front of them.
STATEMENT_STARTS = frozenset([
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
])


class Parser:
    """
    Recursive descent parser, one method per grammar rule:

    program     -> declaration* EOF
    declaration -> funDecl | varDecl | statement
    funDecl     -> "fun" IDENTIFIER "(" parameters? ")" block
    varDecl     -> "var" IDENTIFIER ( "=" expression )? ";"
    statement   -> exprStmt | forStmt | ifStmt | printStmt | returnStmt
                 | whileStmt | breakStmt | block
    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" )*
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | "(" expression ")" | IDENTIFIER

    A syntax error abandons the current declaration only: the parser skips
    ahead to the next statement and carries on, so each broken statement is
    reported once.
    """
    def __init__(self, tokens: List[Token]):
        self.tokens: List[Token] = tokens
        self.current: int = 0
        self.errors: List[ParseError] = []

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def parse(self) -> List[ast.Stmt]:
        """
        Parses the whole token list. Declarations that failed to parse are
        left out of the result, so check had_error before running it.
        """
        statements: List[ast.Stmt] = []
        while not self._is_at_end():
            declaration = self._declaration()
            if declaration is not None:
                statements.append(declaration)
        return statements

    # --- Declarations and statements ---

    def _declaration(self) -> Optional[ast.Stmt]:
        try:
            if self._match(TokenType.FUN):
                return self._function("function")
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParseError:
            self._synchronize()
            return None

    def _function(self, kind: str) -> ast.Function:
        name = self._consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        parameters = self._comma_separated(
            lambda: self._consume(TokenType.IDENTIFIER, "Expect parameter name."),
            "parameters",
        )
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self._consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return ast.Function(name, parameters, self._block())

    def _var_declaration(self) -> ast.Var:
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")
        initializer = self._expression() if self._match(TokenType.EQUAL) else None
        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    def _statement(self) -> ast.Stmt:
        rules = {
            TokenType.FOR: self._for_statement,
            TokenType.IF: self._if_statement,
            TokenType.PRINT: self._print_statement,
            TokenType.RETURN: self._return_statement,
            TokenType.WHILE: self._while_statement,
            TokenType.BREAK: self._break_statement,
            TokenType.LEFT_BRACE: lambda: ast.Block(self._block()),
        }
        rule = rules.get(self._peek().token_type)
        if rule is None:
            return self._expression_statement()
        self._advance()
        return rule()

    def _for_statement(self) -> ast.Stmt:
        """
        There is no for node. The loop becomes
        { initializer; while (condition) { body; increment; } }
        with a missing condition meaning true.
        """
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[ast.Stmt] = None
        if self._match(TokenType.VAR):
            initializer = self._var_declaration()
        elif not self._match(TokenType.SEMICOLON):
            initializer = self._expression_statement()

        condition = self._optional_expression(TokenType.SEMICOLON)
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")
        increment = self._optional_expression(TokenType.RIGHT_PAREN)
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()
        if increment is not None:
            body = ast.Block([body, ast.Expression(increment)])
        loop: ast.Stmt = ast.While(condition if condition is not None else ast.Literal(True), body)
        if initializer is not None:
            loop = ast.Block([initializer, loop])
        return loop

    def _if_statement(self) -> ast.If:
        condition = self._parenthesized_condition("if")
        then_branch = self._statement()
        else_branch = self._statement() if self._match(TokenType.ELSE) else None
        return ast.If(condition, then_branch, else_branch)

    def _print_statement(self) -> ast.Print:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def _return_statement(self) -> ast.Return:
        keyword = self._previous()
        value = self._optional_expression(TokenType.SEMICOLON)
        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    def _while_statement(self) -> ast.While:
        condition = self._parenthesized_condition("while")
        return ast.While(condition, self._statement())

    def _break_statement(self) -> ast.Break:
        keyword = self._previous()
        self._consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
        return ast.Break(keyword)

    def _block(self) -> List[ast.Stmt]:
        """The statements up to the closing brace. The opening brace is already consumed."""
        statements: List[ast.Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            declaration = self._declaration()
            if declaration is not None:
                statements.append(declaration)

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> ast.Expression:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    def _parenthesized_condition(self, keyword: str) -> ast.Expr:
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after '{keyword}'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, f"Expect ')' after {keyword} condition.")
        return condition

    def _optional_expression(self, terminator: TokenType) -> Optional[ast.Expr]:
        if self._check(terminator):
            return None
        return self._expression()

    # --- Expressions, lowest precedence first ---

    def _expression(self) -> ast.Expr:
        return self._assignment()

    def _assignment(self) -> ast.Expr:
        # The target is parsed as an ordinary expression, then checked.
        expr = self._or()
        if not self._match(TokenType.EQUAL):
            return expr

        equals = self._previous()
        value = self._assignment()
        if isinstance(expr, ast.Variable):
            return ast.Assign(expr.name, value)

        # Reported, not raised: the parser isn't lost, so keep going.
        self._error(equals, "Invalid assignment target.")
        return expr

    def _or(self) -> ast.Expr:
        return self._left_associative(self._and, ast.Logical, TokenType.OR)

    def _and(self) -> ast.Expr:
        return self._left_associative(self._equality, ast.Logical, TokenType.AND)

    def _equality(self) -> ast.Expr:
        return self._left_associative(self._comparison, ast.Binary,
                                      TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self) -> ast.Expr:
        return self._left_associative(self._term, ast.Binary,
                                      TokenType.GREATER, TokenType.GREATER_EQUAL,
                                      TokenType.LESS, TokenType.LESS_EQUAL)

    def _term(self) -> ast.Expr:
        return self._left_associative(self._factor, ast.Binary, TokenType.MINUS, TokenType.PLUS)

    def _factor(self) -> ast.Expr:
        return self._left_associative(self._unary, ast.Binary, TokenType.SLASH, TokenType.STAR)

    def _left_associative(self, operand: Callable[[], ast.Expr], node: Type[ast.Expr],
                          *operators: TokenType) -> ast.Expr:
        """operand ( operator operand )*, folded to the left."""
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            expr = node(expr, operator, operand())
        return expr

    def _unary(self) -> ast.Expr:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return ast.Unary(operator, self._unary())
        return self._call()

    def _call(self) -> ast.Expr:
        expr = self._primary()
        while self._match(TokenType.LEFT_PAREN):
            arguments = self._comma_separated(self._expression, "arguments")
            paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
            expr = ast.Call(expr, paren, arguments)
        return expr

    def _primary(self) -> ast.Expr:
        token = self._peek()
        if token.token_type in (TokenType.NUMBER, TokenType.STRING):
            self._advance()
            return ast.Literal(token.literal)
        if token.token_type in KEYWORD_LITERALS:
            self._advance()
            return ast.Literal(KEYWORD_LITERALS[token.token_type])
        if self._match(TokenType.IDENTIFIER):
            return ast.Variable(token)
        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self._error(token, "Expect expression.")

    def _comma_separated(self, item: Callable, what: str) -> list:
        """Zero or more items separated by commas, stopping before ')'."""
        items = []
        if self._check(TokenType.RIGHT_PAREN):
            return items
        while True:
            if len(items) >= MAX_ARGUMENTS:
                self._error(self._peek(), f"Can't have more than {MAX_ARGUMENTS} {what}.")
            items.append(item())
            if not self._match(TokenType.COMMA):
                return items

    # --- Token stream ---

    def _match(self, *types: TokenType) -> bool:
        """Consumes the current token if it has one of the given types."""
        if any(self._check(token_type) for token_type in types):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        return not self._is_at_end() and self._peek().token_type == token_type

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().token_type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1]

    # --- Errors and recovery ---

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _error(self, token: Token, message: str) -> ParseError:
        """Reports and records an error. Callers raise it when they can't go on."""
        error = ParseError(token, message)
        error.report()
        self.errors.append(error)
        return error

    def _synchronize(self):
        """Discards tokens up to the end of the broken statement."""
        self._advance()
        while not self._is_at_end():
            if self._previous().token_type == TokenType.SEMICOLON:
                return
            if self._peek().token_type in STATEMENT_STARTS:
                return
            self._advance()


def parse(tokens: List[Token]) -> Tuple[List[ast.Stmt], Optional[ParseError]]:
    """Parses a token list, returning the statements and the first error, if any."""
    parser = Parser(tokens)
    statements = parser.parse()
    return statements, (parser.errors[0] if parser.errors else None)
