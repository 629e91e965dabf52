from lox_interpreter.lexer import Lexer, scan
from lox_interpreter.tokens import TokenType, Token


def token_types(source):
    return [token.token_type for token in Lexer(source).scan_tokens()]


def test_simple_variable_declaration():
    tokens, error = scan("var x = 10;")
    assert error is None
    assert tokens == [
        Token(TokenType.VAR, 'var', None, 1),
        Token(TokenType.IDENTIFIER, 'x', None, 1),
        Token(TokenType.EQUAL, '=', None, 1),
        Token(TokenType.NUMBER, '10', 10.0, 1),
        Token(TokenType.SEMICOLON, ';', None, 1),
        Token(TokenType.EOF, '', None, 1),
    ]


def test_function_with_comments():
    source = """
    // Simple function
    fun main() {
        var y = "hello"; /* block comment */
    }
    """
    tokens, error = scan(source)
    assert error is None
    assert tokens == [
        Token(TokenType.FUN, 'fun', None, 3),
        Token(TokenType.IDENTIFIER, 'main', None, 3),
        Token(TokenType.LEFT_PAREN, '(', None, 3),
        Token(TokenType.RIGHT_PAREN, ')', None, 3),
        Token(TokenType.LEFT_BRACE, '{', None, 3),
        Token(TokenType.VAR, 'var', None, 4),
        Token(TokenType.IDENTIFIER, 'y', None, 4),
        Token(TokenType.EQUAL, '=', None, 4),
        Token(TokenType.STRING, '"hello"', 'hello', 4),
        Token(TokenType.SEMICOLON, ';', None, 4),
        Token(TokenType.RIGHT_BRACE, '}', None, 5),
        Token(TokenType.EOF, '', None, 6),
    ]


def test_one_and_two_character_operators():
    assert token_types("! != = == < <= > >= / * + - , . ( ) { }") == [
        TokenType.BANG, TokenType.BANG_EQUAL,
        TokenType.EQUAL, TokenType.EQUAL_EQUAL,
        TokenType.LESS, TokenType.LESS_EQUAL,
        TokenType.GREATER, TokenType.GREATER_EQUAL,
        TokenType.SLASH, TokenType.STAR, TokenType.PLUS, TokenType.MINUS,
        TokenType.COMMA, TokenType.DOT,
        TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN,
        TokenType.LEFT_BRACE, TokenType.RIGHT_BRACE,
        TokenType.EOF,
    ]


def test_keywords_are_case_sensitive():
    assert token_types("and break class else false for fun if nil or print return super this true var while") == [
        TokenType.AND, TokenType.BREAK, TokenType.CLASS, TokenType.ELSE,
        TokenType.FALSE, TokenType.FOR, TokenType.FUN, TokenType.IF,
        TokenType.NIL, TokenType.OR, TokenType.PRINT, TokenType.RETURN,
        TokenType.SUPER, TokenType.THIS, TokenType.TRUE, TokenType.VAR,
        TokenType.WHILE, TokenType.EOF,
    ]
    assert token_types("Print VAR orchid _x1") == [TokenType.IDENTIFIER] * 4 + [TokenType.EOF]


def test_number_literals():
    tokens = Lexer("12 3.25").scan_tokens()
    assert [t.literal for t in tokens[:2]] == [12.0, 3.25]


def test_trailing_dot_is_not_part_of_number():
    tokens = Lexer("1.").scan_tokens()
    assert [(t.token_type, t.lexeme) for t in tokens] == [
        (TokenType.NUMBER, '1'),
        (TokenType.DOT, '.'),
        (TokenType.EOF, ''),
    ]


def test_multiline_string_counts_lines():
    tokens = Lexer('"one\ntwo"\nx').scan_tokens()
    assert tokens[0].literal == "one\ntwo"
    assert tokens[0].line == 2
    assert tokens[1] == Token(TokenType.IDENTIFIER, 'x', None, 3)
    assert tokens[2].line == 3


def test_nested_block_comments():
    source = "/* outer /* inner */ still a comment\n */ print"
    tokens, error = scan(source)
    assert error is None
    assert tokens == [
        Token(TokenType.PRINT, 'print', None, 2),
        Token(TokenType.EOF, '', None, 2),
    ]


def test_unterminated_nested_comment(capsys):
    lexer = Lexer("/* a /* b */\n\n")
    tokens = lexer.scan_tokens()
    assert lexer.had_error
    assert lexer.errors[0].line == 3
    assert lexer.errors[0].message == "Unterminated block comment."
    assert tokens == [Token(TokenType.EOF, '', None, 3)]
    assert "[Line 3] Error: Unterminated block comment." in capsys.readouterr().err


def test_unterminated_string(capsys):
    tokens, error = scan('print "oops')
    assert error is not None
    assert error.message == "Unterminated string."
    assert [t.token_type for t in tokens] == [TokenType.PRINT, TokenType.EOF]
    assert "Unterminated string." in capsys.readouterr().err


def test_unexpected_characters_do_not_stop_scanning(capsys):
    lexer = Lexer("var a = 1 @ 2;\n#")
    tokens = lexer.scan_tokens()
    assert [e.line for e in lexer.errors] == [1, 2]
    assert [t.token_type for t in tokens] == [
        TokenType.VAR, TokenType.IDENTIFIER, TokenType.EQUAL,
        TokenType.NUMBER, TokenType.NUMBER, TokenType.SEMICOLON,
        TokenType.EOF,
    ]
    err = capsys.readouterr().err
    assert "[Line 1] Error: Unexpected character '@'." in err
    assert "[Line 2] Error: Unexpected character '#'." in err


def test_scan_returns_first_error():
    _, error = scan("@\n$")
    assert error.line == 1
    assert "'@'" in error.message
