import pytest

from lox_interpreter.lexer import Lexer
from lox_interpreter.parser import Parser
from lox_interpreter.interpreter import Interpreter
from lox_interpreter.errors import InternalError
from lox_interpreter.tokens import Token, TokenType
from lox_interpreter import ast_nodes as ast
from lox_interpreter.signals import ReturnValue


def run(source, interpreter=None):
    """Runs a full lexer -> parser -> interpreter pass and returns the interpreter's verdict."""
    tokens = Lexer(source).scan_tokens()
    parser = Parser(tokens)
    statements = parser.parse()
    assert not parser.had_error
    interpreter = interpreter or Interpreter()
    return interpreter.interpret(statements)


def output_of(source, capsys):
    assert run(source)
    return capsys.readouterr().out.splitlines()


def runtime_error_of(source, capsys):
    assert not run(source)
    return capsys.readouterr()


def global_value(interpreter, var_name):
    return interpreter.globals.get(Token(TokenType.IDENTIFIER, var_name, None, 0))


def test_arithmetic_and_variables():
    interpreter = Interpreter()
    assert run("var x = 10; var y = x * 2 + 5;", interpreter)
    assert global_value(interpreter, "y") == 25.0


def test_string_concatenation(capsys):
    assert output_of('print "a" + "b"; print 1 + "x"; print "n=" + 2.5;', capsys) == ["ab", "1x", "n=2.5"]


def test_print_displays_values(capsys):
    source = 'print 3; print 1.5; print "hi"; print true; print nil; print 10 / 4; print clock;'
    assert output_of(source, capsys) == ["3", "1.5", "hi", "true", "nil", "2.5", "<native fn>"]


def test_print_never_uses_exponent_notation(capsys):
    source = "print 10000000000000000; print 0.00001; print 0/0; print -1/0;"
    assert output_of(source, capsys) == ["10000000000000000", "0.00001", "NaN", "-inf"]


def test_arithmetic_on_booleans_is_a_runtime_error(capsys):
    captured = runtime_error_of("print 1;\nprint true - 1;\nprint 2;", capsys)
    assert captured.out.splitlines() == ["1"]
    assert captured.err.strip() == "[Line 2] RuntimeError at '-': Operands must be numbers."


def test_comparison_across_kinds_is_a_runtime_error(capsys):
    captured = runtime_error_of("print 1 > true;", capsys)
    assert "Operands must be numbers." in captured.err
    captured = runtime_error_of('print 1 == "1";', capsys)
    assert "Cannot compare number with string." in captured.err


def test_nil_equality(capsys):
    assert output_of('print nil == nil; print nil == 1; print "a" != nil;', capsys) == ["true", "false", "true"]


def test_unary_operators(capsys):
    assert output_of('print -3; print -"a"; print !nil; print !0;', capsys) == ["-3", "nil", "true", "false"]


def test_logical_operators_return_deciding_operand(capsys):
    source = 'print "a" or "b"; print nil or "b"; print false and 1; print 1 and "c";'
    assert output_of(source, capsys) == ["a", "b", "false", "c"]


def test_logical_operators_short_circuit(capsys):
    source = """
    var calls = 0;
    fun touch() { calls = calls + 1; return true; }
    var a = true or touch();
    var b = false and touch();
    print calls;
    """
    assert output_of(source, capsys) == ["0"]


def test_block_shadowing(capsys):
    assert output_of("var a = 1; { var a = a + 1; print a; } print a;", capsys) == ["2", "1"]


def test_block_variables_are_invisible_afterwards(capsys):
    captured = runtime_error_of("{ var inner = 1; } print inner;", capsys)
    assert "Undefined variable 'inner'." in captured.err


def test_assignment_mutates_outer_binding(capsys):
    assert output_of("var a = 1; { a = 2; } print a;", capsys) == ["2"]


def test_assignment_to_undefined_variable(capsys):
    captured = runtime_error_of("{ ghost = 1; }", capsys)
    assert captured.err.strip() == "[Line 1] RuntimeError at 'ghost': Undefined variable 'ghost'."


def test_if_else(capsys):
    assert output_of('if (0) print "zero is true"; else print "no";', capsys) == ["zero is true"]
    assert output_of('if (nil) print "yes"; else print "no";', capsys) == ["no"]


def test_while_loop():
    interpreter = Interpreter()
    source = """
    var i = 0;
    var total = 0;
    while (i < 5) {
        total = total + i;
        i = i + 1;
    }
    """
    assert run(source, interpreter)
    assert global_value(interpreter, "total") == 10.0
    assert global_value(interpreter, "i") == 5.0


def test_for_loop(capsys):
    assert output_of("for (var i = 0; i < 3; i = i + 1) print i;", capsys) == ["0", "1", "2"]


def test_break_ends_only_innermost_loop(capsys):
    source = """
    for (var i = 0; i < 3; i = i + 1) {
        for (var j = 0; j < 10; j = j + 1) {
            if (j == 2) break;
            print i + ":" + j;
        }
    }
    """
    assert output_of(source, capsys) == ["0:0", "0:1", "1:0", "1:1", "2:0", "2:1"]


def test_break_outside_loop(capsys):
    captured = runtime_error_of("print 1;\nbreak;", capsys)
    assert captured.out.splitlines() == ["1"]
    assert captured.err.strip() == "[Line 2] RuntimeError at 'break': Cannot break outside of a loop."


def test_break_cannot_escape_a_function(capsys):
    captured = runtime_error_of("fun f() { break; } while (true) { f(); }", capsys)
    assert "Cannot break outside of a loop." in captured.err


def test_return_outside_function(capsys):
    captured = runtime_error_of("return 1;", capsys)
    assert "Cannot return from top-level code." in captured.err


def test_function_call(capsys):
    assert output_of("fun add(a,b) { return a + b; } print add(2,3);", capsys) == ["5"]


def test_function_without_return_gives_nil(capsys):
    assert output_of("fun f() { 1; } print f(); print f;", capsys) == ["nil", "<fn f>"]


def test_return_from_inside_loop(capsys):
    source = """
    fun first_over(limit) {
        var i = 0;
        while (true) {
            if (i > limit) return i;
            i = i + 1;
        }
    }
    print first_over(3);
    """
    assert output_of(source, capsys) == ["4"]


def test_recursion():
    interpreter = Interpreter()
    source = """
    fun fib(n) {
        if (n <= 1) return n;
        return fib(n - 2) + fib(n - 1);
    }
    var result = fib(8);
    """
    assert run(source, interpreter)
    assert global_value(interpreter, "result") == 21.0


def test_counters_are_independent_closures(capsys):
    source = """
    fun make_counter() {
        var count = 0;
        fun counter() {
            count = count + 1;
            return count;
        }
        return counter;
    }
    var a = make_counter();
    var b = make_counter();
    print a();
    print a();
    print b();
    print a();
    """
    assert output_of(source, capsys) == ["1", "2", "1", "3"]


def test_closures_use_lexical_scope(capsys):
    source = """
    var name = "global";
    fun show() { print name; }
    fun caller() { var name = "local"; show(); }
    caller();
    """
    assert output_of(source, capsys) == ["global"]


def test_arity_mismatch(capsys):
    captured = runtime_error_of("fun f(a) {}\nf(1, 2);", capsys)
    assert captured.err.strip() == "[Line 2] RuntimeError at ')': Expected 1 arguments but got 2."


def test_calling_a_non_callable(capsys):
    captured = runtime_error_of('"text"();', capsys)
    assert "Can only call functions." in captured.err


def test_native_clock(capsys):
    assert output_of("print clock() > 0;", capsys) == ["true"]


def test_globals_survive_between_runs(capsys):
    interpreter = Interpreter()
    assert run("var count = 1;", interpreter)
    assert run("count = count + 1; print count;", interpreter)
    assert capsys.readouterr().out == "2\n"


def test_environment_is_restored_after_error(capsys):
    interpreter = Interpreter()
    assert not run("{ var local = 1; local - nil; }", interpreter)
    assert interpreter.environment is interpreter.globals


class LeakingReturn(ast.Stmt):
    """A statement the parser never produces: a return signal with no function around it."""
    def accept(self, visitor):
        return ReturnValue(None)


def test_signal_reaching_top_level_is_internal_error():
    with pytest.raises(InternalError):
        Interpreter().interpret([LeakingReturn()])
