import builtins

from lox_interpreter.lox import Lox, main, EX_USAGE, EX_DATAERR, EX_SOFTWARE


def write_script(tmp_path, source):
    script = tmp_path / "script.lox"
    script.write_text(source, encoding='utf-8')
    return str(script)


def test_run_file_success(tmp_path, capsys):
    path = write_script(tmp_path, "var a = 1; { var a = a + 1; print a; } print a;")
    assert main([path]) == 0
    assert capsys.readouterr().out == "2\n1\n"


def test_syntax_error_exit_code(tmp_path, capsys):
    path = write_script(tmp_path, "print ;\nprint 1;")
    assert main([path]) == EX_DATAERR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.count("Error") == 1


def test_scan_error_suppresses_execution(capsys):
    lox = Lox()
    lox.run("print 1; @")
    assert lox.had_error
    assert capsys.readouterr().out == ""


def test_runtime_error_exit_code(tmp_path, capsys):
    path = write_script(tmp_path, 'print "before";\nprint nil < 1;\nprint "after";')
    assert main([path]) == EX_SOFTWARE
    captured = capsys.readouterr()
    assert captured.out == "before\n"
    assert "[Line 2] RuntimeError at '<'" in captured.err


def test_usage(capsys):
    assert main(["a.lox", "b.lox"]) == EX_USAGE
    assert "Usage" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.lox")]) == EX_USAGE
    assert "Could not read" in capsys.readouterr().err


def test_prompt_keeps_state_between_lines(monkeypatch, capsys):
    lines = iter(["var a = 1;", "print ;", "a = a + 1;", "print a;"])

    def fake_input(prompt=''):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, 'input', fake_input)
    assert main([]) == 0
    captured = capsys.readouterr()
    assert "2\n" in captured.out
    assert "Expect expression." in captured.err
