import sys
from typing import List, Optional

from .lexer import scan
from .parser import parse
from .interpreter import Interpreter

USAGE = "Usage: lox [script]"

# sysexits.h codes.
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70


class Lox:
    """
    Runs source text through scanning, parsing and interpretation. One
    interpreter is kept for the driver's lifetime, so REPL lines share globals.
    """
    def __init__(self):
        self.interpreter = Interpreter()
        self.had_error = False
        self.had_runtime_error = False

    def run(self, source: str):
        tokens, scan_error = scan(source)
        # Parse even after a scan error so syntax errors are reported as well.
        statements, parse_error = parse(tokens)
        if scan_error is not None or parse_error is not None:
            self.had_error = True
            return

        self.had_runtime_error = not self.interpreter.interpret(statements)

    def run_file(self, path: str):
        with open(path, encoding='utf-8') as script:
            self.run(script.read())

    def run_prompt(self):
        print("Lox REPL (Ctrl+D to exit)")
        while True:
            try:
                line = input("> ")
            except (EOFError, KeyboardInterrupt):
                print()
                return
            if line.strip():
                self.run(line)
            # A bad line must not end the session.
            self.had_error = False
            self.had_runtime_error = False

    def exit_code(self) -> int:
        if self.had_error:
            return EX_DATAERR
        if self.had_runtime_error:
            return EX_SOFTWARE
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1:
        print(USAGE)
        return EX_USAGE

    lox = Lox()
    if not args:
        lox.run_prompt()
        return 0

    try:
        lox.run_file(args[0])
    except OSError as e:
        print(f"ERROR: Could not read '{args[0]}': {e.strerror}", file=sys.stderr)
        return EX_USAGE
    return lox.exit_code()


if __name__ == "__main__":
    sys.exit(main())
