from .lexer import Lexer, scan
from .parser import Parser, parse
from .interpreter import Interpreter
