"""
Non-local control flow.

Executing a statement yields ``None`` when it completes normally, or one of
the signals below. Blocks and ifs pass a signal upward untouched, a while
loop consumes ``BreakLoop`` and a function call consumes ``ReturnValue``.
Runtime errors travel separately, as ``LoxRuntimeError`` exceptions.
"""
from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class BreakLoop:
    pass


@dataclass(frozen=True)
class ReturnValue:
    value: Any


Completion = Optional[Union[BreakLoop, ReturnValue]]

BREAK = BreakLoop()
