# csspat/lex/units.py
"""Tree builder: flat tokens -> nested Units.

Brackets and call-open tokens are resolved with an explicit stack of
"current child list" contexts. Literal tokens are reused as leaf units.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from . import Token, NumberToken, UnicodeRangeToken, FlatToken, each_token


@dataclass(frozen=True)
class ContainerUnit:
    type: str                                     # 'round' | 'square' | 'curly'
    contents: Tuple["Unit", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "contents", tuple(self.contents))

@dataclass(frozen=True)
class CallUnit:
    func_name: str
    params: Tuple["Unit", ...] = ()
    type: str = field(default="call", init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))

Unit = Union[Token, NumberToken, UnicodeRangeToken, ContainerUnit, CallUnit]

_OPENERS = {"(": "round", "[": "square", "{": "curly"}
_CLOSERS = {")": ("round", "call"), "]": ("square",), "}": ("curly",)}


def to_units(
        src: Union[str, Iterable[FlatToken]],
        *,
        ignore_whitespace: bool = False,
        ignore_comments: bool = False) -> List[Unit]:
    """Build the top-level unit list from text or an iterable of tokens.

    Child lists are collected while their block is open and frozen into the
    unit when it closes. Raises ``SyntaxError`` on a closing bracket with
    nothing open, a closer of the wrong kind, or brackets still open at end
    of input.
    """
    tokens = each_token(src) if isinstance(src, str) else src

    top: List[Unit] = []
    context = top
    # (enclosing child list, block kind, call name or None)
    stack: List[Tuple[List[Unit], str, Optional[str]]] = []

    for tok in tokens:
        if tok.type == "call-open":
            stack.append((context, "call", tok.content))
            context = []
        elif tok.type == "symbol" and tok.content in _OPENERS:
            stack.append((context, _OPENERS[tok.content], None))
            context = []
        elif tok.type == "symbol" and tok.content in _CLOSERS:
            if not stack:
                raise SyntaxError(f"unexpected {tok.content!r}: nothing to close")
            parent, kind, name = stack.pop()
            if kind not in _CLOSERS[tok.content]:
                raise SyntaxError(f"mismatched {tok.content!r} closing a {kind} block")
            parent.append(CallUnit(name, context) if kind == "call" else ContainerUnit(kind, context))
            context = parent
        elif tok.type == "url":
            # unify with the quoted url("...") form
            context.append(CallUnit("url", [Token("string", tok.content)]))
        elif tok.type == "whitespace":
            if not ignore_whitespace:
                context.append(tok)
        elif tok.type == "comment":
            if not ignore_comments:
                context.append(tok)
        else:
            context.append(tok)

    if stack:
        _, kind, _ = stack[-1]
        raise SyntaxError(f"unbalanced brackets: {kind} block left open at end of input")
    return top
