# csspat/grammar/bootstrap.py
"""Hand-built matcher tree for the rule-definition language itself.

Grammar we match (over units, whitespace insignificant):
    document   := rule? (";" rule?)*
    rule       := IDENT ":" pattern
    pattern    := seq ("|" seq)*
    seq        := item*
    item       := atom quantifier?
    atom       := IDENT            -> Placeholder(name)   (rule or macro)
                | STRING           -> Symbol / zero-whitespace Symbol sequence
                | "(" pattern ")"
                | CALL(...)        -> registry function, see builtins.py
    quantifier := "?" | "*" | "+" | "{" m "}" | "{" m "," "}" | "{" m "," n "}"

The CaptureTransform nodes below build the target matcher tree while the
source is being matched; the compiler object travels in as match context.
"""

from __future__ import annotations
from typing import Optional, Tuple

from ..lex.units import CallUnit, ContainerUnit
from ..match.ast import (
    Any, Alternate, Call, CaptureArray, CaptureConstant, CaptureContent, CaptureContext,
    CaptureTransform, CaptureUnit, Container, Identifier, Node, Placeholder, Repeat,
    Sequence, String, Success, Symbol, ZeroWhitespace,
)
from .resolve import resolve

Bounds = Tuple[int, Optional[int]]

# ---- capture transforms ----

def _make_alternate(*seqs: Node) -> Node:
    return seqs[0] if len(seqs) == 1 else Alternate(seqs)

def _make_sequence(*items: Node) -> Node:
    if not items:
        return Success()
    return items[0] if len(items) == 1 else Sequence(items)

def _apply_quantifier(atom: Node, bounds: Optional[Bounds] = None) -> Node:
    if bounds is None:
        return atom
    lo, hi = bounds
    return Repeat(atom, lo, hi)

_NEVER_SYMBOL = frozenset("\"'\\()[]{}_")

def _lexes_as_symbol(ch: str) -> bool:
    return not (ch.isspace() or ch.isalnum() or ch in _NEVER_SYMBOL or ord(ch) >= 0x80)

def literal_matcher(text: str) -> Node:
    """'x' matches one symbol; 'xyz' matches adjacent symbols with no gaps."""
    if not text:
        raise SyntaxError("empty string literal in rule")
    bad = [ch for ch in text if not _lexes_as_symbol(ch)]
    if bad:
        raise SyntaxError(f"invalid literal {text!r}: {bad[0]!r} never lexes as a symbol; "
                          "use a macro or ID(...) for words, numbers and whitespace")
    if len(text) == 1:
        return Symbol(text)
    items = [Symbol(text[0])]
    for ch in text[1:]:
        items.append(ZeroWhitespace())
        items.append(Symbol(ch))
    return Sequence(items)

def _curly_bounds(unit: ContainerUnit) -> Bounds:
    parts = [u for u in unit.contents if u.type not in ("whitespace", "comment")]

    def _count(u) -> int:
        if u.type != "number" or u.unit is not None or not isinstance(u.value, int) or u.value < 0:
            raise SyntaxError(f"malformed quantifier: {{...}} bounds must be non-negative integers, got {u!r}")
        return u.value

    def _is_comma(u) -> bool:
        return u.type == "symbol" and u.content == ","

    if len(parts) == 1:
        lo = _count(parts[0])
        return lo, lo
    if len(parts) == 2 and _is_comma(parts[1]):
        return _count(parts[0]), None
    if len(parts) == 3 and _is_comma(parts[1]):
        lo, hi = _count(parts[0]), _count(parts[2])
        if hi < lo:
            raise SyntaxError(f"malformed quantifier: {{{lo},{hi}}} has max below min")
        return lo, hi
    raise SyntaxError("malformed quantifier: expected {m}, {m,} or {m,n}")

def _apply_function(compiler, call: CallUnit) -> Node:
    return compiler.apply_function(call)

def _make_rule(name: str, pattern: Node) -> Tuple[str, Node]:
    return name, pattern

# ---- the bootstrap tree ----

_QUANTIFIER = Alternate([
    CaptureConstant((0, 1), Symbol("?")),
    CaptureConstant((0, None), Symbol("*")),
    CaptureConstant((1, None), Symbol("+")),
    CaptureTransform(_curly_bounds, CaptureUnit(Container("curly", Repeat(Any())))),
])

_ATOM = Alternate([
    CaptureTransform(Placeholder, CaptureContent(Identifier())),
    CaptureTransform(literal_matcher, CaptureContent(String())),
    Container("round", Placeholder("pattern")),
    CaptureTransform(_apply_function, Sequence([
        CaptureContext(),
        CaptureUnit(Call(None, Repeat(Any()))),
    ])),
])

_ITEM = CaptureTransform(_apply_quantifier, Sequence([_ATOM, Repeat(_QUANTIFIER, 0, 1)]))

_SEQ = CaptureTransform(_make_sequence, Repeat(_ITEM))

_RULE = CaptureTransform(_make_rule, Sequence([
    CaptureContent(Identifier()),
    Symbol(":"),
    Placeholder("pattern"),
]))

_ARENA = resolve({
    "pattern": CaptureTransform(_make_alternate, Sequence([
        _SEQ,
        Repeat(Sequence([Symbol("|"), _SEQ])),
    ])),
    "document": CaptureArray(Sequence([
        Repeat(_RULE, 0, 1),
        Repeat(Sequence([Symbol(";"), Repeat(_RULE, 0, 1)])),
    ])),
}, macros={})

PATTERN: Node = _ARENA["pattern"]
DOCUMENT: Node = _ARENA["document"]
