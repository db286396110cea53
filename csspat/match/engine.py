# csspat/match/engine.py
from __future__ import annotations
from typing import Callable, List, Optional, Sequence as Seq, Tuple

from .ast import (
    Any, End, Success, Failure, ZeroWhitespace, NonzeroWhitespace,
    Symbol, Identifier, AtIdentifier, Hash, String, Number, UnicodeRange,
    Sequence, Alternate, Repeat, Subset, Container, Call,
    CaptureConstant, CaptureContext, CaptureArray, CaptureObject, CaptureNamed,
    CaptureTransform, CaptureReduce, CaptureUnit, CaptureContent,
    Placeholder, Ref, Node, Content,
)

# Backtracking engine:
# - No memoization; ordered choice, greedy repeats (exponential in the worst case).
# - eval() returns the end offset or -1. Captures are appended to `out` as
#   (name, value) records; a failing node leaves `out` exactly as it found it.
# - Unit-consuming nodes skip insignificant whitespace/comments first.
#   Combinators and captures do not, so whitespace assertions see raw offsets.

FAIL = -1

Record = Tuple[Optional[str], object]
Sink = Callable[[object, Optional[str]], None]


class MatcherError(RuntimeError):
    """Fatal engine error: the matcher tree (not the input) is broken."""


class _NoContext:
    def __repr__(self) -> str:
        return "NO_CONTEXT"

NO_CONTEXT = _NoContext()

_SKIPPABLE = ("whitespace", "comment")


def skip_whitespace(units: Seq, pos: int) -> int:
    n = len(units)
    while pos < n and units[pos].type in _SKIPPABLE:
        pos += 1
    return pos


def _content_ok(want: Content, have: str) -> bool:
    if want is None:
        return True
    if isinstance(want, str):
        return want == have
    return want.search(have) is not None


def _unit_ok(want, unit: Optional[str]) -> bool:
    if want is None:
        return unit is None
    if isinstance(want, str):
        return unit == want
    return unit in want


def _format_number(value, unit: Optional[str] = None) -> str:
    if isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value)
    return text + (unit or "")


def unit_content(unit) -> object:
    """Content of a single unit: a number for unitless numbers, else a string.
    Containers and calls flatten to the joined content of their children."""
    kind = unit.type
    if kind == "number":
        return unit.value if unit.unit is None else _format_number(unit.value, unit.unit)
    if kind in ("round", "square", "curly"):
        return join_content(unit.contents)
    if kind == "call":
        return join_content(unit.params)
    if kind == "unicode-range":
        return f"U+{unit.from_cp:X}-{unit.to_cp:X}"
    return unit.content


def join_content(units: Seq) -> str:
    parts = []
    for u in units:
        if u.type == "comment":
            continue
        c = unit_content(u)
        parts.append(_format_number(c) if not isinstance(c, str) else c)
    return "".join(parts)


class Engine:
    def __init__(self, context: object = NO_CONTEXT):
        self.context = context

    # ---- Evaluator for matcher nodes ----
    def eval(self, node: Node, units: Seq, pos: int, out: List[Record]) -> int:
        # -- single-unit predicates
        if isinstance(node, (Symbol, Identifier, AtIdentifier, Hash, String, Number, UnicodeRange, Any)):
            p = skip_whitespace(units, pos)
            if p < len(units) and self._accepts(node, units[p]):
                return p + 1
            return FAIL

        if isinstance(node, Sequence):
            mark = len(out)
            cur = pos
            for it in node.items:
                cur = self.eval(it, units, cur, out)
                if cur < 0:
                    del out[mark:]
                    return FAIL
            return cur

        if isinstance(node, Alternate):
            for opt in node.options:
                end = self.eval(opt, units, pos, out)
                if end >= 0:
                    return end
            return FAIL

        if isinstance(node, Ref):
            try:
                target = node.rules[node.name]
            except KeyError:
                raise MatcherError(f"reference to unknown rule {node.name!r}") from None
            return self.eval(target, units, pos, out)

        if isinstance(node, Repeat):
            return self._repeat(node, units, pos, out)

        if isinstance(node, Subset):
            return self._subset(node, units, pos, out)

        if isinstance(node, (Container, Call)):
            return self._nested(node, units, pos, out)

        if isinstance(node, ZeroWhitespace):
            if pos < len(units) and units[pos].type in _SKIPPABLE:
                return FAIL
            return pos

        if isinstance(node, NonzeroWhitespace):
            p = skip_whitespace(units, pos)
            return p if p > pos else FAIL

        if isinstance(node, End):
            p = skip_whitespace(units, pos)
            return p if p == len(units) else FAIL

        if isinstance(node, Success):
            return pos

        if isinstance(node, Failure):
            return FAIL

        if isinstance(node, (CaptureConstant, CaptureContext, CaptureArray, CaptureObject, CaptureNamed,
                             CaptureTransform, CaptureReduce, CaptureUnit, CaptureContent)):
            return self._capture(node, units, pos, out)

        if isinstance(node, Placeholder):
            raise MatcherError(f"unresolved placeholder {node.name!r} reached the matcher")

        raise MatcherError(f"unknown matcher node: {node!r}")

    # ---- predicates ----
    def _accepts(self, node: Node, unit) -> bool:
        kind = unit.type
        if isinstance(node, Any):
            return True
        if isinstance(node, Symbol):
            return kind == "symbol" and unit.content == node.text
        if isinstance(node, Identifier):
            return kind == "identifier" and _content_ok(node.content, unit.content)
        if isinstance(node, Hash):
            return kind == "hash" and _content_ok(node.content, unit.content)
        if isinstance(node, AtIdentifier):
            return kind == "at-identifier" and _content_ok(node.content, unit.content)
        if isinstance(node, String):
            return kind == "string" and (node.content is None or unit.content == node.content)
        if isinstance(node, Number):
            return kind == "number" and _unit_ok(node.unit, unit.unit)
        if isinstance(node, UnicodeRange):
            return kind == "unicode-range"
        raise MatcherError(f"not a predicate node: {node!r}")

    # ---- combinators ----
    def _repeat(self, node: Repeat, units: Seq, pos: int, out: List[Record]) -> int:
        mark = len(out)
        cur = pos
        count = 0
        while node.max is None or count < node.max:
            end = self.eval(node.inner, units, cur, out)
            if end < 0:
                break
            if end == cur:
                raise MatcherError(f"repeated matcher consumed nothing at offset {cur}: {node.inner!r}")
            cur = end
            count += 1
        if count < node.min:
            del out[mark:]
            return FAIL
        return cur

    def _subset(self, node: Subset, units: Seq, pos: int, out: List[Record]) -> int:
        mark = len(out)
        remaining = list(node.members)
        cur = pos
        count = 0
        while remaining and (node.max is None or count < node.max):
            for i, member in enumerate(remaining):
                end = self.eval(member, units, cur, out)
                if end >= 0:
                    cur = end
                    del remaining[i]
                    count += 1
                    break
            else:
                break
        if count < node.min:
            del out[mark:]
            return FAIL
        return cur

    def _nested(self, node, units: Seq, pos: int, out: List[Record]) -> int:
        p = skip_whitespace(units, pos)
        if p >= len(units):
            return FAIL
        unit = units[p]
        if isinstance(node, Container):
            if unit.type != node.type:
                return FAIL
            children, inner = unit.contents, node.contents
        else:
            if unit.type != "call" or not _content_ok(node.func_name, unit.func_name):
                return FAIL
            children, inner = unit.params, node.params
        mark = len(out)
        end = self.eval(inner, children, 0, out)
        # the inner matcher must describe the whole child list
        if end < 0 or skip_whitespace(children, end) != len(children):
            del out[mark:]
            return FAIL
        return p + 1

    # ---- captures ----
    def _capture(self, node: Node, units: Seq, pos: int, out: List[Record]) -> int:
        if isinstance(node, CaptureContext) and self.context is NO_CONTEXT:
            raise MatcherError("CaptureContext evaluated without a match context")

        mark = len(out)
        end = self.eval(node.inner, units, pos, out)
        if end < 0:
            return FAIL
        inner: List[Record] = out[mark:]
        del out[mark:]

        if isinstance(node, CaptureNamed):
            out.extend((node.name, value) for _, value in inner)
            return end

        if isinstance(node, CaptureConstant):
            value = node.value
        elif isinstance(node, CaptureContext):
            value = self.context
        elif isinstance(node, CaptureArray):
            value = [v for _, v in inner]
        elif isinstance(node, CaptureObject):
            value = {name: v for name, v in inner if name is not None}
        elif isinstance(node, CaptureTransform):
            value = node.fn(*(v for _, v in inner))
        elif isinstance(node, CaptureReduce):
            value = node.initial
            for _, v in inner:
                value = node.fn(value, v)
        else:
            start = skip_whitespace(units, pos)
            span = units[start:end] if end > start else []
            if isinstance(node, CaptureUnit):
                value = None if not span else (span[0] if len(span) == 1 else list(span))
            elif len(span) == 1:
                value = unit_content(span[0])
            else:
                value = join_content(span)
        out.append((None, value))
        return end


# ---- public entrypoints ----

def match(units: Seq, node: Node, sink: Optional[Sink] = None, start: int = 0,
          context: object = NO_CONTEXT) -> int:
    """Match ``node`` anchored at ``units[start]``.

    Returns the end offset, or -1 when there is no match. On success each
    top-level capture is passed to ``sink(value, name)`` in emission order;
    nothing reaches the sink for a failed match.
    """
    out: List[Record] = []
    end = Engine(context).eval(node, units, start, out)
    if end >= 0 and sink is not None:
        for name, value in out:
            sink(value, name)
    return end


def match_all(units: Seq, node: Node, context: object = NO_CONTEXT) -> Optional[list]:
    """Match ``node`` against the whole of ``units`` (trailing whitespace allowed).

    Returns the list of top-level capture values, or None if there is no
    complete match.
    """
    out: List[Record] = []
    end = Engine(context).eval(node, units, 0, out)
    if end < 0 or skip_whitespace(units, end) != len(units):
        return None
    return [value for _, value in out]
