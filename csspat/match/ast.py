# csspat/match/ast.py
from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Dict, FrozenSet, Iterator, Optional, Tuple, Union
import regex as re

# Pattern-like content constraint: a literal string or a compiled `regex` pattern
Content = Optional[Union[str, re.Pattern]]

# Member of a Number unit set meaning "no unit at all"
NO_UNIT = None


class _Undefined:
    """Distinct from None: the value of ``CAP_CONST(undefined)``."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

UNDEFINED = _Undefined()

# ---- Matcher node definitions ----

# -- zero/one-unit predicates

@dataclass(frozen=True)
class Any:
    pass

@dataclass(frozen=True)
class End:
    pass

@dataclass(frozen=True)
class Success:
    pass

@dataclass(frozen=True)
class Failure:
    pass

@dataclass(frozen=True)
class ZeroWhitespace:
    pass  # no whitespace/comment at the raw position

@dataclass(frozen=True)
class NonzeroWhitespace:
    pass  # at least one whitespace/comment unit, consumed

@dataclass(frozen=True)
class Symbol:
    text: str

@dataclass(frozen=True)
class Identifier:
    content: Content = None

@dataclass(frozen=True)
class AtIdentifier:
    content: Content = None

@dataclass(frozen=True)
class Hash:
    content: Content = None

@dataclass(frozen=True)
class String:
    content: Optional[str] = None

@dataclass(frozen=True)
class Number:
    # None: unitless only; str: exactly that unit; frozenset: any listed unit (NO_UNIT admits unitless)
    unit: Union[None, str, FrozenSet[Optional[str]]] = None

@dataclass(frozen=True)
class UnicodeRange:
    pass

# -- combinators

@dataclass(frozen=True)
class Sequence:
    items: Tuple["Node", ...]

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

@dataclass(frozen=True)
class Alternate:
    options: Tuple["Node", ...]

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))

@dataclass(frozen=True)
class Repeat:
    inner: "Node"
    min: int = 0
    max: Optional[int] = None   # None: unbounded

@dataclass(frozen=True)
class Subset:
    members: Tuple["Node", ...]
    min: int = 0
    max: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "members", tuple(self.members))

@dataclass(frozen=True)
class Container:
    type: str          # 'round' | 'square' | 'curly'
    contents: "Node"

@dataclass(frozen=True)
class Call:
    func_name: Content
    params: "Node"

# -- captures

@dataclass(frozen=True)
class CaptureConstant:
    value: object
    inner: "Node" = Success()

@dataclass(frozen=True)
class CaptureContext:
    inner: "Node" = Success()

@dataclass(frozen=True)
class CaptureArray:
    inner: "Node"

@dataclass(frozen=True)
class CaptureObject:
    inner: "Node"

@dataclass(frozen=True)
class CaptureNamed:
    name: str
    inner: "Node"

@dataclass(frozen=True)
class CaptureTransform:
    fn: Callable[..., object]
    inner: "Node"

@dataclass(frozen=True)
class CaptureReduce:
    fn: Callable[[object, object], object]
    initial: object
    inner: "Node"

@dataclass(frozen=True)
class CaptureUnit:
    inner: "Node"

@dataclass(frozen=True)
class CaptureContent:
    inner: "Node"

# -- references

@dataclass(frozen=True)
class Placeholder:
    name: str  # must be resolved before matching

@dataclass(frozen=True)
class Ref:
    """Resolved rule reference: looks ``name`` up in a shared rule arena."""
    name: str
    rules: Dict[str, "Node"] = field(compare=False, repr=False)

    @property
    def target(self) -> "Node":
        return self.rules[self.name]


Node = Union[
    Any, End, Success, Failure, ZeroWhitespace, NonzeroWhitespace,
    Symbol, Identifier, AtIdentifier, Hash, String, Number, UnicodeRange,
    Sequence, Alternate, Repeat, Subset, Container, Call,
    CaptureConstant, CaptureContext, CaptureArray, CaptureObject, CaptureNamed,
    CaptureTransform, CaptureReduce, CaptureUnit, CaptureContent,
    Placeholder, Ref,
]

# ---- generic traversal ----

_NODE_FIELDS = ("inner", "contents", "params")
_NODE_TUPLE_FIELDS = ("items", "options", "members")


def children(node: Node) -> Tuple[Node, ...]:
    """Direct child nodes. A Ref is a leaf here; its target lives in the arena."""
    out = []
    for f in fields(node):
        if f.name in _NODE_FIELDS:
            out.append(getattr(node, f.name))
        elif f.name in _NODE_TUPLE_FIELDS:
            out.extend(getattr(node, f.name))
    return tuple(out)


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of a tree, not following Refs."""
    stack = [node]
    while stack:
        cur = stack.pop()
        yield cur
        stack.extend(reversed(children(cur)))


def substitute(node: Node, fn: Callable[[Node], Optional[Node]]) -> Node:
    """Rebuild ``node`` top-down; wherever ``fn`` returns a node, it replaces
    the subtree there (and is not descended into). Unchanged subtrees are
    shared, not copied."""
    new = fn(node)
    if new is not None:
        return new
    changes = {}
    for f in fields(node):
        if f.name in _NODE_FIELDS:
            old = getattr(node, f.name)
            sub = substitute(old, fn)
            if sub is not old:
                changes[f.name] = sub
        elif f.name in _NODE_TUPLE_FIELDS:
            old_items = getattr(node, f.name)
            new_items = tuple(substitute(it, fn) for it in old_items)
            if any(a is not b for a, b in zip(old_items, new_items)):
                changes[f.name] = new_items
    return replace(node, **changes) if changes else node


def has_placeholders(node: Node) -> bool:
    return any(isinstance(n, Placeholder) for n in walk(node))
