# csspat/grammar/builtins.py
"""Builtin rule-language functions and macros, and the Registry that carries
them (plus any caller extensions) into a compiler.

A function hook is called as ``hook(compiler, params)`` where ``params`` is the
call unit's parameter list; it returns a matcher node (placeholders allowed,
they are resolved with the rest of the document). A macro is a ready matcher
tree and must not contain placeholders.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Mapping, Optional
import math
import regex as re

from ..lex.units import Unit
from ..match.ast import (
    Alternate, Any, AtIdentifier, Call, CaptureArray, CaptureConstant, CaptureContent,
    CaptureContext, CaptureNamed, CaptureObject, CaptureUnit, Container, End, Hash,
    Identifier, NO_UNIT, Node, NonzeroWhitespace, Number, Repeat, String, Subset,
    Success, UNDEFINED, UnicodeRange, ZeroWhitespace, has_placeholders,
)

if TYPE_CHECKING:
    from .compiler import RuleCompiler

FunctionHook = Callable[["RuleCompiler", List[Unit]], Node]

# ---- helpers ----

def significant(units: List[Unit]) -> List[Unit]:
    return [u for u in units if u.type not in ("whitespace", "comment")]

def _single(fname: str, units: List[Unit]) -> Unit:
    parts = significant(units)
    if len(parts) != 1:
        raise SyntaxError(f"{fname}() expects a single value, got {len(parts)}")
    return parts[0]

def _name_of(fname: str, unit: Unit) -> str:
    if unit.type in ("identifier", "string"):
        return unit.content
    raise SyntaxError(f"{fname}() expects a name (identifier or string), got {unit!r}")

def _regex_arg(fname: str, call) -> "re.Pattern":
    src = _name_of("MATCH", _single("MATCH", call.params))
    try:
        return re.compile(src)
    except re.error as e:
        raise SyntaxError(f"{fname}(MATCH({src!r})): invalid regular expression: {e}") from None

def _names_or_match(fname: str, params: List[Unit], make: Callable[[object], Node]) -> Node:
    """``a | b | 'c'`` -> alternation of literal matches; ``MATCH("re")`` -> regex match."""
    parts = significant(params)
    if len(parts) == 1 and parts[0].type == "call" and parts[0].func_name == "MATCH":
        return make(_regex_arg(fname, parts[0]))
    names: List[str] = []
    for i, u in enumerate(parts):
        if i % 2:
            if not (u.type == "symbol" and u.content == "|"):
                raise SyntaxError(f"{fname}() alternatives must be separated by '|', got {u!r}")
        else:
            names.append(_name_of(fname, u))
    if not names or len(parts) % 2 == 0:
        raise SyntaxError(f"{fname}() expects one or more names separated by '|'")
    nodes = [make(n) for n in names]
    return nodes[0] if len(nodes) == 1 else Alternate(nodes)

# ---- builtin functions ----

def fn_id(compiler, params):
    return _names_or_match("ID", params, Identifier)

def fn_hash(compiler, params):
    return _names_or_match("HASH", params, Hash)

def fn_at(compiler, params):
    return _names_or_match("AT", params, AtIdentifier)

def fn_fn(compiler, params):
    """FN(name(pattern)) or FN(MATCH("re"), pattern).

    Without a pattern the MATCH form accepts any parameters.
    """
    groups = compiler.split_params(params, maxsplit=1)
    call = _single("FN", groups[0])
    if call.type != "call":
        raise SyntaxError(f"FN() expects a call like name(...), got {call!r}")
    if call.func_name == "MATCH":
        inner = compiler.compile_pattern(groups[1]) if len(groups) > 1 else Repeat(Any())
        return Call(_regex_arg("FN", call), inner)
    if len(groups) > 1:
        raise SyntaxError(f"FN({call.func_name}(...)) takes no second argument")
    return Call(call.func_name, compiler.compile_pattern(call.params))

def _any_order(minimum: int) -> FunctionHook:
    def hook(compiler, params):
        members = [compiler.compile_pattern(group) for group in compiler.split_params(params)]
        return Subset(members, minimum, None)
    return hook

def _container(kind: str) -> FunctionHook:
    def hook(compiler, params):
        return Container(kind, compiler.compile_pattern(params))
    return hook

def _wrap(capture) -> FunctionHook:
    def hook(compiler, params):
        return capture(compiler.compile_pattern(params))
    return hook

def fn_cap_named(compiler, params):
    groups = compiler.split_params(params, maxsplit=1)
    if len(groups) != 2:
        raise SyntaxError("CAP_NAMED() expects a name and a pattern: CAP_NAMED(name, pattern)")
    name = _name_of("CAP_NAMED", _single("CAP_NAMED", groups[0]))
    return CaptureNamed(name, compiler.compile_pattern(groups[1]))

_CONST_IDENTS = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
    "NaN": math.nan,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}

def fn_cap_const(compiler, params):
    unit = _single("CAP_CONST", params)
    if unit.type == "string":
        value = unit.content
    elif unit.type == "number" and unit.unit is None:
        value = unit.value
    elif unit.type == "identifier" and unit.content in _CONST_IDENTS:
        value = _CONST_IDENTS[unit.content]
    else:
        raise SyntaxError(f"CAP_CONST() expects a string, number, true, false, null, undefined, "
                          f"NaN or Infinity, got {unit!r}")
    return CaptureConstant(value, Success())

def fn_cap_context(compiler, params):
    inner = compiler.compile_pattern(params) if significant(params) else Success()
    return CaptureContext(inner)

def fn_dimension(compiler, params):
    """DIMENSION(px | em | '%' | NONE): a number whose unit is one of those listed."""
    units = set()
    for i, u in enumerate(significant(params)):
        if i % 2:
            if not (u.type == "symbol" and u.content == "|"):
                raise SyntaxError(f"DIMENSION() units must be separated by '|', got {u!r}")
        elif u.type == "identifier" and u.content == "NONE":
            units.add(NO_UNIT)
        else:
            units.add(_name_of("DIMENSION", u))
    if not units:
        raise SyntaxError("DIMENSION() expects at least one unit")
    return Number(frozenset(units))


BUILTIN_FUNCTIONS: Dict[str, FunctionHook] = {
    "ID": fn_id,
    "HASH": fn_hash,
    "AT": fn_at,
    "FN": fn_fn,
    "ONE_OR_MORE_ANY_ORDER": _any_order(1),
    "ZERO_OR_MORE_ANY_ORDER": _any_order(0),
    "ROUND": _container("round"),
    "SQUARE": _container("square"),
    "CURLY": _container("curly"),
    "CAP": _wrap(CaptureContent),
    "CAP_UNIT": _wrap(CaptureUnit),
    "CAP_ARRAY": _wrap(CaptureArray),
    "CAP_OBJECT": _wrap(CaptureObject),
    "CAP_NAMED": fn_cap_named,
    "CAP_CONST": fn_cap_const,
    "CAP_CONTEXT": fn_cap_context,
    "DIMENSION": fn_dimension,
}

# ---- builtin macros ----

BUILTIN_MACROS: Dict[str, Node] = {
    "number": Number(),
    "percentage": Number("%"),
    "string": String(),
    "identifier": Identifier(),
    "hash": Hash(),
    "at-identifier": AtIdentifier(),
    "unicode-range": UnicodeRange(),
    "call": Call(None, Repeat(Any())),
    "any": Any(),
    "end": End(),
    "NONZERO_WHITESPACE": NonzeroWhitespace(),
    "ZERO_WHITESPACE": ZeroWhitespace(),
}

# ---- registry ----

@dataclass
class Registry:
    functions: Dict[str, FunctionHook] = field(default_factory=dict)
    macros: Dict[str, Node] = field(default_factory=dict)

    @classmethod
    def with_builtins(
            cls,
            functions: Optional[Mapping[str, FunctionHook]] = None,
            macros: Optional[Mapping[str, Node]] = None) -> "Registry":
        """Builtins merged with caller entries. On a name collision the
        caller's entry wins."""
        merged_functions = dict(BUILTIN_FUNCTIONS)
        merged_functions.update(functions or {})
        merged_macros = dict(BUILTIN_MACROS)
        for name, node in (macros or {}).items():
            if has_placeholders(node):
                raise SyntaxError(f"macro {name!r} contains unresolved placeholders")
            merged_macros[name] = node
        return cls(merged_functions, merged_macros)
