# csspat/grammar/compiler.py
"""Rule compiler: rule-definition source -> named matcher trees.

    selectors: CAP_ARRAY( selector (',' selector)* );
    selector:  CAP_OBJECT( CAP_NAMED(initial, -unit) ... );

The source is lexed with the csspat lexer and matched with the bootstrap tree
(see bootstrap.py) by the ordinary engine; building the target trees happens
inside that match. Placeholders left for rule/macro names are resolved once
every rule of the document is known.
"""

from __future__ import annotations
from typing import Dict, List, Mapping, Optional

from ..lex.units import CallUnit, Unit, to_units
from ..match.ast import Node
from ..match.engine import match, match_all, skip_whitespace
from .bootstrap import DOCUMENT, PATTERN
from .builtins import FunctionHook, Registry
from .resolve import resolve


def describe(unit: Unit) -> str:
    kind = unit.type
    if kind == "number":
        return f"number {unit.value}{unit.unit or ''}"
    if kind == "call":
        return f"call {unit.func_name}(...)"
    if kind in ("round", "square", "curly"):
        return f"{kind} block"
    if kind == "unicode-range":
        return f"unicode-range U+{unit.from_cp:X}-{unit.to_cp:X}"
    return f"{kind} {unit.content!r}"


class RuleCompiler:
    """Compiles rule documents against one Registry of functions and macros.

    The registry is owned by the compiler, so independent compilers (with
    different extensions) never interfere.
    """

    def __init__(self, registry: Optional[Registry] = None):
        self.registry = registry if registry is not None else Registry.with_builtins()

    # ---- documents ----
    def compile(self, src: str) -> Dict[str, Node]:
        units = to_units(src)
        decls: List[list] = []
        end = match(units, DOCUMENT, lambda value, name: decls.append(value), 0, context=self)
        stop = skip_whitespace(units, max(end, 0))
        if end < 0 or stop != len(units):
            where = describe(units[stop]) if stop < len(units) else "end of input"
            after = f" after rule {decls[0][-1][0]!r}" if decls and decls[0] else ""
            raise SyntaxError(f"invalid rule definition at {where}{after}")

        rules: Dict[str, Node] = {}
        for name, pattern in decls[0]:
            if name in rules:
                raise SyntaxError(f"duplicate rule {name!r}")
            rules[name] = pattern
        return resolve(rules, self.registry.macros)

    # ---- used by function hooks ----
    def compile_pattern(self, units: List[Unit]) -> Node:
        """Compile a unit list (e.g. a function's parameters) as one pattern.
        The result may still contain placeholders."""
        captures = match_all(units, PATTERN, context=self)
        if captures is None:
            shown = ", ".join(describe(u) for u in units if u.type not in ("whitespace", "comment"))
            raise SyntaxError(f"invalid pattern: [{shown}]")
        return captures[0]

    def split_params(self, units: List[Unit], maxsplit: int = -1) -> List[List[Unit]]:
        """Split a parameter list on top-level ',' symbols."""
        groups: List[List[Unit]] = [[]]
        for u in units:
            if u.type == "symbol" and u.content == "," and (maxsplit < 0 or len(groups) <= maxsplit):
                groups.append([])
            else:
                groups[-1].append(u)
        return groups

    def apply_function(self, call: CallUnit) -> Node:
        hook = self.registry.functions.get(call.func_name)
        if hook is None:
            raise SyntaxError(f"unknown rule function {call.func_name}()")
        return hook(self, call.params)


def parse_rules(
        src: str,
        functions: Optional[Mapping[str, FunctionHook]] = None,
        macros: Optional[Mapping[str, Node]] = None) -> Dict[str, Node]:
    """Compile ``src`` and return ``{rule name: matcher tree}``.

    Caller ``functions``/``macros`` are merged over the builtins (caller wins).
    """
    return RuleCompiler(Registry.with_builtins(functions, macros)).compile(src)
