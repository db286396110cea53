# csspat/grammar/resolve.py
"""Placeholder resolution.

Every rule compiled from one document goes into a shared arena (a plain dict
keyed by rule name). A Placeholder naming a rule becomes ``Ref(name, arena)``;
one naming a macro is replaced by the macro's tree. Cycles between rules are
therefore representable without node objects pointing at each other.
"""

from __future__ import annotations
from typing import Dict, List, Mapping

from ..match.ast import Node, Placeholder, Ref, substitute


def _follow_chain(name: str, rules: Mapping[str, Node]) -> Node:
    """A rule whose whole body is another rule's name shares that rule's tree."""
    seen: List[str] = [name]
    body = rules[name]
    while isinstance(body, Placeholder) and body.name in rules:
        if body.name in seen:
            chain = " -> ".join(seen + [body.name])
            raise SyntaxError(f"rule alias cycle: {chain}")
        seen.append(body.name)
        body = rules[body.name]
    return body


def resolve(rules: Mapping[str, Node], macros: Mapping[str, Node]) -> Dict[str, Node]:
    """Return the arena: every rule with its placeholders substituted.

    Rule names shadow macro names. A name that is neither raises SyntaxError.
    """
    arena: Dict[str, Node] = {}

    def _swap(node: Node):
        if not isinstance(node, Placeholder):
            return None
        if node.name in rules:
            return Ref(node.name, arena)
        if node.name in macros:
            return macros[node.name]
        raise SyntaxError(f"unresolved reference {node.name!r} in rule {current!r}: "
                          "no rule or macro by that name")

    current = ""
    for name in rules:
        current = name
        arena[name] = substitute(_follow_chain(name, rules), _swap)
    return arena
