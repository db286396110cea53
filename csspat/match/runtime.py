# csspat/match/runtime.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional

from ..lex import to_units
from .ast import Node
from .engine import NO_CONTEXT, match_all


@dataclass
class Pattern:
    """A matcher tree bound to text input."""
    node: Node
    ignore_comments: bool = False

    @classmethod
    def from_rules(cls, src: str, rule: str,
                   functions: Optional[Mapping] = None,
                   macros: Optional[Mapping] = None) -> "Pattern":
        from ..grammar import parse_rules
        rules = parse_rules(src, functions=functions, macros=macros)
        try:
            return cls(rules[rule])
        except KeyError:
            raise SyntaxError(f"undefined rule {rule!r}") from None

    def match(self, text: str, context: object = NO_CONTEXT) -> Optional[list]:
        """Captures of a match spanning all of ``text``, or None."""
        units = to_units(text, ignore_comments=self.ignore_comments)
        return match_all(units, self.node, context)

    def test(self, text: str, context: object = NO_CONTEXT) -> bool:
        return self.match(text, context) is not None
