"""csspat: structural pattern matching over CSS-like token streams.

lexer (``csspat.lex``) -> units (``to_units``) -> matcher engine
(``csspat.match``) <- rule compiler (``csspat.grammar``)
"""

from .lex import Token, NumberToken, UnicodeRangeToken, ContainerUnit, CallUnit, each_token, to_units
from .match import MatcherError, NO_CONTEXT, Pattern, match, match_all
from .grammar import Registry, RuleCompiler, load_rules, load_rules_text, parse_rules

__version__ = "0.1.0"
