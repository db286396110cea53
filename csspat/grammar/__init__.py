# csspat/grammar/__init__.py
"""Rule-definition language compiler.

- bootstrap: hand-built matcher tree for the rule language itself
- builtins : builtin functions (ID, CAP_ARRAY, ...) / macros and the Registry
- compiler : RuleCompiler / parse_rules
- resolve  : placeholder -> rule arena resolution
- loader   : rules files (load_rules_text / load_rules)
"""

from .builtins import BUILTIN_FUNCTIONS, BUILTIN_MACROS, FunctionHook, Registry
from .compiler import RuleCompiler, parse_rules
from .loader import load_rules, load_rules_text
from .resolve import resolve
