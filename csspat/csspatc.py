# csspat/csspatc.py
"""csspatc: csspat CLI

Usage)
    $ python -m csspat.csspatc lex --text 'div.foo > #bar'
    $ python -m csspat.csspatc units --text 'a(b [c])'
    $ python -m csspat.csspatc check tests/grammar_test/selectors.g -D
    $ python -m csspat.csspatc match tests/grammar_test/selectors.g selectors --text 'div.foo > #bar'

Commands
--------
- lex   : print the flat token stream of the input text
- units : print the unit tree of the input text
- check : compile a rules file and list the rules it defines
- match : compile a rules file and match one rule against the input text,
          printing the captures as JSON

Debug mode (-D/--debug) reports each pipeline stage on stderr.
Exit status: 0 ok, 1 no match, 2 error.
"""

from __future__ import annotations
import argparse
import dataclasses
import json
import sys
from typing import Optional

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _read_input(args) -> str:
    if args.text is not None:
        return args.text
    with open(args.input, "r", encoding="utf-8") as f:
        return f.read()


def _jsonable(value):
    """json.dumps fallback for units and sentinels found in captures."""
    from .match import UNDEFINED
    if value is UNDEFINED:
        return None
    if dataclasses.is_dataclass(value):
        out = {"type": value.type}
        out.update(dataclasses.asdict(value))
        return out
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return repr(value)


def _print_units(units, depth: int = 0) -> None:
    pad = "  " * depth
    for u in units:
        if u.type in ("round", "square", "curly"):
            print(f"{pad}{u.type}")
            _print_units(u.contents, depth + 1)
        elif u.type == "call":
            print(f"{pad}call {u.func_name}")
            _print_units(u.params, depth + 1)
        else:
            print(f"{pad}{u!r}")


def _add_input_args(p) -> None:
    src_group = p.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="input text")
    src_group.add_argument("--input", help="input text file path")

# ------------------------------
# commands
# ------------------------------

def cmd_lex(args) -> int:
    from .lex import each_token
    try:
        text = _read_input(args)
        for i, tok in enumerate(each_token(text)):
            print(f"{i:03d}: {tok.type:<14} {tok!r}")
        return 0
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]", str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2


def cmd_units(args) -> int:
    from .lex import to_units
    try:
        units = to_units(_read_input(args),
                         ignore_whitespace=args.ignore_whitespace,
                         ignore_comments=args.ignore_comments)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]", str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2
    _print_units(units)
    return 0


def _load_rules(path: str, debug: bool):
    from .grammar import load_rules
    if debug: _eprint(f"[DEBUG] compiling rules file | path={path}")
    rules = load_rules(path)
    if debug: _eprint(f"[DEBUG] rules compiled | count={len(rules)}")
    return rules


def cmd_check(args) -> int:
    try:
        rules = _load_rules(args.file, args.debug)
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    for name, node in rules.items():
        print(f"{name}: {type(node).__name__}")
    print(f"[CHECK OK] rules={len(rules)}")
    return 0


def cmd_match(args) -> int:
    from .lex import to_units
    from .match import MatcherError, match_all
    try:
        rules = _load_rules(args.file, args.debug)
        if args.rule not in rules:
            _eprint(f"[ERROR] no rule named {args.rule!r} in {args.file}")
            return 2
        units = to_units(_read_input(args))
        if args.debug: _eprint(f"[DEBUG] input units | top-level={len(units)}")
        captures = match_all(units, rules[args.rule])
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except MatcherError as e:
        _eprint("[MATCH ERROR]", str(e))
        return 2
    except OSError as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if captures is None:
        print("[NO MATCH]")
        return 1
    print(json.dumps(captures, default=_jsonable, ensure_ascii=False, indent=2))
    return 0

# ------------------------------
# entrypoint
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="csspatc", description="csspat pattern toolkit CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_lex = sub.add_parser("lex", help="tokenize input text")
    _add_input_args(p_lex)
    p_lex.set_defaults(func=cmd_lex)

    p_units = sub.add_parser("units", help="print the unit tree of input text")
    _add_input_args(p_units)
    p_units.add_argument("--ignore-whitespace", action="store_true", help="drop whitespace units")
    p_units.add_argument("--ignore-comments", action="store_true", help="drop comment units")
    p_units.set_defaults(func=cmd_units)

    p_check = sub.add_parser("check", help="compile a rules file and list its rules")
    p_check.add_argument("file", help="rules file")
    p_check.add_argument("-D", "--debug", action="store_true", help="report pipeline stages on stderr")
    p_check.set_defaults(func=cmd_check)

    p_match = sub.add_parser("match", help="match a rule against input text and print captures")
    p_match.add_argument("file", help="rules file")
    p_match.add_argument("rule", help="rule name to match")
    _add_input_args(p_match)
    p_match.add_argument("-D", "--debug", action="store_true", help="report pipeline stages on stderr")
    p_match.set_defaults(func=cmd_match)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
