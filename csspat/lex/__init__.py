# csspat/lex/__init__.py
"""csspat tokenizer: CSS-style flat tokens from raw text.

Features
--------
- One forward scan driven by a single master pattern; alternatives are tried
  in declaration order (first match wins), so longer / more specific token
  shapes are listed first.
- Escapes (``\\4F ``, ``\\"`` ...) are decoded in identifiers, at-keywords,
  hashes, units and strings.
- ``url(foo.png)`` (unquoted) becomes a single ``url`` token; the quoted form
  lexes as call-open + string + ``)``.
- Unicode ranges (``U+0-7F``, ``U+4??``) become :class:`UnicodeRangeToken`.

API
---
- ``Token(type, content)``: comment / whitespace / string / identifier /
  at-identifier / hash / symbol / call-open / url
- ``NumberToken(value, unit)``
- ``UnicodeRangeToken(from_cp, to_cp)``
- ``each_token(text)``: generator of the above
- ``to_units(src, ...)``: tree builder (see :mod:`csspat.lex.units`)

Fatal input problems (unterminated string/comment, bad escape, malformed
unicode range) raise ``SyntaxError`` with a ``line:col`` position.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union
import regex as re


MAX_CODEPOINT = 0x10FFFF

# --------- Public datatypes ---------

@dataclass(frozen=True)
class Token:
    type: str       # comment | whitespace | string | identifier | at-identifier | hash | symbol | call-open | url
    content: str    # decoded text (no quotes / sigils / comment delimiters)

@dataclass(frozen=True)
class NumberToken:
    value: Union[int, float]
    unit: Optional[str] = None   # '%' or an identifier-shaped unit
    type: str = field(default="number", init=False, repr=False)

@dataclass(frozen=True)
class UnicodeRangeToken:
    from_cp: int
    to_cp: int      # inclusive
    type: str = field(default="unicode-range", init=False, repr=False)

FlatToken = Union[Token, NumberToken, UnicodeRangeToken]

# --------- Patterns ---------

_WS = r"(?:\r\n|[ \t\r\n\f])"
_ESCAPE = r"\\(?:[^\r\n\f0-9a-fA-F]|[0-9a-fA-F]{1,6}" + _WS + r"?)"
# strings additionally allow an escaped newline (which decodes to nothing)
_STRING_ESCAPE = r"\\(?:[^\r\n\f0-9a-fA-F]|[0-9a-fA-F]{1,6}" + _WS + r"?|\r\n|[\r\n\f])"

_HEAD = r"(?:[a-zA-Z_\u0080-\U0010FFFF]|" + _ESCAPE + r")"
_TAIL = r"(?:[a-zA-Z0-9_\-\u0080-\U0010FFFF]|" + _ESCAPE + r")"
_IDENT = r"(?:--|-?" + _HEAD + r")" + _TAIL + r"*"


def _url_letter(lower: str, hex_a: str, hex_b: str) -> str:
    # a letter of "url", literal, backslash-escaped, or as a hex escape
    return rf"(?:\\?[{lower}{lower.upper()}]|\\0{{0,4}}[{hex_a}]{hex_b}{_WS}?)"

_URL = (
    _url_letter("u", "57", "5")
    + _url_letter("r", "57", "2")
    + _url_letter("l", "46", "[cC]")
    + r"\([ \t\r\n\f]*(?P<url_arg>[^\"'()\\ \t\r\n\f\x00-\x08\x0E-\x1F\x7F]+)[ \t\r\n\f]*\)"
)

_TOKEN_SPEC = [
    ("comment",       r"/\*.*?\*/"),
    ("open_comment",  r"/\*"),
    ("whitespace",    r"[ \t\r\n\f]+"),
    ("urange",        r"[uU]\+(?P<ur_from>[0-9a-fA-F?]{1,6})(?:-(?P<ur_to>[0-9a-fA-F?]{1,6}))?"),
    ("url",           _URL),
    ("ident",         _IDENT + r"(?P<call_paren>\()?"),
    ("at",            r"@" + _IDENT),
    ("hash",          r"#" + _TAIL + r"+"),
    ("dq_string",     r'"(?:[^"\\\r\n\f]+|' + _STRING_ESCAPE + r')*"'),
    ("sq_string",     r"'(?:[^'\\\r\n\f]+|" + _STRING_ESCAPE + r")*'"),
    ("number",        r"[+\-]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]+)?)(?:[eE][+\-]?[0-9]+)?"
                      r"(?P<unit>%|" + _IDENT + r")?"),
    ("open_string",   r"[\"']"),
    ("backslash",     r"\\"),
    ("symbol",        r"."),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n, p in _TOKEN_SPEC), re.S)

_ESCAPE_RE = re.compile(_ESCAPE, re.S)
_STRING_ESCAPE_RE = re.compile(_STRING_ESCAPE, re.S)
_HEX_PREFIX_RE = re.compile(r"\\([0-9a-fA-F]+)")

# --------- Helpers ---------

def _where(text: str, pos: int) -> str:
    """Human readable 1-based ``line:col`` of an absolute offset."""
    line = text.count("\n", 0, pos) + 1
    col = pos - (text.rfind("\n", 0, pos) + 1) + 1
    return f"{line}:{col}"

def _err(text: str, pos: int, msg: str) -> SyntaxError:
    return SyntaxError(f"{msg} at {_where(text, pos)}")

def _decode(raw: str, text: str, pos: int, *, in_string: bool = False) -> str:
    """Replace every escape sequence in ``raw`` (found at ``pos`` of ``text``)."""
    if "\\" not in raw:
        return raw

    def _replace(m) -> str:
        esc = m.group(0)
        hx = _HEX_PREFIX_RE.match(esc)
        if hx:
            cp = int(hx.group(1), 16)
            if cp > MAX_CODEPOINT:
                raise _err(text, pos + m.start(), f"unicode escape {esc.strip()!r} out of range")
            return chr(cp)
        if esc[1] in "\r\n\f":
            # escaped newlines are omitted, not preserved
            return ""
        return esc[1:]

    rx = _STRING_ESCAPE_RE if in_string else _ESCAPE_RE
    return rx.sub(_replace, raw)

def _to_number(num: str) -> Union[int, float]:
    if any(c in num for c in ".eE"):
        return float(num)
    return int(num)

def _unicode_range(m, text: str) -> UnicodeRangeToken:
    pos = m.start()
    lo_s: str = m.group("ur_from")
    hi_s: Optional[str] = m.group("ur_to")
    if "?" in lo_s:
        if hi_s is not None:
            raise _err(text, pos, "unicode-range cannot combine '?' wildcards with an explicit range")
        if "?" in lo_s.rstrip("?"):
            raise _err(text, pos, "unicode-range wildcards must be trailing")
        lo = int(lo_s.replace("?", "0"), 16)
        hi = min(int(lo_s.replace("?", "f"), 16), MAX_CODEPOINT)
    else:
        lo = int(lo_s, 16)
        if hi_s is None:
            hi = lo
        else:
            if "?" in hi_s:
                raise _err(text, pos, "unicode-range end point cannot contain '?'")
            hi = int(hi_s, 16)
    if lo > MAX_CODEPOINT or hi > MAX_CODEPOINT:
        raise _err(text, pos, "unicode-range end point above U+10FFFF")
    if hi < lo:
        raise _err(text, pos, "unicode-range end point lower than its start")
    return UnicodeRangeToken(lo, hi)

# --------- Core implementation ---------

def each_token(text: str) -> Iterator[FlatToken]:
    """Lex ``text`` into flat tokens, lazily."""
    i = 0
    n = len(text)
    while i < n:
        m = MASTER_RE.match(text, i)
        kind = m.lastgroup
        lex = m.group(0)

        if kind == "whitespace":
            yield Token("whitespace", lex)
        elif kind == "comment":
            yield Token("comment", lex[2:-2])
        elif kind == "open_comment":
            raise _err(text, i, "unterminated comment")
        elif kind == "urange":
            yield _unicode_range(m, text)
        elif kind == "url":
            yield Token("url", m.group("url_arg"))
        elif kind == "ident":
            if m.group("call_paren") is not None:
                yield Token("call-open", _decode(lex[:-1], text, i))
            else:
                yield Token("identifier", _decode(lex, text, i))
        elif kind == "at":
            yield Token("at-identifier", _decode(lex[1:], text, i + 1))
        elif kind == "hash":
            yield Token("hash", _decode(lex[1:], text, i + 1))
        elif kind in ("dq_string", "sq_string"):
            yield Token("string", _decode(lex[1:-1], text, i + 1, in_string=True))
        elif kind == "number":
            unit = m.group("unit")
            if unit:
                yield NumberToken(_to_number(lex[:-len(unit)]),
                                  _decode(unit, text, m.start("unit")))
            else:
                yield NumberToken(_to_number(lex))
        elif kind == "open_string":
            raise _err(text, i, "unterminated string")
        elif kind == "backslash":
            raise _err(text, i, "invalid escape")
        else:
            yield Token("symbol", lex)
        i = m.end()


def tokenize(text: str) -> list:
    """Eager convenience wrapper around :func:`each_token`."""
    return list(each_token(text))


from .units import ContainerUnit, CallUnit, Unit, to_units  # noqa: E402
