# csspat/match/__init__.py
"""Matcher engine for csspat units.

This package provides:
- Matcher node definitions (a closed set of frozen dataclasses)
- A backtracking engine with a capture protocol
- A small runtime wrapper binding a matcher tree to text input
"""

from .ast import (
    Any, End, Success, Failure, ZeroWhitespace, NonzeroWhitespace,
    Symbol, Identifier, AtIdentifier, Hash, String, Number, UnicodeRange,
    Sequence, Alternate, Repeat, Subset, Container, Call,
    CaptureConstant, CaptureContext, CaptureArray, CaptureObject, CaptureNamed,
    CaptureTransform, CaptureReduce, CaptureUnit, CaptureContent,
    Placeholder, Ref, Node, NO_UNIT, UNDEFINED,
)
from .engine import Engine, MatcherError, NO_CONTEXT, match, match_all
from .runtime import Pattern
