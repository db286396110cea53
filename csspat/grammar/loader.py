"""Rule file loading."""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from ..match.ast import Node
from .builtins import FunctionHook
from .compiler import parse_rules

PathLike = Union[str, Path]


def load_rules_text(path: PathLike) -> str:
    """Read a rules file: a leading BOM is dropped and newlines become LF."""
    text = Path(path).read_text(encoding="utf-8-sig")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_rules(
        path: PathLike,
        functions: Optional[Mapping[str, FunctionHook]] = None,
        macros: Optional[Mapping[str, Node]] = None) -> Dict[str, Node]:
    """Compile a rules file. Source errors are reported against ``path``."""
    src = load_rules_text(path)
    try:
        return parse_rules(src, functions, macros)
    except SyntaxError as e:
        raise SyntaxError(f"{path}: {e.msg}") from None
