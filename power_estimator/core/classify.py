# power_estimator/core/classify.py
from __future__ import annotations
import logging
import re
from typing import Iterable

from .model import InstructionCategory, ParsedInstruction

# ----- defaults (used if configure_from_config isn't called) -----
_COMMENT_PREFIXES: tuple[str, ...] = ("//", "/*", "*")

_BRANCH_KEYWORDS: tuple[str, ...] = ("if", "else", "switch", "case", "default")
_CONTROL_KEYWORDS: tuple[str, ...] = ("for", "while", "do", "break", "continue", "return")

_COMPOUND_ASSIGN = re.compile(r"[+\-*/%]=")
_ASSIGN_THEN_ARITH = re.compile(r"=.*[+\-*/%]")
_BIT_OPERATOR = re.compile(r"[&|^]")

_LOG = logging.getLogger(__name__)

def configure_from_config(cfg: dict) -> None:
    """
    Optional: call once at startup to override the skipped comment prefixes
    from config.yaml. The categorisation rules are fixed.
    """
    global _COMMENT_PREFIXES

    # reset to defaults each call so repeated invocations do not accumulate
    _COMMENT_PREFIXES = ("//", "/*", "*")
    cls = (cfg or {}).get("classification", {}) if cfg else {}
    prefixes = cls.get("comment_prefixes", None)
    if isinstance(prefixes, Iterable) and not isinstance(prefixes, (str, bytes)):
        _COMMENT_PREFIXES = tuple(str(p) for p in prefixes if str(p))

def is_skipped(line: str) -> bool:
    """True for blank lines and comment lines (expects an already trimmed line)."""
    return not line or line.startswith(_COMMENT_PREFIXES)

def categorize_line(line: str) -> InstructionCategory:
    """
    Lexical category of a single source line.

    Order (first match wins):
      1) ARITHMETIC: compound assignment, '=' followed by an arithmetic operator,
         'math.', '++' or '--'
      2) LOGICAL: '&&', '||', any of & | ^, or '!' anywhere (also catches '!=')
      3) BRANCH: starts with if/else/switch/case/default
      4) CONTROL: starts with for/while/do/break/continue/return
      5) MEMORY: '[', 'new ', 'malloc', 'free'
      6) UNKNOWN
    Keyword rules are plain prefix checks, so 'double x;' counts as CONTROL.
    """
    lower = line.strip().lower()

    if (_COMPOUND_ASSIGN.search(lower)
            or _ASSIGN_THEN_ARITH.search(lower)
            or "math." in lower
            or "++" in lower
            or "--" in lower):
        return InstructionCategory.ARITHMETIC

    if "&&" in lower or "||" in lower or _BIT_OPERATOR.search(lower) or "!" in lower:
        return InstructionCategory.LOGICAL

    if lower.startswith(_BRANCH_KEYWORDS):
        return InstructionCategory.BRANCH

    if lower.startswith(_CONTROL_KEYWORDS):
        return InstructionCategory.CONTROL

    if "[" in lower or "new " in lower or "malloc" in lower or "free" in lower:
        return InstructionCategory.MEMORY

    return InstructionCategory.UNKNOWN

def split_lines(text: str) -> list[str]:
    if not text:
        return []
    return text.split("\n")

def classify(lines: str | Iterable[str]) -> list[ParsedInstruction]:
    """
    Turn source text (or an iterable of lines) into ParsedInstructions.

    Lines are trimmed; blank and comment lines produce nothing. The output keeps
    the relative order of the surviving lines.
    """
    if lines is None:
        return []
    if isinstance(lines, str):
        lines = split_lines(lines)

    out: list[ParsedInstruction] = []
    for raw in lines:
        line = str(raw).strip()
        if is_skipped(line):
            continue
        category = categorize_line(line)
        _LOG.debug("%-10s <- %s", category.name, line)
        out.append(ParsedInstruction(line, category))
    return out
