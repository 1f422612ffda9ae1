"""
Pattern-table helpers.

Rule tables are ordered lists of (compiled pattern, value) pairs. The first
pattern that matches decides the value, so tables are written from most to
least specific.
"""
import re
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

PatternTable = List[Tuple[Pattern, str]]


def compile_table(rows: Sequence[Tuple[str, str]]) -> PatternTable:
    """Compile (regex, value) rows into a PatternTable."""
    return [(re.compile(regex, re.IGNORECASE), value) for regex, value in rows]


def compile_all(regexes: Iterable[str]) -> List[Pattern]:
    """Compile a list of regexes."""
    return [re.compile(regex, re.IGNORECASE) for regex in regexes]


def first_match(table: PatternTable, text: str) -> Optional[str]:
    """Value of the first row whose pattern matches text, else None."""
    for pattern, value in table:
        if pattern.search(text):
            return value
    return None


def any_match(patterns: Iterable[Pattern], text: str) -> bool:
    """True when any pattern matches text."""
    return any(pattern.search(text) for pattern in patterns)


def word_alternation(words: Iterable[str]) -> str:
    """Regex matching any of the given words or phrases on word boundaries."""
    escaped = (re.escape(w).replace(r"\ ", r"\s+") for w in words)
    return r"\b(?:" + "|".join(escaped) + r")\b"
