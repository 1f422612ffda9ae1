"""
Note text normalization shared by every extractor.

Lower-cases and collapses whitespace so pattern tables can be written
against a single canonical form.
"""
import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """
    Normalize note text for pattern matching.

    Args:
        text: Raw note text; None and empty strings are allowed

    Returns:
        Lower-cased text with whitespace runs collapsed and ends trimmed.
        Normalizing an already normalized string returns it unchanged.
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.lower()).strip()
