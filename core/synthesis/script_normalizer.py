"""
Script normalization for transliterated (Roman-letter) replies.

The oracle is asked to answer in Roman letters, but models routinely slip
native glyphs in, typically as parenthesised translations. This strips every
codepoint of the language's native-script block and tidies what is left.
"""

import re
from typing import Dict, Optional

# Unicode blocks per language.
SCRIPT_RANGES: Dict[str, "re.Pattern[str]"] = {
    "hi": re.compile(r"[\u0900-\u097F]"),  # Devanagari
    "te": re.compile(r"[\u0C00-\u0C7F]"),  # Telugu
    "ta": re.compile(r"[\u0B80-\u0BFF]"),  # Tamil
    "or": re.compile(r"[\u0B00-\u0B7F]"),  # Odia
}

# Joiners only make sense between native glyphs.
_JOINERS_RE = re.compile(r"[\u200c\u200d]")
_EMPTY_BRACKETS_RE = re.compile(r"\(\s*\)|\[\s*\]|\{\s*\}")
_SPACES_RE = re.compile(r"[ \t\u00a0]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_SPACE_BEFORE_PUNCT_RE = re.compile(r" +([,.;:!?])")


def script_range(language: str) -> Optional["re.Pattern[str]"]:
    return SCRIPT_RANGES.get(language)


def normalize_script(text: str, language: str) -> str:
    """
    Remove `language`'s native-script codepoints from `text`.

    Languages without a registered block (English) are returned unchanged.
    The function is idempotent.
    """
    pattern = SCRIPT_RANGES.get(language)
    if pattern is None or not text:
        return text

    cleaned = pattern.sub("", text)
    cleaned = _JOINERS_RE.sub("", cleaned)

    # Removing one pair can expose another, e.g. "( ( ) )".
    previous = None
    while previous != cleaned:
        previous = cleaned
        cleaned = _EMPTY_BRACKETS_RE.sub("", cleaned)

    cleaned = _SPACES_RE.sub(" ", cleaned)
    cleaned = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", cleaned)
    cleaned = _SPACE_AROUND_NEWLINE_RE.sub("\n", cleaned)
    cleaned = _BLANK_LINES_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def contains_native_script(text: str, language: str) -> bool:
    pattern = SCRIPT_RANGES.get(language)
    return bool(pattern and pattern.search(text))
