"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/normalizer.py
Implements canonical name normalization for audio files and folders.
"""

import os
import re
import unicodedata
from functools import lru_cache

# Pre-compiled regex patterns (performance optimization)
# Windows' invalid set is used on every platform so results never depend on the host.
_PATTERN_INVALID = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_PATTERN_WORD = re.compile(r'\S+')
_PATTERN_WHITESPACE = re.compile(r'\s+')
_PATTERN_DISALLOWED = re.compile(r"[^\w\s\-.,']")


def _title_word(word: str) -> str:
    for i, ch in enumerate(word):
        # Leading punctuation and modifier letters (U+02BC and friends) are not the word's first letter
        if unicodedata.category(ch) == "Lm" or not (ch.isalnum() or ch == "_"):
            continue
        if ch.isdecimal() or ch == "_":
            return word
        return word[:i] + ch.title() + word[i + 1:]
    return word


def _title_word_starts(text: str) -> str:
    return _PATTERN_WORD.sub(lambda m: _title_word(m.group(0)), text)


@lru_cache(maxsize=8192)
def normalize_name(name: str) -> str:
    """
    Normalize a single path segment (no extension handling).

    Normalization rules, in order:
    - Remove characters invalid in file names
    - Lowercase, then capitalize the first letter of each whitespace-separated word
    - Collapse whitespace runs to a single space
    - Remove anything except letters, digits, whitespace and - _ . , '
    - Trim

    Casing uses Unicode case mappings only, never the process locale.

    Args:
        name: Raw file base name or directory name

    Returns:
        str: Normalized name; may be empty if nothing survives

    Examples:
        "weird!!name" → "Weirdname"
        "THE  best   of" → "The Best Of"
        "(live) at wembley" → "Live At Wembley"
    """
    if not name:
        return ""

    # Compose accents so "e" + combining acute survives the character filter
    cleaned = unicodedata.normalize("NFC", name)

    # Step 1: Remove invalid characters
    cleaned = _PATTERN_INVALID.sub('', cleaned)

    # Step 2: Lowercase, then title-case word starts
    cleaned = _title_word_starts(cleaned.lower())

    # Step 3: Collapse whitespace
    cleaned = _PATTERN_WHITESPACE.sub(' ', cleaned)

    # Step 4: Remove disallowed punctuation
    cleaned = _PATTERN_DISALLOWED.sub('', cleaned)

    # Step 5: Trim (stripping in step 4 can leave double spaces behind)
    return _PATTERN_WHITESPACE.sub(' ', cleaned).strip()


def normalize_filename(filename: str) -> str:
    """
    Normalize a file name, keeping its extension out of the casing pipeline.

    The extension is lowercased and reattached. If the base name normalizes to
    nothing, the original name is returned so no file ends up nameless.

    Examples:
        "weird!!name.MP3" → "Weirdname.mp3"
        "!!!.mp3" → "!!!.mp3"
    """
    if not filename:
        return ""

    base, ext = os.path.splitext(filename)
    normalized = normalize_name(base)
    if not normalized:
        return filename
    return normalized + ext.lower()


def normalize_dirname(dirname: str) -> str:
    """Normalize a directory name; falls back to the original if nothing survives."""
    return normalize_name(dirname) or dirname
