"""Cheap language checks for transcripts: explicit language markers and dominant script."""

import re

# Speakers or the call agent name the language explicitly (Hindi in Devanagari or Latin).
_LANGUAGE_MARKERS = re.compile(
    r"\u0939\u093F\u0928\u094D\u0926\u0940|\u0939\u093F\u0902\u0926\u0940|\bhindi\b",
    re.IGNORECASE,
)

_SCRIPTS: tuple[tuple[str, re.Pattern], ...] = (
    ("te", re.compile(r"[\u0C00-\u0C7F]")),
    ("hi", re.compile(r"[\u0900-\u097F]")),
    ("ta", re.compile(r"[\u0B80-\u0BFF]")),
    ("kn", re.compile(r"[\u0C80-\u0CFF]")),
    ("ml", re.compile(r"[\u0D00-\u0D7F]")),
    ("gu", re.compile(r"[\u0A80-\u0AFF]")),
    ("pa", re.compile(r"[\u0A00-\u0A7F]")),
    ("bn", re.compile(r"[\u0980-\u09FF]")),
    ("od", re.compile(r"[\u0B00-\u0B7F]")),
    ("ar", re.compile(r"[\u0600-\u06FF]")),
    ("ru", re.compile(r"[\u0400-\u04FF]")),
    ("zh", re.compile(r"[\u4E00-\u9FFF]")),
    ("en", re.compile(r"[A-Za-z]")),
)


def infer_language_from_script(text: str) -> str | None:
    """Language code of the script with the most characters in text, or None when no letters."""
    best_code, best_count = None, 0
    for code, pattern in _SCRIPTS:
        count = len(pattern.findall(text or ""))
        if count > best_count:
            best_code, best_count = code, count
    return best_code


def is_non_english(text: str) -> bool:
    if _LANGUAGE_MARKERS.search(text or ""):
        return True
    code = infer_language_from_script(text)
    return code is not None and code != "en"
