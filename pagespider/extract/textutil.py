"""Small text helpers shared by the extractors."""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime

from dateutil import parser as date_parser

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")
_BLANK_LINES = re.compile(r"\n\s*\n+")
_ZH_DATE_PARTS = str.maketrans({"年": "-", "月": "-", "日": " ", "时": ":", "点": ":", "分": ":", "秒": " "})


def normalise_space(text: str) -> str:
    """Collapse every run of whitespace into one space and trim the ends."""
    return " ".join(text.split())


def normalise_line(text: str) -> str:
    """Unify line endings and collapse blank lines into a single line break."""
    text = _LINE_BREAKS.sub("\n", text)
    return _BLANK_LINES.sub("\n", text).strip()


def remove_lines(text: str) -> str:
    """Remove all carriage returns and line feeds."""
    return text.replace("\r", "").replace("\n", "")


def remove_sign(text: str) -> str:
    """Remove Unicode punctuation and symbol characters."""
    return "".join(ch for ch in text if unicodedata.category(ch)[0] not in "PS")


def split_trim(text: str, sep: str) -> list[str]:
    """Split on ``sep``, strip each part and drop the empty ones."""
    return [part.strip() for part in text.split(sep) if part.strip()]


def _common_length(first: str, second: str) -> int:
    if not first or not second:
        return 0
    best = pos1 = pos2 = 0
    for i in range(len(first)):
        for j in range(len(second)):
            k = 0
            while i + k < len(first) and j + k < len(second) and first[i + k] == second[j + k]:
                k += 1
            if k > best:
                best, pos1, pos2 = k, i, j
    if best == 0:
        return 0
    return (
        best
        + _common_length(first[:pos1], second[:pos2])
        + _common_length(first[pos1 + best:], second[pos2 + best:])
    )


def similarity_text(first: str, second: str) -> float:
    """Similarity of two strings in [0, 1], counting shared substrings."""
    total = len(first) + len(second)
    if total == 0:
        return 0.0
    return 2.0 * _common_length(first, second) / total


def str_to_time(text: str) -> int:
    """Parse a date or date-time string into a Unix timestamp, 0 when it cannot."""
    value = text.strip().translate(_ZH_DATE_PARTS)
    value = " ".join(value.split()).rstrip(":- ")
    value = re.sub(r":\s+", ":", value)
    if not value:
        return 0
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError):
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.now().astimezone().tzinfo)
        return int(datetime(*parsed.timetuple()[:6]).timestamp())
    return int(parsed.timestamp())