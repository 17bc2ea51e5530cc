"""Character set detection from HTTP headers, HTML meta tags and content."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

import chardet

CHARSET_POS_HEADER = "header"
CHARSET_POS_HTML = "html"
CHARSET_POS_GUESS = "guess"
CHARSET_POS_VALID = "valid"

CHARSET_PATTERN = re.compile(r"charset=\s*([a-z][_\-0-9a-z]*)", re.IGNORECASE | re.ASCII)
CHARSET_HTML4_PATTERN = re.compile(
    r"""<meta\s+([^>]*http-equiv=("|')?content-type("|')?[^>]*)>""", re.IGNORECASE | re.ASCII
)
CHARSET_HTML5_PATTERN = re.compile(
    r"""<meta\s+charset\s*=\s*["']?([a-z][_\-0-9a-z]*)[^>]*>""", re.IGNORECASE | re.ASCII
)


@dataclass
class CharsetRes:
    """A detected character set and where it was found."""

    charset: str = ""
    charset_pos: str = ""


def _is_utf8(body: bytes) -> bool:
    try:
        body.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def charset(body: bytes, headers: Mapping[str, str] | None = None) -> CharsetRes:
    """Detect the charset of a response body, guessing when nothing declares it."""
    if _is_utf8(body):
        return CharsetRes("UTF-8", CHARSET_POS_VALID)
    res = charset_from_header_html(body, headers)
    if not res.charset:
        guess = charset_guess(body)
        if guess:
            res = CharsetRes(guess, CHARSET_POS_GUESS)
    return res


def charset_from_header_html(body: bytes, headers: Mapping[str, str] | None = None) -> CharsetRes:
    """Charset declared by the Content-Type header or the HTML, header first unless it is ISO/WINDOWS."""
    from_header = charset_from_header(headers)
    from_html = charset_from_html(body)

    if from_header and not from_html:
        return CharsetRes(from_header, CHARSET_POS_HEADER)
    if from_html and not from_header:
        return CharsetRes(from_html, CHARSET_POS_HTML)
    if from_header and from_html:
        if from_header != from_html and from_header.startswith(("ISO", "WINDOWS")):
            return CharsetRes(from_html, CHARSET_POS_HTML)
        return CharsetRes(from_header, CHARSET_POS_HEADER)
    return CharsetRes()


def _header_value(headers: Mapping[str, str] | None, name: str) -> str:
    if not headers:
        return ""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return ""


def charset_from_header(headers: Mapping[str, str] | None) -> str:
    """Charset named in the Content-Type header."""
    content_type = _header_value(headers, "Content-Type")
    found = ""
    if content_type.strip():
        match = CHARSET_PATTERN.search(content_type)
        if match:
            found = match.group(1)
    return convert_charset(found)


def charset_from_html(body: bytes) -> str:
    """Charset named in an HTML4 or HTML5 meta tag; the earlier one wins."""
    html = body.decode("latin-1")

    charset4 = ""
    match = CHARSET_HTML4_PATTERN.search(html)
    if match:
        inner = CHARSET_PATTERN.search(match.group(1))
        if inner:
            charset4 = inner.group(1)

    match = CHARSET_HTML5_PATTERN.search(html)
    charset5 = match.group(1) if match else ""

    if charset4 and charset5:
        if charset4 == charset5:
            found = charset5
        else:
            found = charset4 if html.find(charset4) < html.find(charset5) else charset5
    else:
        found = charset4 or charset5
    return convert_charset(found)


def charset_guess(body: bytes) -> str:
    """Guess the charset from the bytes alone; empty when no guess is possible."""
    encoding = chardet.detect(body).get("encoding")
    return encoding.upper() if encoding else ""


def convert_charset(charset: str) -> str:
    """Upper-case a charset name and fold common aliases."""
    value = charset.strip().upper()
    if value in ("UTF8", "UTF_8"):
        return "UTF-8"
    if value.startswith("GB"):
        return "GBK"
    if value.startswith("BIG5"):
        return "Big5"
    if value.startswith("SHIFT"):
        return "SHIFT_JIS"
    return value