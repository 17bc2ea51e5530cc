"""Publish time discovery for article pages."""

from __future__ import annotations

import posixpath
import re
import time
import unicodedata
from datetime import datetime
from urllib.parse import unquote, urlsplit

from .link import path_dir_clean
from .textutil import normalise_line, normalise_space, str_to_time

_PUNCT_CLASS = "".join(
    re.escape(chr(code)) for code in range(0x10000) if unicodedata.category(chr(code)).startswith("P")
)

_TIME_TAIL = (
    r"[日Tt]?[ ]{0,3}(([0-9]|[0-1][0-9]|2[0-3]|[1-9])[:点时]([0-5][0-9]|[0-9])[:分]?"
    r"(([0-5][0-9]|[0-9])[秒]?)?((\.\d{3})?)(z|Z|[\+-]\d{2}[:]?\d{2})?)?)"
)
_MONTH_DAY = r"(0[1-9]|1[0-2]|[1-9])[-/月.](0[1-9]|[1-2][0-9]|3[0-1]|[1-9])"
_PUBLISH_DATE = r"(((20[1-3]\d{1})[-/年.])" + _MONTH_DAY + _TIME_TAIL
_PUBLISH_SHORT_DATE = r"(((20[1-3]\d{1}|[1-3]\d{1})[-/年.])" + _MONTH_DAY + _TIME_TAIL
_MONTHS = (
    "(january|february|march|april|may|june|july|august|september|october|november|december"
    "|jan|feb|mar|apr|may|jun|jul|aug|sept?|oct|nov|dec)"
)
_EN_DAY = r"(?:(0[1-9]|[1-2][0-9]|3[0-1]|[1-9])(?:st|nd|rd|th)?)"
_EN_TIME = r"([, ]{0,4}([0-9]|[0-1][0-9]|2[0-3]|[1-9])[:]([0-5][0-9]|[0-9])([:]([0-5][0-9]|[0-9]))?([, ]{0,4}(am|pm))?)?"

PUBLISH_DATE_PATTERN = re.compile(_PUBLISH_DATE, re.ASCII)
PUBLISH_SHORT_DATE_PATTERN = re.compile(_PUBLISH_SHORT_DATE, re.ASCII)
PUBLISH_DATE_NO_YEAR_PATTERN = re.compile(
    r"(" + _MONTH_DAY + r"[日Tt]?[ ]{0,3}(([0-9]|[0-1][0-9]|2[0-3]|[1-9])[:点时]([0-5][0-9]|[0-9])[:分]?"
    r"(([0-5][0-9]|[0-9])[秒]?)?)?)",
    re.ASCII,
)
ZH_PUBLISH_DATE_PATTERN = re.compile(
    r"(发布|创建|出版|发表|编辑)?(时间|日期)[" + _PUNCT_CLASS + r" ]{1,8}" + _PUBLISH_SHORT_DATE,
    re.ASCII | re.IGNORECASE,
)
EN_PUBLISH_DATE_PATTERN_1 = re.compile(
    "(" + _EN_DAY + "[, ]{0,4}" + _MONTHS + r"[, ]{0,4}(20[1-3]\d{1})" + _EN_TIME + ")",
    re.ASCII | re.IGNORECASE,
)
EN_PUBLISH_DATE_PATTERN_2 = re.compile(
    "(" + _MONTHS + "[, ]{0,4}" + _EN_DAY + r"[, ]{0,4}(20[1-3]\d{1})" + _EN_TIME + ")",
    re.ASCII | re.IGNORECASE,
)
EN_US_PUBLISH_DATE_PATTERN = re.compile(
    r"((0[1-9]|1[0-2]|[1-9])[-/.](0[1-9]|[1-2][0-9]|3[0-1]|[1-9])[-/.](20[1-3]\d{1}|[1-3]\d{1})"
    r"[ ]{0,3}(([0-9]|[0-1][0-9]|2[0-3]|[1-9])[:]([0-5][0-9]|[0-9])[:]?(([0-5][0-9]|[0-9]))?)?)",
    re.ASCII,
)
TIME_PATTERN = re.compile(
    r"([0-9]|[0-1][0-9]|2[0-3]|[1-9])[:点时]([0-5][0-9]|[0-9])[:分]?(([0-5][0-9]|[0-9])[秒]?)?", re.ASCII
)
SCRIPT_TIME_PATTERN = re.compile(
    r'"[\w_\-]*pub.*"[\t ]{0,4}:[\t ]{0,4}"' + _PUBLISH_DATE.replace(_TIME_TAIL, _TIME_TAIL[:-2] + ")") + '"',
    re.ASCII | re.IGNORECASE,
)
WX_SCRIPT_TIME_PATTERN = re.compile(r'ct[\t ]{0,4}=[\t ]{0,4}"(1[2-9]\d{8})"', re.ASCII | re.IGNORECASE)
CONTENT_URL_PUBLISH_DATE_PATTERN = re.compile(
    r"(20[2-3]\d{1}[/]?(0[1-9]|1[0-2])[/]?(0[1-9]|[1-2][0-9]|3[0-1]))", re.ASCII
)
_BAD_TAIL_3 = re.compile(r"[:分]\d{3}$", re.ASCII)
_BAD_TAIL_4 = re.compile(r"[:分]\d{4}$", re.ASCII)
_ZONE_PATTERN = re.compile(r"(([\+-]\d{2})[:]?\d{2})$", re.ASCII)

META_DATETIME_WORDS = ("publish", "pubdate", "pubtime", "release", "dctermsdate")
_META_NAME_STRIP = str.maketrans("", "", "_-.")


def _all(pattern: re.Pattern, text: str) -> list[str]:
    return [match.group(0) for match in pattern.finditer(text)]


def _byte_index(text: str, sub: str) -> int:
    return text.encode().find(sub.encode())


def _en_normalise(value: str) -> str:
    return normalise_space(value.strip()).replace(",", " ")


def _path_dir(path: str) -> str:
    head = posixpath.dirname(path)
    if not head:
        return "."
    cleaned = posixpath.normpath(head)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


class TimeFinder:
    """Looks for an article's publish time in meta tags, scripts, text and URL."""

    def __init__(self, doc, origin_doc, lang: str, origin_url: str):
        self.doc = doc
        self.origin_doc = origin_doc
        self.lang = lang
        self.origin_url = origin_url
        self.time_pos = ""
        self.time_en_format = False
        self._title = ""
        self._title_pos = ""

    def find(self, title: str, title_pos: str) -> str:
        """Return the raw publish time string, or an empty string."""
        self._title = title
        self._title_pos = title_pos
        self.time_pos = ""
        self.time_en_format = False

        found = self._by_meta((PUBLISH_DATE_PATTERN,), english=False)
        if found:
            self.time_pos = "meta"
            return found

        if self.lang != "zh":
            found = self._by_meta((EN_PUBLISH_DATE_PATTERN_1, EN_PUBLISH_DATE_PATTERN_2), english=True)
            if found:
                self.time_pos = "meta"
                self.time_en_format = True
                return found

        for pos, finder in (("tag", self._by_tag), ("script", self._by_script)):
            found = finder()
            if found:
                self.time_pos = pos
                return found

        body_text = normalise_space("".join(body.get_text() for body in self.doc.find_all("body")))
        for pos, finder in (("body", self._by_body), ("lang", self._by_lang)):
            found = finder(body_text)
            if found:
                self.time_pos = pos
                return found

        found = self._by_url()
        if found:
            self.time_pos = "url"
            return found
        return ""

    def format_time(self, value: str) -> str:
        """Tidy a raw time string so it can be parsed."""
        if not self.time_en_format:
            if any(ch in value for ch in "TtZz"):
                value = value.replace(" ", "")
            if "T" in value and "z" not in value.lower() and not _ZONE_PATTERN.search(value):
                value = value.replace("T", " ")
        if ":" in value and "时" not in value and "点" not in value:
            value = value.removesuffix("分")
        return value

    def _by_meta(self, patterns, english: bool) -> str:
        dates: list[str] = []
        for meta in self.doc.find_all("meta"):
            content = meta.get("content", "")
            for pattern in patterns:
                match = pattern.search(content)
                if not match:
                    continue
                value = _en_normalise(match.group(0)) if english else match.group(0).strip()
                name = meta.get("name", "").translate(_META_NAME_STRIP)
                prop = meta.get("property", "").translate(_META_NAME_STRIP)
                if any(word in prop for word in META_DATETIME_WORDS):
                    dates.append(value)
                if any(word in name for word in META_DATETIME_WORDS):
                    dates.append(value)
                break

        has_times = [d for d in dates if TIME_PATTERN.search(d)]
        no_times = [d for d in dates if not TIME_PATTERN.search(d)]
        if has_times:
            return max(has_times, key=len)
        if self.lang != "zh" and no_times:
            return max(no_times, key=len)
        return ""

    def _by_tag(self) -> str:
        tag = self.doc.find("time")
        if tag is None:
            return ""
        value = tag.get("datetime", "")
        if not value:
            return ""
        match = PUBLISH_DATE_PATTERN.search(value)
        if match:
            return match.group(0)
        if self.lang != "zh":
            for pattern in (EN_PUBLISH_DATE_PATTERN_1, EN_PUBLISH_DATE_PATTERN_2):
                match = pattern.search(value)
                if match:
                    self.time_en_format = True
                    return normalise_space(match.group(0)).replace(",", " ")
        return ""

    def _by_script(self) -> str:
        found = ""
        for script in self.origin_doc.find_all("script"):
            text = normalise_line("".join(script.find_all(string=True)))
            match = SCRIPT_TIME_PATTERN.search(text)
            if match:
                found = match.group(1).strip()
                continue
            match = WX_SCRIPT_TIME_PATTERN.search(text)
            if match:
                stamp = int(match.group(1).strip())
                found = datetime.fromtimestamp(stamp).strftime("%Y-%m-%d %H:%M:%S")
        return found

    def _by_body(self, body_text: str) -> str:
        dates = _all(PUBLISH_SHORT_DATE_PATTERN, body_text)
        if dates:
            return self._pick(body_text, dates, require_time=False)

        if self.lang == "zh":
            no_year_dates = _all(PUBLISH_DATE_NO_YEAR_PATTERN, body_text)
            if no_year_dates:
                no_year = self._pick(body_text, no_year_dates, require_time=True)
                if not no_year:
                    return ""
                now = datetime.now()
                if "月" in no_year:
                    return now.strftime("%Y") + "年" + no_year
                return now.strftime("%Y-") + no_year.replace("/", "-").replace(".", "-")
        return ""

    def _by_lang(self, body_text: str) -> str:
        if self.lang == "zh":
            dates = []
            for found in _all(ZH_PUBLISH_DATE_PATTERN, body_text):
                match = PUBLISH_SHORT_DATE_PATTERN.search(found)
                if match:
                    dates.append(match.group(0))
            return self._pick(body_text, dates, require_time=False) if dates else ""

        for pattern in (EN_PUBLISH_DATE_PATTERN_1, EN_PUBLISH_DATE_PATTERN_2):
            dates = [_en_normalise(found) for found in _all(pattern, body_text)]
            if dates:
                self.time_en_format = True
                return self._pick(body_text, dates, require_time=False)

        dates = [found.strip() for found in _all(EN_US_PUBLISH_DATE_PATTERN, body_text)]
        if dates:
            return self._pick(body_text, dates, require_time=False)
        return ""

    def _by_url(self) -> str:
        if not self.origin_url:
            return ""
        try:
            path = unquote(urlsplit(self.origin_url).path)
        except ValueError:
            return ""
        clean = path_dir_clean(_path_dir(path.strip()))
        match = CONTENT_URL_PUBLISH_DATE_PATTERN.search(clean)
        return match.group(0).replace("/", "") if match else ""

    def _nearest(self, body_text: str, dates: list[str]) -> str:
        title_index = _byte_index(body_text, self._title)
        return min(dates, key=lambda date: abs(_byte_index(body_text, date) - title_index))

    def _pick(self, body_text: str, dates: list[str], require_time: bool) -> str:
        has_times: list[str] = []
        no_times: list[str] = []
        for date in dates:
            value = date.strip()
            if TIME_PATTERN.search(value):
                if _BAD_TAIL_3.search(value):
                    value = value[:-1]
                if _BAD_TAIL_4.search(value):
                    value = value[:-2]
                has_times.append(value)
            else:
                no_times.append(value)

        if has_times:
            if len(has_times) == 1:
                return has_times[0]
            longest = max(range(len(has_times)), key=lambda i: len(has_times[i]))
            if longest == 0:
                return has_times[0]
            if self._title and self._title_pos in ("selector", "headline", "content"):
                return self._nearest(body_text, has_times)
            return has_times[0]

        if require_time or not no_times:
            return ""
        if len(no_times) == 1:
            return no_times[0]

        if self.time_en_format:
            if self._title and self._title_pos in ("selector", "headline"):
                return self._nearest(body_text, no_times)
            return no_times[0]

        limit = int(time.time()) + 86400
        chosen = 0
        for index, date in enumerate(no_times):
            if 0 < str_to_time(date) < limit:
                chosen = index
        return no_times[chosen]