"""Classification of page links into article, list and other links."""

from __future__ import annotations

import posixpath
import re
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from urllib.parse import unquote, urlsplit

from .domain import domain_top
from .textutil import split_trim

URL_PUBLISH_DATE_PATTERN = re.compile(
    r"(20[2-3]\d{1}[/]?(0[1-9]|1[0-2]|[1-9])[/]?(0[1-9]|[1-2][0-9]|3[0-1]|[1-9])?)", re.ASCII
)
INDEX_SUFFIX_PATTERN = re.compile(r"^/index\.(html|shtml|htm|php|asp|aspx|jsp)$")
TITLE_ZH_BLACK_PATTERN = re.compile("(经营|制作|信息服务|出版|出版服务|演出|视听节目|新闻|视听|新网)许可证")
HAN_PATTERN = re.compile(
    r"[\u2e80-\u2e99\u2e9b-\u2ef3\u2f00-\u2fd5\u3005\u3007\u3021-\u3029\u3038-\u303b"
    r"\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufa6d\ufa70-\ufad9"
    r"\U00020000-\U0002a6df\U0002a700-\U0002ebef\U00030000-\U0003134f]"
)
EN_PATTERN = re.compile("[a-zA-Z]")

ZH_PUNCS = ("，", "。", "；", "：", "？", "！", "（", "）", "“", "”")
WORD_LANGS = ("en", "ru", "ar", "de", "fr", "es", "pt")
ZH_EN_TITLES = ("nba", "cba", "5g", "ai", "it", "ipo")


class LinkType(IntEnum):
    """Kind of page a link points to."""

    NONE = 0
    CONTENT = 1
    LIST = 2
    UNKNOWN = 3


@dataclass
class LinkRes:
    """Links grouped by kind, each mapped to its anchor text."""

    content: dict[str, str] = field(default_factory=dict)
    list: dict[str, str] = field(default_factory=dict)
    unknown: dict[str, str] = field(default_factory=dict)
    none: dict[str, str] = field(default_factory=dict)


def _remove_punct(text: str) -> str:
    return "".join(ch for ch in text if not unicodedata.category(ch).startswith("P"))


def _url_path(link: str) -> str:
    try:
        return unquote(urlsplit(link).path)
    except ValueError:
        return ""


def _hostname(link: str) -> str:
    try:
        return urlsplit(link).hostname or ""
    except ValueError:
        return ""


def _path_dir(path: str) -> str:
    head = posixpath.dirname(path)
    if not head:
        return "."
    cleaned = posixpath.normpath(head)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def path_dir_clean(path_dir: str) -> str:
    """Drop dots, dashes and underscores so dates in paths line up."""
    return path_dir.replace(".", "").replace("-", "").replace("_", "")


def _has_url_date(link: str) -> bool:
    clean = path_dir_clean(_path_dir(_url_path(link).strip()))
    return URL_PUBLISH_DATE_PATTERN.search(clean) is not None


def _top_dirs(link: str) -> list[str]:
    return split_trim(_path_dir(_url_path(link).strip()), "/")


def link_types(
    link_titles: dict[str, str], lang: str, rules: dict[str, list[str]] | None = None
) -> tuple[LinkRes, set[str]]:
    """Classify links; return the groups and the subdomains seen."""
    res = LinkRes()
    sub_domains: set[str] = set()
    publish_count = 0
    top_paths: Counter[str] = Counter()

    for link, title in link_titles.items():
        try:
            parts = urlsplit(link)
        except ValueError:
            continue
        hostname = parts.hostname or ""
        if hostname != domain_top(hostname):
            sub_domains.add(hostname)

        if rules is None:
            kind = link_is_content_by_title(link, title, lang)
            if kind is LinkType.CONTENT:
                res.content[link] = title
                if _has_url_date(link):
                    publish_count += 1
                dirs = _top_dirs(link)
                if dirs:
                    top_paths[dirs[0]] += 1
            elif kind is LinkType.LIST:
                res.list[link] = title
            elif kind is LinkType.NONE:
                res.none[link] = title
            else:
                res.unknown[link] = title
        elif link_is_content_by_regex(link, rules):
            res.content[link] = title
        else:
            path = unquote(parts.path).strip()
            if path in ("", "/") or INDEX_SUFFIX_PATTERN.search(path):
                res.none[link] = title
            else:
                res.list[link] = title

    if rules is None:
        _classify_by_path(res, top_paths, publish_count)
    _clean(res, lang)
    return res, sub_domains


def _clean(res: LinkRes, lang: str) -> None:
    if lang != "zh":
        return
    for link, title in list(res.content.items()):
        if TITLE_ZH_BLACK_PATTERN.search(title):
            res.none[link] = title
            del res.content[link]


def _classify_by_path(res: LinkRes, top_path_stats: Counter[str], publish_count: int) -> None:
    content_count = len(res.content)
    publish_prob = publish_count / content_count if content_count else 0.0

    top_paths: list[str] = []
    if content_count >= 8:
        top_paths = [
            path for path, stat in top_path_stats.items() if stat > 1 and stat / content_count > 0.4
        ]

    if publish_prob > 0.7:
        for link, title in list(res.list.items()):
            if _has_url_date(link) and len(title) >= 2:
                res.content[link] = title
                del res.list[link]
        for link, title in list(res.unknown.items()):
            if _has_url_date(link) and len(title) >= 2:
                res.content[link] = title
            else:
                res.list[link] = title
            del res.unknown[link]
    elif top_paths and res.unknown:
        for link, title in list(res.unknown.items()):
            dirs = _top_dirs(link)
            if not dirs:
                continue
            if dirs[0] in top_paths and len(title) >= 2:
                res.content[link] = title
            else:
                res.list[link] = title
            del res.unknown[link]

    if content_count > 0 and (publish_prob > 0.7 or top_paths):
        for link, title in list(res.content.items()):
            path = _url_path(link).strip()
            if path in ("", "/") or not _top_dirs(link):
                res.unknown[link] = title
                del res.content[link]


def link_is_content_by_regex(link_url: str, rules: dict[str, list[str]]) -> bool:
    """True when the link matches a rule for its host or registrable domain."""
    hostname = _hostname(link_url)
    patterns = rules.get(hostname)
    if patterns is None:
        patterns = rules.get(domain_top(hostname))
    return any(re.search(pattern, link_url) for pattern in patterns or ())


def link_is_content_by_title(link_url: str, title: str, lang: str) -> LinkType:
    """Guess the kind of a link from its URL path and anchor text."""
    if len(link_url) > 255:
        return LinkType.NONE

    path = _url_path(link_url).strip()
    if path in ("", "/") or INDEX_SUFFIX_PATTERN.search(path):
        return LinkType.NONE

    if lang == "zh":
        han_count = len(HAN_PATTERN.findall(title))
        if han_count == 0:
            return LinkType.LIST if title.lower() in ZH_EN_TITLES else LinkType.NONE
        if han_count <= 5:
            return LinkType.LIST
        compact = title.replace(" ", "")
        if len(compact) >= 8 or any(punc in compact for punc in ZH_PUNCS):
            return LinkType.CONTENT
        return LinkType.UNKNOWN

    if lang in WORD_LANGS:
        title = _remove_punct(title)
        if not EN_PATTERN.search(title):
            return LinkType.NONE
        return LinkType.CONTENT if len(split_trim(title, " ")) >= 5 else LinkType.LIST

    return LinkType.CONTENT if len(_remove_punct(title)) >= 8 else LinkType.LIST