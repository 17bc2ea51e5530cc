"""Page title, description and link extraction."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlsplit

from .domain import domain_top
from .textutil import normalise_space, remove_lines, remove_sign

FILTER_URL_SUFFIX = {
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".txt", ".xml",
    ".pdf", ".doc", ".docx", ".ppt", ".pptx", ".xls", ".xlsx",
    ".zip", ".rar", ".7z", ".gz", ".apk", ".cgi", ".exe", ".bz2", ".play",
    ".rss", ".sig", ".sgf",
    ".mp3", ".mp4", ".rm", ".rmvb", ".mov", ".ogv", ".flv",
}
INVALID_URL_CHARS = ("{", "}", "[", "]", "@", "$", "<", ">", '"')
TITLE_ZH_SPLITS = ("_", "|", "-", "－", "｜", "—", "＊", "：", ",", "，", ":", "·", ">>", "=")
TITLE_ZH_CONTENT_SPLITS = ("_", "|", "-", "－", "｜", "—")
TITLE_EN_SPLITS = (" - ", " | ", ":")

HOSTNAME_IP_PATTERN = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")
_HOME_PREFIX = re.compile("首页([ |\\-_－—｜])*")


class FilterError(ValueError):
    """A link was rejected; ``url`` holds the link as far as it was resolved."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


def _truncate(text: str, max_length: int, limit: int) -> str:
    return text[: max_length if 0 < max_length < limit else limit]


def web_title(doc, max_length: int = 0) -> str:
    """The page title, cut to ``max_length`` characters (at most 128)."""
    nodes = doc.find_all("title")
    title = nodes[0].get_text() if len(nodes) > 1 else "".join(n.get_text() for n in nodes)
    return _truncate(remove_lines(title).strip(), max_length, 128)


def _strip_prefixes(title: str, splits) -> str:
    for split in splits:
        if title.lower().startswith(split.lower()):
            title = title[len(split):]
    return title


def _cut_at_splits(title: str, splits) -> str:
    for split in splits:
        end = title.rfind(split)
        if end != -1:
            while end != -1:
                title = title[:end].strip()
                end = title.rfind(split)
            break
    return title


def _cut_en(title: str) -> str:
    for split in TITLE_EN_SPLITS:
        end = title.rfind(split)
        if end != -1:
            return title[:end].strip()
    return title


def web_title_clean(title: str, lang: str) -> str:
    """Strip site names and separators from a page title."""
    if lang != "zh":
        return _cut_en(title)
    title = _strip_prefixes(title, TITLE_ZH_SPLITS)
    if title.startswith("首页"):
        title = _HOME_PREFIX.sub("", title)
    clean = _cut_at_splits(title, TITLE_ZH_SPLITS)
    if clean != "首页":
        clean = clean.removesuffix("首页")
    return remove_sign(clean)


def web_content_title_clean(title: str, lang: str) -> str:
    """Strip the trailing site name from an article page title."""
    if lang != "zh":
        return _cut_en(title)
    title = _strip_prefixes(title, TITLE_ZH_CONTENT_SPLITS)
    return _cut_at_splits(title, TITLE_ZH_CONTENT_SPLITS)


def _meta_content(doc, name: str) -> str:
    meta = doc.find("meta", attrs={"name": re.compile(f"^{name}$", re.I)})
    if meta is None:
        return ""
    return remove_lines(meta.get("content", "")).strip()


def web_keywords(doc) -> str:
    """The meta keywords of a page."""
    return _meta_content(doc, "keywords")


def web_description(doc, max_length: int = 0) -> str:
    """The meta description, cut to ``max_length`` characters (at most 384)."""
    return _truncate(_meta_content(doc, "description"), max_length, 384)


def web_link_titles(doc, base_url: str | None, strict_domain: bool) -> tuple[dict[str, str], dict[str, str]]:
    """Return accepted links with anchor texts, and rejected links with reasons."""
    link_titles: dict[str, str] = {}
    filters: dict[str, str] = {}
    if not base_url:
        return link_titles, filters

    candidates: dict[str, str] = {}
    for anchor in doc.find_all("a"):
        href = anchor.get("href")
        if href is None:
            continue
        link = remove_lines(href).strip()
        title = normalise_space(anchor.get_text())
        if not link or not title:
            continue
        old = candidates.get(link)
        if old is None or len(old.encode()) < len(title.encode()):
            candidates[link] = title

    for link, title in candidates.items():
        try:
            link_titles[filter_url(link, base_url, strict_domain)] = title
        except FilterError as err:
            filters[err.url] = str(err)
    return link_titles, filters


def filter_url(link: str, base_url: str, strict_domain: bool) -> str:
    """Resolve ``link`` against ``base_url`` and reject unusable links."""
    if any(ch in link for ch in INVALID_URL_CHARS):
        raise FilterError(link, "invalid url with illegal characters")

    if not link.lower().startswith("http"):
        try:
            url = urljoin(base_url, link)
        except ValueError:
            raise FilterError(link, "invalid url with baseUrl parse error") from None
    else:
        url = link

    try:
        parts = urlsplit(url)
    except ValueError:
        raise FilterError(url, "invalid url with parse error") from None

    if not parts.scheme:
        raise FilterError(url, "invalid url with not absolute url")

    try:
        port = parts.port
    except ValueError:
        port = -1
    if port is not None:
        raise FilterError(url, "invalid url with not 80 port")

    hostname = parts.hostname or ""
    if HOSTNAME_IP_PATTERN.search(hostname):
        raise FilterError(url, "invalid url with ip hostname")

    base_name = parts.path.rsplit("/", 1)[-1]
    dot = base_name.rfind(".")
    if dot != -1 and base_name[dot:].lower() in FILTER_URL_SUFFIX:
        raise FilterError(url, "invalid url with suffix")

    if strict_domain and domain_top(hostname) != domain_top(urlsplit(base_url).hostname or ""):
        raise FilterError(url, "invalid url with strict domain")

    return url