"""Fetching a page and extracting its links or its article."""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from .extract.content import Content, News
from .extract.domain import domain_top
from .extract.link import LinkRes, link_types
from .extract.web import HOSTNAME_IP_PATTERN, web_link_titles
from .http import (
    HTTP_DEFAULT_MAX_CONTENT_LENGTH,
    HTTP_DEFAULT_TIMEOUT,
    HttpError,
    HttpReq,
    HttpResp,
    http_get_resp,
)
from .lang import detect_lang

__all__ = [
    "DEFAULT_DOC_REMOVE_TAGS",
    "HOSTNAME_IP_PATTERN",
    "META_REFRESH_PATTERN",
    "LinkData",
    "SpiderError",
    "get_link_data",
    "get_link_data_do",
    "get_news",
    "get_news_do",
]

DEFAULT_DOC_REMOVE_TAGS = "script,noscript,style,iframe,br,link,svg"
META_REFRESH_PATTERN = re.compile(r"url=(.+)", re.IGNORECASE)
_META_REFRESH_SELECTOR = "meta[http-equiv='refresh' i]"

_T = TypeVar("_T")


class SpiderError(Exception):
    """A page could not be fetched or processed."""


@dataclass
class LinkData:
    """Classified links of a page, the rejected links and the subdomains seen."""

    link_res: LinkRes
    filters: dict[str, str] = field(default_factory=dict)
    sub_domains: set[str] = field(default_factory=set)


def _default_req(max_redirect: int) -> HttpReq:
    return HttpReq(
        max_content_length=HTTP_DEFAULT_MAX_CONTENT_LENGTH,
        max_redirect=max_redirect,
        force_text_content_type=True,
    )


def _with_retry(prefix: str, retry: int, attempt: Callable[[], _T]) -> _T:
    errors: list[str] = []
    for _ in range(max(retry, 1)):
        try:
            return attempt()
        except SpiderError as err:
            errors.append(str(err))
    raise SpiderError(prefix + json.dumps(errors, ensure_ascii=False, separators=(",", ":")))


def _fetch(url: str, req: HttpReq, timeout: int) -> HttpResp:
    try:
        resp = http_get_resp(url, req, timeout)
    except HttpError as err:
        raise SpiderError("ErrorRequest") from err
    if not resp.success:
        raise SpiderError("ErrorRequest")
    return resp


def _parse(body: bytes) -> BeautifulSoup:
    return BeautifulSoup(body.decode("utf-8", errors="replace"), "html.parser")


def _remove_tags(doc: BeautifulSoup) -> None:
    for tag in doc.select(DEFAULT_DOC_REMOVE_TAGS):
        tag.extract()


def get_link_data(
    url: str,
    strict_domain: bool,
    rules: dict[str, list[str]] | None = None,
    req: HttpReq | None = None,
    timeout: int = 0,
    retry: int = 1,
) -> LinkData:
    """Fetch a page and classify its links, retrying up to ``retry`` times."""
    return _with_retry(
        "ErrorLinkRes", retry, lambda: get_link_data_do(url, strict_domain, rules, req, timeout)
    )


def get_link_data_do(
    url: str,
    strict_domain: bool,
    rules: dict[str, list[str]] | None = None,
    req: HttpReq | None = None,
    timeout: int = 0,
) -> LinkData:
    """Fetch a page once and classify its links."""
    timeout = timeout or HTTP_DEFAULT_TIMEOUT
    resp = _fetch(url, req or _default_req(3), timeout)

    doc = _parse(resp.body)
    _remove_tags(doc)
    lang = detect_lang(doc, resp.charset.charset, True)
    link_titles, filters = web_link_titles(doc, resp.request_url, strict_domain)
    link_res, sub_domains = link_types(link_titles, lang.lang, rules)
    return LinkData(link_res=link_res, filters=filters, sub_domains=sub_domains)


def get_news(
    url: str, title: str = "", req: HttpReq | None = None, timeout: int = 0, retry: int = 1
) -> tuple[News, HttpResp]:
    """Fetch an article page and extract it, retrying up to ``retry`` times."""
    return _with_retry("ErrorRequest", retry, lambda: get_news_do(url, title, req, timeout))


def get_news_do(
    url: str, title: str = "", req: HttpReq | None = None, timeout: int = 0
) -> tuple[News, HttpResp]:
    """Fetch an article page once and extract it."""
    return _get_news(url, title, req, timeout, top=True)


def _refresh_target(doc: BeautifulSoup, request_url: str) -> str:
    """A meta refresh target on the same registrable domain, or an empty string."""
    meta = doc.select_one(_META_REFRESH_SELECTOR)
    refresh = meta.get("content") if meta is not None else None
    if not isinstance(refresh, str):
        return ""
    match = META_REFRESH_PATTERN.search(refresh)
    if not match:
        return ""
    target = match.group(1).strip()
    try:
        target_host = urlsplit(target).hostname or ""
        request_host = urlsplit(request_url).hostname or ""
    except ValueError:
        return ""
    target_top = domain_top(target_host)
    if target_top and target_top == domain_top(request_host):
        return target
    return ""


def _get_news(url: str, title: str, req: HttpReq | None, timeout: int, top: bool) -> tuple[News, HttpResp]:
    timeout = timeout or HTTP_DEFAULT_TIMEOUT
    req = req or _default_req(2)
    resp = _fetch(url, req, timeout)

    doc = _parse(resp.body)
    content_doc = copy.copy(doc)
    _remove_tags(doc)

    if top:
        target = _refresh_target(doc, resp.request_url)
        if target:
            return _get_news(target, title, req, timeout, top=False)

    lang = detect_lang(doc, resp.charset.charset, False)
    news = Content(content_doc, lang.lang, title, url).extract_news()
    return news, resp