"""Probing a domain's home page for its charset, language, title and links."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import SplitResult, urlsplit

from bs4 import BeautifulSoup

from .charset import CharsetRes
from .extract.domain import domain_top
from .extract.icp import PROVINCE_SHORT_MAP, icp
from .extract.link import link_types
from .extract.meta import meta_from_host
from .extract.web import (
    HOSTNAME_IP_PATTERN,
    web_description,
    web_link_titles,
    web_title,
    web_title_clean,
)
from .http import HttpError, HttpReq, HttpResp, http_get_resp
from .lang import LangRes, detect_lang
from .spider import DEFAULT_DOC_REMOVE_TAGS, META_REFRESH_PATTERN

DETECT_DEFAULT_TIMEOUT = 10000
_MAX_CONTENT_LENGTH = 10 * 1024 * 1024
_REFRESH_SELECTOR = "meta[http-equiv='refresh' i]"
_HOME_PATHS = ("", "/", "/index.html", "/index.htm", "/index.shtml")


@dataclass
class DomainRes:
    """What was learned about a domain from its home page."""

    domain: str = ""
    home_domain: str = ""
    scheme: str = ""
    charset: CharsetRes = field(default_factory=CharsetRes)
    lang: LangRes = field(default_factory=LangRes)
    country: str = ""
    province: str = ""
    category: str = ""
    title: str = ""
    title_clean: str = ""
    description: str = ""
    icp: str = ""
    state: bool = False
    status_code: int = 0
    content_count: int = 0
    list_count: int = 0
    sub_domains: set[str] = field(default_factory=set)


class DetectError(Exception):
    """Detection failed; ``result`` holds what was found before the failure."""

    def __init__(self, message: str, result: DomainRes | None = None):
        super().__init__(message)
        self.result = result if result is not None else DomainRes()


def _request() -> HttpReq:
    return HttpReq(
        max_content_length=_MAX_CONTENT_LENGTH,
        max_redirect=3,
        force_text_content_type=True,
    )


def _has_port(parts: SplitResult) -> bool:
    try:
        return parts.port is not None
    except ValueError:
        return True


def _split(url: str) -> SplitResult | None:
    try:
        return urlsplit(url)
    except ValueError:
        return None


def _parse(resp: HttpResp) -> BeautifulSoup:
    doc = BeautifulSoup(resp.body.decode("utf-8", errors="replace"), "html.parser")
    for tag in doc.select(DEFAULT_DOC_REMOVE_TAGS):
        tag.extract()
    return doc


def _retry(domain: str, is_top: bool, timeout: int, retry: int) -> DomainRes:
    for _ in range(retry or 1):
        try:
            return detect_domain_do(domain, is_top, timeout)
        except DetectError as err:
            if err.result.status_code != 0:
                raise
    raise DetectError("ErrorDomainDetect", DomainRes())


def detect_domain(domain: str, timeout: int = 0, retry: int = 1) -> DomainRes:
    """Probe ``www.<domain>`` and then ``<domain>``, retrying on network failures."""
    return _retry(domain, True, timeout, retry)


def detect_sub_domain(domain: str, timeout: int = 0, retry: int = 1) -> DomainRes:
    """Probe ``<domain>`` itself, retrying on network failures."""
    return _retry(domain, False, timeout, retry)


def _check_jump(hostname: str, parts: SplitResult, domain: str, kind: str, res: DomainRes) -> None:
    top = domain_top(hostname)
    if top and top != domain:
        if HOSTNAME_IP_PATTERN.search(hostname) or _has_port(parts):
            raise DetectError(f"Error{kind}Host", res)
        raise DetectError(f"Error{kind}:{top}", res)


def detect_domain_do(domain: str, is_top: bool = True, timeout: int = 0) -> DomainRes:
    """Probe a domain once; raises DetectError with the partial result on failure."""
    timeout = timeout or DETECT_DEFAULT_TIMEOUT
    res = DomainRes()
    req = _request()
    scheme = "http"

    for home in ("www", "") if is_top else ("",):
        home_domain = f"{home}.{domain}" if home else domain
        url = f"{scheme}://{home_domain}"

        try:
            resp = http_get_resp(url, req, timeout)
        except HttpError as err:
            if err.response is not None:
                res.status_code = err.response.status_code
            continue
        if not resp.success:
            res.status_code = resp.status_code
            continue

        res.domain = domain
        res.status_code = resp.status_code
        res.home_domain = home_domain

        request_parts = urlsplit(resp.request_url)
        request_host = request_parts.hostname or ""
        if res.home_domain != request_host:
            _check_jump(request_host, request_parts, domain, "Redirect", res)
            res.home_domain = request_host

        res.scheme = request_parts.scheme or scheme
        res.charset = resp.charset

        doc = _parse(resp)

        meta = doc.select_one(_REFRESH_SELECTOR)
        refresh = meta.get("content") if meta is not None else None
        if isinstance(refresh, str):
            match = META_REFRESH_PATTERN.search(refresh)
            if match:
                parts = _split(match.group(1))
                if parts is not None:
                    _check_jump(parts.hostname or "", parts, domain, "MetaJump", res)
                raise DetectError("ErrorMetaJump", res)

        icp_number, province = icp(doc)
        if icp_number and province:
            res.country = "中国"
            res.icp = icp_number
            res.province = PROVINCE_SHORT_MAP.get(province, "")

        lang = detect_lang(doc, resp.charset.charset, True)
        res.lang = lang

        if not res.country:
            res.country, res.province, res.category = meta_from_host(
                urlsplit(url).hostname or "", lang.lang
            )

        res.title = web_title(doc, 0)
        res.title_clean = web_title_clean(res.title, lang.lang)
        res.description = web_description(doc, 0)

        link_titles, _ = web_link_titles(doc, resp.request_url, True)
        links, sub_domains = link_types(link_titles, lang.lang, None)
        res.content_count = len(links.content)
        res.list_count = len(links.list)
        res.sub_domains = sub_domains
        res.state = True
        return res

    raise DetectError("ErrorDomainDetect", res)


def detect_friend_domain(domain: str, timeout: int = 0, retry: int = 1) -> dict[str, str]:
    """Registrable domains linked from the home page, retrying on failure."""
    for _ in range(retry or 1):
        try:
            return detect_friend_domain_do(domain, timeout)
        except DetectError:
            continue
    raise DetectError("ErrorDomainDetect")


def detect_friend_domain_do(domain: str, timeout: int = 0) -> dict[str, str]:
    """Map each other registrable domain linked by its home page to the anchor text."""
    timeout = timeout or DETECT_DEFAULT_TIMEOUT
    friends: dict[str, str] = {}
    url = f"http://www.{domain}"

    try:
        resp = http_get_resp(url, _request(), timeout)
    except HttpError as err:
        raise DetectError(str(err)) from err
    if not resp.success:
        return friends

    doc = _parse(resp)
    link_titles, _ = web_link_titles(doc, resp.request_url, False)
    for link, title in link_titles.items():
        if not link or not title:
            continue
        parts = _split(link)
        if parts is None or _has_port(parts):
            continue
        hostname = parts.hostname or ""
        if HOSTNAME_IP_PATTERN.search(hostname):
            continue
        if parts.path.strip() in _HOME_PATHS:
            top = domain_top(hostname)
            if top != domain:
                friends[top] = title
    return friends