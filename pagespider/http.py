"""HTTP GET with charset detection and conversion of text bodies to UTF-8."""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from dataclasses import dataclass, field

import requests

from .charset import CharsetRes, charset

HTTP_DEFAULT_TIMEOUT = 10000
HTTP_DEFAULT_MAX_CONTENT_LENGTH = 10 * 1024 * 1024
HTTP_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/103.0.0.0 Safari/537.36"
)
HTTP_DEFAULT_ACCEPT_ENCODING = "gzip, deflate"

TEXT_CONTENT_TYPES = (
    "text/plain",
    "text/html",
    "text/xml",
    "application/xml",
    "application/xhtml+xml",
    "application/json",
)

_CHUNK_SIZE = 64 * 1024


class HttpError(Exception):
    """A request failed; ``response`` holds what was received, if anything."""

    def __init__(self, message: str, response: HttpResp | None = None):
        super().__init__(message)
        self.response = response


@dataclass
class HttpReq:
    """Options for one request."""

    headers: dict[str, str] = field(default_factory=dict)
    user_agent: str = HTTP_DEFAULT_USER_AGENT
    max_content_length: int = HTTP_DEFAULT_MAX_CONTENT_LENGTH
    max_redirect: int = 0
    allowed_content_types: list[str] = field(default_factory=list)
    proxies: dict[str, str] | None = None
    verify: bool = False
    disable_charset: bool = False
    force_text_content_type: bool = False


@dataclass
class HttpResp:
    """A received response with its body converted to UTF-8 where possible."""

    status_code: int = 0
    success: bool = False
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    content_length: int = 0
    request_url: str = ""
    charset: CharsetRes = field(default_factory=CharsetRes)


def http_get(url: str, req: HttpReq | None = None, timeout: int = 0) -> bytes:
    """GET ``url`` and return the body."""
    if req is not None and not isinstance(req, HttpReq):
        raise TypeError("http get params error")
    return http_get_resp(url, req, timeout).body


def http_get_resp(url: str, req: HttpReq | None = None, timeout: int = 0) -> HttpResp:
    """GET ``url`` and return the whole response."""
    return http_do_resp(requests.Request("GET", url), req, timeout)


def _read_body(response: requests.Response, limit: int, resp: HttpResp) -> bytes:
    declared = response.headers.get("Content-Length", "")
    if limit > 0 and declared.isdigit() and int(declared) > limit:
        raise HttpError(f"content length {declared} exceeds {limit}", resp)
    chunks: list[bytes] = []
    size = 0
    try:
        for chunk in response.iter_content(_CHUNK_SIZE):
            size += len(chunk)
            if limit > 0 and size > limit:
                raise HttpError(f"content length exceeds {limit}", resp)
            chunks.append(chunk)
    except requests.RequestException as err:
        raise HttpError(str(err), resp) from err
    return b"".join(chunks)


def http_do_resp(request: requests.Request, req: HttpReq | None = None, timeout: int = 0) -> HttpResp:
    """Send ``request`` (timeout in milliseconds) and return the response."""
    req = req or HttpReq()
    timeout = timeout or HTTP_DEFAULT_TIMEOUT
    allowed = TEXT_CONTENT_TYPES if req.force_text_content_type else tuple(req.allowed_content_types)

    headers = {"User-Agent": req.user_agent, "Accept-Encoding": HTTP_DEFAULT_ACCEPT_ENCODING}
    headers.update(request.headers or {})
    headers.update(req.headers)
    request.headers = headers

    with requests.Session() as session:
        if req.max_redirect > 0:
            session.max_redirects = req.max_redirect
        try:
            prepared = session.prepare_request(request)
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                response = session.send(
                    prepared,
                    timeout=timeout / 1000,
                    allow_redirects=True,
                    verify=req.verify,
                    proxies=req.proxies or {},
                    stream=True,
                )
        except requests.RequestException as err:
            raise HttpError(str(err)) from err

        with response:
            resp = HttpResp(
                status_code=response.status_code,
                success=200 <= response.status_code < 300,
                headers=response.headers,
                request_url=response.url,
            )
            if allowed:
                content_type = response.headers.get("Content-Type", "").split(";")[0].strip().lower()
                if content_type not in allowed:
                    raise HttpError(f"content type not allowed: {content_type}", resp)
            resp.body = _read_body(response, req.max_content_length, resp)
            resp.content_length = len(resp.body)

    if not req.disable_charset:
        resp.charset = charset(resp.body, resp.headers)
        name = resp.charset.charset
        if name and name != "UTF-8":
            try:
                resp.body = resp.body.decode(name, errors="replace").encode("utf-8")
            except LookupError:
                raise HttpError("ErrorCharset", resp) from None

    return resp