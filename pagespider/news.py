"""A crawler that walks list pages of a news site and hands results to a callback."""

from __future__ import annotations

import queue
import random
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .http import HttpReq
from .spider import LinkData, SpiderError, get_link_data, get_news

_STOP = object()


@dataclass
class NewsContent:
    """One extracted article."""

    url: str = ""
    title: str = ""
    time: str = ""
    content: str = ""
    lang: str = ""


@dataclass
class NewsData:
    """Link data of one list page, or the error that prevented it."""

    link_data: LinkData | None
    depth: int
    list_url: str
    error: Exception | None = None


class _WaitGroup:
    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._count = 0

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._count += n

    def done(self) -> None:
        with self._cond:
            self._count -= 1
            if self._count <= 0:
                self._cond.notify_all()

    def wait(self) -> None:
        with self._cond:
            self._cond.wait_for(lambda: self._count <= 0)


def get_subdomains(url: str, req: HttpReq | None = None, timeout: int = 0, retry: int = 1) -> set[str]:
    """Subdomains linked from the page at ``url``."""
    return get_link_data(url, True, None, req, timeout, retry).sub_domains


def get_index_url(url: str) -> tuple[str, str]:
    """Return the scheme prefix (``"http://"``) and the home page URL of ``url``."""
    parts = url.split("/")
    if len(parts) == 1:
        return "https://", "https://www." + url
    if len(parts) < 3:
        raise ValueError(f"cannot find host in {url!r}")
    scheme = parts[0] + "//"
    return scheme, scheme + parts[2]


class NewsSpider:
    """Crawls list pages to a given depth and reports link data or articles."""

    def __init__(
        self,
        url: str,
        depth: int,
        process_func: Callable[[Any, Any], None],
        ctx: Any = None,
        *,
        retry_time: int = 2,
        timeout: int = 20000,
        req: HttpReq | None = None,
        is_sub: bool = False,
    ):
        self.url = url
        self.depth = depth
        self.process_func = process_func
        self.ctx = ctx
        self.retry_time = retry_time
        self.timeout = timeout
        self.req = req
        self.is_sub = is_sub
        self._reset()

    def _reset(self) -> None:
        self._seen: set[str] = set()
        self._seen_lock = threading.Lock()
        self._queue: queue.Queue = queue.Queue()
        self._wg = _WaitGroup()

    def clone(self) -> NewsSpider:
        """A copy with the same settings and fresh crawl state."""
        return NewsSpider(
            self.url,
            self.depth,
            self.process_func,
            self.ctx,
            retry_time=self.retry_time,
            timeout=self.timeout,
            req=self.req,
            is_sub=self.is_sub,
        )

    def _mark_seen(self, link: str) -> bool:
        with self._seen_lock:
            if link in self._seen:
                return False
            self._seen.add(link)
            return True

    def _spawn(self, target: Callable, arg: Any) -> None:
        self._wg.add(1)
        threading.Thread(target=target, args=(arg,), daemon=True).start()

    def get_news(self, links_handle_func: Callable[[NewsData], None]) -> None:
        """Walk list pages level by level, handing each page's data to the handler."""
        scheme, index_url = get_index_url(self.url)
        pending = [self.url]

        if self.is_sub:
            try:
                sub_domains = get_subdomains(index_url, self.req, self.timeout, self.retry_time * 100)
            except SpiderError:
                sub_domains = set()
            pending.extend(sorted(sub_domains))

        for level in range(self.depth):
            found = self.get_news_link_res(
                links_handle_func, scheme, pending, level + 1, self.timeout, self.retry_time
            )
            if not found:
                break
            pending = found

    def get_news_link_res(
        self,
        links_handle_func: Callable[[NewsData], None],
        scheme: str,
        urls: list[str],
        depth: int,
        timeout: int,
        retry: int,
    ) -> list[str]:
        """Fetch each URL, hand its data to the handler and return the new list pages."""
        found: list[str] = []
        for url in urls:
            if "http" not in url:
                url = scheme + url
            try:
                link_data = get_link_data(url, True, None, self.req, timeout, retry)
            except SpiderError as err:
                self._spawn(links_handle_func, NewsData(None, depth, url, err))
                continue
            for link in link_data.link_res.list:
                if self._mark_seen(link):
                    found.append(link)
            self._spawn(links_handle_func, NewsData(link_data, depth, url, None))
        return found

    def crawl_link_res(self, data: NewsData) -> None:
        """Pass list page data straight to the processing callback."""
        try:
            self._queue.put(data)
        finally:
            self._wg.done()

    def crawl_content_news(self, data: NewsData) -> None:
        """Start fetching every unseen article linked from a list page."""
        try:
            if data.error is None and data.link_data is not None:
                for link, title in data.link_data.link_res.content.items():
                    if self._mark_seen(link):
                        self._spawn(self.req_content_news, {link: title})
        finally:
            self._wg.done()

    def req_content_news(self, content: dict[str, str]) -> None:
        """Fetch and extract articles, passing each to the processing callback."""
        try:
            time.sleep(random.randint(10, 100) / 1000)
            for url, title in content.items():
                try:
                    news, _ = get_news(url, title, None, self.timeout, self.retry_time)
                except SpiderError:
                    continue
                self._queue.put(
                    NewsContent(
                        url=url, title=news.title, time=news.time_local, content=news.content, lang=news.lang
                    )
                )
        finally:
            self._wg.done()

    def _process(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            self.process_func(item, self.ctx)

    def _run(self, handler: Callable[[NewsData], None]) -> None:
        worker = threading.Thread(target=self._process, daemon=True)
        worker.start()
        try:
            self.get_news(handler)
            self._wg.wait()
        finally:
            self._queue.put(_STOP)
            worker.join()

    def get_link_res(self) -> None:
        """Crawl and pass every list page's NewsData to the callback."""
        self._run(self.crawl_link_res)

    def get_content_news(self) -> None:
        """Crawl and pass every extracted NewsContent to the callback."""
        self._run(self.crawl_content_news)