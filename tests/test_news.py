import threading

import pytest
import responses

from pagespider.news import NewsContent, NewsData, NewsSpider, get_index_url, get_subdomains
from pagespider.spider import SpiderError

HTML = "text/html; charset=utf-8"

LIST_ROOT = """<html lang="de"><head><title>Start</title></head><body>
<a href="/sport/">Sport</a><a href="/politik/">Politik</a></body></html>"""

EMPTY_PAGE = '<html lang="de"><head><title>Leer</title></head><body><p>Nichts</p></body></html>'

CONTENT_ROOT = """<html lang="de"><head><title>Start</title></head><body>
<a href="/news/2023/artikel.html">Ein langer Titel mit vielen Worten</a></body></html>"""

ARTICLE = """<html lang="de"><head><title>Ein langer Titel mit vielen Worten</title></head><body>
<h1>Ein langer Titel mit vielen Worten</h1>
<div id="main">
<p>Erster Absatz mit einigem Text ueber die Ereignisse des Tages.</p>
<p>Zweiter Absatz, der deutlich laenger ist und noch viel mehr Einzelheiten enthaelt als der erste.</p>
<p>Kurz.</p>
</div></body></html>"""


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


class _Collector:
    def __init__(self):
        self.items = []
        self._lock = threading.Lock()

    def __call__(self, data, ctx):
        with self._lock:
            self.items.append((data, ctx))


def test_get_index_url_with_scheme():
    assert get_index_url("http://www.cankaoxiaoxi.com/") == ("http://", "http://www.cankaoxiaoxi.com")


def test_get_index_url_bare_domain():
    assert get_index_url("cankaoxiaoxi.com") == ("https://", "https://www.cankaoxiaoxi.com")


def test_get_index_url_without_host():
    with pytest.raises(ValueError):
        get_index_url("a/b")


def test_defaults_and_options():
    spider = NewsSpider("http://www.example.com/", 2, _Collector())
    assert spider.retry_time == 2
    assert spider.timeout == 20000
    assert spider.is_sub is False
    tuned = NewsSpider("http://www.example.com/", 1, _Collector(), "ctx", retry_time=1, timeout=10000)
    assert (tuned.retry_time, tuned.timeout, tuned.ctx) == (1, 10000, "ctx")


def test_clone_keeps_settings():
    spider = NewsSpider("http://www.example.com/", 2, _Collector(), "getLinkRes", retry_time=1)
    copy = spider.clone()
    copy.ctx = "getLinkRes_Clone"
    assert copy.url == spider.url
    assert copy.depth == 2
    assert copy.retry_time == 1
    assert spider.ctx == "getLinkRes"


def test_get_link_res(rsps):
    rsps.add(responses.GET, "http://www.example.com/", body=LIST_ROOT, content_type=HTML)
    rsps.add(responses.GET, "http://www.example.com/sport/", body=EMPTY_PAGE, content_type=HTML)
    rsps.add(responses.GET, "http://www.example.com/politik/", status=404, body="x", content_type=HTML)
    collector = _Collector()
    spider = NewsSpider("http://www.example.com/", 2, collector, "getLinkRes", retry_time=1, timeout=5000)
    spider.get_link_res()

    by_url = {data.list_url: data for data, _ in collector.items}
    assert sorted(by_url) == [
        "http://www.example.com/",
        "http://www.example.com/politik/",
        "http://www.example.com/sport/",
    ]
    assert all(ctx == "getLinkRes" for _, ctx in collector.items)

    root = by_url["http://www.example.com/"]
    assert root.depth == 1
    assert set(root.link_data.link_res.list) == {
        "http://www.example.com/sport/",
        "http://www.example.com/politik/",
    }
    assert by_url["http://www.example.com/sport/"].depth == 2
    failed = by_url["http://www.example.com/politik/"]
    assert failed.link_data is None
    assert isinstance(failed.error, SpiderError)


def test_get_content_news(rsps):
    rsps.add(responses.GET, "http://www.example.com/", body=CONTENT_ROOT, content_type=HTML)
    rsps.add(responses.GET, "http://www.example.com/news/2023/artikel.html", body=ARTICLE, content_type=HTML)
    collector = _Collector()
    spider = NewsSpider("http://www.example.com/", 1, collector, "getContentNews", retry_time=1, timeout=5000)
    spider.get_content_news()

    assert len(collector.items) == 1
    news, ctx = collector.items[0]
    assert isinstance(news, NewsContent)
    assert ctx == "getContentNews"
    assert news.url == "http://www.example.com/news/2023/artikel.html"
    assert news.title == "Ein langer Titel mit vielen Worten"
    assert news.lang == "de"
    assert "Zweiter Absatz" in news.content


def test_crawl_link_res_without_process_thread():
    spider = NewsSpider("http://www.example.com/", 1, _Collector())
    data = NewsData(None, 1, "http://www.example.com/", SpiderError("ErrorRequest"))
    spider._wg.add(1)
    spider.crawl_link_res(data)
    assert spider._queue.get_nowait() is data


def test_get_subdomains(rsps):
    page = """<html><body><a href="http://news.example.com/x/">X</a>
    <a href="http://www.example.com/y/">Y</a></body></html>"""
    rsps.add(responses.GET, "http://www.example.com/", body=page, content_type=HTML)
    subs = get_subdomains("http://www.example.com/", None, 5000, 1)
    assert {"news.example.com", "www.example.com"} <= subs


def test_get_subdomains_failure(rsps):
    rsps.add(responses.GET, "http://www.example.com/", status=404, body="x", content_type=HTML)
    with pytest.raises(SpiderError):
        get_subdomains("http://www.example.com/", None, 5000, 1)