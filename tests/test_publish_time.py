from datetime import datetime

from bs4 import BeautifulSoup

from pagespider.extract.publish_time import TimeFinder
from pagespider.extract.textutil import str_to_time

REMOVE_TAGS = ["script", "noscript", "style", "iframe", "br", "link", "svg", "textarea"]


def make_finder(html, lang="zh", url=""):
    origin = BeautifulSoup(html, "html.parser")
    doc = BeautifulSoup(html, "html.parser")
    for tag in doc.find_all(REMOVE_TAGS):
        tag.decompose()
    return TimeFinder(doc, origin, lang, url)


def test_meta_published_time():
    value = "2022-09-01T10:20:30+08:00"
    finder = make_finder(
        f'<html><head><meta property="article:published_time" content="{value}"></head><body></body></html>'
    )
    assert finder.find("", "") == value
    assert finder.time_pos == "meta"


def test_english_meta_date():
    raw = "Sep 02, 2022"
    finder = make_finder(f'<html><head><meta name="pubdate" content="{raw}"></head><body></body></html>', "en")
    result = finder.find("", "")
    assert result.split() == raw.replace(",", " ").split()
    assert finder.time_pos == "meta"
    assert finder.time_en_format is True


def test_time_tag():
    value = "2022-08-30 08:15:00"
    finder = make_finder(f'<html><body><time datetime="{value}">x</time></body></html>', "en")
    assert finder.find("", "") == value
    assert finder.time_pos == "tag"


def test_script_publish_field():
    value = "2022-07-01 09:00:00"
    finder = make_finder(f'<html><body><script>var d = {{"pubDate": "{value}"}};</script></body></html>')
    assert finder.find("", "") == value
    assert finder.time_pos == "script"


def test_wechat_script_timestamp_round_trips():
    finder = make_finder('<html><body><script>var ct = "1662000000";</script></body></html>')
    result = finder.find("", "")
    assert finder.time_pos == "script"
    assert str_to_time(result) == 1662000000


def test_body_date_with_time():
    finder = make_finder("<html><body><p>发布时间：2022-05-06 12:30:45 来源：新华社</p></body></html>")
    assert finder.find("", "") == "2022-05-06 12:30:45"
    assert finder.time_pos == "body"


def test_body_first_date_wins_when_longest():
    finder = make_finder("<html><body><p>2022-05-06 12:30:45 更新 2022-05-07 12:30</p></body></html>")
    assert finder.find("", "") == "2022-05-06 12:30:45"


def test_body_date_nearest_title():
    html = (
        "<html><body><p>2022-01-01 10:00 很长的一段其他内容在这里出现 正文标题 "
        "2022-03-03 10:00:00</p></body></html>"
    )
    assert make_finder(html).find("正文标题", "headline") == "2022-03-03 10:00:00"
    assert make_finder(html).find("正文标题", "title") == "2022-01-01 10:00"


def test_body_date_without_year():
    finder = make_finder("<html><body><p>更新 09-02 11:30 阅读</p></body></html>")
    result = finder.find("", "")
    assert result == datetime.now().strftime("%Y-") + "09-02 11:30"
    assert finder.time_pos == "body"


def test_url_date():
    finder = make_finder("<html><body></body></html>", url="http://example.com/news/20221003/123.html")
    assert finder.find("", "") == "20221003"
    assert finder.time_pos == "url"


def test_nothing_found():
    finder = make_finder("<html><body><p>没有时间</p></body></html>", url="http://example.com/a/b.html")
    assert finder.find("", "") == ""
    assert finder.time_pos == ""


def test_format_time_local_t_separator():
    finder = make_finder("<html><body></body></html>")
    assert finder.format_time("2022-09-01T10:20:30") == "2022-09-01 10:20:30"


def test_format_time_keeps_zone():
    finder = make_finder("<html><body></body></html>")
    value = "2022-09-01T10:20:30+08:00"
    assert finder.format_time(value) == value


def test_format_time_trims_minute_suffix():
    finder = make_finder("<html><body></body></html>")
    assert finder.format_time("2022-09-01 10:20分") == "2022-09-01 10:20"
    assert finder.format_time("2022年9月1日10点20分") == "2022年9月1日10点20分"