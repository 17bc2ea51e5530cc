import pytest

from pagespider.extract.link import (
    HAN_PATTERN,
    LinkRes,
    LinkType,
    link_is_content_by_regex,
    link_is_content_by_title,
    link_types,
    path_dir_clean,
)


def test_han_pattern_matches_source_case():
    assert HAN_PATTERN.findall("123你好，世界asdf") == ["你", "好", "世", "界"]


@pytest.mark.parametrize(
    "url",
    ["http://www.163.com", "http://www.163.com/", "http://www.163.com/index.html"],
)
def test_home_links_are_none(url):
    assert link_is_content_by_title(url, "北极圈内最高温达到三十八度", "zh") is LinkType.NONE


@pytest.mark.parametrize(
    "title, lang, expected",
    [
        ("北极圈内最高温达到38℃北极熊还好吗", "zh", LinkType.CONTENT),
        ("新闻中心", "zh", LinkType.LIST),
        ("NBA", "zh", LinkType.LIST),
        ("hello", "zh", LinkType.NONE),
        ("今天天气，很好", "zh", LinkType.CONTENT),
        ("今天天气很好啊", "zh", LinkType.UNKNOWN),
        ("China and US hold talks today", "en", LinkType.CONTENT),
        ("World News", "en", LinkType.LIST),
        ("123", "en", LinkType.NONE),
        ("日本のニュースです今日は", "ja", LinkType.CONTENT),
        ("ニュース", "ja", LinkType.LIST),
    ],
)
def test_link_is_content_by_title(title, lang, expected):
    assert link_is_content_by_title("https://www.163.com/a/b.html", title, lang) is expected


def test_overlong_link_is_none():
    url = "https://www.163.com/" + "a" * 300 + ".html"
    assert link_is_content_by_title(url, "China and US hold talks today", "en") is LinkType.NONE


def test_link_is_content_by_regex_uses_domain_top():
    rules = {"163.com": [r"\d+\.html$"]}
    assert link_is_content_by_regex("https://news.163.com/a/123.html", rules) is True
    assert link_is_content_by_regex("https://news.163.com/a/abc.html", rules) is False


def test_link_is_content_by_regex_hostname_takes_precedence():
    rules = {"news.163.com": ["nomatch"], "163.com": [".*"]}
    assert link_is_content_by_regex("https://news.163.com/a/123.html", rules) is False


def test_path_dir_clean():
    assert path_dir_clean("/2022-10.03_x") == "/20221003x"


def test_link_types_with_rules():
    links = {
        "https://news.163.com/a/123.html": "t",
        "https://www.163.com/": "home",
        "https://www.163.com/list/": "list",
    }
    res, subs = link_types(links, "zh", {"163.com": [r"\d+\.html$"]})
    assert res.content == {"https://news.163.com/a/123.html": "t"}
    assert res.none == {"https://www.163.com/": "home"}
    assert res.list == {"https://www.163.com/list/": "list"}
    assert subs == {"news.163.com", "www.163.com"}


def test_link_types_publish_date_paths_promote_lists():
    links = {
        f"https://www.example.com/2022/09/01/story-{i}.html": "China and US hold talks today"
        for i in range(8)
    }
    links["https://www.example.com/2022/09/02/brief.html"] = "Short title"
    links["https://www.example.com/about/"] = "About us"
    res, subs = link_types(links, "en", None)
    assert "https://www.example.com/2022/09/02/brief.html" in res.content
    assert res.list == {"https://www.example.com/about/": "About us"}
    assert len(res.content) == 9
    assert subs == {"www.example.com"}


def test_link_types_top_paths_and_zh_cleanup():
    links = {f"https://www.example.com/news/{i}.html": "北极圈内最高温达到三十八度" for i in range(8)}
    links["https://www.example.com/story.html"] = "北极熊还好吗南极情况怎么样"
    links["https://www.example.com/news/weather.html"] = "今天天气很好啊"
    links["https://www.example.com/news/license.html"] = "信息网络传播视听节目许可证"
    res, _ = link_types(links, "zh", None)
    assert "https://www.example.com/news/weather.html" in res.content
    assert res.unknown == {"https://www.example.com/story.html": "北极熊还好吗南极情况怎么样"}
    assert res.none == {"https://www.example.com/news/license.html": "信息网络传播视听节目许可证"}


def test_link_types_groups_partition_input():
    links = {
        "https://www.example.com/a/one.html": "Some fairly long headline words here",
        "https://www.example.com/b/": "Section",
        "https://www.example.com/": "Home",
    }
    res, _ = link_types(links, "en", None)
    assert isinstance(res, LinkRes)
    merged = {**res.content, **res.list, **res.unknown, **res.none}
    assert merged == links