from datetime import datetime, timezone

from bs4 import BeautifulSoup

from pagespider.extract.content import Content, News

P1 = "今天天气很好，我们一起去公园散步。"
P2 = "公园里有很多人在锻炼身体，空气非常新鲜，让人心情愉快。"
P3 = "傍晚我们回家。"

ZH_PAGE = f"""<html><head><title>城市公园迎来游客高峰_示例网</title>
<script>var x = 1;</script></head>
<body>
<div id="header"><h1>城市公园迎来游客高峰</h1><div class="info">发布时间：2022-09-01 10:20:30</div></div>
<div id="article"><p>{P1}</p><p>{P2}</p><p>{P3}</p></div>
<div id="footer"><a href="/">首页</a></div>
</body></html>"""


def _news(html, lang, origin_title="", origin_url=""):
    return Content(BeautifulSoup(html, "html.parser"), lang, origin_title, origin_url).extract_news()


def test_chinese_article_content_title_and_time():
    news = _news(ZH_PAGE, "zh")
    assert isinstance(news, News)
    assert news.content == "\n".join([P1, P2, P3])
    assert news.content_node.get("id") == "article"
    assert news.title == "城市公园迎来游客高峰"
    assert news.title_pos == "headline"
    assert news.time == "2022-09-01 10:20:30"
    assert news.time_pos == "body"
    assert news.time_local == "2022-09-01 10:20:30"
    assert news.lang == "zh"


def test_input_document_is_not_modified():
    soup = BeautifulSoup(ZH_PAGE, "html.parser")
    content = Content(soup, "zh", "", "")
    content.extract_news()
    assert soup.find("script") is not None
    assert content.doc.find("script") is None
    assert content.origin_doc.find("script") is not None


def test_english_meta_title_and_meta_time():
    html = """<html><head><title>Big News Happens Today - Example Site</title>
<meta property="og:title" content="Big News Happens Today">
<meta property="article:published_time" content="2022-09-01T10:20:30+08:00">
</head><body><p>Some words here.</p></body></html>"""
    news = _news(html, "en")
    assert news.title == "Big News Happens Today"
    assert news.title_pos == "meta"
    assert news.time == "2022-09-01T10:20:30+08:00"
    assert news.time_pos == "meta"
    expected = datetime(2022, 9, 1, 2, 20, 30, tzinfo=timezone.utc).astimezone()
    assert news.time_local == expected.strftime("%Y-%m-%d %H:%M:%S")


def test_origin_title_picks_last_similar_headline():
    html = """<html><head><title>Other</title></head><body>
<h1>Big News Today</h1><h2>Big News Today Extra</h2><p>text</p></body></html>"""
    news = _news(html, "en", origin_title="Big News Today")
    assert news.title == "Big News Today Extra"
    assert news.title_pos == "headline"


def test_title_from_script():
    html = """<html><head><title>Rocket Launch Succeeds - Site</title>
<script>var data = {"title": "Rocket Launch Succeeds"};</script>
</head><body><p>words</p></body></html>"""
    news = _news(html, "en")
    assert news.title == "Rocket Launch Succeeds"
    assert news.title_pos == "script"


def test_title_from_selector():
    html = """<html><head><title>Quiet Harbor Opens - Site</title></head><body>
<div class="title">Quiet Harbor Opens</div><p>plain words only</p></body></html>"""
    news = _news(html, "en")
    assert news.title == "Quiet Harbor Opens"
    assert news.title_pos == "selector"


def test_title_falls_back_to_page_title():
    html = "<html><head><title>Plain Page</title></head><body></body></html>"
    news = _news(html, "en")
    assert news.title == "Plain Page"
    assert news.title_pos == "title"
    assert news.content == ""
    assert news.content_node is None


def test_time_from_url():
    html = """<html><head><title>Story</title></head><body>
<p>Nothing dated appears in this body text at all.</p></body></html>"""
    news = _news(html, "en", origin_url="http://news.example.com/2022/10/03/story.html")
    assert news.time == "20221003"
    assert news.time_pos == "url"
    assert news.time_local == "2022-10-03 00:00:00"


def test_accepts_raw_html_text():
    news = Content(ZH_PAGE, "zh", "", "").extract_news()
    assert news.title == "城市公园迎来游客高峰"
    assert news.content.splitlines() == [P1, P2, P3]