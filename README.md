# pagespider

A toolkit for fetching and understanding web pages: detecting charsets and
languages, classifying the links on a page into content, list and other
pages, extracting news articles (title, publish time, body text), and
probing domains for basic site information.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

### Fetching a page

`http_get_resp` fetches a URL, detects its charset and decodes the body
to UTF-8:

```python
from pagespider.http import http_get_resp

resp = http_get_resp("http://www.example.com", None, 10000)
print(resp.charset)
```

### Links on a page

`get_link_data` fetches a page and sorts its links into content, list,
unknown and filtered groups, and also collects the subdomains it saw:

```python
from pagespider.spider import get_link_data

data = get_link_data("http://www.example.com", True, None, None, 10000, 1)
print(len(data.link_res.content), len(data.link_res.list))
print(sorted(data.sub_domains))
```

To classify links you already have, with no network access, use
`pagespider.extract.link.link_types`.

### News extraction

`get_news` fetches an article page and extracts its title, publish time
and body text:

```python
from pagespider.spider import get_news

news, resp = get_news("http://www.example.com/2022/0901/1.html", "", None, 10000, 1)
print(news.title, news.time_local)
print(news.content)
```

When you already hold a parsed document, build a
`pagespider.extract.content.Content` and call `extract_news()`.

### Language and charset

```python
from pagespider.lang import lang_text
from pagespider.charset import charset

print(lang_text("some long enough text ..."))
print(charset(b"<html>...</html>", None))
```

### Domain probing

```python
from pagespider.detect import detect_domain

res = detect_domain("example.com", 10000, 1)
print(res.title, res.lang, res.content_count, res.list_count)
```

### Crawling a news site

`NewsSpider` walks a site's list pages to a chosen depth and passes each
result to your callback along with a context value:

```python
from pagespider.news import NewsSpider

def handle(data, ctx):
    print(ctx, data)

spider = NewsSpider("http://www.example.com/", 1, handle, "my-task", retry_time=1, timeout=10000)
spider.get_content_news()
```

### Offline helpers

The `pagespider.extract` sub-package works without the network:
`domain` (registered-domain parsing), `icp` (Chinese ICP record numbers),
`meta` (country and category from a host name), `web` (titles,
descriptions and link filtering) and `textutil` (text normalisation and
similarity).