import pytest

from pagespider.extract.domain import (
    domain_parse,
    domain_parse_from_url,
    domain_top,
    domain_top_from_url,
    public_suffix,
)


@pytest.mark.parametrize(
    "host,top",
    [
        ("www.net.cn", "www.net.cn"),
        ("hi.chinanews.com", "chinanews.com"),
        ("a.wh.cn", "wh.cn"),
        ("siat.ac.cn", "siat.ac.cn"),
        ("abc.spring.io", "spring.io"),
        ("www.china-embassy.or.jp", "china-embassy.or.jp"),
        ("xwxc.mwr.cn", "mwr.cn"),
        ("legismac.safp.gov.mo", "safp.gov.mo"),
        ("www.gov.cn", "www.gov.cn"),
        ("scopsr.gov.cn", "scopsr.gov.cn"),
        ("usa.gov", "usa.gov"),
        ("bbc.co.uk", "bbc.co.uk"),
    ],
)
def test_domain_top(host, top):
    assert domain_top(host) == top


def test_domain_parse_parts():
    parsed = domain_parse("dealer.auto.sohu.com")
    assert (parsed.subdomain, parsed.domain, parsed.tld, parsed.icann) == ("dealer.auto", "sohu", "com", True)


def test_domain_parse_errors():
    with pytest.raises(ValueError):
        domain_parse("  ")
    with pytest.raises(ValueError):
        domain_parse("com.cn")


def test_public_suffix():
    assert public_suffix("bbs.sohu.com") == ("com", True)


def test_from_url():
    assert domain_top_from_url("https://www.google.com") == "google.com"
    assert domain_top_from_url("https://www.baidu.com/news") == "baidu.com"
    assert domain_top_from_url("http://szb.xnnews.com.cn/zhzx/202207/t20220722_2731400.htm") == "xnnews.com.cn"
    assert domain_parse_from_url("http://a.b.example.com/").subdomain == "a.b"
    assert domain_top_from_url("not a url") == ""