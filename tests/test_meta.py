import pytest

from pagespider.extract.meta import meta_from_host


@pytest.mark.parametrize(
    "host,expected",
    [
        ("matichon.co.th", ("", "", "")),
        ("wanbao.com.sg", ("", "", "")),
        ("waou.com.mo", ("", "", "")),
        ("archives.gov.mo", ("中国", "", "政务")),
        ("mfa.gov.sg", ("新加坡", "", "政务")),
        ("nasa.gov", ("美国", "", "政务")),
    ],
)
def test_meta_from_host_without_lang(host, expected):
    assert meta_from_host(host, "") == expected


def test_meta_from_host_with_lang():
    assert meta_from_host("archives.gov.mo", "zh") == ("中国", "中国澳门", "政务")
    assert meta_from_host("waou.com.mo", "zh") == ("中国", "中国澳门", "")
    assert meta_from_host("WWW.Example.CN", "zh") == ("中国", "", "")
    assert meta_from_host("example.de", "en") == ("", "", "")
    assert meta_from_host("", "zh") == ("", "", "")