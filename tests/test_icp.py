import pytest
from bs4 import BeautifulSoup

from pagespider.extract.icp import icp, icp_from_text


@pytest.mark.parametrize(
    "text,expected",
    [
        ("粤ICP备17055554号", ("粤ICP备17055554", "粤")),
        ("粤ICP备17055554-34号", ("粤ICP备17055554", "粤")),
        ("沪ICP备05018492", ("沪ICP备05018492", "沪")),
        ("粤B2-20090059", ("粤B2-20090059", "粤")),
        ("京公网安备31010402001073号", ("京公网安备31010402001073", "京")),
        ("京公网安备-31010-4020010-73号", ("", "")),
        ("鲁ICP备05002386鲁公网安备37070502000027号", ("鲁ICP备05002386", "鲁")),
    ],
)
def test_icp_from_text(text, expected):
    assert icp_from_text(text) == expected


def test_icp_from_doc_strips_spaces():
    doc = BeautifulSoup("<html><body><p>粤 ICP 备\n17055554号</p></body></html>", "html.parser")
    assert icp(doc) == ("粤ICP备17055554", "粤")