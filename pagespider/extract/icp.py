"""Chinese site registration (ICP) number extraction."""

from __future__ import annotations

import re

from .textutil import remove_lines

PROVINCE_SHORT_MAP = {
    "京": "北京", "津": "天津", "沪": "上海", "渝": "重庆", "黑": "黑龙江", "吉": "吉林",
    "辽": "辽宁", "冀": "河北", "豫": "河南", "鲁": "山东", "晋": "山西", "陕": "陕西",
    "秦": "陕西", "蒙": "内蒙古", "宁": "宁夏", "陇": "甘肃", "甘": "甘肃", "新": "新疆",
    "青": "青海", "藏": "西藏", "鄂": "湖北", "皖": "安徽", "苏": "江苏", "浙": "浙江",
    "闽": "福建", "湘": "湖南", "赣": "江西", "川": "四川", "蜀": "四川", "黔": "贵州",
    "贵": "贵州", "滇": "云南", "云": "云南", "粤": "广东", "桂": "广西", "琼": "海南",
    "港": "中国香港", "澳": "中国澳门", "台": "中国台湾",
}

_PROVINCES = "(京|津|冀|晋|蒙|辽|吉|黑|沪|苏|浙|皖|闽|赣|鲁|豫|鄂|湘|粤|桂|琼|川|蜀|贵|黔|云|滇|渝|藏|陇|甘|陕|秦|青|宁|新)"

ICP_PATTERNS = (
    re.compile(_PROVINCES + r"ICP(备|证|备案)?[0-9]+", re.I),
    re.compile(_PROVINCES + r"公网安备[0-9]+", re.I),
    re.compile(_PROVINCES + r"B2-[0-9]+", re.I),
)


def icp(doc) -> tuple[str, str]:
    """Find the registration number and province short name in a page body."""
    body = doc.find("body")
    text = body.get_text() if body is not None else ""
    text = remove_lines(text).replace("\t", "").replace(" ", "")
    return icp_from_text(text)


def icp_from_text(text: str) -> tuple[str, str]:
    """Return (number, province short name), or empty strings when absent."""
    for pattern in ICP_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0), match.group(1)
    return "", ""