"""Country, province and category guesses from a host name."""

from __future__ import annotations

from .domain import domain_parse

HOST_GOV_COUNTRY_MAP = {
    "hk": "中国", "tw": "中国", "mo": "中国", "jp": "日本", "kr": "韩国", "in": "印度",
    "uk": "英国", "us": "美国", "it": "意大利", "es": "西班牙", "ru": "俄罗斯", "de": "德国",
    "fr": "法国", "th": "泰国", "vn": "越南", "sg": "新加坡", "au": "澳大利亚", "ca": "加拿大",
    "il": "以色列", "mm": "缅甸", "dz": "阿尔及利亚", "pl": "波兰", "az": "南非",
    "ng": "尼日利亚", "kp": "朝鲜", "lb": "黎巴嫩", "ua": "乌克兰", "tr": "土耳其",
    "se": "瑞典", "lk": "斯里兰卡", "si": "斯洛文尼亚", "sk": "斯洛伐克", "ro": "罗马尼亚",
    "pt": "葡萄牙", "ph": "菲律宾", "pk": "巴基斯坦", "py": "巴拉圭", "np": "尼泊尔",
    "ma": "摩洛哥", "my": "马来西亚", "lt": "立陶宛", "ie": "爱尔兰", "iq": "伊拉克",
    "ir": "伊朗", "id": "印度尼西亚", "hu": "匈牙利", "gr": "希腊", "eg": "埃及",
    "cz": "捷克", "hr": "克罗地亚", "co": "哥伦比亚", "cl": "智利", "br": "巴西",
    "bg": "保加利亚", "be": "比利时", "bd": "孟加拉国", "aw": "阿鲁巴", "am": "亚美尼亚",
    "ai": "安圭拉", "ao": "安哥拉", "al": "阿尔巴尼亚", "af": "阿富汗", "sa": "沙特阿拉伯",
    "nl": "荷兰",
}

_ZH_REGIONS = ((".hk", "中国香港"), (".tw", "中国台湾"), (".mo", "中国澳门"))

_SUFFIX_COUNTRY = (
    (".cn", "zh", "中国"), (".jp", "ja", "日本"), (".kr", "ko", "韩国"), (".uk", "en", "英国"),
    (".us", "en", "美国"), (".in", "hi", "印度"), (".es", "es", "西班牙"), (".ru", "ru", "俄罗斯"),
    (".de", "de", "德国"), (".fr", "fr", "法国"),
)


def meta_from_host(host: str, lang: str) -> tuple[str, str, str]:
    """Return (country, province, category) guessed from a host and its language."""
    host = host.lower()
    try:
        tld = domain_parse(host).tld
    except ValueError:
        return "", "", ""

    if tld == "gov":
        return "美国", "", "政务"

    for code, country in HOST_GOV_COUNTRY_MAP.items():
        if tld == "gov." + code:
            province = ""
            for suffix, region in _ZH_REGIONS:
                if host.endswith(suffix) and lang == "zh":
                    province = region
            return country, province, "政务"

    if lang == "zh":
        for suffix, region in _ZH_REGIONS:
            if host.endswith(suffix):
                return "中国", region, ""

    for suffix, suffix_lang, country in _SUFFIX_COUNTRY:
        if host.endswith(suffix) and lang == suffix_lang:
            return country, "", ""

    return "", "", ""