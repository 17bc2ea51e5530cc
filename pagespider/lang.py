"""Language detection for HTML pages and plain text."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from .extract.link import HAN_PATTERN
from .extract.textutil import remove_lines, remove_sign
from .extract.web import web_title

LANG_POS_CHARSET = "charset"
LANG_POS_HTML_TAG = "html"
LANG_POS_BODY = "body"
LANG_POS_LINGUA = "lingua"
LANG_POS_TITLE_ZH = "title"
BODY_CHUNK_SIZE = 2048
BODY_MIN_SIZE = 64

CHARSET_LANG_MAP = {
    "GBK": "zh",
    "Big5": "zh",
    "ISO-2022-CN": "zh",
    "SHIFT_JIS": "ja",
    "KOI8-R": "ru",
    "EUC-JP": "ja",
    "EUC-KR": "ko",
    "EUC-CN": "zh",
    "ISO-2022-JP": "ja",
    "ISO-2022-KR": "ko",
}

LANG_EN_ZH_MAP = {
    "zh": "中文", "en": "英语", "ja": "日语", "ru": "俄语", "ko": "韩语", "ar": "阿拉伯语",
    "hi": "印地语", "de": "德语", "fr": "法语", "es": "西班牙语", "pt": "葡萄牙语",
    "it": "意大利语", "th": "泰语", "vi": "越南语", "my": "缅甸语",
}
LANG_ZH_EN_MAP = {zh: code for code, zh in LANG_EN_ZH_MAP.items()}

LANG_HTML_PATTERN = re.compile(r"^([a-z]{2}|[a-z]{2}\-[a-z]+)$", re.IGNORECASE | re.ASCII)
_LANG_META_SELECTORS = ("meta[http-equiv='content-language' i]", "meta[name='lang' i]")

EN_PATTERN = re.compile("[a-zA-Z]")
LATIN_PATTERN = re.compile("[\u0080-\u00ff]")
JA_PATTERN = re.compile(
    "[|\u3041-\u3096\u309d-\u309f\U0001b001-\U0001b11f\U0001f200"
    "\u30a1-\u30fa\u30fd-\u30ff\u31f0-\u31ff\u32d0-\u32fe\u3300-\u3357"
    "\uff66-\uff6f\uff71-\uff9d\U0001b000]"
)
KO_PATTERN = re.compile(
    "[\u1100-\u11ff\u302e\u302f\u3131-\u318e\u3200-\u321e\u3260-\u327e"
    "\ua960-\ua97c\uac00-\ud7a3\ud7b0-\ud7c6\ud7cb-\ud7fb"
    "\uffa0-\uffbe\uffc2-\uffc7\uffca-\uffcf\uffd2-\uffd7\uffda-\uffdc]"
)

_SCRIPT_LANGS = (
    ("ar", re.compile("[\u0600-\u06ff\u0750-\u077f\u08a0-\u08ff\ufb50-\ufdff\ufe70-\ufeff]")),
    ("ru", re.compile("[\u0400-\u04ff]")),
    ("hi", re.compile("[\u0900-\u097f]")),
    ("ko", KO_PATTERN),
)

_LATIN_PROFILES = (
    ("fr", set("le la les de des du et est un une que qui pour dans sur pas au aux avec ce il elle".split()), "èêàçùœëîûâ"),
    ("de", set("der die das und ist nicht ein eine zu den von mit sich des auf für im dem wird".split()), "äöüß"),
    ("es", set("el la los las de y que en un una por con para es del se al lo".split()), "ñ¿¡íó"),
    ("pt", set("o a os as de e que em um uma do da dos das para com não por é".split()), "ãõâ"),
    ("en", set("the and of to in is that for it with as was on be by".split()), ""),
)


@dataclass
class LangRes:
    """A detected language code and where it was found."""

    lang: str = ""
    lang_pos: str = ""


def lang_text(text: str) -> tuple[str, str]:
    """Detect the language of plain text; returns (lang, position)."""
    return _lang_from_text(text)


def detect_lang(doc, charset: str = "", list_mode: bool = False) -> LangRes:
    """Detect the language of a parsed HTML page."""
    if charset in CHARSET_LANG_MAP:
        return LangRes(CHARSET_LANG_MAP[charset], LANG_POS_CHARSET)

    lang, pos = lang_from_title(doc, list_mode)
    if lang:
        return LangRes(lang, pos)

    lang = lang_from_html(doc)
    if lang and lang != "en":
        return LangRes(lang, LANG_POS_HTML_TAG)

    if charset.startswith("UTF"):
        lang, pos = lang_from_utf8_body(doc, list_mode)
        if lang:
            return LangRes(lang, pos)
    return LangRes()


def lang_from_html(doc) -> str:
    """Language declared by the html tag or a language meta tag."""
    candidates = []
    html = doc.find("html")
    if html is not None:
        candidates += [html.get("lang"), html.get("xml:lang")]
    for selector in _LANG_META_SELECTORS:
        meta = doc.select_one(selector)
        if meta is not None:
            candidates.append(meta.get("content"))

    for value in candidates:
        if isinstance(value, str):
            value = value.strip()
            if LANG_HTML_PATTERN.match(value):
                return value[:2]
    return ""


def lang_from_title(doc, list_mode: bool = False) -> tuple[str, str]:
    """Chinese, Japanese or Korean when the title holds at least two Han characters."""
    text = remove_sign(web_title(doc, 0)).strip()
    if not text or len(HAN_PATTERN.findall(text)) < 2:
        return "", ""

    body = remove_sign(_body_text_for_lang(doc, list_mode))[:BODY_CHUNK_SIZE].strip()
    count = len(body)
    ja = len(JA_PATTERN.findall(body))
    if ja and ja / count > 0.2:
        return "ja", LANG_POS_TITLE_ZH
    ko = len(KO_PATTERN.findall(body))
    if ko and ko / count > 0.2:
        return "ko", LANG_POS_TITLE_ZH
    return "zh", LANG_POS_TITLE_ZH


def lang_from_utf8_body(doc, list_mode: bool = False) -> tuple[str, str]:
    """Detect the language from the page's text content."""
    return _lang_from_text(_body_text_for_lang(doc, list_mode))


def _detect_latin(text: str) -> str:
    words = Counter(text.lower().split())
    lowered = text.lower()

    def score(profile) -> int:
        _, stopwords, letters = profile
        return sum(words[w] for w in stopwords) + 2 * sum(lowered.count(ch) for ch in letters)

    best = max(_LATIN_PROFILES, key=score)
    return best[0] if score(best) > 0 else "en"


def _detect_script(text: str) -> str:
    counts = [(len(pattern.findall(text)), lang) for lang, pattern in _SCRIPT_LANGS]
    count, lang = max(counts, key=lambda item: item[0])
    return lang if count > 0 else ""


def _lang_from_text(text: str) -> tuple[str, str]:
    text = remove_lines(text).replace("\t", "").replace("  ", "")
    text = remove_sign(text)[:BODY_CHUNK_SIZE].strip()
    count = len(text)
    if count < BODY_MIN_SIZE:
        return "", ""

    han = len(HAN_PATTERN.findall(text))
    if han and han / count >= 0.3:
        ja = len(JA_PATTERN.findall(text))
        if ja and ja / han > 0.1:
            return "ja", LANG_POS_BODY
        return "zh", LANG_POS_BODY

    english = len(EN_PATTERN.findall(text))
    if english and english / count > 0.618:
        if len(LATIN_PATTERN.findall(text)) > 5:
            return _detect_latin(text), LANG_POS_LINGUA
        return "en", LANG_POS_BODY

    lang = _detect_script(text)
    if lang:
        return lang, LANG_POS_LINGUA
    return "", ""


def _body_text_for_lang(doc, list_mode: bool) -> str:
    if list_mode:
        anchors = doc.find_all("a")
        if len(anchors) < 16:
            return ""
        text = "".join(a.get_text() for a in anchors[:64])
        if text.count("{") >= 5 and text.count("}") >= 5:
            return ""
        return text

    text = "".join(p.get_text() for p in doc.find_all("p")[:64])
    if len(text) < BODY_MIN_SIZE:
        text = "".join(body.get_text() for body in doc.find_all("body"))
    return text