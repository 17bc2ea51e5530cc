"""Article extraction: main text, title and publish time of a news page."""

from __future__ import annotations

import copy
import math
import re
import time
from dataclasses import dataclass, field
from datetime import datetime

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .link import WORD_LANGS
from .publish_time import TimeFinder
from .textutil import normalise_line, normalise_space, similarity_text, split_trim, str_to_time
from .web import web_content_title_clean, web_title

CONTENT_REMOVE_TAGS = "script,noscript,style,iframe,br,link,svg,textarea"
TITLE_SIM_ZH = 0.3
TITLE_SIM_WORD = 0.5

META_TITLE_SELECTORS = (
    "meta[property='og:title' i]",
    "meta[property='twitter:title' i]",
    "meta[name='twitter:title' i]",
)
TITLE_SELECTOR = "*[id^=title],*[id$=title],*[class^=title],*[class$=title]"
SCRIPT_TITLE_PATTERN = re.compile(r'"title"[\t ]{0,4}:[\t ]{0,4}"(.*)"', re.IGNORECASE)
_HEADLINE_NAME = re.compile("h[1-2]")


@dataclass
class News:
    """The extracted parts of an article page."""

    title: str = ""
    title_pos: str = ""
    time_local: str = ""
    time: str = ""
    time_pos: str = ""
    content: str = ""
    content_node: Tag | None = None
    spend: int = 0
    lang: str = ""


@dataclass
class _CountInfo:
    text_count: int = 0
    link_text_count: int = 0
    tag_count: int = 0
    link_tag_count: int = 0
    density: float = 0.0
    density_sum: float = 0.0
    p_count: int = 0
    leaves: list[int] = field(default_factory=list)


def _clone(doc) -> BeautifulSoup:
    if isinstance(doc, BeautifulSoup):
        return copy.copy(doc)
    return BeautifulSoup(doc, "html.parser")


def _is_text(node) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _normalise_text(node) -> str:
    """Concatenate the whitespace-normalised text nodes below ``node``."""
    if _is_text(node):
        return normalise_space(str(node))
    if not isinstance(node, Tag):
        return ""
    return "".join(normalise_space(str(text)) for text in node.descendants if _is_text(text))


def _variance(leaves: list[int]) -> float:
    if not leaves:
        return 0.0
    if len(leaves) == 1:
        return leaves[0] / 2
    mean = sum(leaves) / len(leaves)
    return sum((leaf - mean) ** 2 for leaf in leaves) / len(leaves)


class Content:
    """Extracts the news parts of one parsed page."""

    def __init__(self, doc, lang: str = "", origin_title: str = "", origin_url: str = ""):
        self.origin_doc = _clone(doc)
        self.doc = _clone(doc)
        for tag in self.doc.select(CONTENT_REMOVE_TAGS):
            tag.extract()
        self.origin_title = origin_title
        self.origin_url = origin_url
        self.lang = lang
        self.title_sim = TITLE_SIM_WORD if lang in WORD_LANGS else TITLE_SIM_ZH
        self.title_pos = ""
        self._infos: dict[int, tuple[Tag, _CountInfo]] = {}
        self._body: Tag | None = None

    def extract_news(self) -> News:
        """Find the main text node, title and publish time of the page."""
        begin = time.monotonic()
        news = News(lang=self.lang)

        node = self._content_node()
        if node is not None:
            news.content_node = node
            news.content = self._format_content(node)

        news.title = self._title(node)
        news.title_pos = self.title_pos

        finder = TimeFinder(self.doc, self.origin_doc, self.lang, self.origin_url)
        raw = finder.find(news.title, self.title_pos)
        if raw:
            news.time = raw
            news.time_pos = finder.time_pos
            stamp = str_to_time(finder.format_time(raw))
            if stamp > 0:
                news.time_local = datetime.fromtimestamp(stamp).strftime("%Y-%m-%d %H:%M:%S")

        news.spend = int((time.monotonic() - begin) * 1000)
        return news

    def _format_content(self, node: Tag) -> str:
        inner = node.decode_contents().replace("</p>", "</p>\n")
        text = BeautifulSoup(inner, "html.parser").get_text()
        lines = split_trim(text, "\n")
        if lines:
            return "\n".join(normalise_space(line) for line in lines)
        return normalise_space(text)

    def _content_node(self) -> Tag | None:
        body = self.doc.find("body")
        if body is None:
            return None
        self._body = body
        self._infos.clear()
        self._compute_info(body)

        best: Tag | None = None
        best_score = 0.0
        for node, info in self._infos.values():
            if node.name == "a" or node is body:
                continue
            score = self._score(info)
            if score > best_score:
                best_score = score
                best = node
        return best

    def _compute_info(self, node) -> _CountInfo:
        if isinstance(node, Tag):
            info = _CountInfo()
            for child in node.children:
                child_info = self._compute_info(child)
                info.text_count += child_info.text_count
                info.link_text_count += child_info.link_text_count
                info.tag_count += child_info.tag_count
                info.link_tag_count += child_info.link_tag_count
                info.density_sum += child_info.density
                info.p_count += child_info.p_count
                info.leaves.extend(child_info.leaves)

            info.tag_count += 1
            if node.name == "a":
                info.link_text_count = info.text_count
                info.link_tag_count += 1
            elif node.name == "p":
                info.p_count += 1

            pure = info.text_count - info.link_text_count
            tags = info.tag_count - info.link_tag_count
            info.density = pure / tags if pure and tags else 0.0

            self._infos[id(node)] = (node, info)
            return info
        if _is_text(node):
            length = len(normalise_space(str(node)))
            return _CountInfo(text_count=length, leaves=[length])
        return _CountInfo()

    @staticmethod
    def _score(info: _CountInfo) -> float:
        value = math.sqrt(_variance(info.leaves) + 1)
        score_log10 = math.log10(info.p_count + 1)
        score_log = math.log(info.text_count - info.link_text_count + 1)
        return math.log(value) * info.density_sum * score_log * score_log10

    def _title(self, content_node: Tag | None) -> str:
        title = self._title_by_origin()
        if title:
            self.title_pos = "headline"
            return title

        origin_meta_title = web_title(self.doc, 255)
        meta_title = web_content_title_clean(origin_meta_title, self.lang)

        title = self._title_by_meta(meta_title)
        if title:
            self.title_pos = "meta"
            return title

        title = self._title_by_script(meta_title)
        if title:
            self.title_pos = "script"
            return title

        if origin_meta_title.strip() and content_node is not None and self._body is not None:
            best_score = 0.0
            best: Tag | None = None
            for tag in self._body.find_all(True):
                if tag.contents and _HEADLINE_NAME.search(tag.name):
                    score = similarity_text(_normalise_text(tag), meta_title)
                    if score > best_score:
                        best_score = score
                        best = tag
            if best is not None and best_score > self.title_sim:
                self.title_pos = "headline"
                return _normalise_text(best)

        body = self.doc.find("body")
        if body is not None:
            candidate = body.select_one(TITLE_SELECTOR)
            if candidate is not None:
                selector_title = _normalise_text(candidate)
                if similarity_text(meta_title, selector_title) > self.title_sim:
                    self.title_pos = "selector"
                    return selector_title

        self.title_pos = "title"
        return meta_title

    def _title_by_origin(self) -> str:
        """The last h1/h2 similar enough to the title given by the linking page."""
        if not self.origin_title.strip():
            return ""
        found = ""
        for headline in self.doc.select("h1,h2"):
            text = normalise_space(headline.get_text())
            if similarity_text(self.origin_title, text) > self.title_sim:
                found = text
        return found

    def _title_by_meta(self, meta_title: str) -> str:
        titles = []
        for selector in META_TITLE_SELECTORS:
            tag = self.doc.select_one(selector)
            title = (tag.get("content", "") if tag is not None else "").strip()
            if title:
                titles.append(title)
        if not titles:
            return ""
        if not meta_title:
            return titles[0]
        for title in titles:
            if similarity_text(title, meta_title) > self.title_sim:
                return title if len(title) < len(meta_title) else meta_title
        return ""

    def _title_by_script(self, meta_title: str) -> str:
        found = ""
        for script in self.origin_doc.find_all("script"):
            text = normalise_line("".join(script.find_all(string=True)))
            match = SCRIPT_TITLE_PATTERN.search(text)
            if match:
                candidate = match.group(1).strip()
                if similarity_text(meta_title, candidate) > self.title_sim:
                    found = candidate
        return found