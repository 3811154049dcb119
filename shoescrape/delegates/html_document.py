# shoescrape/delegates/html_document.py
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag


class HtmlDocument:
    """
    A parsed page (or a fragment of one) with selector based accessors.
    Selectors are CSS selectors, evaluated by BeautifulSoup on top of the lxml parser.
    """
    def __init__(self, url: str, html: str = "", root: Optional[Tag] = None):
        self.url = url
        if root is None:
            root = BeautifulSoup(html, "lxml")
        self._root = root
        self._html = html

    @property
    def html(self) -> str:
        """The raw markup. Regex based extraction runs against this."""
        if not self._html:
            self._html = str(self._root)
        return self._html

    def select(self, selector: str) -> List["HtmlDocument"]:
        """Returns every match as its own document, in page order."""
        return [HtmlDocument(self.url, root=tag) for tag in self._root.select(selector)]

    def text(self, selector: Optional[str] = None) -> str:
        """Concatenated text of all matches, trimmed. Empty string when nothing matches."""
        if selector is None:
            return self._root.get_text().strip()
        return "".join(tag.get_text() for tag in self._root.select(selector)).strip()

    def attr(self, attribute: str, selector: Optional[str] = None) -> str:
        """Value of `attribute` on the first match that carries it, or on this element itself."""
        if selector is None:
            return self._attr_value(self._root, attribute)
        for tag in self._root.select(selector):
            value = self._attr_value(tag, attribute)
            if value:
                return value
        return ""

    def script_text(self, selector: Optional[str] = None) -> str:
        """
        Raw contents of the matched <script> elements. get_text() skips script
        strings when called on a parent, so the strings are read directly. HTML
        comments inside a matched element are left out.
        """
        if selector is None:
            return self.html
        parts = []
        for tag in self._root.select(selector):
            parts.extend(
                str(node) for node in tag.descendants
                if isinstance(node, NavigableString) and not isinstance(node, Comment)
            )
        return "".join(parts).strip()

    @staticmethod
    def _attr_value(tag: Tag, attribute: str) -> str:
        value = tag.get(attribute)
        if value is None:
            return ""
        if isinstance(value, list):
            # multi-valued attributes like class come back as lists
            return " ".join(value).strip()
        return str(value).strip()
