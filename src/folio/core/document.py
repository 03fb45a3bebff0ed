"""Page document with named containers.

Wraps the page markup in a BeautifulSoup tree and exposes the handful of
operations section population needs. Every write replaces a container's
content completely, so populating the same document twice yields the same
markup.
"""

from bs4 import BeautifulSoup, Tag

_PARSER = "html.parser"


class PageDocument:
    """Mutable HTML page."""

    __slots__ = ("_soup",)

    def __init__(self, markup: str) -> None:
        self._soup = BeautifulSoup(markup, _PARSER)

    def find(self, selector: str) -> Tag | None:
        """Return the first element matching a CSS selector."""
        return self._soup.select_one(selector)

    def find_all(self, selector: str) -> list[Tag]:
        """Return every element matching a CSS selector."""
        return list(self._soup.select(selector))

    def has(self, selector: str) -> bool:
        return self.find(selector) is not None

    def replace_html(self, selector: str, markup: str) -> bool:
        """Replace the content of a container with an HTML fragment.

        Args:
            selector: CSS selector of the container
            markup: HTML fragment to insert

        Returns:
            True if the container exists, False otherwise
        """
        target = self.find(selector)
        if target is None:
            return False
        _replace_children(target, markup)
        return True

    def set_text(self, selector: str, text: str) -> bool:
        """Replace the content of an element with plain text."""
        target = self.find(selector)
        if target is None:
            return False
        target.clear()
        target.append(text)
        return True

    def set_title(self, title: str) -> None:
        """Set the document title, creating <title> under <head> if needed."""
        title_tag = self._soup.find("title")
        if title_tag is None:
            head = self._soup.find("head")
            if head is None:
                return
            title_tag = self._soup.new_tag("title")
            head.append(title_tag)
        title_tag.clear()
        title_tag.append(title)

    def set_root_attribute(self, name: str, value: str) -> None:
        """Set an attribute on the <html> element, if present."""
        root = self._soup.find("html")
        if root is not None:
            root[name] = value

    def upsert_overlay(
        self,
        element_id: str,
        markup: str,
        attributes: dict[str, str] | None = None,
    ) -> None:
        """Insert or replace a top-level overlay element.

        The overlay is appended to <body> (or the document root when the
        markup has no body). An existing element with the same id is
        replaced in place.

        Args:
            element_id: Id of the overlay element
            markup: Inner HTML of the overlay
            attributes: Extra attributes set on the overlay element
        """
        overlay = self._soup.find(id=element_id)
        if overlay is None:
            overlay = self._soup.new_tag("div", id=element_id)
            parent = self._soup.find("body") or self._soup
            parent.append(overlay)
        for name, value in (attributes or {}).items():
            overlay[name] = value
        _replace_children(overlay, markup)

    def render(self) -> str:
        """Serialize the document."""
        return str(self._soup)


def _replace_children(target: Tag, markup: str) -> None:
    target.clear()
    fragment = BeautifulSoup(markup, _PARSER)
    for child in list(fragment.contents):
        target.append(child.extract())
