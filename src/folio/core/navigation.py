"""Navigation bar link highlighting."""

from folio.core.document import PageDocument
from folio.core.location import Location

NAV_LINK_SELECTOR = ".nav-links a"
ACTIVE_CLASS = "active"


def is_active_link(href: str, path: str) -> bool:
    """Whether a navigation link points at the current page.

    Args:
        href: Link target as written in the markup
        path: URL path of the current page
    """
    if not href or href.startswith(("#", "http://", "https://", "mailto:")):
        return False
    if path in ("", "/") and href in ("index.html", "./index.html", "/"):
        return True
    target = href.removeprefix("./").removeprefix("/")
    return bool(target) and target in path


def mark_active_links(document: PageDocument, location: Location) -> int:
    """Add the active class to navigation links pointing at the current page.

    Returns:
        Number of links marked active
    """
    marked = 0
    for link in document.find_all(NAV_LINK_SELECTOR):
        href = link.get("href")
        if not isinstance(href, str) or not is_active_link(href, location.path):
            continue
        classes = list(link.get("class") or [])
        if ACTIVE_CLASS not in classes:
            classes.append(ACTIVE_CLASS)
            link["class"] = classes
        marked += 1
    return marked
