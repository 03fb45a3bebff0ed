"""Page identity classification.

Maps the current location to one of a closed set of page identities.
Rules are checked in order and the first match wins; a URL that matches
nothing is the home page.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote


class PageIdentity(Enum):
    """Views of the site."""

    HOME = "home"
    ABOUT = "about"
    PROJECTS = "projects"
    BLOG_INDEX = "blog"
    BLOG_POST = "post"


@dataclass(frozen=True)
class PageRule:
    """File names and path suffixes identifying a page."""

    identity: PageIdentity
    filenames: tuple[str, ...]
    suffixes: tuple[str, ...]

    def matches(self, path: str) -> bool:
        filename = path.rsplit("/", 1)[-1]
        if filename in self.filenames:
            return True
        return any(path.endswith(suffix) for suffix in self.suffixes)


# Post before blog index: "/blog/post.html" must not classify as the index.
PAGE_RULES: tuple[PageRule, ...] = (
    PageRule(PageIdentity.BLOG_POST, ("post.html",), ("/post", "/post/")),
    PageRule(PageIdentity.BLOG_INDEX, ("blog.html",), ("/blog", "/blog/")),
    PageRule(PageIdentity.ABOUT, ("about.html",), ("/about", "/about/")),
    PageRule(PageIdentity.PROJECTS, ("projects.html",), ("/projects", "/projects/")),
)


def classify_page(path: str, query: str = "", fragment: str = "") -> PageIdentity:
    """Classify a page view.

    Only the path decides the identity; query and fragment never change it
    (a post view without a slug is still a post view).

    Args:
        path: URL path of the page
        query: URL query string
        fragment: URL fragment

    Returns:
        Identity of the first matching rule, HOME otherwise
    """
    normalized = unquote(path).lower() or "/"
    for rule in PAGE_RULES:
        if rule.matches(normalized):
            return rule.identity
    return PageIdentity.HOME
