"""Resource descriptors and candidate path generation.

The site's JSON documents may be served from a domain root, from a
subpath (e.g. a project page under a shared host), or opened from the local
filesystem. Instead of assuming one base URL, every resource is tried under
a fixed, ordered list of path forms:

    1. the path as given                     "data/posts.json"
    2. directory-relative                    "./data/posts.json"
    3. site-root-relative                    "/data/posts.json"
    4. absolute, origin + page directory     "https://host/site/data/posts.json"
    5-8. percent-encoded versions of 1-4     "my%20information.json", ...

The order is part of the deployment contract and must not change.
"""

from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import quote

# Characters encodeURI leaves untouched besides alphanumerics and "_.-~",
# which quote() never escapes.
_ENCODE_URI_SAFE = ";,/?:@&=+$!*'()#"


@dataclass(frozen=True)
class ResourceDescriptor:
    """Logical JSON resource of the site."""

    name: str
    relative_path: str


@dataclass(frozen=True)
class PathTransform:
    """One prefix transformation of the candidate table."""

    name: str
    apply: Callable[[str, str], str]


PATH_TRANSFORMS: tuple[PathTransform, ...] = (
    PathTransform("as-given", lambda path, base_url: path),
    PathTransform("directory-relative", lambda path, base_url: f"./{path}"),
    PathTransform("root-relative", lambda path, base_url: f"/{path}"),
    PathTransform("absolute", lambda path, base_url: f"{base_url}{path}"),
)


def encode_uri(value: str) -> str:
    """Percent-encode a URI the way JavaScript's encodeURI does."""
    return quote(value, safe=_ENCODE_URI_SAFE)


def build_candidates(relative_path: str, base_url: str) -> list[str]:
    """Build the ordered candidate list for a resource path.

    Args:
        relative_path: Canonical, site-root-relative path of the resource
        base_url: Origin plus directory of the current page, with trailing slash

    Returns:
        Plain candidates for every transform, followed by their encoded forms
    """
    plain = [transform.apply(relative_path, base_url) for transform in PATH_TRANSFORMS]
    return plain + [encode_uri(candidate) for candidate in plain]


def portfolio_resource(relative_path: str) -> ResourceDescriptor:
    return ResourceDescriptor(name="portfolio", relative_path=relative_path)


def posts_resource(relative_path: str) -> ResourceDescriptor:
    return ResourceDescriptor(name="posts", relative_path=relative_path)
