"""Page location parsing.

A Location is the runner's equivalent of the browser's window.location:
the absolute URL of the page view being populated, split into the parts
page classification and candidate generation need.
"""

from dataclasses import dataclass
from urllib.parse import parse_qs, urljoin, urlsplit

from folio.core.types import PageURL


@dataclass(frozen=True)
class Location:
    """Absolute URL of a page view."""

    url: PageURL
    scheme: str
    origin: str
    path: str
    query: str
    fragment: str

    @classmethod
    def from_url(cls, url: str) -> "Location":
        """Parse an absolute page URL.

        Args:
            url: Absolute URL (http, https or file scheme)

        Returns:
            Location for the URL

        Raises:
            ValueError: If the URL has no scheme
        """
        parts = urlsplit(url)
        if not parts.scheme:
            raise ValueError(f"Page URL must be absolute: {url!r}")

        path = parts.path or "/"
        return cls(
            url=PageURL(url),
            scheme=parts.scheme,
            origin=f"{parts.scheme}://{parts.netloc}",
            path=path,
            query=parts.query,
            fragment=parts.fragment,
        )

    @property
    def filename(self) -> str:
        """Last path segment, empty for directory URLs."""
        return self.path.rsplit("/", 1)[-1]

    @property
    def directory(self) -> str:
        """Path of the directory holding the page, with trailing slash."""
        return self.path[: self.path.rfind("/") + 1] or "/"

    @property
    def base_url(self) -> str:
        """Origin plus the page's directory."""
        return f"{self.origin}{self.directory}"

    @property
    def is_local_file(self) -> bool:
        """Whether the page was opened straight from the filesystem."""
        return self.scheme == "file"

    def query_param(self, name: str) -> str | None:
        """Return the first value of a query parameter, None when absent or empty."""
        values = parse_qs(self.query).get(name)
        if not values or not values[0]:
            return None
        return values[0]

    def resolve(self, reference: str) -> str:
        """Resolve a (possibly relative) reference against the page URL."""
        return urljoin(self.url, reference)
