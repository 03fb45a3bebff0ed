"""Blog post ordering, lookup and text formatting."""

import html
import re
from datetime import UTC, datetime

from folio.core.models import BlogPost

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def parse_date(value: str) -> datetime | None:
    """Parse an ISO date or datetime, normalized to naive UTC.

    Returns:
        Parsed datetime, or None when the value is not ISO-parseable
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def sort_posts(posts: list[BlogPost]) -> list[BlogPost]:
    """Sort posts newest first.

    The sort is stable: posts with equal dates keep their document order.
    Posts whose date cannot be parsed come last, in document order.
    """
    dated: list[tuple[datetime, BlogPost]] = []
    undated: list[BlogPost] = []
    for post in posts:
        parsed = parse_date(post.date)
        if parsed is None:
            undated.append(post)
        else:
            dated.append((parsed, post))

    dated.sort(key=lambda item: item[0], reverse=True)
    return [post for _, post in dated] + undated


def preview_posts(posts: list[BlogPost], count: int) -> list[BlogPost]:
    """Return the `count` most recent posts."""
    return sort_posts(posts)[:count]


def find_post(posts: list[BlogPost], slug: str | None) -> BlogPost | None:
    """Find a post by exact slug match.

    Duplicate slugs resolve to the first post in document order.
    """
    if not slug:
        return None
    for post in posts:
        if post.slug == slug:
            return post
    return None


def format_date(value: str) -> str:
    """Format an ISO date as "January 5, 2024"; unparseable values pass through."""
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def content_to_html(content: str | None) -> str:
    """Convert a post body to HTML.

    Plain text is escaped and split into paragraphs on blank lines, with
    single newlines folded into spaces. Content that already carries
    paragraph or heading markup is kept, with newlines turned into <br>.
    """
    if not content:
        return ""

    if "<p>" in content or "<h" in content:
        return content.replace("\n", "<br>")

    paragraphs = []
    for block in _PARAGRAPH_BREAK.split(content):
        text = " ".join(line.strip() for line in block.splitlines() if line.strip())
        if text:
            paragraphs.append(f"<p>{html.escape(text)}</p>")
    return "".join(paragraphs)
