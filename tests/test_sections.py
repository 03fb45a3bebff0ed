"""Tests for section population operations."""

import pytest
from folio.core.document import PageDocument
from folio.core.fragments import NO_POSTS_MESSAGE
from folio.core.location import Location
from folio.core.models import PortfolioDocument, parse_posts
from folio.core.pages import PageIdentity
from folio.core.sections import (
    NO_SLUG_MESSAGE,
    POST_NOT_FOUND_MESSAGE,
    PageData,
    RenderOptions,
    SectionContext,
    populate,
    populate_blog_post,
    populate_blog_preview,
    populate_hero,
    populate_projects_page,
)

from tests.sample_site import (
    BLOG_HTML,
    HOME_HTML,
    POST_HTML,
    PROJECTS_HTML,
    SITE_URL,
)


def _context(
    page: str,
    portfolio: dict | None = None,
    posts: list[dict] | None = None,
) -> SectionContext:
    return SectionContext(
        data=PageData(
            portfolio=PortfolioDocument.from_json(portfolio) if portfolio is not None else None,
            posts=parse_posts(posts) if posts is not None else None,
        ),
        location=Location.from_url(f"{SITE_URL}{page}"),
        options=RenderOptions(),
    )


class TestHomeSections:
    """Tests for home page population."""

    def test__full_portfolio__populates_every_section(
        self, portfolio_payload: dict, posts_payload: list[dict]
    ) -> None:
        """Every home container is filled."""
        document = PageDocument(HOME_HTML)
        context = _context("index.html", portfolio_payload, posts_payload)

        sections = populate(document, PageIdentity.HOME, context)

        assert sections == [
            "hero",
            "skills",
            "experience",
            "projects",
            "achievements",
            "contact",
            "problem-solving",
            "blog-preview",
        ]
        hero = document.find(".hero h1")
        assert hero is not None
        assert hero.get_text() == "Jane Doe"
        tagline = document.find(".hero .tagline")
        assert tagline is not None
        assert tagline.get_text() == "Software Engineer & Problem Solver | Berlin, Germany"

    def test__twice__same_markup(self, portfolio_payload: dict, posts_payload: list[dict]) -> None:
        """Population is idempotent."""
        document = PageDocument(HOME_HTML)
        context = _context("index.html", portfolio_payload, posts_payload)

        populate(document, PageIdentity.HOME, context)
        once = document.render()
        populate(document, PageIdentity.HOME, context)

        assert document.render() == once

    def test__skill_categories__humanized(self, portfolio_payload: dict) -> None:
        """Category keys become headings."""
        document = PageDocument(HOME_HTML)

        populate(document, PageIdentity.HOME, _context("index.html", portfolio_payload))

        headings = [h3.get_text() for h3 in document.find_all("#skills-container h3")]
        assert headings == ["Programming Languages", "Web Frameworks"]

    def test__experience_meta__joins_present_parts(self, portfolio_payload: dict) -> None:
        """Dates, duration, location and mode are joined with bullets."""
        document = PageDocument(HOME_HTML)

        populate(document, PageIdentity.HOME, _context("index.html", portfolio_payload))

        meta = document.find("#experience-container .meta")
        assert meta is not None
        assert meta.get_text() == "Jan 2022 - Present • 2 yrs • Berlin • Hybrid"

    def test__contact__skips_unknown_platforms(self, portfolio_payload: dict) -> None:
        """Only known profile platforms are linked."""
        document = PageDocument(HOME_HTML)

        populate(document, PageIdentity.HOME, _context("index.html", portfolio_payload))

        hrefs = [a["href"] for a in document.find_all("#contact-container a")]
        assert hrefs == [
            "mailto:jane@example.com",
            "tel:+491701234567",
            "https://github.com/janedoe",
            "https://linkedin.com/in/jane-doe",
        ]

    def test__missing_optional_fields__other_sections_still_render(self) -> None:
        """Absent data leaves its container untouched."""
        document = PageDocument(HOME_HTML)
        context = _context("index.html", {"personalInfo": {"name": "Jane Doe"}})

        sections = populate(document, PageIdentity.HOME, context)

        assert sections == ["hero"]
        tagline = document.find(".hero .tagline")
        assert tagline is not None
        assert tagline.get_text() == ""

    def test__missing_container__section_skipped(self, portfolio_payload: dict) -> None:
        """Pages without a container do not fail."""
        document = PageDocument("<html><body><section class='hero'><h1></h1></section></body></html>")

        sections = populate(document, PageIdentity.HOME, _context("index.html", portfolio_payload))

        assert sections == ["hero"]

    def test__text_fields__escaped(self) -> None:
        """Document text cannot inject markup."""
        document = PageDocument(HOME_HTML)
        payload = {"personalInfo": {"name": "Jane"}, "achievements": ["<script>x</script>"]}

        populate(document, PageIdentity.HOME, _context("index.html", payload))

        assert "<script>" not in document.render()
        assert "&lt;script&gt;" in document.render()


class TestBlogPreview:
    """Tests for populate_blog_preview()."""

    def test__posts__three_newest_linked_by_slug(
        self, portfolio_payload: dict, posts_payload: list[dict]
    ) -> None:
        """The preview shows the newest posts with post page links."""
        document = PageDocument(HOME_HTML)

        assert populate_blog_preview(
            document, _context("index.html", portfolio_payload, posts_payload)
        )

        hrefs = [a["href"] for a in document.find_all("#blog-preview-container a.blog-card")]
        assert hrefs == [
            "post.html?slug=newest",
            "post.html?slug=middle",
            "post.html?slug=first-post",
        ]

    def test__empty_posts__shows_placeholder(self, portfolio_payload: dict) -> None:
        """An empty array renders the empty state message."""
        document = PageDocument(HOME_HTML)

        populate_blog_preview(document, _context("index.html", portfolio_payload, []))

        container = document.find("#blog-preview-container")
        assert container is not None
        assert container.get_text() == NO_POSTS_MESSAGE

    def test__zero_preview_count__no_placeholder_when_posts_exist(
        self, portfolio_payload: dict, posts_payload: list[dict]
    ) -> None:
        """The empty state is reserved for sites without posts."""
        document = PageDocument(HOME_HTML)
        context = SectionContext(
            data=PageData(
                portfolio=PortfolioDocument.from_json(portfolio_payload),
                posts=parse_posts(posts_payload),
            ),
            location=Location.from_url(f"{SITE_URL}index.html"),
            options=RenderOptions(preview_count=0),
        )

        populate_blog_preview(document, context)

        assert NO_POSTS_MESSAGE not in document.render()
        assert document.find_all("#blog-preview-container .blog-card") == []

    def test__posts_not_loaded__untouched(self, portfolio_payload: dict) -> None:
        """Without posts the container keeps its markup."""
        document = PageDocument(HOME_HTML)

        assert not populate_blog_preview(document, _context("index.html", portfolio_payload))


class TestBlogList:
    """Tests for the blog index."""

    def test__posts__all_listed_newest_first(self, posts_payload: list[dict]) -> None:
        """Every post is listed in date order."""
        document = PageDocument(BLOG_HTML)

        populate(document, PageIdentity.BLOG_INDEX, _context("blog.html", posts=posts_payload))

        titles = [h3.get_text() for h3 in document.find_all("#blog-container h3")]
        assert titles == ["Newest", "Middle", "First Post", "Older"]

    def test__post_dates__formatted(self, posts_payload: list[dict]) -> None:
        """Dates are shown in long form."""
        document = PageDocument(BLOG_HTML)

        populate(document, PageIdentity.BLOG_INDEX, _context("blog.html", posts=posts_payload))

        dates = [div.get_text() for div in document.find_all("#blog-container .date")]
        assert dates[0] == "June 1, 2024"


class TestBlogPost:
    """Tests for populate_blog_post()."""

    def test__known_slug__renders_post(self, posts_payload: list[dict]) -> None:
        """Header, body and title come from the post."""
        document = PageDocument(POST_HTML)

        assert populate_blog_post(
            document, _context("post.html?slug=first-post", posts=posts_payload)
        )

        header = document.find("#blog-post-header h1")
        assert header is not None
        assert header.get_text() == "First Post"
        content = document.find("#blog-post-content")
        assert content is not None
        assert len(content.find_all("p")) == 2
        assert "<title>First Post | Blog</title>" in document.render()

    def test__unknown_slug__shows_not_found(self, posts_payload: list[dict]) -> None:
        """Unknown slugs render the not-found state with a way back."""
        document = PageDocument(POST_HTML)

        populate_blog_post(document, _context("post.html?slug=missing", posts=posts_payload))

        article = document.find(".blog-post")
        assert article is not None
        assert POST_NOT_FOUND_MESSAGE in article.get_text()
        link = document.find(".blog-post a")
        assert link is not None
        assert link["href"] == "blog.html"

    @pytest.mark.parametrize("page", ["post.html", "post.html?slug="])
    def test__no_slug__shows_no_post_specified(self, page: str, posts_payload: list[dict]) -> None:
        """A missing or empty slug has its own message."""
        document = PageDocument(POST_HTML)

        populate_blog_post(document, _context(page, posts=posts_payload))

        article = document.find(".blog-post")
        assert article is not None
        assert NO_SLUG_MESSAGE in article.get_text()

    def test__no_article__not_found_written_to_body(self, posts_payload: list[dict]) -> None:
        """Pages without the article container fall back to body."""
        document = PageDocument("<html><body><p>old</p></body></html>")

        assert populate_blog_post(document, _context("post.html?slug=x", posts=posts_payload))

        assert "old" not in document.render()
        assert POST_NOT_FOUND_MESSAGE in document.render()


class TestProjectsPage:
    """Tests for populate_projects_page()."""

    def test__research__appended_as_last_card(self, portfolio_payload: dict) -> None:
        """The research project follows the regular projects."""
        document = PageDocument(PROJECTS_HTML)

        populate_projects_page(document, _context("projects.html", portfolio_payload))

        titles = [h3.get_text() for h3 in document.find_all("#projects-container h3")]
        assert titles == ["Trail Planner", "Notes", "Adaptive Traffic Signals"]

    def test__twice__research_card_not_duplicated(self, portfolio_payload: dict) -> None:
        """Repeated population keeps a single research card."""
        document = PageDocument(PROJECTS_HTML)
        context = _context("projects.html", portfolio_payload)

        populate_projects_page(document, context)
        populate_projects_page(document, context)

        assert len(document.find_all("#projects-container .research")) == 1


class TestSectionGuard:
    """Tests for the section() guard."""

    def test__malformed_data__section_reports_unpopulated(self) -> None:
        """Data errors are swallowed by the guard and logged."""
        document = PageDocument(HOME_HTML)
        context = SectionContext(
            data=PageData(portfolio="not a document"),  # type: ignore[arg-type]
            location=Location.from_url(f"{SITE_URL}index.html"),
            options=RenderOptions(),
        )

        assert populate_hero(document, context) is False
