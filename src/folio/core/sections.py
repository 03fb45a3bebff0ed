"""Section population operations.

A section operation looks up one container, reads one field of the loaded
data and replaces the container's content. Each operation is guarded: a
missing container or missing data is a silent no-op, and a malformed
document never escapes as an exception.
"""

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import quote

from folio.core import fragments
from folio.core.blog import find_post, preview_posts, sort_posts
from folio.core.document import PageDocument
from folio.core.location import Location
from folio.core.models import BlogPost, PortfolioDocument
from folio.core.pages import PageIdentity

logger = logging.getLogger(__name__)

NO_SLUG_MESSAGE = "No blog post specified."
POST_NOT_FOUND_MESSAGE = "Blog post not found."


@dataclass(frozen=True)
class RenderOptions:
    """Site-level rendering settings."""

    tagline: str = "Software Engineer & Problem Solver"
    preview_count: int = 3
    blog_index: str = "blog.html"
    post_page: str = "post.html"

    def post_href(self, slug: str) -> str:
        return f"{self.post_page}?slug={quote(slug, safe='')}"


@dataclass(frozen=True)
class PageData:
    """Documents loaded for one page view."""

    portfolio: PortfolioDocument | None = None
    posts: list[BlogPost] | None = None


@dataclass(frozen=True)
class SectionContext:
    """Everything a section operation may read."""

    data: PageData
    location: Location
    options: RenderOptions


SectionOperation = Callable[[PageDocument, SectionContext], bool]


def section(name: str) -> Callable[[SectionOperation], SectionOperation]:
    """Guard a section operation under a name.

    The wrapped operation returns True when it wrote to the document.
    Data errors from a malformed document are logged and reported as an
    unpopulated section.
    """

    def decorator(operation: SectionOperation) -> SectionOperation:
        @functools.wraps(operation)
        def guarded(document: PageDocument, context: SectionContext) -> bool:
            try:
                populated = operation(document, context)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Section {name} skipped: {type(e).__name__}: {e}")
                return False
            if not populated:
                logger.debug(f"Section {name} left untouched")
            return populated

        guarded.section_name = name  # type: ignore[attr-defined]
        return guarded

    return decorator


@section("hero")
def populate_hero(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None:
        return False

    info = portfolio.personal_info
    wrote = False
    if info.name:
        wrote = document.set_text(".hero h1", info.name) or wrote
    if info.location:
        tagline = f"{context.options.tagline} | {info.location}"
        wrote = document.set_text(".hero .tagline", tagline) or wrote
    return wrote


@section("skills")
def populate_skills(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or not portfolio.technologies_and_skills:
        return False
    markup = "".join(
        fragments.skill_category(category, skills)
        for category, skills in portfolio.technologies_and_skills.items()
    )
    return document.replace_html("#skills-container", markup)


@section("experience")
def populate_experience(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or not portfolio.experience:
        return False
    markup = "".join(fragments.timeline_item(item) for item in portfolio.experience)
    return document.replace_html("#experience-container", markup)


@section("projects")
def populate_projects(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or not portfolio.projects:
        return False
    markup = "".join(fragments.project_card(project) for project in portfolio.projects)
    return document.replace_html("#projects-container", markup)


@section("projects-with-research")
def populate_projects_page(document: PageDocument, context: SectionContext) -> bool:
    """Projects grid with the research project as its last card."""
    portfolio = context.data.portfolio
    if portfolio is None:
        return False
    cards = [fragments.project_card(project) for project in portfolio.projects or []]
    if portfolio.research_and_thesis is not None:
        cards.append(fragments.research_card(portfolio.research_and_thesis))
    if not cards:
        return False
    return document.replace_html("#projects-container", "".join(cards))


@section("achievements")
def populate_achievements(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or not portfolio.achievements:
        return False
    markup = "".join(fragments.achievement_item(item) for item in portfolio.achievements)
    return document.replace_html("#achievements-container", markup)


@section("contact")
def populate_contact(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None:
        return False
    info = portfolio.personal_info
    markup = fragments.contact_links(info.contact, info.links)
    if not markup:
        return False
    return document.replace_html("#contact-container", markup)


@section("problem-solving")
def populate_problem_solving(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or not portfolio.problem_solving:
        return False
    markup = "".join(fragments.problem_solving_card(entry) for entry in portfolio.problem_solving)
    return document.replace_html("#problem-solving-container", markup)


@section("education")
def populate_education(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or not portfolio.education:
        return False
    markup = "".join(fragments.education_card(item) for item in portfolio.education)
    return document.replace_html("#education-container", markup)


@section("research")
def populate_research(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or portfolio.research_and_thesis is None:
        return False
    markup = fragments.research_summary(portfolio.research_and_thesis)
    return document.replace_html("#research-container", markup)


@section("other-experiences")
def populate_other_experiences(document: PageDocument, context: SectionContext) -> bool:
    portfolio = context.data.portfolio
    if portfolio is None or not portfolio.other_experiences:
        return False
    markup = "".join(fragments.other_experience_card(item) for item in portfolio.other_experiences)
    return document.replace_html("#other-experiences-container", markup)


def _blog_cards(posts: list[BlogPost], options: RenderOptions) -> str:
    if not posts:
        return fragments.no_posts()
    return "".join(fragments.blog_card(post, options.post_href(post.slug)) for post in posts)


@section("blog-preview")
def populate_blog_preview(document: PageDocument, context: SectionContext) -> bool:
    posts = context.data.posts
    if posts is None:
        return False
    if not posts:
        return document.replace_html("#blog-preview-container", fragments.no_posts())
    recent = preview_posts(posts, context.options.preview_count)
    markup = "".join(fragments.blog_card(post, context.options.post_href(post.slug)) for post in recent)
    return document.replace_html("#blog-preview-container", markup)


@section("blog-list")
def populate_blog_list(document: PageDocument, context: SectionContext) -> bool:
    posts = context.data.posts
    if posts is None:
        return False
    return document.replace_html("#blog-container", _blog_cards(sort_posts(posts), context.options))


def show_post_not_found(document: PageDocument, message: str, options: RenderOptions) -> bool:
    """Replace the post article (or the whole body) with the not-found state."""
    markup = fragments.post_not_found(message, options.blog_index)
    if document.replace_html(".blog-post", markup):
        return True
    return document.replace_html("body", markup)


@section("blog-post")
def populate_blog_post(document: PageDocument, context: SectionContext) -> bool:
    """Render the post named by the slug parameter, or the not-found state."""
    posts = context.data.posts
    if posts is None:
        return False

    slug = context.location.query_param("slug")
    post = find_post(posts, slug)
    if post is None:
        message = NO_SLUG_MESSAGE if slug is None else POST_NOT_FOUND_MESSAGE
        logger.info(f"Post view not found state: {message} (slug={slug!r})")
        return show_post_not_found(document, message, context.options)

    header = document.replace_html("#blog-post-header", fragments.post_header(post))
    body = document.replace_html("#blog-post-content", fragments.post_body(post))
    if header or body:
        document.set_title(f"{post.title} | Blog")
    return header or body


PAGE_SECTIONS: dict[PageIdentity, tuple[SectionOperation, ...]] = {
    PageIdentity.HOME: (
        populate_hero,
        populate_skills,
        populate_experience,
        populate_projects,
        populate_achievements,
        populate_contact,
        populate_problem_solving,
        populate_blog_preview,
    ),
    PageIdentity.ABOUT: (
        populate_education,
        populate_research,
        populate_other_experiences,
        populate_skills,
        populate_experience,
    ),
    PageIdentity.PROJECTS: (populate_projects_page,),
    PageIdentity.BLOG_INDEX: (populate_blog_list,),
    PageIdentity.BLOG_POST: (populate_blog_post,),
}


def populate(document: PageDocument, identity: PageIdentity, context: SectionContext) -> list[str]:
    """Run every section operation registered for a page.

    Args:
        document: Page to populate
        identity: Page identity selecting the sections
        context: Loaded data, location and options

    Returns:
        Names of the sections that wrote to the document
    """
    populated = []
    for operation in PAGE_SECTIONS[identity]:
        if operation(document, context):
            populated.append(operation.section_name)  # type: ignore[attr-defined]
    return populated
