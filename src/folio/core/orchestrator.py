"""Page population orchestrator.

Runs one page view: classifies the page, loads the resources it needs,
and either populates the page's sections or shows a single error banner.

    IDLE -> LOADING -> POPULATED
                    -> FAILED

An orchestrator serves exactly one page view; a new view needs a new
instance.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from html import escape

from folio.core import fragments
from folio.core.document import PageDocument
from folio.core.effects import Effects, NoEffects
from folio.core.errors import InvalidDocumentError, ResourceUnavailableError
from folio.core.loader import LoadFailure, LoadResult, ResourceLoader
from folio.core.location import Location
from folio.core.models import PortfolioDocument, parse_posts
from folio.core.navigation import mark_active_links
from folio.core.pages import PageIdentity, classify_page
from folio.core.resources import ResourceDescriptor, portfolio_resource, posts_resource
from folio.core.sections import (
    NO_SLUG_MESSAGE,
    PageData,
    RenderOptions,
    SectionContext,
    populate,
    show_post_not_found,
)
from folio.core.theme import Theme

logger = logging.getLogger(__name__)

ERROR_BANNER_ID = "folio-error-banner"


class PageState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    POPULATED = "populated"
    FAILED = "failed"


@dataclass(frozen=True)
class SiteResources:
    """Descriptors of the site's JSON documents."""

    portfolio: ResourceDescriptor = field(
        default_factory=lambda: portfolio_resource("my information.json")
    )
    posts: ResourceDescriptor = field(default_factory=lambda: posts_resource("data/posts.json"))

    def requirements(
        self, identity: PageIdentity
    ) -> tuple[list[ResourceDescriptor], list[ResourceDescriptor]]:
        """Required and optional resources of a page.

        The home page shows a blog preview when posts load, and renders
        without it when they do not.
        """
        if identity is PageIdentity.HOME:
            return [self.portfolio], [self.posts]
        if identity in (PageIdentity.ABOUT, PageIdentity.PROJECTS):
            return [self.portfolio], []
        return [self.posts], []


@dataclass
class PageView:
    """A page being viewed: its markup and where it was loaded from."""

    document: PageDocument
    location: Location
    theme: Theme | None = None


@dataclass(frozen=True)
class PageOutcome:
    """Result of running a page view."""

    state: PageState
    identity: PageIdentity
    sections: list[str] = field(default_factory=list)
    error: ResourceUnavailableError | None = None


class PageOrchestrator:
    """Loads data for one page view and populates it."""

    def __init__(
        self,
        loader: ResourceLoader,
        *,
        resources: SiteResources | None = None,
        options: RenderOptions | None = None,
        effects: Effects | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            loader: Resource loader used for every document
            resources: Descriptors of the site's documents
            options: Rendering settings passed to section operations
            effects: Optional reveal capability, applied after population
        """
        self._loader = loader
        self._resources = resources or SiteResources()
        self._options = options or RenderOptions()
        self._effects: Effects = effects or NoEffects()
        self._state = PageState.IDLE
        self._data: PageData | None = None

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def data(self) -> PageData | None:
        """Documents loaded by run(), None until loading succeeded."""
        return self._data

    async def run(
        self,
        view: PageView,
        required: Iterable[ResourceDescriptor] | None = None,
    ) -> PageOutcome:
        """Load the page's resources and populate it.

        Args:
            view: Page view to populate
            required: Resources that must load; defaults to the page's own
                requirements. Resources the page lists as optional are still
                loaded when not named here.

        Returns:
            PageOutcome with the final state

        Raises:
            RuntimeError: If this orchestrator already ran
        """
        if self._state is not PageState.IDLE:
            raise RuntimeError(f"Page view already {self._state.value}; create a new orchestrator")

        self._state = PageState.LOADING
        location = view.location
        identity = classify_page(location.path, location.query, location.fragment)
        logger.info(f"Page view {location.url} classified as {identity.value}")

        if view.theme is not None:
            view.document.set_root_attribute("data-theme", view.theme.value)
        mark_active_links(view.document, location)

        # A post view without a slug needs no data
        if identity is PageIdentity.BLOG_POST and location.query_param("slug") is None:
            logger.info(f"Post view not found state: {NO_SLUG_MESSAGE} (no slug)")
            self._data = PageData()
            show_post_not_found(view.document, NO_SLUG_MESSAGE, self._options)
            self._effects.apply(view.document)
            self._state = PageState.POPULATED
            return PageOutcome(state=self._state, identity=identity, sections=["blog-post"])

        default_required, optional = self._resources.requirements(identity)
        required_list = list(required) if required is not None else default_required
        optional = [d for d in optional if d not in required_list]

        try:
            self._data = await self._load(location, required_list, optional)
        except ResourceUnavailableError as e:
            logger.error(f"Page view failed: {e}")
            self._show_error(view.document, location, e)
            self._state = PageState.FAILED
            return PageOutcome(state=self._state, identity=identity, error=e)

        context = SectionContext(data=self._data, location=location, options=self._options)
        sections = populate(view.document, identity, context)
        self._effects.apply(view.document)
        self._state = PageState.POPULATED
        logger.info(f"Populated {identity.value} sections: {', '.join(sections) or 'none'}")
        return PageOutcome(state=self._state, identity=identity, sections=sections)

    async def _load(
        self,
        location: Location,
        required: list[ResourceDescriptor],
        optional: list[ResourceDescriptor],
    ) -> PageData:
        """Load every resource concurrently and build the page data.

        Raises:
            ResourceUnavailableError: For the first required resource that failed
        """
        descriptors = required + optional
        results: list[LoadResult] = await asyncio.gather(
            *(self._loader.load(descriptor, location) for descriptor in descriptors)
        )

        documents: dict[str, object] = {}
        for descriptor, result in zip(descriptors, results, strict=True):
            is_required = descriptor in required
            if isinstance(result, LoadFailure):
                if is_required:
                    raise ResourceUnavailableError(descriptor, result)
                logger.warning(f"Optional resource {descriptor.name} unavailable: {result.last_error}")
                continue

            try:
                documents[descriptor.name] = self._parse(descriptor, result.payload)
            except InvalidDocumentError as e:
                failure = LoadFailure(last_error=str(e), attempted_paths=[result.source_path])
                if is_required:
                    raise ResourceUnavailableError(descriptor, failure) from e
                logger.warning(f"Optional resource {descriptor.name} invalid: {e}")

        return PageData(
            portfolio=documents.get(self._resources.portfolio.name),  # type: ignore[arg-type]
            posts=documents.get(self._resources.posts.name),  # type: ignore[arg-type]
        )

    def _parse(self, descriptor: ResourceDescriptor, payload: object) -> object:
        if descriptor.name == self._resources.portfolio.name:
            return PortfolioDocument.from_json(payload)
        if descriptor.name == self._resources.posts.name:
            return parse_posts(payload)
        return payload

    def _show_error(
        self,
        document: PageDocument,
        location: Location,
        error: ResourceUnavailableError,
    ) -> None:
        relative_path = error.descriptor.relative_path
        if location.is_local_file:
            hint = (
                "<strong>Local file detected:</strong> the page was opened directly "
                "from disk. Serve the site instead, e.g. <code>folio serve</code>."
            )
        else:
            hint = f"Make sure <code>{escape(relative_path)}</code> is in the site root directory."

        markup = fragments.error_banner(
            resource=relative_path,
            message=error.failure.last_error,
            attempted_paths=error.failure.attempted_paths,
            hint=hint,
        )
        document.upsert_overlay(
            ERROR_BANNER_ID,
            markup,
            {"class": "error-banner", "role": "alert"},
        )
