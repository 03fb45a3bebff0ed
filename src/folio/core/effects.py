"""Optional reveal-animation capability.

Population never depends on effects: the orchestrator applies them after
every section has been written, and NoEffects is a valid choice.
"""

from typing import Protocol

from folio.core.document import PageDocument

# Grid containers whose items are revealed one after another
STAGGER_GROUPS = {
    ".skills-grid, #skills-container": ".skill-category",
    ".projects-grid, #projects-container": ".project-card",
    "#experience-container": ".timeline-content",
    "#blog-container, #blog-preview-container": ".blog-card",
}


class Effects(Protocol):
    """Capability that decorates a populated page for animation."""

    def apply(self, document: PageDocument) -> None: ...


class NoEffects:
    """Leaves the page as populated."""

    def apply(self, document: PageDocument) -> None:
        return None


class RevealEffects:
    """Marks elements for scroll-triggered reveal.

    Every `.fade-in` element gets `data-reveal` with the configured
    duration; items of the known grids additionally get a stagger delay
    based on their position. Attributes are overwritten, never appended,
    so applying twice gives the same markup.
    """

    def __init__(self, *, duration: float = 0.8, stagger: float = 0.1) -> None:
        self._duration = duration
        self._stagger = stagger

    def apply(self, document: PageDocument) -> None:
        for element in document.find_all(".fade-in"):
            element["data-reveal"] = f"{self._duration:g}"

        for container_selector, item_selector in STAGGER_GROUPS.items():
            for container in document.find_all(container_selector):
                for index, item in enumerate(container.select(item_selector)):
                    item["data-reveal-delay"] = f"{index * self._stagger:.2f}"
