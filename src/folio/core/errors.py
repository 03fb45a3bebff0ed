"""Exception types raised by the population pipeline."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from folio.core.loader import LoadFailure
    from folio.core.resources import ResourceDescriptor


class FolioError(Exception):
    """Base class for Folio errors."""


class InvalidDocumentError(FolioError):
    """A payload was fetched but does not have the expected structure."""


class ResourceUnavailableError(FolioError):
    """Every candidate path of a required resource failed."""

    def __init__(self, descriptor: "ResourceDescriptor", failure: "LoadFailure") -> None:
        self.descriptor = descriptor
        self.failure = failure
        super().__init__(f"Failed to load {descriptor.relative_path}: {failure.last_error}")
