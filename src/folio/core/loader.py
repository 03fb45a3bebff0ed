"""Resilient JSON resource loader.

Walks the candidate table of a resource until one candidate yields a
parseable JSON payload. Every failure mode (transport error, timeout,
non-2xx status, invalid JSON) is folded into a LoadFailure; the loader
never raises past its boundary.
"""

import json
import logging
from dataclasses import dataclass, field

import httpx

from folio.core.location import Location
from folio.core.resources import ResourceDescriptor, build_candidates
from folio.core.types import JSONValue

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class LoadSuccess:
    """Resource fetched and parsed."""

    payload: JSONValue
    source_path: str


@dataclass(frozen=True)
class LoadFailure:
    """Every candidate of a resource failed."""

    last_error: str
    attempted_paths: list[str] = field(default_factory=list)


LoadResult = LoadSuccess | LoadFailure


class ResourceLoader:
    """Fetches JSON resources over HTTP with a candidate fallback chain."""

    def __init__(self, client: httpx.AsyncClient, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize loader.

        Args:
            client: httpx AsyncClient used for every request
            timeout: Deadline in seconds for each candidate attempt
        """
        self._client = client
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Per-candidate deadline in seconds."""
        return self._timeout

    async def load(self, descriptor: ResourceDescriptor, location: Location) -> LoadResult:
        """Load a resource relative to the current page.

        Args:
            descriptor: Resource to load
            location: Page the resource is loaded for

        Returns:
            LoadSuccess for the first candidate that worked, LoadFailure with
            every attempted candidate otherwise
        """
        candidates = build_candidates(descriptor.relative_path, location.base_url)
        attempted: list[str] = []
        last_error = "Unknown error"

        for candidate in candidates:
            attempted.append(candidate)
            url = location.resolve(candidate)
            logger.debug(f"Trying {descriptor.name} candidate {candidate!r} -> {url}")
            try:
                payload = await self._fetch_json(url)
            except _CandidateError as e:
                last_error = str(e)
                logger.debug(f"Candidate {candidate!r} failed: {last_error}")
                continue

            logger.info(f"Loaded {descriptor.name} from {candidate!r}")
            return LoadSuccess(payload=payload, source_path=candidate)

        logger.warning(
            f"Failed to load {descriptor.name} after {len(attempted)} candidates: {last_error}"
        )
        return LoadFailure(last_error=last_error, attempted_paths=attempted)

    async def _fetch_json(self, url: str) -> JSONValue:
        """Fetch and parse one candidate URL.

        Raises:
            _CandidateError: For any reason the candidate cannot be used
        """
        try:
            response = await self._client.get(url, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise _CandidateError(f"Timed out after {self._timeout}s fetching {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise _CandidateError(_describe(e, url)) from e

        if not response.is_success:
            raise _CandidateError(f"HTTP {response.status_code} fetching {url}")

        try:
            return json.loads(response.content)
        except ValueError as e:
            raise _CandidateError(f"Invalid JSON at {url}: {e}") from e


class _CandidateError(Exception):
    """A single candidate attempt failed."""


def _describe(error: Exception, url: str) -> str:
    message = str(error) or type(error).__name__
    return f"{message} ({url})"
