"""Portfolio and blog document models.

Documents are parsed tolerantly: every field except personalInfo is
optional, and a wrongly-typed optional field is treated as absent so the
sections that do have data still render.
"""

import logging
from dataclasses import dataclass, field

from folio.core.errors import InvalidDocumentError
from folio.core.types import JSONValue

logger = logging.getLogger(__name__)


def _text(data: dict, key: str) -> str | None:
    """Return a scalar field as text, None when absent or not a scalar."""
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        return str(value)
    logger.debug(f"Ignoring non-scalar field {key!r}")
    return None


def _text_list(data: dict, key: str) -> list[str] | None:
    """Return a list of strings, None when absent or not a list."""
    value = data.get(key)
    if not isinstance(value, list):
        return None
    return [str(item) for item in value if isinstance(item, (str, int, float))]


def _objects(data: dict, key: str) -> list[dict] | None:
    """Return the object items of a list field, None when absent or not a list."""
    value = data.get(key)
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, dict)]


@dataclass(frozen=True)
class Contact:
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class Link:
    platform: str
    username: str


@dataclass(frozen=True)
class PersonalInfo:
    """Identity and contact details."""

    name: str | None
    location: str | None
    contact: Contact
    links: list[Link]

    @classmethod
    def from_dict(cls, data: dict) -> "PersonalInfo":
        contact_raw = data.get("contact")
        contact = Contact()
        if isinstance(contact_raw, dict):
            contact = Contact(email=_text(contact_raw, "email"), phone=_text(contact_raw, "phone"))

        links: list[Link] = []
        for item in _objects(data, "links") or []:
            platform = _text(item, "platform")
            username = _text(item, "username")
            if platform and username:
                links.append(Link(platform=platform, username=username))

        return cls(
            name=_text(data, "name"),
            location=_text(data, "location"),
            contact=contact,
            links=links,
        )


@dataclass(frozen=True)
class Experience:
    title: str | None
    company: str | None
    start_date: str | None
    end_date: str | None
    duration: str | None
    location: str | None
    work_mode: str | None
    skills: list[str] | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Experience":
        return cls(
            title=_text(data, "title"),
            company=_text(data, "company"),
            start_date=_text(data, "startDate"),
            end_date=_text(data, "endDate"),
            duration=_text(data, "duration"),
            location=_text(data, "location"),
            work_mode=_text(data, "workMode"),
            skills=_text_list(data, "skills"),
        )


@dataclass(frozen=True)
class Project:
    title: str | None
    technologies: list[str]
    paragraphs: list[str]
    link: str | None = None

    @property
    def description(self) -> str:
        """Description paragraphs joined into one block of text."""
        return " ".join(self.paragraphs)

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        description = data.get("description")
        if isinstance(description, list):
            paragraphs = [str(p) for p in description if isinstance(p, (str, int, float))]
        elif isinstance(description, str):
            paragraphs = [description]
        else:
            paragraphs = []

        return cls(
            title=_text(data, "title"),
            technologies=_text_list(data, "technologies") or [],
            paragraphs=paragraphs,
            link=_text(data, "link"),
        )


@dataclass(frozen=True)
class ProblemSolvingEntry:
    platform: str | None
    details: str | None
    link: str | None


@dataclass(frozen=True)
class Education:
    degree: str | None
    institution: str | None
    duration: str | None
    gpa: str | None
    coursework: list[str]


@dataclass(frozen=True)
class Research:
    title: str | None
    points: list[str]
    technologies: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OtherExperience:
    role: str | None
    event: str | None = None
    organization: str | None = None

    @property
    def context(self) -> str:
        """Event or organization the role was held at."""
        return self.event or self.organization or ""


@dataclass(frozen=True)
class PortfolioDocument:
    """Deserialized personal and professional data."""

    personal_info: PersonalInfo
    technologies_and_skills: dict[str, list[str]] | None = None
    experience: list[Experience] | None = None
    projects: list[Project] | None = None
    achievements: list[str] | None = None
    problem_solving: list[ProblemSolvingEntry] | None = None
    education: list[Education] | None = None
    research_and_thesis: Research | None = None
    other_experiences: list[OtherExperience] | None = None

    @classmethod
    def from_json(cls, payload: JSONValue) -> "PortfolioDocument":
        """Build a document from a parsed JSON payload.

        Args:
            payload: Parsed portfolio JSON

        Returns:
            PortfolioDocument with absent optional fields set to None

        Raises:
            InvalidDocumentError: If the payload is not an object or lacks personalInfo
        """
        if not isinstance(payload, dict):
            raise InvalidDocumentError("Invalid JSON structure: expected an object")

        personal_raw = payload.get("personalInfo")
        if not isinstance(personal_raw, dict):
            raise InvalidDocumentError("Invalid JSON structure: personalInfo missing")

        for key in ("technologiesAndSkills", "experience", "projects"):
            if key not in payload:
                logger.warning(f"{key} missing in portfolio document")

        return cls(
            personal_info=PersonalInfo.from_dict(personal_raw),
            technologies_and_skills=_parse_skills(payload.get("technologiesAndSkills")),
            experience=_map(payload, "experience", Experience.from_dict),
            projects=_map(payload, "projects", Project.from_dict),
            achievements=_text_list(payload, "achievements"),
            problem_solving=_map(
                payload,
                "problemSolving",
                lambda item: ProblemSolvingEntry(
                    platform=_text(item, "platform"),
                    details=_text(item, "details"),
                    link=_text(item, "link"),
                ),
            ),
            education=_map(
                payload,
                "education",
                lambda item: Education(
                    degree=_text(item, "degree"),
                    institution=_text(item, "institution"),
                    duration=_text(item, "duration"),
                    gpa=_text(item, "gpa"),
                    coursework=_text_list(item, "coursework") or [],
                ),
            ),
            research_and_thesis=_parse_research(payload.get("researchAndThesis")),
            other_experiences=_map(
                payload,
                "otherExperiences",
                lambda item: OtherExperience(
                    role=_text(item, "role"),
                    event=_text(item, "event"),
                    organization=_text(item, "organization"),
                ),
            ),
        )


def _map(payload: dict, key: str, build) -> list | None:
    items = _objects(payload, key)
    if items is None:
        return None
    return [build(item) for item in items]


def _parse_skills(value: object) -> dict[str, list[str]] | None:
    if not isinstance(value, dict):
        return None
    skills: dict[str, list[str]] = {}
    for category, items in value.items():
        if isinstance(items, list):
            skills[str(category)] = [str(item) for item in items if isinstance(item, (str, int, float))]
    return skills


def _parse_research(value: object) -> Research | None:
    if not isinstance(value, dict):
        return None
    return Research(
        title=_text(value, "title"),
        points=_text_list(value, "points") or [],
        technologies=_text_list(value, "technologies") or [],
    )


@dataclass(frozen=True)
class BlogPost:
    """Single blog post."""

    slug: str
    title: str
    date: str
    cover: str | None = None
    short: str | None = None
    content: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "BlogPost":
        return cls(
            slug=_text(data, "slug") or "",
            title=_text(data, "title") or "",
            date=_text(data, "date") or "",
            cover=_text(data, "cover"),
            short=_text(data, "short"),
            content=_text(data, "content"),
        )


def parse_posts(payload: JSONValue) -> list[BlogPost]:
    """Build the post list from a parsed JSON payload.

    Args:
        payload: Parsed posts JSON

    Returns:
        Posts in document order; non-object entries are skipped

    Raises:
        InvalidDocumentError: If the payload is not an array
    """
    if not isinstance(payload, list):
        raise InvalidDocumentError("Invalid JSON structure: posts must be an array")
    return [BlogPost.from_dict(item) for item in payload if isinstance(item, dict)]
