"""HTML fragment builders for page sections.

Every builder takes model objects and returns an HTML string. Text from
the documents is escaped; a missing optional sub-field drops only the
element that would have shown it.
"""

import re
from html import escape

from folio.core.blog import content_to_html, format_date
from folio.core.models import (
    BlogPost,
    Contact,
    Education,
    Experience,
    Link,
    OtherExperience,
    ProblemSolvingEntry,
    Project,
    Research,
)

NO_POSTS_MESSAGE = "No blog posts available yet. Check back soon!"
META_SEPARATOR = " • "

# platform -> (profile URL template, icon)
_PROFILE_LINKS = {
    "github": ("https://github.com/{username}", "\U0001f4bb"),
    "linkedin": ("https://linkedin.com/in/{username}", "\U0001f4bc"),
    "portfolio": ("https://{username}.github.io", "\U0001f310"),
}

_WORD_START = re.compile(r"\b\w")


def _tags(items: list[str], css_class: str) -> str:
    return "".join(f'<span class="{css_class}">{escape(item)}</span>' for item in items)


def _external_link(href: str, label: str, css_class: str) -> str:
    return (
        f'<a href="{escape(href)}" target="_blank" rel="noopener noreferrer" '
        f'class="{css_class}">{label}</a>'
    )


def humanize_category(category: str) -> str:
    """Turn a skill category key into a heading ("web_frameworks" -> "Web Frameworks")."""
    spaced = category.replace("_", " ")
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced)


def skill_category(category: str, skills: list[str]) -> str:
    return (
        '<div class="skill-category fade-in">'
        f"<h3>{escape(humanize_category(category))}</h3>"
        f'<div class="skill-tags">{_tags(skills, "skill-tag")}</div>'
        "</div>"
    )


def experience_meta(experience: Experience) -> str:
    """Join the present date, duration, location and work mode parts."""
    dates = " - ".join(d for d in (experience.start_date, experience.end_date) if d)
    parts = [dates, experience.duration, experience.location, experience.work_mode]
    return META_SEPARATOR.join(part for part in parts if part)


def timeline_item(experience: Experience) -> str:
    parts = ['<div class="timeline-item fade-in"><div class="timeline-content">']
    if experience.title:
        parts.append(f"<h3>{escape(experience.title)}</h3>")
    if experience.company:
        parts.append(f'<div class="company">{escape(experience.company)}</div>')
    meta = experience_meta(experience)
    if meta:
        parts.append(f'<div class="meta">{escape(meta)}</div>')
    if experience.skills:
        parts.append(f'<div class="skills">{_tags(experience.skills, "skill-tag")}</div>')
    parts.append("</div></div>")
    return "".join(parts)


def project_card(project: Project) -> str:
    parts = ['<div class="project-card fade-in">']
    if project.title:
        parts.append(f"<h3>{escape(project.title)}</h3>")
    if project.technologies:
        parts.append(f'<div class="tech-stack">{_tags(project.technologies, "tech-tag")}</div>')
    if project.paragraphs:
        parts.append(f'<p class="description">{escape(project.description)}</p>')
    if project.link:
        parts.append(_external_link(project.link, "View Project →", "project-link"))
    parts.append("</div>")
    return "".join(parts)


def research_card(research: Research) -> str:
    """Research project shown at the end of the projects grid."""
    points = "".join(f"<li>{escape(point)}</li>" for point in research.points)
    parts = ['<div class="project-card research fade-in">']
    if research.title:
        parts.append(f"<h3>{escape(research.title)}</h3>")
    if research.technologies:
        parts.append(f'<div class="tech-stack">{_tags(research.technologies, "tech-tag")}</div>')
    if points:
        parts.append(f'<div class="description"><ul class="points">{points}</ul></div>')
    parts.append("</div>")
    return "".join(parts)


def achievement_item(achievement: str) -> str:
    return f'<div class="achievement-item fade-in"><div>{escape(achievement)}</div></div>'


def contact_links(contact: Contact, links: list[Link]) -> str:
    """Email, phone and known profile links; unknown platforms are skipped."""
    parts = []
    if contact.email:
        parts.append(
            f'<a href="mailto:{escape(contact.email)}" class="contact-link fade-in">'
            f"<span>\U0001f4e7</span><span>{escape(contact.email)}</span></a>"
        )
    if contact.phone:
        dial = re.sub(r"\s", "", contact.phone)
        parts.append(
            f'<a href="tel:{escape(dial)}" class="contact-link fade-in">'
            f"<span>\U0001f4f1</span><span>{escape(contact.phone)}</span></a>"
        )
    for link in links:
        known = _PROFILE_LINKS.get(link.platform.lower())
        if known is None:
            continue
        template, icon = known
        url = template.format(username=link.username)
        parts.append(
            _external_link(
                url,
                f"<span>{icon}</span><span>{escape(link.platform)}</span>",
                "contact-link fade-in",
            )
        )
    return "".join(parts)


def problem_solving_card(entry: ProblemSolvingEntry) -> str:
    parts = ['<div class="problem-solving-card fade-in">']
    if entry.platform:
        parts.append(f"<h3>{escape(entry.platform)}</h3>")
    if entry.details:
        parts.append(f"<p>{escape(entry.details)}</p>")
    if entry.link:
        parts.append(_external_link(entry.link, "View Profile →", "btn"))
    parts.append("</div>")
    return "".join(parts)


def education_card(education: Education) -> str:
    parts = ['<div class="card fade-in">']
    if education.degree:
        parts.append(f"<h3>{escape(education.degree)}</h3>")
    if education.institution:
        parts.append(f'<div class="company">{escape(education.institution)}</div>')
    meta = [education.duration or "", f"GPA: {education.gpa}" if education.gpa else ""]
    meta_text = META_SEPARATOR.join(part for part in meta if part)
    if meta_text:
        parts.append(f'<div class="meta">{escape(meta_text)}</div>')
    if education.coursework:
        parts.append(
            '<div class="skills"><strong>Key Coursework:</strong>'
            f'<div class="skill-tags">{_tags(education.coursework, "skill-tag")}</div></div>'
        )
    parts.append("</div>")
    return "".join(parts)


def research_summary(research: Research) -> str:
    """Research and thesis card on the about page."""
    points = "".join(f"<li>{escape(point)}</li>" for point in research.points)
    title = f"<h3>{escape(research.title)}</h3>" if research.title else ""
    bullets = f'<ul class="points">{points}</ul>' if points else ""
    return f'<div class="card fade-in">{title}{bullets}</div>'


def other_experience_card(experience: OtherExperience) -> str:
    role = f"<h3>{escape(experience.role)}</h3>" if experience.role else ""
    return (
        f'<div class="card fade-in">{role}'
        f'<div class="company">{escape(experience.context)}</div></div>'
    )


def blog_card(post: BlogPost, href: str) -> str:
    parts = [f'<a class="blog-card fade-in" href="{escape(href)}">']
    if post.cover:
        parts.append(f'<img src="{escape(post.cover)}" alt="{escape(post.title)}" class="cover">')
    parts.append(
        '<div class="content">'
        f"<h3>{escape(post.title)}</h3>"
        f'<div class="date">{escape(format_date(post.date))}</div>'
        f'<p class="summary">{escape(post.short or "")}</p>'
        "</div></a>"
    )
    return "".join(parts)


def no_posts() -> str:
    return f'<p class="empty-state">{NO_POSTS_MESSAGE}</p>'


def post_header(post: BlogPost) -> str:
    cover = ""
    if post.cover:
        cover = f'<img src="{escape(post.cover)}" alt="{escape(post.title)}" class="cover">'
    return (
        f"<h1>{escape(post.title)}</h1>"
        f'<div class="date">{escape(format_date(post.date))}</div>'
        f"{cover}"
    )


def post_body(post: BlogPost) -> str:
    return content_to_html(post.content)


def post_not_found(message: str, blog_index: str) -> str:
    return (
        '<div class="not-found">'
        "<h2>Oops!</h2>"
        f"<p>{escape(message)}</p>"
        f'<a href="{escape(blog_index)}" class="btn btn-primary">Back to Blog</a>'
        "</div>"
    )


def error_banner(resource: str, message: str, attempted_paths: list[str], hint: str) -> str:
    """Dismissible banner shown when a required resource could not be loaded."""
    paths = "".join(f"<li><code>{escape(path)}</code></li>" for path in attempted_paths)
    return (
        "<h3>Error Loading Data</h3>"
        f'<p class="error-resource">Could not load {escape(resource)}</p>'
        f'<p class="error-message">{escape(message)}</p>'
        f'<p class="error-hint">{hint}</p>'
        f'<ul class="attempted-paths">{paths}</ul>'
        '<button type="button" class="error-close" data-dismiss="banner">Close</button>'
    )
