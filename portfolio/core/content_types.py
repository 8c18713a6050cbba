"""Content families, their tables and the revalidation paths they own."""

from dataclasses import dataclass
from enum import Enum


class ContentType(str, Enum):
    """Revalidation families of public content."""

    SKILLS = "skills"
    PROJECTS = "projects"
    BLOG = "blog"
    CASE_STUDIES = "case-studies"
    TIMELINE = "timeline"
    RESEARCH_PROJECTS = "research-projects"
    ALL = "all"


# Concrete families (everything except ALL), in display order
CONCRETE_CONTENT_TYPES: tuple[ContentType, ...] = tuple(
    ct for ct in ContentType if ct is not ContentType.ALL
)

# Default revalidation intervals in minutes
DEFAULT_REVALIDATION_INTERVALS: dict[ContentType, int] = {
    ContentType.SKILLS: 60,
    ContentType.PROJECTS: 120,
    ContentType.BLOG: 180,
    ContentType.CASE_STUDIES: 240,
    ContentType.TIMELINE: 300,
    ContentType.RESEARCH_PROJECTS: 180,
    ContentType.ALL: 360,
}

_REVALIDATION_PATHS: dict[ContentType, tuple[str, ...]] = {
    ContentType.SKILLS: ("/api/skills", "/"),
    ContentType.PROJECTS: ("/api/projects", "/projects", "/projects/[slug]", "/"),
    ContentType.BLOG: ("/api/blog", "/blog", "/blog/[slug]"),
    ContentType.CASE_STUDIES: ("/api/case-studies", "/case-studies"),
    ContentType.TIMELINE: ("/api/timeline", "/"),
    ContentType.RESEARCH_PROJECTS: ("/api/research-projects", "/research", "/research/[slug]"),
}


def expand(content_type: ContentType) -> tuple[ContentType, ...]:
    """ALL expands to every concrete family; others map to themselves."""
    if content_type is ContentType.ALL:
        return CONCRETE_CONTENT_TYPES
    return (content_type,)


def paths_for(content_type: ContentType) -> list[str]:
    """Frontend paths invalidated by a revalidation, de-duplicated in order."""
    paths: list[str] = []
    for ct in expand(content_type):
        for path in _REVALIDATION_PATHS[ct]:
            if path not in paths:
                paths.append(path)
    return paths


@dataclass(frozen=True)
class AdminContentSpec:
    """How the admin CRUD surface writes one kind of content."""

    slug: str
    table: str
    entity: str
    revalidates: ContentType
    required_fields: tuple[str, ...] = ()
    title_field: str = "title"


ADMIN_CONTENT: dict[str, AdminContentSpec] = {
    "projects": AdminContentSpec(
        slug="projects",
        table="projects",
        entity="project",
        revalidates=ContentType.PROJECTS,
        required_fields=("title", "slug", "description"),
    ),
    "blog-posts": AdminContentSpec(
        slug="blog-posts",
        table="blog_posts",
        entity="blog post",
        revalidates=ContentType.BLOG,
        required_fields=("title", "slug", "content", "category_id"),
    ),
    "skills": AdminContentSpec(
        slug="skills",
        table="skills",
        entity="skill",
        revalidates=ContentType.SKILLS,
        required_fields=("name", "category", "proficiency"),
        title_field="name",
    ),
    "research-projects": AdminContentSpec(
        slug="research-projects",
        table="research_projects",
        entity="research project",
        revalidates=ContentType.RESEARCH_PROJECTS,
        required_fields=("title", "slug", "description"),
    ),
    "case-studies": AdminContentSpec(
        slug="case-studies",
        table="case_studies",
        entity="case study",
        revalidates=ContentType.CASE_STUDIES,
        required_fields=("title", "slug"),
    ),
    "achievements": AdminContentSpec(
        slug="achievements",
        table="achievements",
        entity="achievement",
        revalidates=ContentType.TIMELINE,
        required_fields=("title", "description", "award_date", "achievement_type"),
    ),
}


def get_admin_content_spec(slug: str) -> AdminContentSpec | None:
    return ADMIN_CONTENT.get(slug)
