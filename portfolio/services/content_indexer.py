"""Rebuild the vector store from published site content."""

import re
from collections.abc import Callable
from typing import Any

from portfolio.core.chunking import chunk_text
from portfolio.core.config import get_settings
from portfolio.core.logging import get_logger
from portfolio.db import blog, case_studies, projects, skills
from portfolio.db.vector_store import clear_documents, store_documents

logger = get_logger(__name__)

Document = dict[str, Any]


def _chunked(prefix: str, text: str, metadata: dict[str, Any]) -> list[Document]:
    max_chars = get_settings().CHUNK_MAX_CHARS
    return [
        {"id": f"{prefix}-chunk-{chunk['chunk_index']}", "content": chunk["content"], "metadata": metadata}
        for chunk in chunk_text(text, max_chars=max_chars)
    ]


def blog_documents() -> list[Document]:
    documents = []
    for post in blog.list_all_published_posts():
        text = f"{post.get('title', '')}\n\n{post.get('excerpt') or ''}\n\n{post.get('content') or ''}"
        documents += _chunked(
            f"blog-{post['id']}",
            text,
            {
                "type": "blog",
                "title": post.get("title"),
                "slug": post.get("slug"),
                "url": f"/blog/{post.get('slug')}",
                "category_id": post.get("category_id"),
            },
        )
    return documents


def project_documents() -> list[Document]:
    documents = []
    for project in projects.list_projects():
        long_description = project.get("long_description") or project.get("detailed_description") or ""
        text = (
            f"{project.get('title', '')}\n\n{project.get('description') or ''}\n\n{long_description}"
            f"\n\nTechnologies: {', '.join(project.get('technologies') or [])}"
        )
        documents += _chunked(
            f"project-{project['id']}",
            text,
            {
                "type": "project",
                "title": project.get("title"),
                "slug": project.get("slug"),
                "url": f"/projects/{project.get('slug')}",
            },
        )
    return documents


def case_study_documents() -> list[Document]:
    documents = []
    for study in case_studies.list_case_studies():
        text = (
            f"{study.get('title', '')}\n\n{study.get('summary') or ''}"
            f"\n\nChallenge: {study.get('challenge') or ''}"
            f"\n\nApproach: {study.get('approach') or ''}"
            f"\n\nResults: {study.get('results') or ''}"
        )
        documents += _chunked(
            f"case-study-{study['id']}",
            text,
            {
                "type": "case_study",
                "title": study.get("title"),
                "slug": study.get("slug"),
                "url": f"/case-studies/{study.get('slug')}",
            },
        )
    return documents


def skill_documents() -> list[Document]:
    documents = []
    for skill in skills.list_skills():
        name = skill.get("name") or ""
        anchor = re.sub(r"\s+", "-", name.lower())
        text = (
            f"{name}\n\nCategory: {skill.get('category') or ''}"
            f"\n\nProficiency: {skill.get('proficiency') or ''}\n\n{skill.get('description') or ''}"
        )
        documents.append(
            {
                "id": f"skill-{skill['id']}",
                "content": text,
                "metadata": {
                    "type": "skill",
                    "title": name,
                    "category": skill.get("category"),
                    "url": f"/skills#{anchor}",
                },
            }
        )
    return documents


SOURCES: dict[str, Callable[[], list[Document]]] = {
    "blog": blog_documents,
    "project": project_documents,
    "case_study": case_study_documents,
    "skill": skill_documents,
}


def index_all_content() -> dict[str, Any]:
    """
    Clear the vector store and index every content source.

    A failing source is logged and reported; the other sources still run.

    Returns:
        Dict with total count, count per source and per-source errors
    """
    clear_documents()

    by_type: dict[str, int] = {}
    errors: dict[str, str] = {}

    for source, build in SOURCES.items():
        try:
            by_type[source] = store_documents(build())
        except Exception as e:
            logger.exception(f"Failed to index {source} content")
            by_type[source] = 0
            errors[source] = str(e)

    count = sum(by_type.values())
    logger.info(
        f"Indexed {count} documents",
        extra={"extra_data": {"by_type": by_type, "errors": list(errors)}},
    )
    return {"count": count, "by_type": by_type, "errors": errors}
