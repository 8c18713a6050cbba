"""API router for v1 endpoints."""

from fastapi import APIRouter

from portfolio.api import (
    admin_content,
    admin_dashboard,
    admin_vector_db,
    blog,
    case_studies,
    contact,
    github,
    projects,
    rag,
    research_projects,
    revalidation,
    skills,
    sync,
    timeline,
)

router = APIRouter()

# Public content routes
router.include_router(projects.router, tags=["projects"])
router.include_router(blog.router, tags=["blog"])
router.include_router(skills.router, tags=["skills"])
router.include_router(timeline.router, tags=["timeline"])
router.include_router(research_projects.router, tags=["research_projects"])
router.include_router(case_studies.router, tags=["case_studies"])

# Visitor interaction routes
router.include_router(contact.router, tags=["contact"])
router.include_router(rag.router, tags=["rag"])
router.include_router(github.router, tags=["github"])

# Revalidation (public hook, cron and admin settings)
router.include_router(revalidation.router, tags=["revalidation"])

# Admin routes; fixed paths before the generic /admin/{content_type} writers
router.include_router(admin_dashboard.router, tags=["admin_dashboard"])
router.include_router(admin_vector_db.router, tags=["admin_vector_db"])
router.include_router(sync.router, tags=["sync"])
router.include_router(admin_content.router, tags=["admin_content"])
