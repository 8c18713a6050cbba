"""Tests for the admin content CRUD endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from portfolio.core.content_types import ContentType
from portfolio.core.errors import DatabaseError
from portfolio.main import app
from portfolio.services.sync_service import get_sync_service

ADMIN_HEADERS = {"X-API-Key": "test-admin-key"}

client = TestClient(app)


@pytest.fixture
def side_effects():
    """Patch activity logging and revalidation around admin writes."""
    with patch("portfolio.api.admin_content.log_activity") as mock_log, patch(
        "portfolio.api.admin_content.revalidate",
        new_callable=AsyncMock,
        return_value=MagicMock(revalidated=True),
    ) as mock_revalidate:
        yield mock_log, mock_revalidate


def test_requires_admin():
    assert client.post("/v1/admin/skills", json={"name": "Go"}).status_code == 401


def test_create_logs_and_revalidates(side_effects):
    mock_log, mock_revalidate = side_effects
    created = {"id": 7, "name": "Go", "category": "Backend", "proficiency": 70}

    with patch("portfolio.api.admin_content.apply_write", return_value=created) as mock_write:
        response = client.post(
            "/v1/admin/skills",
            json={"name": "Go", "category": "Backend", "proficiency": 70},
            headers=ADMIN_HEADERS,
        )

    assert response.status_code == 201
    assert response.json() == {"success": True, "revalidated": True, "data": created}
    mock_write.assert_called_once_with("create", "skills", {"name": "Go", "category": "Backend", "proficiency": 70})
    mock_log.assert_called_once_with("Created", "Go", content_type="skills", user_name="Admin")
    mock_revalidate.assert_awaited_once_with(ContentType.SKILLS)


def test_unknown_content_type_is_400(side_effects):
    response = client.post("/v1/admin/widgets", json={}, headers=ADMIN_HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Unsupported content type: widgets")


def test_validation_error_is_400(side_effects):
    with patch("portfolio.api.admin_content.apply_write", side_effect=ValueError("Missing required fields: slug")):
        response = client.post("/v1/admin/projects", json={"title": "x"}, headers=ADMIN_HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: slug"


def test_update_requires_id(side_effects):
    response = client.put("/v1/admin/projects", json={"title": "x"}, headers=ADMIN_HEADERS)

    assert response.status_code == 400


def test_update_missing_row_is_404(side_effects):
    mock_log, mock_revalidate = side_effects
    with patch("portfolio.api.admin_content.apply_write", return_value=None):
        response = client.put("/v1/admin/case-studies", json={"id": 9, "title": "x"}, headers=ADMIN_HEADERS)

    assert response.status_code == 404
    assert response.json()["detail"] == "Case study not found"
    mock_revalidate.assert_not_awaited()


def test_delete_omits_data(side_effects):
    mock_log, mock_revalidate = side_effects
    with patch("portfolio.api.admin_content.apply_write", return_value=True) as mock_write:
        response = client.delete("/v1/admin/blog-posts?id=4", headers=ADMIN_HEADERS)

    assert response.json() == {"success": True, "revalidated": True}
    mock_write.assert_called_once_with("delete", "blog-posts", {"id": 4})
    mock_log.assert_called_once_with("Deleted", "blog post #4", content_type="blog-posts", user_name="Admin")
    mock_revalidate.assert_awaited_once_with(ContentType.BLOG)


def test_unavailable_database_queues_write(side_effects):
    mock_log, mock_revalidate = side_effects
    with patch(
        "portfolio.api.admin_content.apply_write",
        side_effect=DatabaseError("Database temporarily unavailable", 503),
    ):
        response = client.put("/v1/admin/skills", json={"id": 2, "proficiency": 90}, headers=ADMIN_HEADERS)

    assert response.status_code == 202
    body = response.json()
    assert body["queued"] is True

    queue = get_sync_service().get_queue()
    assert [(item.id, item.action, item.resource, item.data) for item in queue] == [
        (body["queue_item_id"], "update", "skills", {"id": 2, "proficiency": 90})
    ]
    mock_log.assert_not_called()
    mock_revalidate.assert_not_awaited()


def test_other_database_errors_are_not_queued(side_effects):
    with patch(
        "portfolio.api.admin_content.apply_write",
        side_effect=DatabaseError("Duplicate entry", 409),
    ):
        response = client.post("/v1/admin/projects", json={"title": "x"}, headers=ADMIN_HEADERS)

    assert response.status_code == 409
    assert get_sync_service().get_queue() == []


def test_project_tags(side_effects):
    mock_log, mock_revalidate = side_effects
    with patch("portfolio.db.projects.set_project_tags", return_value=["ai", "rag"]) as mock_tags:
        response = client.put("/v1/admin/projects/3/tags", json={"tags": ["ai", "rag"]}, headers=ADMIN_HEADERS)

    assert response.json() == {"success": True, "tags": ["ai", "rag"]}
    mock_tags.assert_called_once_with(3, ["ai", "rag"])
    mock_revalidate.assert_awaited_once_with(ContentType.PROJECTS)


def test_project_technologies(side_effects):
    rows = [{"id": 1, "name": "FastAPI"}]
    with patch("portfolio.db.projects.set_project_technologies", return_value=rows) as mock_tech:
        response = client.put(
            "/v1/admin/projects/3/technologies",
            json={"technologies": [{"name": "FastAPI", "category": "backend"}]},
            headers=ADMIN_HEADERS,
        )

    assert response.json() == {"success": True, "technologies": ["FastAPI"]}
    assert mock_tech.call_args.args[1] == [
        {"name": "FastAPI", "icon": None, "version": None, "category": "backend"}
    ]


def test_post_tags(side_effects):
    with patch("portfolio.db.blog.set_post_tags", return_value=[1, 2]):
        response = client.put("/v1/admin/blog-posts/5/tags", json={"tag_ids": [1, 2]}, headers=ADMIN_HEADERS)

    assert response.json() == {"success": True, "tag_ids": [1, 2]}


def test_move_research_project(side_effects):
    mock_log, mock_revalidate = side_effects
    project = {"id": 11, "title": "Agents"}
    with patch("portfolio.db.research_projects.move_to_projects", return_value=project):
        response = client.post("/v1/admin/research-projects/4/move-to-projects", headers=ADMIN_HEADERS)

    assert response.json() == {"success": True, "data": project}
    assert [call.args[0] for call in mock_revalidate.await_args_list] == [
        ContentType.PROJECTS,
        ContentType.RESEARCH_PROJECTS,
    ]


def test_move_missing_research_project_is_404(side_effects):
    with patch(
        "portfolio.db.research_projects.move_to_projects",
        side_effect=ValueError("Research project 4 not found"),
    ):
        response = client.post("/v1/admin/research-projects/4/move-to-projects", headers=ADMIN_HEADERS)

    assert response.status_code == 404
