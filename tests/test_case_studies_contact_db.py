"""Tests for case study and contact message persistence."""

import pytest

from portfolio.core.errors import DatabaseError
from portfolio.db import case_studies, contact_messages


class MissingTable(Exception):
    code = "42P01"


def test_case_studies_missing_table_reads_as_empty(fake_supabase):
    fake_supabase.fail("case_studies", MissingTable("relation does not exist"))

    assert case_studies.list_case_studies() == []
    assert case_studies.list_featured_case_studies() == []
    assert case_studies.get_case_study_by_slug("any") is None


def test_case_studies_other_errors_propagate(fake_supabase):
    fake_supabase.fail("case_studies", Exception("permission denied"))

    with pytest.raises(DatabaseError):
        case_studies.list_case_studies()


def test_featured_case_study(fake_supabase):
    fake_supabase.seed(
        "case_studies",
        [
            {"id": 1, "slug": "old", "featured": True, "created_at": "2024-01-01"},
            {"id": 2, "slug": "new", "featured": True, "created_at": "2025-01-01"},
        ],
    )
    assert [c["slug"] for c in case_studies.list_featured_case_studies()] == ["new"]
    assert case_studies.get_case_study_by_slug("old")["id"] == 1


def test_create_contact_message(fake_supabase):
    stored = contact_messages.create_contact_message("Ada", "ada@example.com", "Hello there, nice site!")

    assert stored["email"] == "ada@example.com"
    assert "created_at" in stored
    assert len(fake_supabase.tables["contact_messages"]) == 1
