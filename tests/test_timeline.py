"""Tests for the merged timeline."""

from datetime import date

from portfolio.core.timeline import build_timeline

EXPERIENCE = [
    {
        "id": 1,
        "position": "Engineer",
        "company": "Acme",
        "description": "Built things",
        "start_date": "2022-03-01",
        "skills": ["python"],
    },
    {"id": 2, "start_date": "2019-06-01"},
]
EDUCATION = [
    {"id": 1, "degree": "BSc", "field_of_study": "Computer Science", "institution": "Uni", "start_date": "2015-09-01"}
]
CERTIFICATIONS = [{"id": 1, "name": "CKA", "issue_date": "2023-01-15"}]
ACHIEVEMENTS = [{"id": 1, "title": "Hackathon winner", "award_date": "2021-11-20", "tags": ["award"]}]


def test_items_are_mapped_with_defaults():
    items = {item.id: item for item in build_timeline(EXPERIENCE, EDUCATION, CERTIFICATIONS, ACHIEVEMENTS)}

    work = items["work-1"]
    assert work.type == "work"
    assert work.title == "Engineer"
    assert work.organization == "Acme"
    assert work.tags == ["python"]

    untitled = items["work-2"]
    assert untitled.title == "Untitled Position"
    assert untitled.organization == "Unknown Company"

    education = items["education-1"]
    assert education.description == "BSc in Computer Science"

    cert = items["certification-1"]
    assert cert.type == "achievement"
    assert cert.organization == "Unknown Issuer"
    assert cert.tags == ["certification"]

    assert items["achievement-1"].type == "achievement"


def test_sorted_newest_first():
    items = build_timeline(EXPERIENCE, EDUCATION, CERTIFICATIONS, ACHIEVEMENTS)
    assert [item.id for item in items] == [
        "certification-1",
        "work-1",
        "achievement-1",
        "work-2",
        "education-1",
    ]


def test_type_filter_and_limit():
    items = build_timeline(EXPERIENCE, EDUCATION, CERTIFICATIONS, ACHIEVEMENTS, type_filter="achievement", limit=1)
    assert [item.id for item in items] == ["certification-1"]


def test_missing_start_date_becomes_today():
    items = build_timeline([{"id": 9, "position": "Now"}], [], [], [])
    assert items[0].start_date == date.today().isoformat()


def test_malformed_rows_are_skipped():
    items = build_timeline([{"position": "no id"}, EXPERIENCE[0]], [{"degree": "no id"}], [], [])
    assert [item.id for item in items] == ["work-1"]
