"""GitHub webhook processing for research projects.

Repository activity (pushes, issues, milestones, pull requests) is recorded as
research project updates and challenges, and nudges the project's completion.
"""

import hashlib
import hmac
from datetime import date
from typing import Any

from portfolio.core.dates import parse_datetime, utc_now_iso
from portfolio.core.logging import get_logger
from portfolio.db import research_projects

logger = get_logger(__name__)

# Completion points per repository event
ACTIVITY_BUMPS = {
    "push": 1,
    "issue_closed": 3,
    "milestone_closed": 10,
    "pr_merged": 5,
}
CHALLENGE_LABELS = {"challenge", "blocker", "bug", "problem"}
PUSH_BUMP_THRESHOLD = 3
NO_PROJECT = {"message": "No matching research project found"}


def verify_signature(payload: bytes, signature: str | None, secret: str | None) -> bool:
    """Check X-Hub-Signature-256 against HMAC-SHA256(secret, payload)."""
    if not signature or not secret:
        return False
    expected = "sha256=" + hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def timeline_progress(start_date: Any, end_date: Any, today: date) -> float:
    """Percent of the start-to-end window elapsed, clamped to 0-100."""
    start = parse_datetime(start_date)
    end = parse_datetime(end_date)
    start_day = start.date() if start else today
    end_day = end.date() if end else today

    total = (end_day - start_day).days
    if total <= 0:
        return 0.0
    elapsed = (today - start_day).days
    return min(100.0, max(0.0, elapsed / total * 100))


def compute_completion(
    project: dict[str, Any],
    event_type: str,
    today: date | None = None,
) -> tuple[int, bool]:
    """
    New completion for a research project after a repository event.

    Blends timeline progress (20%), activity-bumped completion (60%) and the
    previous completion (20%).

    Returns:
        (completion, clears_milestone)
    """
    today = today or date.today()
    previous = project.get("completion") or 0

    activity = min(100, max(0, previous + ACTIVITY_BUMPS.get(event_type, 0)))
    progress = timeline_progress(project.get("start_date"), project.get("end_date"), today)

    completion = round(progress * 0.2 + activity * 0.6 + previous * 0.2)
    return completion, event_type == "milestone_closed"


def apply_progress_event(project: dict[str, Any], event_type: str) -> int:
    completion, clears_milestone = compute_completion(project, event_type)
    research_projects.set_research_progress(
        project["id"], completion, clear_milestone=clears_milestone
    )
    logger.info(f"Research project {project['id']} completion now {completion}% after {event_type}")
    return completion


def _event_date(value: str | None) -> str:
    parsed = parse_datetime(value)
    return parsed.isoformat() if parsed else utc_now_iso()


def handle_push(data: dict[str, Any], project: dict[str, Any]) -> dict[str, Any]:
    commits = data.get("commits") or []
    branch = (data.get("ref") or "").replace("refs/heads/", "")
    if not commits:
        return {"message": "No commits to process"}

    for commit in commits:
        author = (commit.get("author") or {}).get("name") or "unknown"
        research_projects.add_research_update(
            project["id"],
            f"[{branch}] {commit.get('message', '')} ({author})",
            _event_date(commit.get("timestamp")),
        )

    if len(commits) > PUSH_BUMP_THRESHOLD:
        apply_progress_event(project, "push")

    return {
        "message": f"Added {len(commits)} commits as updates to project {project['id']}",
        "project_id": project["id"],
    }


def handle_issues(data: dict[str, Any], project: dict[str, Any]) -> dict[str, Any]:
    action = data.get("action")
    issue = data.get("issue") or {}
    title, url, number = issue.get("title"), issue.get("html_url"), issue.get("number")

    if action == "opened":
        labels = {(label.get("name") or "").lower() for label in issue.get("labels") or []}
        if labels & CHALLENGE_LABELS:
            research_projects.add_research_challenge(project["id"], f"{title} - {url}")
            return {"message": f"Added issue #{number} as a challenge"}

        research_projects.add_research_update(
            project["id"], f"New issue: {title} - {url}", _event_date(issue.get("created_at"))
        )
        return {"message": f"Added issue #{number} as an update"}

    if action == "closed":
        research_projects.add_research_update(
            project["id"], f"Closed issue: {title} - {url}", _event_date(issue.get("closed_at"))
        )
        removed = research_projects.delete_challenges_matching(project["id"], url) if url else 0
        if removed:
            logger.info(f"Removed {removed} challenges for closed issue #{number}")
        apply_progress_event(project, "issue_closed")
        return {"message": f"Processed closed issue #{number}"}

    return {"message": f"Issue action '{action}' not handled"}


def handle_milestone(data: dict[str, Any], project: dict[str, Any]) -> dict[str, Any]:
    action = data.get("action")
    milestone = data.get("milestone") or {}
    title = milestone.get("title")

    if action in ("created", "opened"):
        due = parse_datetime(milestone.get("due_on"))
        label = f"{title} (due {due.date().isoformat()})" if due else title
        research_projects.set_research_progress(
            project["id"], project.get("completion") or 0, next_milestone=label
        )
        research_projects.add_research_update(project["id"], f"New milestone: {label}")
        return {"message": f'Updated next milestone to "{title}"'}

    if action == "closed":
        research_projects.add_research_update(project["id"], f"Completed milestone: {title}")
        apply_progress_event(project, "milestone_closed")
        return {"message": f'Processed completed milestone "{title}"'}

    return {"message": f"Milestone action '{action}' not handled"}


def handle_pull_request(data: dict[str, Any], project: dict[str, Any]) -> dict[str, Any]:
    action = data.get("action")
    pr = data.get("pull_request") or {}
    title, url, number = pr.get("title"), pr.get("html_url"), pr.get("number")

    if action == "opened":
        research_projects.add_research_update(
            project["id"], f"New PR: {title} - {url}", _event_date(pr.get("created_at"))
        )
        return {"message": f"Added PR #{number} as an update"}

    if action == "closed":
        merged = bool(pr.get("merged"))
        prefix = "Merged PR" if merged else "Closed PR"
        research_projects.add_research_update(
            project["id"], f"{prefix}: {title} - {url}", _event_date(pr.get("closed_at"))
        )
        if merged:
            apply_progress_event(project, "pr_merged")
        return {"message": f"Processed {'merged' if merged else 'closed'} PR #{number}"}

    return {"message": f"PR action '{action}' not handled"}


HANDLERS = {
    "push": handle_push,
    "issues": handle_issues,
    "milestone": handle_milestone,
    "pull_request": handle_pull_request,
}


def process_event(event: str, data: dict[str, Any]) -> dict[str, Any] | None:
    """
    Dispatch a webhook event.

    Returns:
        Handler result, or None when the event type is not handled
    """
    handler = HANDLERS.get(event)
    if handler is None:
        return None

    repository = data.get("repository") or {}
    logger.info(
        f"Processing GitHub {event} event",
        extra={"extra_data": {"repository": repository.get("full_name"), "action": data.get("action")}},
    )

    html_url = repository.get("html_url")
    project = research_projects.find_research_project_by_repository(html_url) if html_url else None
    if not project:
        return dict(NO_PROJECT)

    return handler(data, project)
