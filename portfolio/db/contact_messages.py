"""Contact message database operations."""

from typing import Any

from portfolio.core.dates import utc_now_iso
from portfolio.db.supabase_client import execute_query, get_supabase


def create_contact_message(name: str, email: str, message: str) -> dict[str, Any]:
    """Store a contact form submission."""
    row = {
        "name": name,
        "email": email,
        "message": message,
        "created_at": utc_now_iso(),
    }
    response = execute_query(
        lambda: get_supabase().table("contact_messages").insert(row),
        "create",
        "contact message",
        {"email": email},
    )
    return (response.data or [row])[0]
