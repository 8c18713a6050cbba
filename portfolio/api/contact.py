"""Public contact form endpoint."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from portfolio.api.errors import http_error
from portfolio.core.logging import get_logger
from portfolio.core.rate_limiter import check_contact_rate_limit
from portfolio.db.contact_messages import create_contact_message

logger = get_logger(__name__)

router = APIRouter()

THANK_YOU_MESSAGE = "Thank you for your message! I'll get back to you as soon as possible."


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    message: str = Field(..., min_length=10, max_length=5000)


@router.post("/contact", dependencies=[Depends(check_contact_rate_limit)])
async def submit_contact(request: ContactRequest) -> dict[str, Any]:
    try:
        create_contact_message(request.name.strip(), request.email, request.message.strip())
    except Exception as e:
        raise http_error(e, "Failed to send message") from e

    logger.info("Contact message received", extra={"extra_data": {"email_domain": request.email.split("@")[-1]}})
    return {"success": True, "message": THANK_YOU_MESSAGE}
