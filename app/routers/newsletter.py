# =============================================================================
# app/routers/newsletter.py - Newsletter Signup
# =============================================================================

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from app.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

router = APIRouter()


class SubscribeRequest(BaseModel):
    email: str = ""


@router.post("/subscribe")
async def subscribe(data: SubscribeRequest):
    """Record a newsletter signup. Addresses must contain '@'."""
    email = data.email.strip()
    if "@" not in email:
        raise InvalidRequestError("Invalid email address")

    # TODO: hand the address to a mailing-list provider once one is chosen
    logger.info(f"Newsletter subscription: {email}")
    return {"message": "Successfully subscribed to newsletter!"}
