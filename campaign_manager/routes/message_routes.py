# campaign_manager/routes/message_routes.py
import logging
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session
from typing import Any, Dict

from campaign_manager.core import errors
from campaign_manager.database import crud
from campaign_manager.database.db import get_db
from campaign_manager.routes.dependencies import ERROR_RESPONSES
from campaign_manager.schemas import MessageResponse
from campaign_manager.services.message_generator import generate_personalized_message

router = APIRouter(responses=ERROR_RESPONSES)
logger = logging.getLogger(__name__)


@router.post("", response_model=MessageResponse)
def personalized_message(profile: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Generates an outreach message for one profile and records it for analytics."""
    message = generate_personalized_message(profile)
    logger.info(
        "Generating personalized message",
        extra={"profile_name": profile.get("name"), "company": profile.get("company")},
    )

    # Recording is best effort; the caller still gets the message.
    try:
        crud.save_generated_message(db, profile, message)
    except errors.ApiError as exc:
        logger.error("Error saving generated message to database", extra={"error": exc.message})
    return {"message": message}
