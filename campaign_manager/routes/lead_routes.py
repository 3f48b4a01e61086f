# campaign_manager/routes/lead_routes.py
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from campaign_manager.auth.auth_utils import get_current_user
from campaign_manager.core import errors
from campaign_manager.core.settings import settings
from campaign_manager.database import crud
from campaign_manager.database.db import get_db
from campaign_manager.database.models import User, utcnow
from campaign_manager.routes.dependencies import ERROR_RESPONSES
from campaign_manager.schemas import ProfileIn
from campaign_manager.services.message_generator import REQUIRED_FIELDS, missing_fields

router = APIRouter(responses=ERROR_RESPONSES)
logger = logging.getLogger(__name__)


@router.get("")
def list_profiles(
    limit: int = Query(settings.default_leads_limit, ge=1, le=settings.max_list_limit),
    skip: int = Query(0, ge=0),
    search: str = "",
    db: Session = Depends(get_db),
):
    """Scraped LinkedIn profiles, newest first, optionally filtered by a case-insensitive search term."""
    logger.info("Fetching LinkedIn profiles", extra={"limit": limit, "skip": skip, "search": "yes" if search else "no"})
    items = crud.find_profiles(db, search=search, skip=skip, limit=limit)
    total = crud.count_profiles(db, search=search)
    return {
        "items": items,
        "total": total,
        "limit": limit,
        "skip": skip,
        "hasMore": total > skip + limit,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def store_profiles(
    profiles: List[ProfileIn],
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not profiles:
        raise errors.ValidationError("Invalid profiles data", details="Expected an array of profiles")

    documents = [profile.model_dump() for profile in profiles]
    invalid = {}
    for index, document in enumerate(documents):
        missing = missing_fields(document)
        if missing:
            invalid[index] = missing
    if invalid:
        raise errors.ValidationError(
            "Missing required fields",
            details={"required": list(REQUIRED_FIELDS), "invalidProfiles": invalid},
        )

    logger.info("Storing LinkedIn profiles", extra={"count": len(documents)})
    inserted_ids = crud.insert_profiles(db, documents, created_at=utcnow())
    logger.info("LinkedIn profiles stored successfully", extra={"count": len(inserted_ids)})
    return {
        "message": f"{len(inserted_ids)} profiles stored successfully",
        "insertedIds": inserted_ids,
    }
