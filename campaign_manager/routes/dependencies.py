from fastapi import Depends, Request
from sqlalchemy.orm import Session

from campaign_manager.core.cache import TTLCache
from campaign_manager.database.db import get_db
from campaign_manager.schemas import ErrorResponse
from campaign_manager.services.campaign_service import CampaignService

# Documented failure shapes shared by every API router.
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    401: {"model": ErrorResponse, "description": "Authentication required"},
    404: {"model": ErrorResponse, "description": "Not found"},
    503: {"model": ErrorResponse, "description": "Storage unavailable, retry later"},
}


def get_cache(request: Request) -> TTLCache:
    """The process-wide cache built at startup and kept on ``app.state``."""
    return request.app.state.cache


def get_campaign_service(db: Session = Depends(get_db), cache: TTLCache = Depends(get_cache)) -> CampaignService:
    return CampaignService(db, cache)
