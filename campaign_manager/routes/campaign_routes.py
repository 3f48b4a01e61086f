# campaign_manager/routes/campaign_routes.py
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from campaign_manager.auth.auth_utils import get_current_user
from campaign_manager.core.settings import settings
from campaign_manager.database.models import User
from campaign_manager.routes.dependencies import ERROR_RESPONSES, get_campaign_service
from campaign_manager.schemas import CampaignCreate, CampaignOut, CampaignPage, CampaignUpdate, MessageResponse
from campaign_manager.services.campaign_service import CampaignService

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("", response_model=CampaignPage)
def list_campaigns(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(settings.default_campaign_limit, ge=1, le=settings.max_list_limit),
    skip: int = Query(0, ge=0),
    service: CampaignService = Depends(get_campaign_service),
):
    """Lists non-deleted campaigns, newest first. ``status`` narrows to one status (DELETED included)."""
    return service.list_campaigns(status=status_filter, limit=limit, skip=skip)


@router.post("", response_model=CampaignOut, status_code=status.HTTP_201_CREATED)
def create_campaign(
    campaign: CampaignCreate,
    service: CampaignService = Depends(get_campaign_service),
    current_user: User = Depends(get_current_user),
):
    return service.create_campaign(campaign.to_payload())


@router.get("/{campaign_id}", response_model=CampaignOut)
def get_campaign(campaign_id: str, service: CampaignService = Depends(get_campaign_service)):
    return service.get_campaign(campaign_id)


@router.put("/{campaign_id}", response_model=CampaignOut)
def update_campaign(
    campaign_id: str,
    update: CampaignUpdate,
    service: CampaignService = Depends(get_campaign_service),
    current_user: User = Depends(get_current_user),
):
    return service.update_campaign(campaign_id, update.to_payload())


@router.delete("/{campaign_id}", response_model=MessageResponse)
def delete_campaign(
    campaign_id: str,
    service: CampaignService = Depends(get_campaign_service),
    current_user: User = Depends(get_current_user),
):
    """Soft delete: the campaign is kept with status DELETED."""
    service.delete_campaign(campaign_id)
    return {"message": "Campaign deleted successfully"}
