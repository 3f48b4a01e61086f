# campaign_manager/services/campaign_service.py
"""Campaign lifecycle and the read-through cache in front of the campaign store.

Reads consult the shared TTL cache first and populate it only from
successful store queries. Writes go to the store, then refresh or drop the
single-campaign entry and drop the unfiltered listing entries
(``campaigns:all:*``). Filtered listings such as ``campaigns:ACTIVE:100:0``
are left alone and may serve stale results until their TTL runs out.
"""
import copy
import logging
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from campaign_manager.core import cache_keys, errors
from campaign_manager.core.cache import TTLCache
from campaign_manager.core.metrics import CACHE_LOOKUPS
from campaign_manager.core.settings import settings
from campaign_manager.database import crud
from campaign_manager.database.models import CampaignStatus, utcnow

logger = logging.getLogger(__name__)

CAMPAIGN_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")
VALID_STATUSES = [status.value for status in CampaignStatus]
IMMUTABLE_FIELDS = ("_id", "id", "createdAt")
UPDATABLE_FIELDS = ("name", "description", "status", "leads", "accountIDs")


def is_valid_campaign_id(campaign_id: Any) -> bool:
    return isinstance(campaign_id, str) and bool(CAMPAIGN_ID_PATTERN.match(campaign_id))


def normalize_status(value: Any) -> str:
    """Uppercase ``value`` and check it against the campaign status enum."""
    status = value.upper() if isinstance(value, str) else value
    if status not in VALID_STATUSES:
        raise errors.ValidationError(
            "Invalid status value",
            details={"providedStatus": value, "validValues": VALID_STATUSES},
        )
    return status


def _string_list(value: Any, field: str, strict: bool = False) -> List[str]:
    """Non-list values become [] on create; with ``strict`` they are rejected."""
    if not isinstance(value, (list, tuple)):
        if strict:
            raise errors.ValidationError(f"{field} must be a list of strings", details={"field": field})
        return []
    if not all(isinstance(item, str) for item in value):
        raise errors.ValidationError(f"{field} must be a list of strings", details={"field": field})
    return list(value)


def _required_text(payload: Dict[str, Any], field: str) -> Optional[str]:
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        return None
    return value


class CampaignService:
    """Owns every write to the campaigns collection and the cache entries derived from it."""

    def __init__(
        self,
        db: Session,
        cache: TTLCache,
        ttl: Optional[float] = None,
        now: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.cache = cache
        self.ttl = settings.campaign_cache_ttl_seconds if ttl is None else ttl
        self.now = now

    # --- reads ---

    def _cached(self, key: str, kind: str) -> Optional[Any]:
        value = copy.deepcopy(self.cache.get(key))
        result = "miss" if value is None else "hit"
        CACHE_LOOKUPS.labels(kind=kind, result=result).inc()
        logger.debug(f"Cache {result} for {key}", extra={"cache_key": key})
        return value

    def list_campaigns(self, status: Optional[str] = None, limit: Optional[int] = None, skip: int = 0) -> Dict[str, Any]:
        """Returns one page of campaigns, newest first, excluding DELETED unless asked for."""
        if limit is None:
            limit = settings.default_campaign_limit
        status = normalize_status(status) if status else None
        if limit < 1 or skip < 0:
            raise errors.ValidationError(
                "Invalid pagination parameters",
                details={"limit": limit, "skip": skip},
            )

        key = cache_keys.campaign_list_key(status, limit, skip)
        cached = self._cached(key, "list")
        if cached is not None:
            logger.info("Returning cached campaigns data", extra={"cache_key": key})
            return cached

        query = {"status": status} if status else {"exclude_status": CampaignStatus.DELETED.value}
        logger.info("Fetching campaigns", extra={"query": query, "limit": limit, "skip": skip})
        items = crud.find_campaigns(self.db, skip=skip, limit=limit, **query)
        total = crud.count_campaigns(self.db, **query)
        result = {
            "items": items,
            "total": total,
            "limit": limit,
            "skip": skip,
            "hasMore": total > skip + limit,
        }
        self._remember(key, result)
        return result

    def get_campaign(self, campaign_id: str) -> Dict[str, Any]:
        key = cache_keys.campaign_key(campaign_id)
        cached = self._cached(key, "single")
        if cached is not None:
            logger.info("Returning cached campaign data", extra={"campaign_id": campaign_id})
            return cached

        self._check_id(campaign_id)
        logger.info("Fetching campaign by ID", extra={"campaign_id": campaign_id})
        campaign = crud.find_campaign(self.db, campaign_id)
        if campaign is None:
            raise errors.NotFoundError("Campaign not found", details={"id": campaign_id})
        self._remember(key, campaign)
        return campaign

    # --- writes ---

    def create_campaign(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        name = _required_text(payload, "name")
        description = _required_text(payload, "description")
        if name is None or description is None:
            raise errors.ValidationError("Missing required fields", details="Name and description are required")

        status = payload.get("status")
        status = normalize_status(status) if status else CampaignStatus.ACTIVE.value
        now = self.now()
        document = {
            "name": name,
            "description": description,
            "status": status,
            "leads": _string_list(payload.get("leads"), "leads"),
            "accountIDs": _string_list(payload.get("accountIDs"), "accountIDs"),
            "createdAt": now,
            "updatedAt": now,
        }
        logger.info("Creating new campaign", extra={"campaign_name": name})
        campaign_id = crud.insert_campaign(self.db, document)
        self._invalidate_listings()
        logger.info("Campaign created successfully", extra={"campaign_id": campaign_id})

        return {
            "_id": campaign_id,
            **document,
            "createdAt": crud.isoformat(now),
            "updatedAt": crud.isoformat(now),
        }

    def update_campaign(self, campaign_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._check_id(campaign_id)
        patch = self._validate_patch(payload)
        patch["updatedAt"] = self.now()
        logger.info("Updating campaign", extra={"campaign_id": campaign_id, "update_fields": sorted(patch)})

        if crud.update_campaign(self.db, campaign_id, patch) == 0:
            raise errors.NotFoundError("Campaign not found", details={"id": campaign_id})
        updated = crud.find_campaign(self.db, campaign_id)
        if updated is None:
            raise errors.NotFoundError("Campaign not found", details={"id": campaign_id})

        self._remember(cache_keys.campaign_key(campaign_id), updated)
        self._invalidate_listings()
        logger.info("Campaign updated successfully", extra={"campaign_id": campaign_id})
        return updated

    def delete_campaign(self, campaign_id: str) -> None:
        """Soft delete: the record stays in the store with status DELETED."""
        self._check_id(campaign_id)
        logger.info("Soft deleting campaign", extra={"campaign_id": campaign_id})
        patch = {"status": CampaignStatus.DELETED.value, "updatedAt": self.now()}
        if crud.update_campaign(self.db, campaign_id, patch) == 0:
            raise errors.NotFoundError("Campaign not found", details={"id": campaign_id})

        self.cache.delete(cache_keys.campaign_key(campaign_id))
        self._invalidate_listings()
        logger.info("Campaign deleted successfully", extra={"campaign_id": campaign_id})

    # --- helpers ---

    def _check_id(self, campaign_id: str) -> None:
        if not is_valid_campaign_id(campaign_id):
            raise errors.ValidationError("Invalid campaign ID", details={"id": campaign_id})

    def _validate_patch(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        patch = {field: value for field, value in payload.items() if field not in IMMUTABLE_FIELDS}
        unknown = sorted(set(patch) - set(UPDATABLE_FIELDS))
        if unknown:
            raise errors.ValidationError("Unknown campaign fields", details={"fields": unknown})
        for field in ("name", "description"):
            if field in patch and _required_text(patch, field) is None:
                raise errors.ValidationError(f"{field} must be a non-empty string", details={"field": field})
        if patch.get("status"):
            patch["status"] = normalize_status(patch["status"])
        else:
            patch.pop("status", None)
        for field in ("leads", "accountIDs"):
            if field in patch:
                patch[field] = _string_list(patch[field], field, strict=True)
        return patch

    def _remember(self, key: str, value: Any) -> None:
        """Cache a private copy so callers can never reach the stored object."""
        self.cache.set(key, copy.deepcopy(value), self.ttl)

    def _invalidate_listings(self) -> None:
        removed = self.cache.delete_prefix(cache_keys.campaign_list_prefix())
        logger.debug("Invalidated unfiltered campaign listings", extra={"removed": removed})
