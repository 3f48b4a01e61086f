# campaign_manager/database/crud.py
"""Store primitives for campaigns, scraped profiles, generated messages and users.

Records cross this boundary as plain documents (dicts with the API's field
names and ISO-8601 timestamps), never as ORM objects, so callers can cache
them safely.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from campaign_manager.core import errors
from campaign_manager.database.models import Campaign, GeneratedMessage, LinkedInProfile, User, new_id

logger = logging.getLogger(__name__)

# Document field -> Campaign column
CAMPAIGN_FIELDS = {
    "name": "name",
    "description": "description",
    "status": "status",
    "leads": "leads",
    "accountIDs": "account_ids",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

PROFILE_FIELDS = ("name", "job_title", "company", "location", "summary", "profile_url")


@contextmanager
def storage_errors(db: Session, operation: str):
    """Roll back and translate driver failures into typed API errors."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        raise errors.ValidationError(
            "Record violates a store constraint",
            details={"operation": operation, "reason": str(exc.orig)},
        ) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"Store operation failed: {operation}", extra={"operation": operation})
        raise errors.StorageUnavailableError("Storage is currently unavailable", details={"operation": operation}) from exc


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        # SQLite hands back naive datetimes; everything is stored as UTC.
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def campaign_to_document(campaign: Campaign) -> Dict[str, Any]:
    return {
        "_id": campaign.id,
        "name": campaign.name,
        "description": campaign.description,
        "status": campaign.status,
        "leads": list(campaign.leads or []),
        "accountIDs": list(campaign.account_ids or []),
        "createdAt": isoformat(campaign.created_at),
        "updatedAt": isoformat(campaign.updated_at),
    }


def _campaign_columns(document: Dict[str, Any]) -> Dict[str, Any]:
    return {CAMPAIGN_FIELDS[field]: value for field, value in document.items() if field in CAMPAIGN_FIELDS}


def _campaign_query(db: Session, status: Optional[str], exclude_status: Optional[str]):
    query = db.query(Campaign)
    if status is not None:
        query = query.filter(Campaign.status == status)
    if exclude_status is not None:
        query = query.filter(Campaign.status != exclude_status)
    return query


def find_campaign(db: Session, campaign_id: str) -> Optional[Dict[str, Any]]:
    with storage_errors(db, "find_campaign"):
        campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    return campaign_to_document(campaign) if campaign is not None else None


def find_campaigns(
    db: Session,
    status: Optional[str] = None,
    exclude_status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Dict[str, Any]]:
    """Newest first, then paginated."""
    with storage_errors(db, "find_campaigns"):
        campaigns = (
            _campaign_query(db, status, exclude_status)
            .order_by(Campaign.created_at.desc(), Campaign.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
    return [campaign_to_document(campaign) for campaign in campaigns]


def count_campaigns(db: Session, status: Optional[str] = None, exclude_status: Optional[str] = None) -> int:
    with storage_errors(db, "count_campaigns"):
        return _campaign_query(db, status, exclude_status).count()


def insert_campaign(db: Session, document: Dict[str, Any]) -> str:
    """Inserts the document and returns the store-assigned id."""
    campaign_id = new_id()
    campaign = Campaign(id=campaign_id, **_campaign_columns(document))
    with storage_errors(db, "insert_campaign"):
        db.add(campaign)
        db.commit()
    return campaign_id


def update_campaign(db: Session, campaign_id: str, patch: Dict[str, Any]) -> int:
    """Applies ``patch`` to one campaign and returns the matched count (0 or 1)."""
    values = _campaign_columns(patch)
    with storage_errors(db, "update_campaign"):
        matched = (
            db.query(Campaign)
            .filter(Campaign.id == campaign_id)
            .update(values, synchronize_session=False)
        )
        db.commit()
    return matched


# --- Scraped LinkedIn profiles ---

def profile_to_document(profile: LinkedInProfile) -> Dict[str, Any]:
    document = {"_id": profile.id}
    for field in PROFILE_FIELDS:
        document[field] = getattr(profile, field)
    document["createdAt"] = isoformat(profile.created_at)
    document["updatedAt"] = isoformat(profile.updated_at)
    return document


def _profile_query(db: Session, search: str):
    query = db.query(LinkedInProfile)
    if search:
        query = query.filter(or_(
            LinkedInProfile.name.icontains(search, autoescape=True),
            LinkedInProfile.company.icontains(search, autoescape=True),
            LinkedInProfile.job_title.icontains(search, autoescape=True),
            LinkedInProfile.location.icontains(search, autoescape=True),
        ))
    return query


def find_profiles(db: Session, search: str = "", skip: int = 0, limit: int = 50) -> List[Dict[str, Any]]:
    with storage_errors(db, "find_profiles"):
        profiles = (
            _profile_query(db, search)
            .order_by(LinkedInProfile.created_at.desc(), LinkedInProfile.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
    return [profile_to_document(profile) for profile in profiles]


def count_profiles(db: Session, search: str = "") -> int:
    with storage_errors(db, "count_profiles"):
        return _profile_query(db, search).count()


def insert_profiles(db: Session, documents: Iterable[Dict[str, Any]], created_at: datetime) -> List[str]:
    """Inserts all profiles in one transaction; a duplicate URL rejects the batch."""
    profiles = [
        LinkedInProfile(id=new_id(), created_at=created_at, **{field: document.get(field) for field in PROFILE_FIELDS})
        for document in documents
    ]
    ids = [profile.id for profile in profiles]
    with storage_errors(db, "insert_profiles"):
        db.add_all(profiles)
        db.commit()
    return ids


# --- Generated messages ---

def save_generated_message(db: Session, profile_data: Dict[str, Any], message: str) -> str:
    record_id = new_id()
    record = GeneratedMessage(id=record_id, profile_data=profile_data, generated_message=message)
    with storage_errors(db, "save_generated_message"):
        db.add(record)
        db.commit()
    return record_id


# --- Users ---

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Retrieves a user by their email address."""
    with storage_errors(db, "get_user_by_email"):
        return db.query(User).filter(User.email == email).first()


def create_user(db: Session, name: str, email: str, hashed_password: str, role: str) -> User:
    """Creates a new user from an already hashed password."""
    db_user = User(name=name, email=email, hashed_password=hashed_password, role=role)
    with storage_errors(db, "create_user"):
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    return db_user
