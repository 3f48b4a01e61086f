# campaign_manager/database/models.py
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, Index, JSON, String, Text

from campaign_manager.database.db import Base


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CampaignStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


_STATUS_VALUES = ", ".join(f"'{status.value}'" for status in CampaignStatus)


class Campaign(Base):
    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_campaigns_status"),
        Index("ix_campaigns_created_at", "created_at"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default=CampaignStatus.ACTIVE.value, index=True)
    leads = Column(JSON, nullable=False, default=list)  # LinkedIn profile URLs
    account_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class LinkedInProfile(Base):
    __tablename__ = "linkedin_profiles"
    __table_args__ = (Index("ix_linkedin_profiles_created_at", "created_at"),)

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    job_title = Column(String, nullable=False)
    company = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False)
    summary = Column(Text, nullable=False)
    # NULLs never collide, so only profiles that carry a URL are unique.
    profile_url = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class GeneratedMessage(Base):
    __tablename__ = "generated_messages"

    id = Column(String(32), primary_key=True, default=new_id)
    profile_data = Column(JSON, nullable=False)
    generated_message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(16), nullable=False, default=UserRole.USER.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
