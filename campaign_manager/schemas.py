# campaign_manager/schemas.py
"""Request bodies and response envelopes.

Campaign bodies stay loose on purpose (``status`` is a plain string, list
fields accept anything): normalisation and validation happen in
``CampaignService`` so HTTP and direct callers get identical errors.
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Any, List, Optional


class CampaignCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    leads: Any = None
    account_ids: Any = Field(default=None, alias="accountIDs")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class CampaignUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    leads: Any = None
    account_ids: Any = Field(default=None, alias="accountIDs")

    def to_payload(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CampaignOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    description: str
    status: str
    leads: List[str]
    account_ids: List[str] = Field(alias="accountIDs")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class CampaignPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[CampaignOut]
    total: int
    limit: int
    skip: int
    has_more: bool = Field(alias="hasMore")


class ProfileIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    summary: Optional[str] = None
    profile_url: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: str = "user"


class ErrorResponse(BaseModel):
    error: str
    type: str
    details: Any | None = None
