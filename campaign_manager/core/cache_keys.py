"""Cache key construction.

Single resources live under ``<resource>:<id>``; list queries under
``<resource>s:<status|all>:<limit>:<skip>``, so every filter and pagination
window gets its own entry.
"""
from typing import Optional

ALL = "all"
CAMPAIGN = "campaign"


def resource_key(resource: str, resource_id: str) -> str:
    return f"{resource}:{resource_id}"


def list_prefix(resource: str, status: Optional[str] = None) -> str:
    return f"{resource}s:{status or ALL}:"


def list_key(resource: str, status: Optional[str], limit: int, skip: int) -> str:
    return f"{list_prefix(resource, status)}{limit}:{skip}"


def campaign_key(campaign_id: str) -> str:
    return resource_key(CAMPAIGN, campaign_id)


def campaign_list_key(status: Optional[str], limit: int, skip: int) -> str:
    return list_key(CAMPAIGN, status, limit, skip)


def campaign_list_prefix(status: Optional[str] = None) -> str:
    return list_prefix(CAMPAIGN, status)
