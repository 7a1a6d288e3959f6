"""Domain and API models package."""

from .base import JsonModel
from .domain import (
    ACTION_VIEW,
    CATEGORY_BROWSABLE,
    ApplicationId,
    BrowsingSession,
    LaunchDescriptor,
    RedirectDecision,
    is_http_or_https,
)

__all__ = [
    "ACTION_VIEW",
    "CATEGORY_BROWSABLE",
    "ApplicationId",
    "BrowsingSession",
    "JsonModel",
    "LaunchDescriptor",
    "RedirectDecision",
    "is_http_or_https",
]
