"""HTTP routers package."""

from .redirect_router import (
    BrowserListResponse,
    LaunchDescriptorResponse,
    RedirectDecisionResponse,
    ResolveRequest,
    create_redirect_router,
)

__all__ = [
    "create_redirect_router",
    "BrowserListResponse",
    "LaunchDescriptorResponse",
    "RedirectDecisionResponse",
    "ResolveRequest",
]
