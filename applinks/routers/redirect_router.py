"""App-link resolution API endpoints.

Routers handle HTTP concerns only - no business logic.
Resolution is delegated to RedirectResolver.
"""

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException

from applinks.errors import ParseError
from applinks.models.base import JsonModel
from applinks.models.domain import LaunchDescriptor, RedirectDecision

if TYPE_CHECKING:
    from applinks.services.redirect_resolver import RedirectResolver


class ResolveRequest(JsonModel):
    """Request model for URL resolution."""

    url: str


class LaunchDescriptorResponse(JsonModel):
    """Serialized launch descriptor."""

    uri: str | None = None
    action: str | None = None
    package: str | None = None
    fallback_url: str | None = None
    browsable: bool = False

    @classmethod
    def from_descriptor(cls, descriptor: LaunchDescriptor) -> "LaunchDescriptorResponse":
        return cls(
            uri=descriptor.uri,
            action=descriptor.action,
            package=descriptor.package,
            fallback_url=descriptor.fallback_url,
            browsable=descriptor.browsable,
        )


class RedirectDecisionResponse(JsonModel):
    """Response model for URL resolution."""

    external_target: LaunchDescriptorResponse | None = None
    fallback_web_url: str | None = None
    is_redirect: bool = False

    @classmethod
    def from_decision(cls, decision: RedirectDecision) -> "RedirectDecisionResponse":
        target = decision.external_target
        return cls(
            external_target=(
                LaunchDescriptorResponse.from_descriptor(target) if target is not None else None
            ),
            fallback_web_url=decision.fallback_web_url,
            is_redirect=decision.is_redirect,
        )


class BrowserListResponse(JsonModel):
    """Response model for the browser exclusion set."""

    browsers: list[str]


def create_redirect_router(resolver: "RedirectResolver") -> APIRouter:
    """Create the app-link router with an injected resolver.

    Handlers are plain `def` so FastAPI runs them in its threadpool; the
    resolver queries the resolution service synchronously.

    Args:
        resolver: RedirectResolver used for every request.

    Returns:
        APIRouter with app-link endpoints configured
    """
    router = APIRouter(prefix="/api/app-links", tags=["app-links"])

    @router.post("/resolve", response_model=RedirectDecisionResponse)
    def resolve(request: ResolveRequest) -> RedirectDecisionResponse:
        """Resolve a URL to an external app target and web fallback.

        Raises:
            HTTPException: 422 if the URL cannot be parsed.
        """
        try:
            decision = resolver.resolve(request.url)
        except ParseError as e:
            raise HTTPException(
                status_code=422,
                detail=e.reason,
            ) from e
        return RedirectDecisionResponse.from_decision(decision)

    @router.get("/browsers", response_model=BrowserListResponse)
    def list_browsers() -> BrowserListResponse:
        """List applications excluded from redirects as web browsers."""
        return BrowserListResponse(browsers=sorted(resolver.browser_package_names))

    return router
