"""App-link resolution services package."""

from .app_launcher import AppLauncher, OpenAppLinkRedirect
from .app_links_use_cases import AppLinksUseCases
from .browser_exclusion import BrowserExclusionProber
from .confirmation_controller import RedirectConfirmationController, SessionNavigator
from .confirmation_surface import ConfirmationSurface, PendingConfirmation, SurfaceHost
from .redirect_resolver import RedirectResolver
from .resolution_service import (
    ApplicationEntry,
    ApplicationResolutionService,
    StaticHandlerRegistry,
)
from .uri_parser import market_descriptor, parse_uri

__all__ = [
    "AppLauncher",
    "AppLinksUseCases",
    "ApplicationEntry",
    "ApplicationResolutionService",
    "BrowserExclusionProber",
    "ConfirmationSurface",
    "OpenAppLinkRedirect",
    "PendingConfirmation",
    "RedirectConfirmationController",
    "RedirectResolver",
    "SessionNavigator",
    "StaticHandlerRegistry",
    "SurfaceHost",
    "market_descriptor",
    "parse_uri",
]
