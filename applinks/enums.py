"""StrEnum definitions for type-safe constants."""

from enum import StrEnum


class SchemeClass(StrEnum):
    """How a launch descriptor's target URI is classified for candidate building."""

    WEB = "web"
    APP = "app"
    NONE = "none"


class ConfirmationState(StrEnum):
    """Redirect confirmation controller states."""

    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    RESOLVED = "resolved"
