"""Hand a resolved external target to the platform.

The platform shows its own application chooser; we only supply the
descriptor and the chooser title.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from applinks.models.domain import LaunchDescriptor, RedirectDecision

logger = logging.getLogger(__name__)

DEFAULT_CHOOSER_TITLE = "Open in…"


class AppLauncher(ABC):
    """Abstract interface for starting an external application."""

    @abstractmethod
    def launch(self, descriptor: LaunchDescriptor, *, chooser_title: str) -> None:
        """Open `descriptor` in a new task, via a chooser titled `chooser_title`."""
        ...


class OpenAppLinkRedirect:
    """Open the external application chosen by the redirect resolver."""

    def __init__(self, launcher: AppLauncher, chooser_title: str = DEFAULT_CHOOSER_TITLE) -> None:
        self._launcher = launcher
        self._chooser_title = chooser_title

    def invoke(self, decision: RedirectDecision) -> bool:
        """Launch `decision.external_target`.

        Returns:
            True if something was launched, False if the decision had no target.
        """
        target = decision.external_target
        if target is None:
            return False

        logger.info("Opening external app for %s", target.uri)
        self._launcher.launch(target, chooser_title=self._chooser_title)
        return True
