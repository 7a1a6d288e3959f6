"""Gate external-app redirects behind user confirmation in private sessions.

State machine, per controller:

- IDLE: a user-triggered navigation that resolves to an external app either
  opens the app right away (regular session) or shows a confirmation surface
  and moves to AWAITING_CONFIRMATION (private session). Programmatic
  navigations are ignored.
- AWAITING_CONFIRMATION: confirm opens the app (RESOLVED, then IDLE); dismiss,
  cancel or destroying the surface loads the web fallback into the session
  (IDLE). New redirects are dropped while a surface is showing.

The pending confirmation lives on the surface. After the controller is
recreated, `start()` finds the surface by tag and re-binds its confirm
callback without resolving or prompting again.
"""

from __future__ import annotations

import logging
import threading
import weakref
from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import partial

from applinks.enums import ConfirmationState
from applinks.errors import ParseError
from applinks.models.domain import BrowsingSession, RedirectDecision
from applinks.services.app_links_use_cases import AppLinksUseCases
from applinks.services.confirmation_surface import (
    ConfirmationSurface,
    PendingConfirmation,
    SurfaceHost,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TAG = "APP_LINKS_REDIRECT_DIALOG"


class SessionNavigator(ABC):
    """Loads URLs into browsing sessions."""

    @abstractmethod
    def load_url(self, session: BrowsingSession, url: str) -> None:
        ...


class RedirectConfirmationController:
    """Detects app-link redirects on navigation and asks before leaving the app."""

    def __init__(
        self,
        use_cases: AppLinksUseCases,
        navigator: SessionNavigator,
        surface_host: SurfaceHost,
        *,
        surface_factory: Callable[[], ConfirmationSurface] = ConfirmationSurface,
        tag: str = DEFAULT_CONFIRMATION_TAG,
    ) -> None:
        self._use_cases = use_cases
        self._navigator = navigator
        self._surface_host = surface_host
        self._surface_factory = surface_factory
        self._tag = tag
        # Re-entrant: a surface may answer synchronously from present().
        self._lock = threading.RLock()
        self._surface_ref: weakref.ReferenceType[ConfirmationSurface] | None = None
        self._resolving = False
        self._started = False

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def state(self) -> ConfirmationState:
        if self._resolving:
            return ConfirmationState.RESOLVED
        pending = self._pending()
        if pending is not None and not pending.consumed:
            return ConfirmationState.AWAITING_CONFIRMATION
        return ConfirmationState.IDLE

    def start(self) -> None:
        """Start handling navigations and re-attach to a surviving surface."""
        self._started = True

        surface = self._surface_host.find(self._tag)
        if surface is None:
            return

        self._surface_ref = weakref.ref(surface)
        pending = surface.pending
        if pending is None or pending.consumed:
            return

        surface.on_confirm = partial(self._confirm, pending)
        logger.info(
            "Re-attached to pending redirect confirmation for session %s",
            pending.session.id,
        )

    def stop(self) -> None:
        """Stop handling navigations. A showing surface is left in place."""
        self._started = False
        self._surface_ref = None

    def on_url_changed(
        self,
        session: BrowsingSession,
        url: str,
        *,
        user_triggered: bool,
    ) -> ConfirmationState:
        """Handle a navigation reported by the session layer.

        A URL that cannot be parsed is logged and left to load in-app.

        Returns:
            The controller state after handling the navigation.
        """
        if not self._started or not user_triggered:
            return self.state

        try:
            decision = self._use_cases.app_link_redirect.resolve(url)
        except ParseError as e:
            logger.warning("Not checking app links for unparseable URL: %s", e)
            return self.state

        return self.handle_decision(session, decision)

    def handle_decision(
        self,
        session: BrowsingSession,
        decision: RedirectDecision,
    ) -> ConfirmationState:
        """Open, prompt for, or ignore a resolved redirect."""
        if not decision.has_external_app():
            return self.state

        with self._lock:
            if not session.private:
                self._use_cases.open_app_link.invoke(decision)
                return self.state

            if self._surface_host.find(self._tag) is not None:
                logger.info(
                    "Redirect confirmation already showing; dropping redirect for session %s",
                    session.id,
                )
                return self.state

            pending = PendingConfirmation(decision=decision, session=session)
            surface = self._surface_factory()
            surface.bind(
                pending,
                on_confirm=partial(self._confirm, pending),
                on_dismiss=partial(self._dismiss, pending),
            )
            self._surface_ref = weakref.ref(surface)
            try:
                self._surface_host.show(surface, self._tag)
            except Exception as e:
                # The navigation proceeds in-app; a later redirect may prompt again.
                pending.consume()
                self._release_surface()
                logger.error(
                    "Failed to show redirect confirmation for session %s: %s", session.id, e
                )
                return self.state
            logger.info("Asking to confirm redirect for private session %s", session.id)
            return self.state

    def _confirm(self, pending: PendingConfirmation) -> None:
        if not pending.consume():
            return
        with self._lock:
            self._resolving = True
            try:
                self._use_cases.open_app_link.invoke(pending.decision)
            finally:
                self._resolving = False
                self._release_surface()

    def _dismiss(self, pending: PendingConfirmation) -> None:
        if not pending.consume():
            return
        with self._lock:
            try:
                if pending.decision.has_fallback():
                    self._navigator.load_url(pending.session, pending.decision.fallback_web_url)
            finally:
                self._release_surface()

    def _pending(self) -> PendingConfirmation | None:
        surface = self._surface_ref() if self._surface_ref is not None else None
        if surface is None:
            surface = self._surface_host.find(self._tag)
        return surface.pending if surface is not None else None

    def _release_surface(self) -> None:
        self._surface_host.remove(self._tag)
        self._surface_ref = None
