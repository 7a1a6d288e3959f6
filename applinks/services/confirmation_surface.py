"""Confirmation surfaces: the UI that asks the user before leaving the app.

A surface carries the pending confirmation itself, so the pending state
outlives the controller that created it. A `SurfaceHost` keeps surfaces by
tag (the way a UI toolkit keeps its dialogs) and is the only owner; the
controller finds its surface again by tag after being recreated.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from applinks.models.domain import BrowsingSession, RedirectDecision

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


@dataclass
class PendingConfirmation:
    """A redirect waiting for the user's answer."""

    decision: RedirectDecision
    session: BrowsingSession
    consumed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def consume(self) -> bool:
        """Mark the confirmation answered.

        Returns:
            True for the first caller only.
        """
        with self._lock:
            if self.consumed:
                return False
            self.consumed = True
            return True


class ConfirmationSurface:
    """Base confirmation surface.

    Subclasses render the prompt in `present()` and call `confirm()` or
    `dismiss()` when the user answers. Each callback fires at most once.
    """

    def __init__(self) -> None:
        self.pending: PendingConfirmation | None = None
        self.on_confirm: Callback | None = None
        self.on_dismiss: Callback | None = None

    def bind(
        self,
        pending: PendingConfirmation,
        *,
        on_confirm: Callback,
        on_dismiss: Callback,
    ) -> None:
        self.pending = pending
        self.on_confirm = on_confirm
        self.on_dismiss = on_dismiss

    def present(self) -> None:
        """Show the prompt. The base implementation renders nothing."""

    def confirm(self) -> None:
        callback, self.on_confirm, self.on_dismiss = self.on_confirm, None, None
        if callback is not None:
            callback()

    def dismiss(self) -> None:
        callback, self.on_confirm, self.on_dismiss = self.on_dismiss, None, None
        if callback is not None:
            callback()

    def cancel(self) -> None:
        self.dismiss()

    def destroy(self) -> None:
        """Tear the surface down; an unanswered prompt counts as dismissed."""
        if self.pending is not None and not self.pending.consumed:
            self.dismiss()


class SurfaceHost:
    """Keeps the currently showing surfaces, keyed by tag."""

    def __init__(self) -> None:
        self._surfaces: dict[str, ConfirmationSurface] = {}
        self._lock = threading.Lock()

    def find(self, tag: str) -> ConfirmationSurface | None:
        with self._lock:
            return self._surfaces.get(tag)

    def show(self, surface: ConfirmationSurface, tag: str) -> None:
        with self._lock:
            self._surfaces[tag] = surface
        surface.present()

    def remove(self, tag: str) -> ConfirmationSurface | None:
        with self._lock:
            return self._surfaces.pop(tag, None)
