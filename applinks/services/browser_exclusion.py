"""Discover which installed applications are general-purpose web browsers.

Browsers can open any https URL, so they must never count as an "external
app" for an http(s) link. We find them by asking the resolution service who
handles a random https URL that no application can have registered for
specifically; whatever answers is a browser, this app included.
"""

from __future__ import annotations

import logging
import uuid

from applinks.models.domain import ApplicationId, LaunchDescriptor
from applinks.services.resolution_service import ApplicationResolutionService

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TLD = "net"


class BrowserExclusionProber:
    """Computes the browser exclusion set with a single probe query."""

    def __init__(
        self,
        resolution_service: ApplicationResolutionService,
        *,
        tld: str = DEFAULT_PROBE_TLD,
    ) -> None:
        self._resolution_service = resolution_service
        self._tld = tld

    def probe_url(self) -> str:
        return f"https://{uuid.uuid4()}.{self._tld}"

    def probe(self) -> frozenset[ApplicationId]:
        """Return the ids of applications that handle an arbitrary https URL.

        Never raises: a failing query is logged and yields an empty set.
        """
        descriptor = LaunchDescriptor(uri=self.probe_url()).as_browsable()
        try:
            handlers = self._resolution_service.resolve_handlers(descriptor)
        except Exception as e:
            logger.warning("Browser probe failed, excluding no applications: %s", e)
            return frozenset()

        browsers = frozenset(handlers or ())
        logger.debug("Browser exclusion set: %s", sorted(browsers))
        return browsers
