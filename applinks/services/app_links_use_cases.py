"""Use cases for detecting and opening links that other applications claim.

Care is taken to:
- resolve ``intent://`` links, including ``S.browser_fallback_url``;
- fall back to the installed marketplace for a missing application;
- open http(s) links in an external application, never in another browser.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import cached_property

from applinks.models.domain import ApplicationId
from applinks.services.app_launcher import DEFAULT_CHOOSER_TITLE, AppLauncher, OpenAppLinkRedirect
from applinks.services.browser_exclusion import DEFAULT_PROBE_TLD
from applinks.services.redirect_resolver import DEFAULT_MAX_FALLBACK_DEPTH, RedirectResolver
from applinks.services.resolution_service import ApplicationResolutionService


class AppLinksUseCases:
    """Bundles redirect resolution and launching behind one object.

    Both use cases are created on first access.
    """

    def __init__(
        self,
        resolution_service: ApplicationResolutionService,
        launcher: AppLauncher,
        browser_package_names: Iterable[ApplicationId] | None = None,
        *,
        max_fallback_depth: int = DEFAULT_MAX_FALLBACK_DEPTH,
        probe_tld: str = DEFAULT_PROBE_TLD,
        chooser_title: str = DEFAULT_CHOOSER_TITLE,
    ) -> None:
        self._resolution_service = resolution_service
        self._launcher = launcher
        self._browser_package_names = browser_package_names
        self._max_fallback_depth = max_fallback_depth
        self._probe_tld = probe_tld
        self._chooser_title = chooser_title

    @cached_property
    def app_link_redirect(self) -> RedirectResolver:
        return RedirectResolver(
            self._resolution_service,
            self._browser_package_names,
            max_fallback_depth=self._max_fallback_depth,
            probe_tld=self._probe_tld,
        )

    @cached_property
    def open_app_link(self) -> OpenAppLinkRedirect:
        return OpenAppLinkRedirect(self._launcher, self._chooser_title)
