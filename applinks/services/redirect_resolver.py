"""Resolve a navigated URL to an external application and a web fallback.

For a URL the user navigated to, we build an ordered list of launch
candidates:

1. the URL itself;
2. for non-web URLs, the candidates of its embedded ``browser_fallback_url``
   (recursively, up to a depth cap and never revisiting a URL);
3. for non-web URLs with a package hint, the marketplace listing
   ``market://details?id=<package>``.

The first candidate with at least one handler that is not a browser becomes
the external target. The first http(s) candidate that differs from the
original URL becomes the web fallback.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from applinks.enums import SchemeClass
from applinks.errors import RecursionLimitExceeded
from applinks.models.domain import (
    ACTION_VIEW,
    ApplicationId,
    LaunchDescriptor,
    RedirectDecision,
)
from applinks.services.browser_exclusion import DEFAULT_PROBE_TLD, BrowserExclusionProber
from applinks.services.resolution_service import ApplicationResolutionService
from applinks.services.uri_parser import market_descriptor, parse_uri

logger = logging.getLogger(__name__)

DEFAULT_MAX_FALLBACK_DEPTH = 10


class RedirectResolver:
    """Detects links that a non-browser application can open.

    Installed browsers (this app included) are excluded from the handler
    sets, since any of them could open an http(s) page. The exclusion set is
    probed once, on first use, unless one is passed in.
    """

    def __init__(
        self,
        resolution_service: ApplicationResolutionService,
        browser_package_names: Iterable[ApplicationId] | None = None,
        *,
        max_fallback_depth: int = DEFAULT_MAX_FALLBACK_DEPTH,
        probe_tld: str = DEFAULT_PROBE_TLD,
    ) -> None:
        self._resolution_service = resolution_service
        self._prober = BrowserExclusionProber(resolution_service, tld=probe_tld)
        self._max_fallback_depth = max_fallback_depth
        self._browser_package_names: frozenset[ApplicationId] | None = (
            frozenset(browser_package_names) if browser_package_names is not None else None
        )
        self._probe_lock = threading.Lock()

    @property
    def browser_package_names(self) -> frozenset[ApplicationId]:
        if self._browser_package_names is None:
            with self._probe_lock:
                if self._browser_package_names is None:
                    self._browser_package_names = self._prober.probe()
        return self._browser_package_names

    def resolve(self, url: str) -> RedirectDecision:
        """Resolve `url` into a RedirectDecision.

        Raises:
            ParseError: If `url` (or a fallback URL nested in it) is malformed.
        """
        candidates = self.build_candidates(url)

        external_target = next(
            (c for c in candidates if self._non_browser_handlers(c)),
            None,
        )

        web_urls = [c.uri for c in candidates if c.is_web]
        fallback_web_url = next(
            (u for u in web_urls if u != url),
            web_urls[0] if web_urls else None,
        )

        decision = RedirectDecision(
            external_target=external_target,
            fallback_web_url=fallback_web_url,
            is_redirect=fallback_web_url is not None and fallback_web_url != url,
        )
        logger.debug(
            "Resolved %s: target=%s fallback=%s redirect=%s",
            url,
            external_target.uri if external_target else None,
            fallback_web_url,
            decision.is_redirect,
        )
        return decision

    def build_candidates(self, url: str) -> list[LaunchDescriptor]:
        """Return the ordered launch candidates for `url`."""
        return self._build_candidates(url, depth=0, seen=frozenset())

    def _build_candidates(
        self, url: str, *, depth: int, seen: frozenset[str]
    ) -> list[LaunchDescriptor]:
        if depth > self._max_fallback_depth or url in seen:
            raise RecursionLimitExceeded(url, depth)

        descriptor = parse_uri(url)
        if descriptor.action == ACTION_VIEW and descriptor.is_web:
            descriptor = descriptor.as_browsable()

        scheme_class = descriptor.scheme_class
        if scheme_class is SchemeClass.NONE:
            return []
        if scheme_class is SchemeClass.WEB:
            return [descriptor]

        candidates = [descriptor]

        if descriptor.fallback_url is not None:
            try:
                candidates.extend(
                    self._build_candidates(
                        descriptor.fallback_url, depth=depth + 1, seen=seen | {url}
                    )
                )
            except RecursionLimitExceeded as e:
                logger.warning("Ignoring nested fallback URLs: %s", e)

        if descriptor.package:
            candidates.append(market_descriptor(descriptor.package))

        return candidates

    def _non_browser_handlers(self, descriptor: LaunchDescriptor) -> set[ApplicationId]:
        try:
            handlers = self._resolution_service.resolve_handlers(descriptor)
        except Exception as e:
            # One failing candidate must not abort the rest of the chain.
            logger.warning("Handler lookup failed for %s: %s", descriptor.uri, e)
            return set()
        return set(handlers or ()) - self.browser_package_names
