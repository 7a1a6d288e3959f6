"""Core value types shared by the resolver and the confirmation controller.

Plain frozen dataclasses. HTTP payloads wrap them in `JsonModel` subclasses
at the router layer.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from applinks.enums import SchemeClass

ACTION_VIEW = "android.intent.action.VIEW"
CATEGORY_BROWSABLE = "android.intent.category.BROWSABLE"

WEB_SCHEMES = frozenset({"http", "https"})

ApplicationId = str


def uri_scheme(uri: str | None) -> str | None:
    """Return the lower-cased scheme of `uri`, or None when it has none."""
    if not uri:
        return None
    try:
        scheme = urlsplit(uri).scheme
    except ValueError:
        return None
    return scheme.lower() or None


def is_http_or_https(uri: str | None) -> bool:
    return uri_scheme(uri) in WEB_SCHEMES


@dataclass(frozen=True, slots=True)
class LaunchDescriptor:
    """A request to open a URI in whichever installed application handles it.

    Attributes:
        uri: Target URI, or None when the input carried no URI data.
        action: Launch action; generic view unless an intent URI says otherwise.
        package: Explicit application-package hint.
        fallback_url: Embedded `browser_fallback_url` value.
        browsable: Whether the browsable category is attached. It changes which
            handlers the resolution service reports but not descriptor identity,
            so it is excluded from equality and hashing.
    """

    uri: str | None
    action: str | None = ACTION_VIEW
    package: str | None = None
    fallback_url: str | None = None
    browsable: bool = field(default=False, compare=False)

    @property
    def scheme(self) -> str | None:
        return uri_scheme(self.uri)

    @property
    def is_web(self) -> bool:
        return self.scheme in WEB_SCHEMES

    @property
    def scheme_class(self) -> SchemeClass:
        if self.uri is None:
            return SchemeClass.NONE
        if self.is_web:
            return SchemeClass.WEB
        return SchemeClass.APP

    @property
    def categories(self) -> frozenset[str]:
        return frozenset({CATEGORY_BROWSABLE}) if self.browsable else frozenset()

    def as_browsable(self) -> LaunchDescriptor:
        """Return a copy carrying the browsable category."""
        return dataclasses.replace(self, browsable=True)


@dataclass(frozen=True, slots=True)
class RedirectDecision:
    """Outcome of resolving one URL.

    `external_target` and `fallback_web_url` are independent: either, both or
    neither may be present. Absence is the only "nothing found" signal.
    """

    external_target: LaunchDescriptor | None = None
    fallback_web_url: str | None = None
    is_redirect: bool = False

    def has_external_app(self) -> bool:
        return self.external_target is not None

    def has_fallback(self) -> bool:
        return self.fallback_web_url is not None


@dataclass
class BrowsingSession:
    """A browsing session as reported by the navigation layer."""

    id: str
    url: str = ""
    private: bool = False
