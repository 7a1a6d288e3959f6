"""Exception types raised while resolving app-link redirects."""


class AppLinksError(Exception):
    """Base class for app-link resolution errors."""


class ParseError(AppLinksError, ValueError):
    """A URL could not be parsed into a launch descriptor."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot parse {url!r}: {reason}")


class ResolutionServiceError(AppLinksError):
    """The application resolution service failed to answer a query."""


class RecursionLimitExceeded(AppLinksError):
    """Nested fallback URLs went deeper than the configured cap, or looped."""

    def __init__(self, url: str, depth: int) -> None:
        self.url = url
        self.depth = depth
        super().__init__(f"Fallback chain stopped at depth {depth}: {url!r}")
