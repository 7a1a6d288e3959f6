"""Parse URL strings into launch descriptors.

Two input shapes are understood:

- Plain URIs (``https://...``, ``myapp://open?...``). A non-web URI may carry
  its web fallback as the ``browser_fallback_url`` query parameter.
- Intent URIs, where the launch details live in a ``#Intent;...;end``
  fragment::

      intent://scan/#Intent;scheme=zxing;package=com.example.scan;S.browser_fallback_url=https%3A%2F%2Fexample.com;end

  The fragment is a ``;``-separated list of ``key=value`` fields. Extras are
  written as ``<type>.<name>=<value>`` where ``<type>`` is a one-letter type
  code (``S`` for strings). Values are percent-decoded.
"""

from __future__ import annotations

from urllib.parse import parse_qs, unquote, urlsplit

from applinks.errors import ParseError
from applinks.models.domain import ACTION_VIEW, LaunchDescriptor, is_http_or_https

EXTRA_BROWSER_FALLBACK_URL = "browser_fallback_url"
MARKET_URI_PACKAGE_PREFIX = "market://details?id="

INTENT_SCHEME_PREFIX = "intent:"
INTENT_FRAGMENT_PREFIX = "#Intent;"
INTENT_FRAGMENT_END = "end"

# Fields that carry launch details we do not model; accepted and ignored.
_IGNORED_FIELDS = frozenset(
    {"category", "type", "identifier", "launchFlags", "component", "sourceBounds"}
)
_INT_EXTRA_TYPES = frozenset({"b", "i", "l", "s"})
_FLOAT_EXTRA_TYPES = frozenset({"d", "f"})
_OTHER_EXTRA_TYPES = frozenset({"S", "B", "c"})


def _check_syntax(url: str, uri: str) -> None:
    try:
        parts = urlsplit(uri)
        # Port parsing is lazy in urlsplit; force it so bad ports fail here.
        parts.port
    except ValueError as e:
        raise ParseError(url, str(e)) from e


def _query_fallback(uri: str) -> str | None:
    query = urlsplit(uri).query
    if not query:
        return None
    values = parse_qs(query).get(EXTRA_BROWSER_FALLBACK_URL)
    return values[0] if values else None


def _parse_extra(url: str, key: str, value: str, extras: dict[str, str]) -> None:
    type_code, _, name = key.partition(".")
    if not name:
        raise ParseError(url, f"unknown intent field {key!r}")

    if type_code in _INT_EXTRA_TYPES:
        try:
            int(value)
        except ValueError as e:
            raise ParseError(url, f"extra {name!r} is not an integer") from e
    elif type_code in _FLOAT_EXTRA_TYPES:
        try:
            float(value)
        except ValueError as e:
            raise ParseError(url, f"extra {name!r} is not a number") from e
    elif type_code not in _OTHER_EXTRA_TYPES:
        raise ParseError(url, f"unknown extra type {type_code!r}")

    if type_code == "S":
        extras[name] = value


def _parse_intent_uri(url: str, marker: int) -> LaunchDescriptor:
    data = url[:marker]
    body = url[marker + len(INTENT_FRAGMENT_PREFIX):]

    action: str | None = ACTION_VIEW
    package: str | None = None
    scheme: str | None = None
    extras: dict[str, str] = {}

    terminated = False
    for token in body.split(";"):
        if token == INTENT_FRAGMENT_END:
            terminated = True
            break
        if token == "SEL" or token == "":
            continue
        key, sep, raw_value = token.partition("=")
        if not sep:
            raise ParseError(url, f"intent field {token!r} has no value")
        value = unquote(raw_value)

        if key == "action":
            action = value
        elif key == "package":
            package = value
        elif key == "scheme":
            scheme = value
        elif key in _IGNORED_FIELDS:
            continue
        else:
            _parse_extra(url, key, value, extras)

    if not terminated:
        raise ParseError(url, "intent fragment is not terminated by 'end'")

    if data.startswith(INTENT_SCHEME_PREFIX):
        data = data[len(INTENT_SCHEME_PREFIX):]
        if scheme and data:
            data = f"{scheme}:{data}"

    uri = data or None
    if uri is not None:
        _check_syntax(url, uri)

    return LaunchDescriptor(
        uri=uri,
        action=action,
        package=package or None,
        fallback_url=extras.get(EXTRA_BROWSER_FALLBACK_URL),
    )


def parse_uri(url: str) -> LaunchDescriptor:
    """Parse `url` into a LaunchDescriptor.

    Input without a scheme (including the empty string) yields a descriptor
    with no URI data. Syntactically broken input raises ParseError.

    Args:
        url: Raw URL or intent URI.

    Returns:
        The parsed descriptor. It is never marked browsable here.

    Raises:
        ParseError: If the URI or its intent fragment is malformed.
    """
    if url is None:
        raise ParseError(str(url), "URL is required")

    marker = url.rfind("#")
    if marker != -1 and url.startswith(INTENT_FRAGMENT_PREFIX, marker):
        return _parse_intent_uri(url, marker)

    if url.startswith(INTENT_SCHEME_PREFIX):
        raise ParseError(url, "intent URI has no '#Intent;' fragment")

    _check_syntax(url, url)
    if not urlsplit(url).scheme:
        return LaunchDescriptor(uri=None)

    fallback = None if is_http_or_https(url) else _query_fallback(url)
    return LaunchDescriptor(uri=url, fallback_url=fallback)


def market_descriptor(package: str) -> LaunchDescriptor:
    """Build the marketplace listing descriptor for an application package."""
    return parse_uri(MARKET_URI_PACKAGE_PREFIX + package)
