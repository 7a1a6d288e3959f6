"""Logging helpers and filters.

This module centralizes small logging tweaks so they can be applied from
multiple entrypoints (e.g. `python -m applinks.main` and
`uvicorn applinks.asgi:app`).
"""

from __future__ import annotations

import logging
import re
from typing import Any

_REPLACEMENT = "[REDACTED]"

# scheme://... and intent:... URIs up to the next whitespace or quote.
_URI_RE = re.compile(r"\b(?:[A-Za-z][A-Za-z0-9+.\-]*://|intent:)[^\s'\"<>]+")


def _redact_uri(match: re.Match[str]) -> str:
    uri = match.group(0)
    # Fallback URLs and deep links often carry tokens in the query or fragment.
    for sep in ("?", "#"):
        head, found, _ = uri.partition(sep)
        if found:
            uri = f"{head}{sep}{_REPLACEMENT}"
    return uri


def redact_urls(text: str) -> str:
    """Replace the query and fragment of every URI in `text`."""
    return _URI_RE.sub(_redact_uri, text)


class RedactUrlFilter(logging.Filter):
    """Strip query strings and fragments from URLs in log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (filter)
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Leave malformed records for the formatter to report.
            return True

        redacted = redact_urls(message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


class SuppressHealthCheckAccessLog(logging.Filter):
    """Drop Uvicorn access log records for the health check endpoint."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (filter)
        # Uvicorn's access logger uses %-formatting with args similar to:
        #   (client_addr, method, full_path, http_version, status_code)
        args: Any = record.args
        if isinstance(args, tuple) and len(args) >= 3:
            path = str(args[2])
            return not (path == "/health" or path.startswith("/health?"))
        return True


def _install_once(logger: logging.Logger, filter_type: type[logging.Filter]) -> None:
    for existing in logger.filters:
        if isinstance(existing, filter_type):
            return
    logger.addFilter(filter_type())


def install_url_redaction(logger_names: list[str] | None = None) -> None:
    """Install RedactUrlFilter on every handler of the given loggers.

    Filters on handlers also see records propagated from child loggers.
    Safe to call multiple times.
    """
    for name in logger_names or [""]:
        for handler in logging.getLogger(name).handlers:
            for existing in handler.filters:
                if isinstance(existing, RedactUrlFilter):
                    break
            else:
                handler.addFilter(RedactUrlFilter())


def install_uvicorn_access_log_filters() -> None:
    """Install filters for Uvicorn loggers.

    Safe to call multiple times.
    """
    _install_once(logging.getLogger("uvicorn.access"), SuppressHealthCheckAccessLog)
