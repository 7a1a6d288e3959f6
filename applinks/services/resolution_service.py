"""Application resolution service.

`ApplicationResolutionService` is the seam to whatever knows which installed
applications can open a launch descriptor. `StaticHandlerRegistry` is a
config-driven implementation backed by a YAML file such as::

    applications:
      - id: org.example.browser
        browser: true
      - id: com.example.maps
        schemes: [geo]
      - id: com.example.shop
        schemes: [https]
        hosts: ["shop.example.com", "*.shop.example.com"]
      - id: com.android.vending
        schemes: [market]

The file is re-read whenever its (mtime_ns, size) changes, so edits apply
without a restart.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, Field, ValidationError

from applinks.errors import ResolutionServiceError
from applinks.models.domain import (
    ACTION_VIEW,
    CATEGORY_BROWSABLE,
    ApplicationId,
    LaunchDescriptor,
)

logger = logging.getLogger(__name__)


class ApplicationResolutionService(ABC):
    """Answers "which installed applications can handle this descriptor?"."""

    @abstractmethod
    def resolve_handlers(self, descriptor: LaunchDescriptor) -> set[ApplicationId]:
        """Return the ids of applications able to handle `descriptor`.

        An empty set means nothing matches; it is not an error.

        Raises:
            ResolutionServiceError: If the query itself fails.
        """
        ...


class ApplicationEntry(BaseModel):
    """One installed application as declared in the registry file."""

    id: str
    schemes: list[str] = Field(default_factory=list)
    hosts: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=lambda: [ACTION_VIEW])
    browser: bool = False
    browsable: bool = True

    @property
    def categories(self) -> frozenset[str]:
        """Intent categories this application accepts."""
        return frozenset({CATEGORY_BROWSABLE}) if self.browsable else frozenset()

    def handles(self, descriptor: LaunchDescriptor) -> bool:
        if descriptor.uri is None:
            return False
        if descriptor.package is not None and descriptor.package != self.id:
            return False
        if descriptor.action not in self.actions:
            return False
        if not descriptor.categories <= self.categories:
            return False

        if self.browser and descriptor.is_web:
            return True

        scheme = descriptor.scheme
        if scheme is None or scheme not in {s.lower() for s in self.schemes}:
            return False
        if not self.hosts:
            return True
        return _host_matches(urlsplit(descriptor.uri).hostname, self.hosts)


def _host_matches(host: str | None, patterns: Iterable[str]) -> bool:
    if not host:
        return False
    host = host.lower()
    for pattern in patterns:
        p = pattern.strip().lower()
        if p.startswith("*."):
            if host.endswith(p[1:]):
                return True
        elif host == p:
            return True
    return False


class _RegistryFile(BaseModel):
    applications: list[ApplicationEntry] = Field(default_factory=list)


class StaticHandlerRegistry(ApplicationResolutionService):
    """Resolution service backed by a declarative list of applications."""

    def __init__(
        self,
        entries: Iterable[ApplicationEntry] | None = None,
        *,
        path: str | Path | None = None,
    ) -> None:
        self._entries: list[ApplicationEntry] = list(entries or [])
        self._path = Path(path) if path is not None else None
        self._lock = threading.Lock()
        self._stamp: tuple[int, int] | None = None

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticHandlerRegistry":
        """Create a registry that loads (and hot-reloads) `path`."""
        return cls(path=path)

    @property
    def entries(self) -> list[ApplicationEntry]:
        return list(self._current_entries())

    def resolve_handlers(self, descriptor: LaunchDescriptor) -> set[ApplicationId]:
        return {entry.id for entry in self._current_entries() if entry.handles(descriptor)}

    def _current_entries(self) -> list[ApplicationEntry]:
        if self._path is None:
            return self._entries

        try:
            st = self._path.stat()
        except FileNotFoundError:
            # Missing registry behaves like "nothing installed".
            with self._lock:
                self._entries, self._stamp = [], (0, 0)
            return []
        except OSError as e:
            raise ResolutionServiceError(f"Cannot stat {self._path}: {e}") from e

        stamp = (st.st_mtime_ns, st.st_size)
        with self._lock:
            if self._stamp == stamp:
                return self._entries

        entries = self._load(self._path)
        with self._lock:
            self._entries, self._stamp = entries, stamp
        logger.info("Loaded %d application(s) from %s", len(entries), self._path)
        return entries

    def _load(self, path: Path) -> list[ApplicationEntry]:
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            return _RegistryFile.model_validate(raw).applications
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise ResolutionServiceError(f"Invalid handler registry {path}: {e}") from e
