"""Configuration with JSON file, config.yml and env variable support."""

import json
import os
from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from applinks.services.app_launcher import DEFAULT_CHOOSER_TITLE
from applinks.services.browser_exclusion import DEFAULT_PROBE_TLD
from applinks.services.confirmation_controller import DEFAULT_CONFIRMATION_TAG
from applinks.services.redirect_resolver import DEFAULT_MAX_FALLBACK_DEPTH

ENV_PREFIX = "APPLINKS_"


def _find_repo_root(*, start: Path) -> Path:
    """Best-effort repository root discovery.

    Relative config paths resolve against the repo root so the service can be
    launched from any working directory. The root is the first directory
    containing `pyproject.toml`, otherwise the current working directory.
    """

    try:
        start = start.resolve()
        for p in [start, *start.parents]:
            if (p / "pyproject.toml").exists():
                return p
    except OSError:
        pass

    return Path.cwd()


class AppLinksConfig(BaseSettings):
    """Configuration with JSON file + config.yml + env var support.

    Load order (later overrides earlier):
    1. config.json - base configuration
    2. config.yml at the repo root - optional overlay
    3. Environment variables - runtime overrides

    Prefix: APPLINKS_ (e.g., APPLINKS_FALLBACK_MAX_DEPTH)
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Resolution
    fallback_max_depth: int = Field(
        default=DEFAULT_MAX_FALLBACK_DEPTH,
        ge=0,
        description="How many nested browser_fallback_url levels are followed.",
    )
    browser_probe_tld: str = Field(default=DEFAULT_PROBE_TLD)
    browser_package_names: list[str] | None = Field(
        default=None,
        description=(
            "Precomputed browser exclusion set. When unset, browsers are "
            "discovered by probing the handler registry."
        ),
    )
    handler_registry_path: str = Field(default="handlers.yml")

    # Confirmation
    chooser_title: str = Field(default=DEFAULT_CHOOSER_TITLE)
    confirmation_tag: str = Field(default=DEFAULT_CONFIRMATION_TAG)

    # Logging
    log_level: str = Field(default="INFO")
    redact_urls_in_logs: bool = Field(
        default=True,
        description="Strip query strings and fragments from URLs in log output.",
    )

    # API settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8750)

    def resolved_registry_path(self) -> Path:
        p = Path(self.handler_registry_path).expanduser()
        if not p.is_absolute():
            p = _find_repo_root(start=Path(__file__)) / p
        return p

    @classmethod
    def from_json_file(cls, config_path: str = "config.json") -> "AppLinksConfig":
        """Load config from JSON + config.yml with env var overrides.

        Args:
            config_path: Path to JSON config file.

        Returns:
            Configured AppLinksConfig instance.
        """
        config_data: dict = {}

        json_path = Path(config_path)
        if json_path.exists():
            with open(json_path) as f:
                config_data = json.load(f)

        # Precedence: config.json < config.yml < env
        repo_root = _find_repo_root(start=Path(__file__))
        cfg_yml = repo_root / "config.yml"
        if cfg_yml.is_file():
            with cfg_yml.open("r", encoding="utf-8") as f:
                yml_data = yaml.safe_load(f) or {}
            if isinstance(yml_data, dict):
                config_data.update(yml_data)

        # Drop file values shadowed by an env var so pydantic-settings applies it.
        for key in list(config_data):
            if f"{ENV_PREFIX}{key.upper()}" in os.environ:
                del config_data[key]

        return cls(**config_data)
