"""Application entry point and bootstrap.

This module wires the handler registry, the redirect resolver and the HTTP
routers, and provides the main entry point for running the service.
"""

import argparse
import logging
import sys
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from applinks.config import AppLinksConfig
from applinks.logging_filters import install_uvicorn_access_log_filters, install_url_redaction
from applinks.routers import create_redirect_router
from applinks.services.app_launcher import AppLauncher
from applinks.services.app_links_use_cases import AppLinksUseCases
from applinks.services.confirmation_controller import (
    RedirectConfirmationController,
    SessionNavigator,
)
from applinks.services.confirmation_surface import ConfirmationSurface, SurfaceHost
from applinks.services.redirect_resolver import RedirectResolver
from applinks.services.resolution_service import StaticHandlerRegistry

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(config: AppLinksConfig) -> None:
    """Configure root logging to stdout. Safe to call more than once."""
    logging.basicConfig(
        level=config.log_level.upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if config.redact_urls_in_logs:
        install_url_redaction()


class Application:
    """Main application container.

    Owns the service components and builds the FastAPI app around them.
    """

    def __init__(self, config: AppLinksConfig) -> None:
        """Initialize the application with configuration.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.handler_registry: StaticHandlerRegistry | None = None
        self.resolver: RedirectResolver | None = None
        self.fastapi_app: FastAPI | None = None

    def setup(self) -> None:
        """Create the handler registry and resolver."""
        registry_path = self.config.resolved_registry_path()
        self.handler_registry = StaticHandlerRegistry.from_file(registry_path)
        self.resolver = RedirectResolver(
            self.handler_registry,
            self.config.browser_package_names,
            max_fallback_depth=self.config.fallback_max_depth,
            probe_tld=self.config.browser_probe_tld,
        )
        logger.info("Handler registry: %s", registry_path)

    def create_use_cases(self, launcher: AppLauncher) -> AppLinksUseCases:
        """Build the app-link use cases for a host that can launch applications."""
        if self.handler_registry is None:
            raise RuntimeError("Application.setup() must run before create_use_cases()")
        return AppLinksUseCases(
            self.handler_registry,
            launcher,
            self.config.browser_package_names,
            max_fallback_depth=self.config.fallback_max_depth,
            probe_tld=self.config.browser_probe_tld,
            chooser_title=self.config.chooser_title,
        )

    def create_confirmation_controller(
        self,
        launcher: AppLauncher,
        navigator: SessionNavigator,
        surface_host: SurfaceHost,
        surface_factory: Callable[[], ConfirmationSurface] = ConfirmationSurface,
    ) -> RedirectConfirmationController:
        """Build a redirect confirmation controller tagged per configuration."""
        return RedirectConfirmationController(
            self.create_use_cases(launcher),
            navigator,
            surface_host,
            surface_factory=surface_factory,
            tag=self.config.confirmation_tag,
        )

    def create_fastapi_app(self) -> FastAPI:
        """Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application.
        """
        if self.resolver is None:
            raise RuntimeError("Application.setup() must run before create_fastapi_app()")

        @asynccontextmanager
        async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
            logger.info("App-links service starting...")
            yield
            logger.info("App-links service shutting down...")

        self.fastapi_app = FastAPI(
            title="App Links",
            description="Resolve URLs to external application launch targets",
            version="1.0.0",
            lifespan=lifespan,
        )
        self.fastapi_app.include_router(create_redirect_router(self.resolver))

        @self.fastapi_app.get("/health")
        def health_check() -> dict[str, str]:
            """Health check endpoint."""
            return {"service": "applinks", "status": "healthy"}

        return self.fastapi_app


def create_app(config: AppLinksConfig | None = None) -> Application:
    """Create and set up the application.

    Args:
        config: Optional configuration. If not provided, loads from
                config.json with environment variable overrides.

    Returns:
        Initialized Application instance.
    """
    if config is None:
        config = AppLinksConfig.from_json_file()

    app = Application(config)
    app.setup()
    app.create_fastapi_app()
    return app


def main(reload: bool = False) -> None:
    """Run the HTTP service until interrupted."""
    import uvicorn

    config = AppLinksConfig.from_json_file()
    configure_logging(config)

    if reload:
        # Reload needs an import string rather than an app object.
        uvicorn.run("applinks.asgi:app", host=config.api_host, port=config.api_port, reload=True)
        return

    app = create_app(config)
    logger.info(
        "Application running. API available at http://%s:%d",
        config.api_host,
        config.api_port,
    )

    uvicorn_config = uvicorn.Config(
        app.fastapi_app,
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.lower(),
    )
    # Ensure Uvicorn logging is configured, then suppress noisy healthcheck access logs.
    uvicorn_config.load()
    install_uvicorn_access_log_filters()
    uvicorn.Server(uvicorn_config).run()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the app-links service")
    parser.add_argument("--reload", action="store_true", help="Enable hot reload")
    args = parser.parse_args()

    main(reload=args.reload)
