"""ASGI entry point for uvicorn with hot reload support.

Usage:
    uvicorn applinks.asgi:app --reload --host 0.0.0.0 --port 8750
"""

from applinks.config import AppLinksConfig
from applinks.logging_filters import install_uvicorn_access_log_filters
from applinks.main import configure_logging, create_app

_config = AppLinksConfig.from_json_file()
configure_logging(_config)
install_uvicorn_access_log_filters()

app = create_app(_config).fastapi_app
