"""Uvicorn server runner with custom configuration."""

import structlog
import uvicorn
from uvicorn.config import LOGGING_CONFIG

from villatours.app import App
from villatours.config import Config
from villatours.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def run_server(app: App, config: Config) -> None:
    """Run the Uvicorn server, terminating TLS itself when enabled.

    Uvicorn handles SIGINT/SIGTERM; the FastAPI lifespan then closes the database client.
    """
    fastapi_app = create_fastapi_app(app, config)

    log_config = LOGGING_CONFIG.copy()
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"

    logger.info("server_starting", port=config.port, environment=config.environment, tls=config.tls_enabled)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=log_config,
        access_log=True,
        ssl_certfile=config.tls_certfile if config.tls_enabled else None,
        ssl_keyfile=config.tls_keyfile if config.tls_enabled else None,
        proxy_headers=True,
    )
