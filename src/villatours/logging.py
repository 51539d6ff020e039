import logging

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from villatours.config import Config

# Event keys whose values must never reach the logs
SECRET_KEYS = frozenset({"csrf_token", "token", "auth_token", "cookie", "password", "md5sig", "merchant_secret"})

NOISY_LOGGERS = ("pymongo",)  # Parent of the topology, connection and command loggers


def redact_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def setup_logging(config: Config) -> None:
    """Route stdlib and structlog output through one renderer.

    Console output in debug mode, one JSON object per line otherwise.
    """
    logging.basicConfig(level=logging.DEBUG if config.debug else logging.INFO, format="%(message)s")
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer: Processor = structlog.dev.ConsoleRenderer() if config.debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
