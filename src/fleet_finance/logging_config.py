"""structlog setup shared by the API, the CLI and the services.

Services log named events with keyword fields, for example
``logger.info("payment_recorded", invoice_id=..., status="partial")``.
Log records go through the standard library so uvicorn, httpx and pytest's
``caplog`` all see them. Production renders one JSON object per line;
every other environment gets the console renderer.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from fleet_finance.config import Settings, get_settings

# Per-request chatter from the store client and the server
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _service_fields(settings: Settings) -> Processor:
    def add_service_fields(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", settings.app_name)
        event_dict.setdefault("environment", settings.environment.value)
        event_dict.setdefault("version", settings.app_version)
        return event_dict

    return add_service_fields


def build_processors(settings: Settings) -> list[Processor]:
    """Processor chain for ``settings.log_format``."""
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.log_format == "json":
        processors += [
            _service_fields(settings),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Route structlog through stdlib logging at the configured level.

    Call once at startup: the API lifespan and ``fleet-finance serve`` do.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.value)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    root = logging.getLogger()
    root.setLevel(level)
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(logging.FileHandler(settings.log_file))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.stdlib.get_logger(name)


@contextmanager
def request_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every event logged while handling one request.

    Context left over from a previous request on the same worker is
    discarded first.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)
    try:
        yield
    finally:
        structlog.contextvars.clear_contextvars()
