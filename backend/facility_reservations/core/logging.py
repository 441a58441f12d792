"""
structlog setup for the service.

Engine modules log snake_case events with keyword fields, e.g.
``logger.info("reservation_approved", reservation_id=7, declined=[8, 9])``.
Request middleware binds request_id/method/path through contextvars, so
every line of a request carries them. Output is JSON lines or a console
renderer depending on Settings.json_logs.
"""

import logging
import sys

import structlog

from facility_reservations.core.config import Settings, get_settings

_HANDLER_NAME = "facility_reservations"

# Libraries that log every statement or request at INFO
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "alembic")


def _pre_chain(json_logs: bool) -> list:
    chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_logs:
        chain.append(structlog.processors.format_exc_info)
    return chain


def _renderer(settings: Settings):
    if settings.json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=settings.DEBUG)


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            *_pre_chain(settings.json_logs),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ]
        )
    )

    root = logging.getLogger()
    # Repeated lifespans (tests, uvicorn --reload) would otherwise stack handlers
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
