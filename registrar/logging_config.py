"""
Logging Configuration

structlog setup driven by Settings.log_level and Settings.log_format.

Every module logs through get_logger(__name__), a structlog logger bound to
the stdlib logger of the same name. The "registrar" stdlib logger carries a
NullHandler, so nothing is written until the host configures logging or
calls configure_logging().
"""

import logging
import sys

import structlog

from registrar.config import Settings

ROOT_LOGGER_NAME = "registrar"

_HANDLER_NAME = "registrar.console"


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """
    Get a structlog logger writing through the stdlib logger `name`.

    Args:
        name: Logger name, normally the calling module's __name__
    """
    return structlog.wrap_logger(logging.getLogger(name))


def configure_logging(settings: Settings) -> None:
    """
    Configure structlog for the academic records core.

    Attaches one stdout handler to the "registrar" stdlib logger; calling
    this again replaces it.

    Args:
        settings: Settings providing log level and output format
    """
    renderer: structlog.typing.Processor
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(settings.log_level)
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
