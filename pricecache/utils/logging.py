"""Structured logging for pricecache, built on structlog.

pricecache is a library: importing it never touches global logging state.
Modules ask for a named logger with :func:`get_logger` and emit structured
events; how those events are rendered is up to the host application.

Applications that have no structlog setup of their own can call
:func:`configure_logging` once at startup.  It installs a shared processor
chain (context vars, log level, timestamps) ending in either a coloured
console renderer or a JSON renderer, chosen by ``APP_ENV`` or forced with
``json_output``.  Routing stdlib ``logging`` through the same formatter is
opt-in via ``bridge_stdlib``, and adds a handler without removing any the
host already installed.
"""

import logging
import os
import sys

import structlog


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    bridge_stdlib: bool = False,
) -> structlog.BoundLogger:
    """Configure structlog rendering for an application embedding the cache.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR, FATAL).
        json_output: Force JSON output. When False, JSON is used only when
                     APP_ENV is "production".
        bridge_stdlib: Also attach a stdout handler to the root stdlib logger
                       that renders through the same processors.

    Returns:
        A configured structlog BoundLogger.
    """
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    level = logging.getLevelName(log_level.upper())

    structlog.configure(
        processors=[*_shared_processors(), renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if bridge_stdlib:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    *_shared_processors(),
                    renderer,
                ],
            )
        )
        logging.getLogger().addHandler(handler)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound with ``logger_name``; configures nothing."""
    return structlog.get_logger(logger_name=name)
