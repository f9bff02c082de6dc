"""structlog setup for paycal.

Modules log through ``structlog.get_logger()`` with an event name and
key/value context. Applications call :func:`configure_logging` once at
startup; libraries embedding the engine may skip it and keep their own
structlog configuration.
"""

import logging

import structlog


def configure_logging(level: str = "INFO", *, json: bool = False) -> None:
    """Configure structlog with a level filter.

    Args:
        level: Standard logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json: Render JSON lines instead of the console renderer.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=False,
    )
