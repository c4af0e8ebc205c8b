"""
structlog configuration.

Library modules only call ``structlog.get_logger(__name__)``; applications
call setup_logging() once at startup to choose level and output format.
"""

import logging

import structlog

from tradebridge.config.models import LogFormat, LoggingConfig, LogLevel


def setup_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.JSON,
) -> None:
    """
    Configure structlog on top of the standard logging module.

    Args:
        level: Log level name.
        log_format: "json" for machine-readable output, "text" for the console.

    Example:
        >>> setup_logging("DEBUG", "text")
    """
    level_name = LogLevel(str(getattr(level, "value", level)).upper()).value
    renderer_format = LogFormat(str(getattr(log_format, "value", log_format)).lower())

    if renderer_format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name),
    )

    # aiohttp logs every connection at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def setup_logging_from_config(config: LoggingConfig) -> None:
    """Configure logging from a LoggingConfig."""
    setup_logging(config.level, config.format)
