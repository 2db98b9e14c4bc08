"""Logging configuration with structlog and standard logging integration."""

import logging
import sys

import structlog


def configure_logging(log_level: str = 'INFO') -> None:
    """
    Configure structlog with standard logging integration.

    Library modules log through `logging.getLogger(__name__)`; this routes
    those records (cache hits, misses, refreshes) through structlog's
    console renderer. Intended for host applications and scripts, the
    library never calls it on import.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    # Convert string level to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=False),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Custom formatter for text output (ts log_level: message format)
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(),
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=False),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger('namerec.repocache')
    package_logger.handlers = [handler]
    package_logger.setLevel(numeric_level)
    package_logger.propagate = False
