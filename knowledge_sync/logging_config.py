"""
Logging configuration using structlog.
"""

import logging
import sys
import structlog
from structlog.stdlib import LoggerFactory


def configure_logging(verbose: bool = False):
    """
    Configure structured logging.

    Log events go to stderr so they never mix with the progress report.

    Args:
        verbose: Enable debug logging (otherwise warnings and above)
    """
    log_level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(log_level)

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
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = None):
    """Get a configured logger."""
    return structlog.get_logger(name)
