"""
Structured Logging

Every store mutation, import and advice request is logged as a
structured event. Logging is local only: there is no persisted
audit history of edits.

The logger:
- Never raises into the caller
- Renders JSON lines so events stay machine-readable
- Binds the component name so events can be filtered per store
"""

import logging
import sys
from typing import Optional

import structlog


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route stdlib logging to stderr at the given level.

    structlog filters by the stdlib level, so this decides which
    events are emitted. Defaults to the configured app log level.
    """
    if level is None:
        from finance_manager.config import get_settings
        level = get_settings().app.log_level

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


def get_logger(name: str, **initial_values) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to a component name."""
    return structlog.get_logger(name, **initial_values)
