"""
Structured logging setup.

Modules log through ``structlog.get_logger(__name__)`` with event-style
names ("repository.transaction_failed"). Call ``configure_logging()`` once
at process start; until then structlog's defaults print to stdout.
"""

import logging
import sys
from typing import Optional

import structlog

from tms.config import settings


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Install the stdlib-backed structlog processor chain.

    Args:
        level: Log level name. Defaults to settings.log_level.
        json_logs: Render JSON lines instead of the console renderer.
            Defaults to settings.log_json.
    """
    level = (level or settings.log_level).upper()
    json_logs = settings.log_json if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

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
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
