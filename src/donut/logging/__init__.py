"""
Structured logging for donut-spine.

Usage:
    from donut.logging import configure_logging, get_logger, bind_context

    configure_logging()
    log = get_logger(__name__)

    bind_context(job="nightly", build_number="42")
    log.info("report.generated", failed=False)
"""

from donut.logging.config import configure_logging, is_configured
from donut.logging.context import (
    LogContext,
    add_context_processor,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    push_context,
    set_context,
)

__all__ = [
    "configure_logging",
    "is_configured",
    "get_logger",
    "set_context",
    "bind_context",
    "push_context",
    "clear_context",
    "get_context",
    "add_context_processor",
    "LogContext",
]
