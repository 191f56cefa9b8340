"""
Logging configuration for the document search service.

Configures structlog on top of the standard library logging module so that
both structlog loggers and third-party stdlib loggers share one output
format. Request IDs are carried through structlog contextvars.
"""

import logging
import sys
from typing import Optional
from uuid import uuid4

import structlog

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = (
    "uvicorn.access",
    "opensearch",
    "azure",
    "urllib3",
    "transformers",
    "httpx",
)


def configure_logging(log_level: str = "INFO", use_json: bool = True) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_json: Render JSON lines instead of human-readable console output
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_id(request_id: Optional[str] = None) -> str:
    """
    Bind a request ID into the structlog context.

    Args:
        request_id: Request ID to bind, generates a new UUID if None

    Returns:
        The request ID that was bound
    """
    if not request_id:
        request_id = str(uuid4())
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def clear_request_context() -> None:
    """Drop all request-scoped context variables."""
    structlog.contextvars.clear_contextvars()
