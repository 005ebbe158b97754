"""
structlog configuration for verbum.

The library itself logs through the standard logging module and never configures
it on import. Applications (and the demo entry point) call configure_logging() to
render those records with structlog:
- Human (default): colored console lines on stderr.
- JSON (log_json=True): one JSON object per line on stderr.
"""
import logging
import sys

import structlog


def configure_logging(*, verbose=False, log_json=False):
    """
    install a structlog-rendered stderr handler on the root logger.

    verbose enables DEBUG records from verbum; otherwise only WARNING and above.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("verbum").setLevel(level)
    return handler


__all__ = (
    "configure_logging",
)
