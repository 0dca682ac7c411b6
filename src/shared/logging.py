"""Logging set-up for the four bounded contexts.

``ordering``, ``inventory``, ``promotions`` and ``identity`` each call
``configure_logging()`` from their ``domain.py``, in whatever order they get
imported, and all of them write to the same stdout stream and the same
``logs/shopstream*.log`` files. Every structlog event carries a ``context``
field naming the bounded context that emitted it, taken from the logger name.

The environment (``ENV``, ``ENVIRONMENT`` or ``PROTEAN_ENV``) picks both the
level and the renderer: JSON lines in production and staging, the rich
console renderer everywhere else.
"""

import logging
import logging.handlers
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog

BOUNDED_CONTEXTS = ("ordering", "inventory", "promotions", "identity")

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_HANDLER_PREFIX = "shopstream."
_MAX_LOG_BYTES = 10 * 1024 * 1024


def _environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL if set, otherwise the level for the current environment."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(_environment(), "INFO"))


def add_bounded_context(logger, method_name, event_dict):
    """structlog processor: tag the event with the context owning the logger."""
    root = str(event_dict.get("logger", "")).split(".", 1)[0]
    if root in BOUNDED_CONTEXTS:
        event_dict.setdefault("context", root)
    return event_dict


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_MAX_LOG_BYTES, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def _is_installed() -> bool:
    return any((h.get_name() or "").startswith(_HANDLER_PREFIX) for h in logging.getLogger().handlers)


def setup_stdlib_logging(level: str | None = None, log_dir: str = "logs") -> None:
    """Replace the root handlers with console, full-log and error-log handlers."""
    log_level = level or get_log_level()
    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)

    handlers = {
        "console": console,
        "file": _rotating_file(log_path / "shopstream.log", log_level),
        "errors": _rotating_file(log_path / "shopstream_error.log", logging.ERROR),
    }

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []
    for name, handler in handlers.items():
        handler.set_name(_HANDLER_PREFIX + name)
        root_logger.addHandler(handler)

    # Protean logs every unit of work at DEBUG
    logging.getLogger("protean").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def setup_structlog() -> None:
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        add_bounded_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.contextvars.merge_contextvars,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]

    if _environment() in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str | None = None, log_dir: str = "logs", force: bool = False) -> None:
    """Install the shared handlers and structlog pipeline.

    The first ``domain.py`` to be imported does the work; the others find the
    ``shopstream.*`` root handlers already in place and return. Pass
    ``force=True`` to rebuild with a different level or directory.
    """
    if _is_installed() and not force:
        return

    setup_stdlib_logging(level=level, log_dir=log_dir)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind fields onto every later log line in this execution context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**kwargs: Any):
    """Bind fields for the duration of a block, restoring the previous values after."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
