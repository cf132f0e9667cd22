# src/schemarecord/core/logging.py
"""Structured logging for schemarecord.

structlog renders both schemarecord's own events (schema_loaded,
record_inserted, sql_executed, ...) and stdlib records from SQLAlchemy and
Dynaconf. Stdlib records reach structlog's renderers via ProcessorFormatter,
so a JSON run produces one JSON object per line on stderr whatever the source.

SQLAlchemy statement logging has its own switch: sql_echo turns the
sqlalchemy.engine logger up to INFO, which is what the CLI's --verbose does.
Otherwise that logger stays at WARNING with the other chatty third-party loggers.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

SQL_LOGGER = "sqlalchemy.engine"

# Quiet even when schemarecord itself logs at DEBUG
_CHATTY_LOGGERS: tuple[str, ...] = (
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "dynaconf",
)


def _drop_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Strip the _record and _from_structlog keys ProcessorFormatter adds."""
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def _renderers(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_bookkeeping,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        _drop_formatter_bookkeeping,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    sql_echo: bool = False,
) -> None:
    """Configure structlog and stdlib logging.

    Safe to call more than once; each call replaces the root handler.

    Args:
        json_output: Emit JSON lines instead of console output.
        level: Root log level (DEBUG, INFO, WARNING, ERROR).
        sql_echo: Log every statement SQLAlchemy executes (INFO on sqlalchemy.engine).
    """
    log_level = getattr(logging, level.upper())

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure between cases
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ProcessorFormatter(processors=_renderers(json_output), foreign_pre_chain=shared_processors))

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(log_level)

    quiet_level = max(log_level, logging.WARNING)
    for logger_name in _CHATTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)
    # Statements log at INFO; echo overrides a stricter root level
    logging.getLogger(SQL_LOGGER).setLevel(logging.INFO if sql_echo else quiet_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger (name is typically __name__)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
