"""
Logging Setup.

structlog on top of the standard library. Every module gets its logger from
``get_logger``; ``setup_logging`` is called once per process (the FastAPI
lifespan, ``cli.py`` and the ``inkline`` CLI callback).

Settings come from config/settings/logging.yaml. Records go to the console
(JSON or a coloured development renderer) and to a rotating JSONL file.

Note bodies and credentials never reach a handler: any field named in
``logging.redact_fields`` is replaced before rendering, including fields
passed inside ``extra={...}``.

Fields in every record:
    timestamp, level, logger, event, func_name, lineno
    source      - web, cli, client, api or internal (set explicitly)
    request_id  - when inside an HTTP request
    frontend    - X-Frontend-ID of the calling client, when inside a request

Usage:
    from inkline.backend.core.logging import get_logger, log_with_source

    logger = get_logger(__name__)
    logger.info("Note archived", extra={"note_id": note_id})
    log_with_source(logger, "client", "warning", "Autosave failed", note_id=note_id)
"""

import logging
import sys
from collections.abc import Iterable, MutableMapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from inkline.backend.core.config import find_project_root, get_app_config

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "client",
    "api",
    "internal",
    "unknown",
})

REDACTED = "[redacted]"

# Libraries that log every request or statement at INFO
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "aiosqlite")


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def redact_fields(fields: Iterable[str]) -> Processor:
    """
    Build a processor that masks sensitive values.

    Matching is case-insensitive and looks one level into ``extra``.
    """
    names = frozenset(f.lower() for f in fields)

    def _mask(values: MutableMapping[str, Any]) -> None:
        for key in values:
            if key.lower() in names and values[key] is not None:
                values[key] = REDACTED

    def processor(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]):
        _mask(event_dict)
        extra = event_dict.get("extra")
        if isinstance(extra, dict):
            event_dict["extra"] = extra = dict(extra)
            _mask(extra)
        return event_dict

    return processor


def _shared_processors(redacted: Iterable[str]) -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        redact_fields(redacted),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments override the matching logging.yaml values; None keeps the file's value.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: Console format, "json" or "console"
        enable_console: Write to stdout
        enable_file_logging: Write to the rotating JSONL file
    """
    config = get_app_config().logging
    handlers = config.handlers

    level = level if level is not None else config.level
    format_type = format_type if format_type is not None else config.format
    if enable_console is None:
        enable_console = handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = handlers.file.enabled

    pre_chain = _shared_processors(config.redact_fields)
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), pre_chain)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        if format_type == "console":
            console_handler.setFormatter(
                _formatter(structlog.dev.ConsoleRenderer(colors=True), pre_chain)
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = _resolve_log_path(handlers.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=handlers.file.max_bytes,
            backupCount=handlers.file.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit ``source`` field.

    For code that runs outside an HTTP request: the client core and the CLIs.

    Raises:
        AttributeError: If level is not a logger method
    """
    getattr(logger, level.lower())(message, source=source, **kwargs)
