"""
Logging Configuration and Utilities

Structured logging for the application: stdlib logging handlers rendered as
JSON through python-json-logger, or as key/value lines through structlog,
with request context injected from context variables.
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, Tuple

import structlog
from pythonjsonlogger import jsonlogger

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

SENSITIVE_KEYS = ("password", "token", "secret", "authorization", "api_key")
SERVICE_NAME = "staysync"


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(sensitive in lowered for sensitive in SENSITIVE_KEYS)


def sanitize(data: Dict[str, Any]) -> Dict[str, Any]:
    """Mask sensitive values in a (possibly nested) mapping."""
    clean: Dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive(key):
            clean[key] = "[REDACTED]"
        elif isinstance(value, dict):
            clean[key] = sanitize(value)
        else:
            clean[key] = value
    return clean


class RequestContextProcessor:
    """Add request context to structlog event dicts"""

    def __init__(self, environment: str = "development"):
        self.environment = environment

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict["request_id"] = req_id

        uid = user_id.get()
        if uid:
            event_dict["user_id"] = uid

        event_dict["service"] = SERVICE_NAME
        event_dict["environment"] = self.environment
        return event_dict


class SecurityLogProcessor:
    """Redact sensitive keys before rendering"""

    def __call__(self, logger, method_name, event_dict):
        return sanitize(event_dict)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno
        log_record["service"] = SERVICE_NAME

        req_id = request_id.get()
        if req_id and "request_id" not in log_record:
            log_record["request_id"] = req_id
        uid = user_id.get()
        if uid and "user_id" not in log_record:
            log_record["user_id"] = uid

        for key in list(log_record.keys()):
            if _is_sensitive(key):
                log_record[key] = "[REDACTED]"

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that merges bound context with per-call ``extra``.

    Usage:
        logger = get_logger(__name__)
        logger.info("Bill created", extra={"bill_id": bill.id})
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **context: Any) -> "ContextLoggerAdapter":
        merged = dict(self.extra or {})
        merged.update(context)
        return ContextLoggerAdapter(self.logger, merged)


def setup_logging(level: str = "INFO", log_format: str = "json", environment: str = "development") -> None:
    """
    Configure root logging and structlog once per process.

    Args:
        level: Root log level name
        log_format: ``json`` for python-json-logger output, anything else for
            structlog key/value console output
        environment: Environment name stamped on structlog events
    """
    shared_processors = [
        RequestContextProcessor(environment),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        SecurityLogProcessor(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(CustomJsonFormatter("%(message)s"))
    else:
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.KeyValueRenderer(
                    key_order=["timestamp", "level", "logger", "event"]
                ),
                foreign_pre_chain=[structlog.stdlib.ExtraAdder()] + shared_processors,
            )
        )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """Return a context-aware logger for ``name``."""
    return ContextLoggerAdapter(logging.getLogger(name), context)


def set_request_context(req_id: Optional[str] = None, uid: Optional[str] = None) -> None:
    if req_id is not None:
        request_id.set(req_id)
    if uid is not None:
        user_id.set(uid)


def clear_request_context() -> None:
    request_id.set(None)
    user_id.set(None)


__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_context",
    "clear_request_context",
    "sanitize",
    "request_id",
    "user_id",
    "CustomJsonFormatter",
]
