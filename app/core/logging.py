"""
Logging setup for the announcement service.

Application code logs through the stdlib ``logging`` module via
``get_logger``. When structured logging is enabled the root handlers format
records with structlog's ``ProcessorFormatter``, so every record (ours,
uvicorn's, SQLAlchemy's) runs through the same processor chain: request
context, ISO timestamps, secret redaction and a JSON or key/value renderer.
With structured logging off, JSON output falls back to python-json-logger.
"""

import sys
import logging
import logging.handlers
from typing import Any, Dict, List, Optional
from pathlib import Path
from contextvars import ContextVar

import structlog
from pythonjsonlogger import jsonlogger

from app.config.settings import settings

SERVICE_NAME = 'sunday-school-announcements'

# Set per request by RequestContextMiddleware / get_current_user
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

SENSITIVE_KEYS = (
    'password', 'token', 'secret', 'credentials', 'authorization', 'cookie',
)

# Marks handlers we installed so a second setup_logging() call replaces them
_HANDLER_FLAG = '_announcements_handler'


def _redact(values: Dict[str, Any]) -> None:
    for key in list(values.keys()):
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            values[key] = '[REDACTED]'
        elif isinstance(values[key], dict):
            _redact(values[key])


def add_request_context(logger, method_name, event_dict):
    """structlog processor: attach request/user ids and service labels."""
    req_id = request_id.get()
    if req_id:
        event_dict.setdefault('request_id', req_id)
    uid = user_id.get()
    if uid:
        event_dict.setdefault('user_id', uid)
    event_dict['service'] = SERVICE_NAME
    event_dict['environment'] = settings.ENVIRONMENT
    return event_dict


def redact_secrets(logger, method_name, event_dict):
    _redact(event_dict)
    return event_dict


def shared_processors() -> List[Any]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_request_context,
        redact_secrets,
    ]


class AnnouncementJsonFormatter(jsonlogger.JsonFormatter):
    """python-json-logger formatter used when structured logging is off."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = SERVICE_NAME
        log_record['environment'] = settings.ENVIRONMENT

        req_id = request_id.get()
        if req_id and 'request_id' not in log_record:
            log_record['request_id'] = req_id
        uid = user_id.get()
        if uid and 'user_id' not in log_record:
            log_record['user_id'] = uid

        _redact(log_record)


class LoggingConfig:
    """Installs the root handlers and the structlog configuration."""

    @staticmethod
    def configure_structlog():
        structlog.configure(
            processors=shared_processors() + [
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def build_formatter() -> logging.Formatter:
        as_json = settings.LOG_FORMAT == "json"

        if settings.ENABLE_STRUCTURED_LOGGING:
            renderer = (
                structlog.processors.JSONRenderer()
                if as_json
                else structlog.dev.ConsoleRenderer(colors=False)
            )
            return structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared_processors(),
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    renderer,
                ],
            )

        if as_json:
            return AnnouncementJsonFormatter('%(asctime)s %(name)s %(levelname)s %(message)s')
        return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    @staticmethod
    def configure_handlers():
        level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
        formatter = LoggingConfig.build_formatter()

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in list(root_logger.handlers):
            if getattr(handler, _HANDLER_FLAG, False):
                root_logger.removeHandler(handler)

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if settings.LOG_FILE:
            log_path = Path(settings.LOG_FILE)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=5
            ))

        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            setattr(handler, _HANDLER_FLAG, True)
            root_logger.addHandler(handler)

        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(
            logging.INFO if settings.LOG_SQL_QUERIES else logging.WARNING
        )


class LoggerAdapter:
    """Thin wrapper over a stdlib logger; always passes a fresh ``extra`` dict."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, message: str, *args, **kwargs):
        kwargs['extra'] = dict(kwargs.get('extra') or {})
        self.logger.log(level, message, *args, **kwargs)

    def log(self, level: int, message: str, *args, **kwargs):
        self._log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name or 'announcements'))


def setup_logging():
    """Configure structlog and the root handlers; safe to call repeatedly."""
    if settings.ENABLE_STRUCTURED_LOGGING:
        LoggingConfig.configure_structlog()
    LoggingConfig.configure_handlers()

    get_logger(__name__).info("Logging system initialized", extra={
        'log_level': settings.LOG_LEVEL,
        'log_format': settings.LOG_FORMAT,
        'structured_logging': settings.ENABLE_STRUCTURED_LOGGING
    })


__all__ = [
    'get_logger',
    'setup_logging',
    'LoggerAdapter',
    'LoggingConfig',
    'request_id',
    'user_id'
]
