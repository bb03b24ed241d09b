# 📄 File: plantid/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# This file sets up the logging system that records what happens in the app (photos identified,
# limits reached, payment events) in a structured way so problems are easy to track down.

# 🧪 Purpose (Technical Summary):
# Configures the root logger through logging.config.dictConfig with either python-json-logger's
# JsonFormatter or a plain text formatter, injects request/user context from contextvars through a
# logging.Filter, and provides performance and business-event helpers.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging / logging.config: Python standard logging
# - contextvars: Request context tracking

# 🔄 Connected Modules / Calls From:
# Used by: plantid.main (startup), plantid.api.middleware (request logging and request ids),
# plantid.shared.infrastructure.external_apis (outbound call timing), domain services (business events)

import logging
import logging.config
import os
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Optional
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from plantid.shared.config.settings import get_settings

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

SERVICE_NAME = 'plantid-backend'
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s'
JSON_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s %(user_id)s'

# Global logging configuration
_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}


class ContextFilter(logging.Filter):
    """
    Adds request ID, user ID and service information to every record
    so both formatters can reference them.
    """

    def __init__(self, name: str = ''):
        super().__init__(name)
        self.hostname = os.uname().nodename if hasattr(os, 'uname') else 'unknown'

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or '-'
        record.user_id = user_id_var.get() or '-'
        record.service = SERVICE_NAME
        record.hostname = self.hostname

        # Flatten extra fields so the JSON formatter emits them as top-level keys
        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            for key, value in extra_fields.items():
                if not hasattr(record, key):
                    setattr(record, key, value)

        return True


class PlantIdJsonFormatter(JsonFormatter):
    """JSON formatter that drops the nested extra_fields dict after flattening."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record.pop('extra_fields', None)
        log_record.setdefault('service', SERVICE_NAME)


class PerformanceLogger:
    """
    Logger for tracking performance metrics and timing information.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        user_id: str = None,
        extra: Dict = None
    ):
        """Log HTTP request performance."""
        extra_fields = {
            'event_type': 'http_request',
            'method': method,
            'path': path,
            'status_code': status_code,
            'duration_ms': round(duration_ms, 2),
            **(extra or {})
        }

        if user_id:
            extra_fields['user_id'] = user_id

        level = logging.INFO if status_code < 500 else logging.ERROR
        self.logger.log(
            level,
            f"HTTP {method} {path} - {status_code} - {duration_ms:.2f}ms",
            extra={'extra_fields': extra_fields}
        )

    def log_external_api_call(
        self,
        api_name: str,
        endpoint: str,
        method: str,
        status_code: int,
        duration_ms: float,
        success: bool,
        extra: Dict = None
    ):
        """Log external API call performance."""
        extra_fields = {
            'event_type': 'external_api_call',
            'api_name': api_name,
            'endpoint': endpoint,
            'method': method,
            'status_code': status_code,
            'duration_ms': round(duration_ms, 2),
            'success': success,
            **(extra or {})
        }

        level = logging.INFO if success else logging.WARNING
        self.logger.log(
            level,
            f"API {api_name} {method} {endpoint} - {status_code} - {duration_ms:.2f}ms",
            extra={'extra_fields': extra_fields}
        )


class StructuredLogger:
    """
    Logger wrapper with structured logging capabilities.

    Keyword arguments passed to the level methods become extra fields on the
    record, which the JSON formatter emits as top-level keys.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.performance = PerformanceLogger(self.logger)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        """Internal log method with extra fields handling."""
        extra_fields = dict(extra or {})

        for key, value in kwargs.items():
            if key not in ['exc_info', 'stack_info', 'stacklevel']:
                extra_fields[key] = value

        clean_kwargs = {k: v for k, v in kwargs.items()
                        if k in ['exc_info', 'stack_info', 'stacklevel']}

        if extra_fields:
            clean_kwargs['extra'] = {'extra_fields': extra_fields}

        self.logger.log(level, message, **clean_kwargs)

    def log_business_event(
        self,
        event_type: str,
        description: str,
        user_id: str = None,
        extra: Dict = None
    ):
        """Log business events (identification recorded, premium granted, ...)."""
        extra_fields = {
            'event_type': 'business_event',
            'business_event_type': event_type,
            **(extra or {})
        }

        if user_id:
            extra_fields['subject_user_id'] = user_id

        self.info(description, extra=extra_fields)


def build_logging_config(log_level: str, log_format: str) -> Dict:
    """
    Build the dictConfig mapping for the requested level and format.

    Args:
        log_level: Standard level name
        log_format: "json" or "text"

    Returns:
        Dict: logging.config.dictConfig compatible mapping
    """
    formatter = 'json' if log_format.lower() == 'json' else 'text'

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'filters': {
            'context': {'()': ContextFilter},
        },
        'formatters': {
            'text': {'format': TEXT_FORMAT},
            'json': {
                '()': PlantIdJsonFormatter,
                'fmt': JSON_FORMAT,
                'rename_fields': {'levelname': 'level', 'asctime': 'timestamp', 'name': 'logger'},
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'stream': 'ext://sys.stdout',
                'formatter': formatter,
                'filters': ['context'],
                'level': log_level,
            },
        },
        'root': {
            'level': log_level,
            'handlers': ['console'],
        },
        'loggers': {
            'aiohttp': {'level': 'WARNING'},
            'asyncio': {'level': 'WARNING'},
            'stripe': {'level': 'WARNING'},
            'sqlalchemy.engine': {'level': 'WARNING'},
            'uvicorn.access': {'level': 'WARNING'},
        },
    }


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    force: bool = False
) -> logging.Logger:
    """
    Setup application logging configuration.

    Args:
        log_level: Overrides settings.LOG_LEVEL
        log_format: Overrides settings.LOG_FORMAT ("json" or "text")
        force: Reconfigure even if logging was already set up

    Returns:
        logging.Logger: The startup logger
    """
    global _logging_configured

    if _logging_configured and not force:
        return logging.getLogger("startup")

    settings = get_settings()
    log_level = (log_level or settings.LOG_LEVEL).upper()
    log_format = log_format or settings.LOG_FORMAT

    logging.config.dictConfig(build_logging_config(log_level, log_format))

    _logging_configured = True
    return logging.getLogger("startup")


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        StructuredLogger instance
    """
    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = StructuredLogger(name)
    _loggers_cache[name] = logger

    return logger


@contextmanager
def log_context(request_id: str = None, user_id: str = None):
    """
    Context manager for adding contextual information to logs.

    Args:
        request_id: Request identifier (generated when omitted)
        user_id: User identifier
    """
    if request_id is None:
        request_id = str(uuid4())

    request_token = request_id_var.set(request_id)
    user_token = user_id_var.set(user_id or '')

    try:
        yield {'request_id': request_id, 'user_id': user_id}
    finally:
        request_id_var.reset(request_token)
        user_id_var.reset(user_token)


def bind_user(user_id: str) -> None:
    """Attach a user id to the current request's log context."""
    user_id_var.set(user_id or '')


def log_startup_event(service_name: str, version: str, extra: Dict = None):
    """Log application startup event."""
    get_logger('startup').info(
        f"Service {service_name} starting up",
        extra={
            'event_type': 'service_startup',
            'service_name': service_name,
            'version': version,
            **(extra or {})
        }
    )


def log_shutdown_event(service_name: str, extra: Dict = None):
    """Log application shutdown event."""
    get_logger('shutdown').info(
        f"Service {service_name} shutting down",
        extra={
            'event_type': 'service_shutdown',
            'service_name': service_name,
            **(extra or {})
        }
    )
