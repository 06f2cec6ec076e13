"""
Scholarship Portal - Centralized Logging Configuration
Supports both development (plain text) and production (JSON structured) logging
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict
from contextvars import ContextVar

from scholarship.core.config import settings


# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

# LogRecord attributes that are not user-supplied extras
_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName', 'request_id', 'user_id',
}


def get_request_id() -> str:
    """Get current request ID from context"""
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    """Set request ID in context"""
    request_id_var.set(request_id)


def get_user_id() -> str:
    """Get current user ID from context"""
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    """Set user ID in context"""
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Generate a unique request ID"""
    return str(uuid.uuid4())[:8]


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging in production
    Outputs logs in a format easily parsed by log aggregation tools
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = get_request_id()
        if request_id:
            log_data["request_id"] = request_id

        user_id = get_user_id()
        if user_id:
            log_data["user_id"] = user_id

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info) if record.exc_info[0] else None
            }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """
    Formatter that includes request_id and user_id context variables
    Used for development with readable output
    """

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'

        return super().format(record)


class ScholarshipLogger(logging.Logger):
    """
    Custom logger with convenience methods for structured logging
    """

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Log HTTP request completion; 4xx as warning, 5xx as error"""
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        self.log(
            level,
            f"← {method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request_complete",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": duration_ms,
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, username: str = None,
                       reason: str = None, **kwargs) -> None:
        """Log authentication events"""
        level = logging.INFO if success else logging.WARNING
        self.log(
            level,
            f"Auth {event}: {'success' if success else 'failed'}" +
            (f" - {username}" if username else "") +
            (f" - {reason}" if reason else ""),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "username": username,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_upload_event(self, field_name: str, success: bool, size_bytes: int = 0,
                         url: str = None, **kwargs) -> None:
        """Log a single document upload"""
        level = logging.INFO if success else logging.ERROR
        self.log(
            level,
            f"Upload {field_name}: {'ok' if success else 'failed'}" +
            (f" ({size_bytes} bytes)" if size_bytes else ""),
            extra={
                "event_type": "upload",
                "upload_field": field_name,
                "upload_success": success,
                "size_bytes": size_bytes,
                "url": url,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               **kwargs) -> None:
        """Log error with full context"""
        self.error(
            f"Error in {context}: {type(error).__name__}: {str(error)}",
            exc_info=True,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


def setup_logging() -> ScholarshipLogger:
    """Setup logging configuration based on environment"""

    logging.setLoggerClass(ScholarshipLogger)

    logger = logging.getLogger("scholarship")
    logger.__class__ = ScholarshipLogger  # Ensure it's our custom class
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    logger.handlers.clear()

    is_production = settings.ENVIRONMENT == "production"

    if is_production:
        # Production: JSON formatted logs for log aggregation
        json_formatter = JSONFormatter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(json_formatter)
        logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_file = Path(settings.LOG_FILE)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10485760,  # 10MB
                backupCount=10
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(json_formatter)
            logger.addHandler(file_handler)

    else:
        detailed_format = (
            "%(asctime)s | %(levelname)-8s | "
            "[%(request_id)s] [%(user_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        simple_format = "%(levelname)-8s | %(message)s"

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(ContextualFormatter(simple_format))
        logger.addHandler(console_handler)

        if settings.LOG_FILE:
            log_file = Path(settings.LOG_FILE)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10485760,  # 10MB
                backupCount=5
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(ContextualFormatter(detailed_format))
            logger.addHandler(file_handler)

    # Suppress noisy loggers
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger.info(
        "Logging initialized",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "json_logging": is_production
        }
    )

    return logger


logger: ScholarshipLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'ScholarshipLogger',
]
