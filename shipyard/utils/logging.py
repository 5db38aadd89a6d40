"""
Logging Configuration

Structured logging setup with JSON output for production.
"""
import logging
import sys
from typing import Any, Dict
import json
from datetime import datetime


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Makes logs machine-readable for log aggregation systems.
    """

    # Extra fields copied into the JSON document when present on a record
    extra_fields = ("user_id", "organization_id", "client", "path", "method", "event_type", "reason")

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in self.extra_fields:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if getattr(record, "security_event", False):
            log_data["security_event"] = True

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format for structured logging

    NOTE: Call this once at application startup.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

    root_logger.addHandler(handler)

    # Reduce noise from noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Use this instead of logging.getLogger() for consistency.
    """
    return logging.getLogger(name)


def log_security_event(event_type: str, details: Dict[str, Any], logger: logging.Logger) -> None:
    """
    Log security-related events.

    Event types:
    - failed_sign_in: Wrong email, password or TOTP code
    - failed_password_change: Wrong current password
    - failed_totp_disable: Wrong password when turning off TOTP
    - invalid_password_reset: Unknown or expired reset link
    """
    log_data = {
        "security_event": True,
        "event_type": event_type,
        **details
    }

    logger.warning(f"SECURITY EVENT: {event_type}", extra=log_data)
