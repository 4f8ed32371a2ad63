"""Structured logging configuration and utilities."""

import logging
import sys
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from .. import __version__
from .config import settings


class StructuredFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        log_record["environment"] = settings.ENVIRONMENT
        log_record["version"] = __version__

        # Request context, set through ``extra=`` by the service layer
        for key in ("request_id", "actor_id", "proposal_id", "course_id"):
            if hasattr(record, key):
                log_record[key] = getattr(record, key)


def setup_logging() -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if settings.ENVIRONMENT == "development":
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
    else:
        handler.setFormatter(StructuredFormatter(
            "%(timestamp)s %(level)s %(logger)s %(message)s"
        ))
    root_logger.addHandler(handler)

    # Noisy libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger("bytecourses.services").setLevel(logging.INFO)


logger = logging.getLogger("bytecourses")


def log_proposal_event(
    event: str,
    proposal_id: int,
    actor_id: int,
    **kwargs: Any,
) -> None:
    """Log a proposal lifecycle event."""
    log_data = {
        "event": event,
        "proposal_id": proposal_id,
        "actor_id": actor_id,
        **kwargs,
    }
    logger.info(event, extra=log_data)


def log_transition(
    proposal_id: int,
    actor_id: int,
    action: str,
    from_status: str,
    to_status: str,
    **kwargs: Any,
) -> None:
    """Log a proposal status transition."""
    log_data = {
        "event": "proposal.transitioned",
        "proposal_id": proposal_id,
        "actor_id": actor_id,
        "action": action,
        "from_status": from_status,
        "to_status": to_status,
        **kwargs,
    }
    logger.info(f"Proposal transition: {from_status} → {to_status}", extra=log_data)


def log_course_event(
    event: str,
    course_id: int,
    actor_id: int,
    proposal_id: Optional[int] = None,
    **kwargs: Any,
) -> None:
    """Log a course lifecycle event."""
    log_data = {
        "event": event,
        "course_id": course_id,
        "actor_id": actor_id,
        "proposal_id": proposal_id,
        **kwargs,
    }
    logger.info(event, extra=log_data)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    error_code: Optional[str] = None,
) -> None:
    """Log errors with context."""
    error_data = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "error_code": error_code,
        **(context or {}),
    }

    logger.error(f"Error: {error_data['error_type']}", extra=error_data, exc_info=True)
