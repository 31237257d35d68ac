"""
Logging configuration for the AEGIS compliance service.

Provides structured JSON logging for audit trails and debugging.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, List, Optional

# Context variable for request ID tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in a consistent JSON format suitable for
    log aggregation systems like ELK, Splunk, or CloudWatch.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Specialized logger for audit events.

    Records the submission write path, compliance decisions
    and certificate issuance.
    """

    def __init__(self, name: str = "aegis.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, exc_info=None, **kwargs) -> None:
        """Internal logging method with extra fields."""
        extra = {
            "event_type": event_type,
            "request_id": request_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            exc_info
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def submission_received(
        self,
        lab_name: Any,
        model_name: Any,
        ignored_fields: Optional[List[str]] = None
    ) -> None:
        """Log an inbound submission before validation. Server-assigned fields it carried are listed."""
        self._log(
            logging.INFO,
            "SUBMISSION_RECEIVED",
            lab_name=lab_name,
            model_name=model_name,
            ignored_fields=ignored_fields or [],
            message=f"Submission received from {lab_name}"
        )

    def request_rejected(self, field: str, reason: str) -> None:
        self._log(
            logging.WARNING,
            "REQUEST_REJECTED",
            field=field,
            reason=reason,
            message=f"Request rejected on {field}: {reason}"
        )

    def submission_stored(self, submission_id: int, signature: str) -> None:
        self._log(
            logging.INFO,
            "SUBMISSION_STORED",
            submission_id=submission_id,
            signature=signature,
            message=f"Submission {submission_id} stored"
        )

    def verification_decision(
        self,
        submission_id: int,
        compliant: bool,
        status: str,
        proof_hash: str
    ) -> None:
        """Log a compliance decision. Non-compliant verdicts log at WARNING."""
        level = logging.INFO if compliant else logging.WARNING
        self._log(
            level,
            "VERIFICATION_DECISION",
            submission_id=submission_id,
            compliant=compliant,
            status=status,
            proof_hash=proof_hash,
            message=f"Verification decision for {submission_id}: {status}"
        )

    def report_generated(self, submission_id: int, size_bytes: int) -> None:
        self._log(
            logging.INFO,
            "REPORT_GENERATED",
            submission_id=submission_id,
            size_bytes=size_bytes,
            message=f"Certificate generated for {submission_id}"
        )

    def lookup_miss(self, submission_id, operation: str) -> None:
        self._log(
            logging.INFO,
            "LOOKUP_MISS",
            submission_id=submission_id,
            operation=operation,
            message=f"{operation}: submission {submission_id} not found"
        )

    def store_failure(self, operation: str, exc: BaseException) -> None:
        """Log a persistence failure with its traceback."""
        self._log(
            logging.ERROR,
            "STORE_FAILURE",
            exc_info=(type(exc), exc, exc.__traceback__),
            operation=operation,
            message=f"Record store failure during {operation}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting (recommended for production)
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID for the current context.

    Args:
        request_id: Request ID to set, or None to generate one

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


# Global audit logger instance
audit_log = AuditLogger()
