"""
Structured logging utilities for the Keycloak realm provider.

This module provides correlation ID tracking, structured log formatting,
and operation logging helpers for troubleshooting provider runs.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

from ..constants import RESOURCE_TYPE_REALM

# Context variable for tracking correlation IDs across one lifecycle operation
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Structured fields copied from log records into the JSON output
STRUCTURED_FIELDS = (
    "resource_type",
    "realm_name",
    "operation",
    "duration",
    "dry_run",
    "error_type",
    "keycloak_url",
    "http_status",
    "response_body",
)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add correlation ID to the log record.

        Args:
            record: The log record to process

        Returns:
            True to allow the record to be processed
        """
        current_correlation_id = correlation_id.get()
        if not current_correlation_id:
            current_correlation_id = generate_correlation_id()
            correlation_id.set(current_correlation_id)

        record.correlation_id = current_correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as one JSON object per line.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as structured JSON.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log message
        """
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """
    Generate a new correlation ID.

    Returns:
        Unique correlation ID string
    """
    return str(uuid.uuid4())[:8]


def set_correlation_id(corr_id: str) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        corr_id: Correlation ID to set

    Returns:
        The correlation ID that was set
    """
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    """Get the current correlation ID, or empty string if none set."""
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
) -> None:
    """
    Set up structured logging for the provider process.

    Log output goes to stderr, which the Pulumi engine surfaces for
    dynamic providers.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter: logging.Formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class ProviderLogger:
    """
    Logger for realm lifecycle operations with structured logging support.

    Provides convenient methods for logging the start, success and failure
    of provider operations with correlation ID tracking.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def log_operation_start(
        self,
        operation: str,
        realm_name: str,
        dry_run: bool = False,
        correlation_id: str | None = None,
    ) -> str:
        """
        Log the start of a lifecycle operation.

        Args:
            operation: Lifecycle operation (check, create, read, update, delete)
            realm_name: Name of the realm
            dry_run: Whether the operation is a preview
            correlation_id: Optional correlation ID (will generate if not provided)

        Returns:
            The correlation ID used for this operation
        """
        if correlation_id is None:
            correlation_id = generate_correlation_id()

        set_correlation_id(correlation_id)

        self.logger.info(
            f"Starting {operation} for realm {realm_name}",
            extra={
                "resource_type": RESOURCE_TYPE_REALM,
                "realm_name": realm_name,
                "operation": f"{operation}_start",
                "dry_run": dry_run,
            },
        )

        return correlation_id

    def log_operation_success(
        self, operation: str, realm_name: str, duration: float
    ) -> None:
        """
        Log successful completion of a lifecycle operation.

        Args:
            operation: Lifecycle operation
            realm_name: Name of the realm
            duration: Operation duration in seconds
        """
        self.logger.info(
            f"Completed {operation} for realm {realm_name}",
            extra={
                "resource_type": RESOURCE_TYPE_REALM,
                "realm_name": realm_name,
                "operation": f"{operation}_success",
                "duration": duration,
            },
        )

    def log_operation_error(
        self,
        operation: str,
        realm_name: str,
        error: Exception,
        duration: float,
    ) -> None:
        """
        Log a failed lifecycle operation.

        Args:
            operation: Lifecycle operation
            realm_name: Name of the realm
            error: The error that occurred
            duration: Operation duration in seconds
        """
        self.logger.error(
            f"{operation.capitalize()} failed for realm {realm_name}: {error}",
            extra={
                "resource_type": RESOURCE_TYPE_REALM,
                "realm_name": realm_name,
                "operation": f"{operation}_error",
                "error_type": type(error).__name__,
                "duration": duration,
            },
            exc_info=True,
        )

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with extra data."""
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with extra data."""
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with extra data."""
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with extra data."""
        self.logger.error(message, exc_info=exc_info, extra=kwargs)
