"""Core utilities for the export worker."""

from export_worker.core.logging import get_logger, configure_logging, bind_request_context
from export_worker.core.errors import (
    ExportWorkerError,
    MessageFormatError,
    ValidationError,
    ExecutionError,
    PersistenceError,
    TaskInterruptedError,
    ConfigurationError,
)
from export_worker.core.config import WorkerConfig

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "bind_request_context",
    # Errors
    "ExportWorkerError",
    "MessageFormatError",
    "ValidationError",
    "ExecutionError",
    "PersistenceError",
    "TaskInterruptedError",
    "ConfigurationError",
    # Configuration
    "WorkerConfig",
]
