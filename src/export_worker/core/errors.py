"""Custom exception classes for the export worker."""

from typing import Optional


class ExportWorkerError(Exception):
    """Base exception for all export worker errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class MessageFormatError(ExportWorkerError):
    """Raw message body cannot be parsed into a job message."""

    def __init__(
        self,
        message: str,
        message_id: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="MESSAGE_FORMAT", **kwargs)
        self.message_id = message_id
        self.details.update({"message_id": message_id})


class ValidationError(ExportWorkerError):
    """Parsed job message has invalid or unsupported parameters."""

    def __init__(
        self,
        message: str,
        job_id: Optional[str] = None,
        task_type: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="VALIDATION", **kwargs)
        self.job_id = job_id
        self.task_type = task_type
        self.details.update({
            "job_id": job_id,
            "task_type": task_type,
        })


class ExecutionError(ExportWorkerError):
    """Task execution failed or was interrupted."""

    def __init__(
        self,
        message: str,
        job_id: Optional[str] = None,
        interrupted: bool = False,
        **kwargs,
    ):
        super().__init__(message, error_code="EXECUTION", **kwargs)
        self.job_id = job_id
        self.interrupted = interrupted
        self.details.update({
            "job_id": job_id,
            "interrupted": interrupted,
        })


class PersistenceError(ExportWorkerError):
    """Status update was rejected or the store could not be reached."""

    def __init__(
        self,
        message: str,
        job_id: Optional[str] = None,
        status: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="PERSISTENCE", **kwargs)
        self.job_id = job_id
        self.status = status
        self.details.update({
            "job_id": job_id,
            "status": status,
        })


class TaskInterruptedError(ExportWorkerError):
    """Raised by a task runner when its wait is cancelled."""

    def __init__(self, message: str, job_id: Optional[str] = None, **kwargs):
        super().__init__(message, error_code="INTERRUPTED", **kwargs)
        self.job_id = job_id
        self.details.update({"job_id": job_id})


class ConfigurationError(ExportWorkerError):
    """Required configuration is missing or malformed."""

    def __init__(
        self,
        message: str,
        missing: Optional[list] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="CONFIGURATION", **kwargs)
        self.missing = missing or []
        self.details.update({"missing": self.missing})
