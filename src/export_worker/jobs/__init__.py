"""Export job processing: parsing, validation, execution and status recording."""

from export_worker.jobs.models import (
    JobStatus,
    ProcessingStage,
    JobMessage,
    QueueMessage,
    MessageResult,
    BatchSummary,
)
from export_worker.jobs.validator import TaskValidator, SUPPORTED_TASK_TYPES
from export_worker.jobs.executor import TaskRunner, SimulatedExportRunner, TaskExecutor
from export_worker.jobs.status_store import (
    StatusStore,
    DynamoDBStatusStore,
    InMemoryStatusStore,
    RecordNotFoundError,
    StatusRecorder,
)
from export_worker.jobs.processor import BatchProcessor, parse_job_message

__all__ = [
    # Models
    "JobStatus",
    "ProcessingStage",
    "JobMessage",
    "QueueMessage",
    "MessageResult",
    "BatchSummary",
    # Validation
    "TaskValidator",
    "SUPPORTED_TASK_TYPES",
    # Execution
    "TaskRunner",
    "SimulatedExportRunner",
    "TaskExecutor",
    # Status persistence
    "StatusStore",
    "DynamoDBStatusStore",
    "InMemoryStatusStore",
    "RecordNotFoundError",
    "StatusRecorder",
    # Orchestration
    "BatchProcessor",
    "parse_job_message",
]
