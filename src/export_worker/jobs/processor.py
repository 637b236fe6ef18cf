"""Batch processing of export job messages.

Each message goes through parse -> validate -> execute -> record. A
failure at any step is logged and counted against that message only;
the rest of the batch continues in delivery order.
"""

import json
from typing import Any, Iterable, Optional

from pydantic import ValidationError as SchemaValidationError

from export_worker.core import get_logger
from export_worker.core.config import WorkerConfig
from export_worker.core.errors import (
    ExecutionError,
    ExportWorkerError,
    MessageFormatError,
    PersistenceError,
    ValidationError,
)
from export_worker.jobs.executor import SimulatedExportRunner, TaskExecutor
from export_worker.jobs.models import (
    BatchSummary,
    JobMessage,
    JobStatus,
    MessageResult,
    ProcessingStage,
    QueueMessage,
)
from export_worker.jobs.status_store import DynamoDBStatusStore, StatusRecorder
from export_worker.jobs.validator import TaskValidator

logger = get_logger(__name__)


def parse_job_message(body: Any, message_id: Optional[str] = None) -> JobMessage:
    """Parse a raw message body into a JobMessage.

    Args:
        body: JSON text (str or bytes) of the message body.
        message_id: Queue message ID, for error context.

    Returns:
        JobMessage: The parsed job.

    Raises:
        MessageFormatError: Body is empty, not JSON, not an object, or
            missing ``jobId``/``taskType``.
    """
    if body is None or (isinstance(body, (str, bytes)) and not body.strip()):
        raise MessageFormatError("Empty message body", message_id=message_id)

    try:
        data = json.loads(body)
    except (TypeError, ValueError) as e:
        logger.error("message_body_not_json", message_id=message_id, body=body)
        raise MessageFormatError(
            f"Invalid JSON in message body: {e}", message_id=message_id
        ) from e

    if not isinstance(data, dict):
        raise MessageFormatError(
            f"Message body must be a JSON object, got {type(data).__name__}",
            message_id=message_id,
        )

    try:
        return JobMessage.model_validate(data)
    except SchemaValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise MessageFormatError(
            f"Invalid message schema: {', '.join(fields)}", message_id=message_id
        ) from e


class BatchProcessor:
    """Runs a batch of queue messages through the export pipeline."""

    def __init__(
        self,
        recorder: StatusRecorder,
        executor: Optional[TaskExecutor] = None,
        validator: Optional[TaskValidator] = None,
    ):
        """Initialize the processor.

        Args:
            recorder: Status recorder; its store is reused for the whole batch.
            executor: Task executor (defaults to the simulated export).
            validator: Task validator.
        """
        self.recorder = recorder
        self.executor = executor or TaskExecutor()
        self.validator = validator or TaskValidator()

    @classmethod
    def from_config(cls, config: WorkerConfig) -> "BatchProcessor":
        """Build a processor backed by DynamoDB from worker configuration."""
        store = DynamoDBStatusStore.from_config(config)
        runner = SimulatedExportRunner(duration_seconds=config.task_duration_seconds)
        return cls(
            recorder=StatusRecorder(store),
            executor=TaskExecutor(runner),
        )

    def process_batch(self, messages: Iterable[QueueMessage]) -> BatchSummary:
        """Process every message in order.

        Never raises; each message is counted as exactly one success or
        one failure.

        Args:
            messages: Messages in delivery order.

        Returns:
            BatchSummary with counts and per-message results.
        """
        summary = BatchSummary()

        for message in messages:
            result = self.process_message(message)
            summary.add(result)

        logger.info(
            "batch_processing_completed",
            success_count=summary.success_count,
            failure_count=summary.failure_count,
        )
        return summary

    def process_message(self, message: QueueMessage) -> MessageResult:
        """Process a single message, converting any failure into a result."""
        result = MessageResult(message_id=message.message_id)
        logger.info("processing_message", message_id=message.message_id)

        try:
            self._run_pipeline(message, result)
        except MessageFormatError as e:
            return self._fail(result, e, "invalid_message_format")
        except ValidationError as e:
            return self._fail(result, e, "invalid_task_parameters")
        except ExecutionError as e:
            return self._fail(result, e, "task_execution_failed")
        except PersistenceError as e:
            # The export ran but its completion is not recorded.
            return self._fail(result, e, "status_recording_failed")
        except Exception as e:
            return self._fail(result, e, "unexpected_processing_error")

        result.succeeded = True
        logger.info(
            "message_processed",
            message_id=message.message_id,
            job_id=result.job_id,
        )
        return result

    def _run_pipeline(self, message: QueueMessage, result: MessageResult) -> None:
        logger.debug("message_body", message_id=message.message_id, body=message.body)

        job = parse_job_message(message.body, message.message_id)
        result.job_id = job.job_id
        result.stage = ProcessingStage.PARSED

        if not self.validator.validate(job.job_id, job.task_type):
            raise ValidationError(
                "Invalid task parameters in message",
                job_id=job.job_id,
                task_type=job.task_type,
            )
        result.stage = ProcessingStage.VALIDATED

        outcome = self.executor.execute(job.job_id, job.task_type)
        result.stage = ProcessingStage.EXECUTED
        logger.info("task_result", job_id=job.job_id, result=outcome)

        self.recorder.record_status(job.job_id, JobStatus.COMPLETED)
        result.stage = ProcessingStage.RECORDED

    def _fail(self, result: MessageResult, error: Exception, event: str) -> MessageResult:
        result.succeeded = False
        result.error = str(error)
        logger.error(
            event,
            message_id=result.message_id,
            job_id=result.job_id,
            stage=result.stage.value,
            error_type=type(error).__name__,
            error=str(error),
            details=error.details if isinstance(error, ExportWorkerError) else None,
            cause=repr(error.__cause__) if error.__cause__ else None,
        )
        return result
