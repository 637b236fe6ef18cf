"""Data models for export job processing.

- Job messages parsed from queue message bodies
- Raw queue messages and per-message outcomes
- Batch summary returned to the invoker
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class JobStatus(str, Enum):
    """Status values written to the status store."""
    COMPLETED = "Completed"


class ProcessingStage(str, Enum):
    """Stages a message passes through in the batch pipeline."""
    RECEIVED = "received"
    PARSED = "parsed"
    VALIDATED = "validated"
    EXECUTED = "executed"
    RECORDED = "recorded"


class JobMessage(BaseModel):
    """One export job, parsed from a queue message body.

    Keys are required and must hold strings, but may be empty; whether
    the values are acceptable is decided by the task validator.
    """
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    job_id: StrictStr = Field(..., alias="jobId", description="Job identifier")
    task_type: StrictStr = Field(..., alias="taskType", description="Requested task type")
    timestamp: Optional[Any] = Field(None, description="Opaque submission timestamp, not validated")


class QueueMessage(BaseModel):
    """A raw message as delivered by the queue."""
    message_id: Optional[str] = Field(None, description="Queue message identifier")
    body: Any = Field(None, description="Raw message body")

    @classmethod
    def from_sqs_record(cls, record: Any) -> "QueueMessage":
        """Create from an SQS event record.

        Never raises: a record that is not a mapping yields a message with
        no body, which then fails parsing like any other malformed message.
        """
        if not isinstance(record, dict):
            return cls()
        message_id = record.get("messageId")
        return cls(
            message_id=str(message_id) if message_id is not None else None,
            body=record.get("body"),
        )


class MessageResult(BaseModel):
    """Outcome of processing one message."""
    message_id: Optional[str] = None
    job_id: Optional[str] = None
    stage: ProcessingStage = ProcessingStage.RECEIVED
    succeeded: bool = False
    error: Optional[str] = None


class BatchSummary(BaseModel):
    """Aggregate result of one batch invocation."""
    success_count: int = 0
    failure_count: int = 0
    results: list[MessageResult] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def failed_message_ids(self) -> list[Optional[str]]:
        return [r.message_id for r in self.results if not r.succeeded]

    def add(self, result: MessageResult) -> None:
        """Record a message outcome and update the counts."""
        self.results.append(result)
        if result.succeeded:
            self.success_count += 1
        else:
            self.failure_count += 1

    def to_message(self) -> str:
        """Render the summary string returned by the handler."""
        return (
            f"Processing completed. Success: {self.success_count}. "
            f"Failures: {self.failure_count}."
        )
