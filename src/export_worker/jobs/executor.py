"""Export task execution.

The export itself is a placeholder: ``SimulatedExportRunner`` blocks the
calling thread for a fixed duration. Runners are injected into
``TaskExecutor`` so tests can substitute instant or failing fakes.
"""

import threading
from typing import Optional, Protocol

from export_worker.core import get_logger
from export_worker.core.config import DEFAULT_TASK_DURATION_SECONDS
from export_worker.core.errors import ExecutionError, TaskInterruptedError

logger = get_logger(__name__)


class TaskRunner(Protocol):
    """Performs the actual work for a job."""

    def run(self, job_id: str, task_type: str) -> None:
        ...


class SimulatedExportRunner:
    """Blocks for a fixed duration in place of a real export."""

    def __init__(self, duration_seconds: float = DEFAULT_TASK_DURATION_SECONDS):
        self.duration_seconds = duration_seconds
        self._cancelled = threading.Event()

    def run(self, job_id: str, task_type: str) -> None:
        logger.info(
            "export_task_executing",
            job_id=job_id,
            duration_seconds=self.duration_seconds,
        )
        if self._cancelled.wait(self.duration_seconds):
            # A cancellation interrupts one task only
            self._cancelled.clear()
            raise TaskInterruptedError(
                f"Export wait cancelled for job: {job_id}", job_id=job_id
            )

    def cancel(self) -> None:
        """Interrupt the current wait, or the next one if no task is running."""
        self._cancelled.set()


class TaskExecutor:
    """Runs export tasks and converts any failure into ExecutionError."""

    def __init__(self, runner: Optional[TaskRunner] = None):
        self.runner = runner or SimulatedExportRunner()

    def execute(self, job_id: str, task_type: str) -> str:
        """Execute an export task.

        Args:
            job_id: Job identifier.
            task_type: Task type (already validated).

        Returns:
            Human-readable success message.

        Raises:
            ExecutionError: The task was interrupted or failed.
        """
        logger.info("export_task_started", job_id=job_id, task_type=task_type)

        try:
            self.runner.run(job_id, task_type)
        except TaskInterruptedError as e:
            logger.error("export_task_interrupted", job_id=job_id, error=str(e))
            raise ExecutionError(
                f"Export task interrupted for job: {job_id}",
                job_id=job_id,
                interrupted=True,
            ) from e
        except Exception as e:
            logger.error(
                "export_task_failed",
                job_id=job_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise ExecutionError(
                f"Export task failed for job: {job_id}", job_id=job_id
            ) from e

        logger.info("export_task_completed", job_id=job_id)
        return f"Export completed successfully for job: {job_id}"
