"""Parameter validation for export jobs."""

from typing import Any

from export_worker.core import get_logger

logger = get_logger(__name__)

# Only export tasks are handled by this worker
SUPPORTED_TASK_TYPES = frozenset({"export"})


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class TaskValidator:
    """Checks that a job's parameters are well-formed and supported.

    Never raises; every rejection is logged with its reason.
    """

    def __init__(self, supported_task_types=SUPPORTED_TASK_TYPES):
        self.supported_task_types = frozenset(supported_task_types)

    def validate(self, job_id: Any, task_type: Any) -> bool:
        """Validate job parameters.

        Args:
            job_id: Job identifier; must be a non-blank string.
            task_type: Task type; must exactly match a supported type.

        Returns:
            True if the job can be executed.
        """
        if _is_blank(job_id):
            logger.error("invalid_job_id", job_id=job_id)
            return False

        if _is_blank(task_type):
            logger.error("invalid_task_type", job_id=job_id, task_type=task_type)
            return False

        if task_type not in self.supported_task_types:
            logger.error("unsupported_task_type", job_id=job_id, task_type=task_type)
            return False

        return True
