"""Job status persistence.

``DynamoDBStatusStore`` issues a single ``SET #status = :status`` update per
job. DynamoDB's UpdateItem creates the item when the key is absent, so the
default behaviour is an upsert. With ``require_existing`` the update is
conditioned on the key already being present and is rejected otherwise.
"""

from typing import Any, Optional, Protocol, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from export_worker.core import get_logger
from export_worker.core.config import DEFAULT_KEY_ATTRIBUTE, WorkerConfig
from export_worker.core.errors import PersistenceError
from export_worker.jobs.models import JobStatus

logger = get_logger(__name__)


class RecordNotFoundError(KeyError):
    """Raised by a strict store when the key has no existing record."""


class StatusStore(Protocol):
    """Key-value store holding one status per job."""

    def upsert_status(self, key: str, status: str) -> None:
        ...


class DynamoDBStatusStore:
    """Status store backed by a DynamoDB table."""

    def __init__(
        self,
        table_name: str,
        key_attribute: str = DEFAULT_KEY_ATTRIBUTE,
        region: Optional[str] = None,
        require_existing: bool = False,
        dynamodb_resource: Optional[Any] = None,
    ):
        """Initialize the store.

        Args:
            table_name: DynamoDB table name
            key_attribute: Name of the table's partition key
            region: AWS region; boto3's default resolution applies when None
            require_existing: Reject updates for keys not already stored
            dynamodb_resource: Optional DynamoDB resource (for testing)
        """
        self.table_name = table_name
        self.key_attribute = key_attribute
        self.region = region
        self.require_existing = require_existing
        self._resource = dynamodb_resource
        self._table = None

    @classmethod
    def from_config(cls, config: WorkerConfig) -> "DynamoDBStatusStore":
        return cls(
            table_name=config.table_name,
            key_attribute=config.key_attribute,
            region=config.region,
            require_existing=config.require_existing,
        )

    @property
    def table(self):
        """Get DynamoDB table resource."""
        if self._table is None:
            if self._resource is None:
                self._resource = boto3.resource("dynamodb", region_name=self.region)
            self._table = self._resource.Table(self.table_name)
        return self._table

    def upsert_status(self, key: str, status: str) -> None:
        params: dict[str, Any] = {
            "Key": {self.key_attribute: key},
            "UpdateExpression": "SET #status = :status",
            "ExpressionAttributeNames": {"#status": "status"},
            "ExpressionAttributeValues": {":status": status},
        }
        if self.require_existing:
            params["ConditionExpression"] = "attribute_exists(#key)"
            params["ExpressionAttributeNames"]["#key"] = self.key_attribute

        try:
            self.table.update_item(**params)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code == "ConditionalCheckFailedException":
                raise RecordNotFoundError(key) from e
            raise

        logger.debug(
            "status_item_updated",
            table=self.table_name,
            key=key,
            status=status,
        )


class InMemoryStatusStore:
    """Dict-backed status store for local runs and tests."""

    def __init__(self, require_existing: bool = False, items: Optional[dict] = None):
        self.require_existing = require_existing
        self.items: dict[str, dict[str, Any]] = dict(items or {})

    def upsert_status(self, key: str, status: str) -> None:
        if key not in self.items:
            if self.require_existing:
                raise RecordNotFoundError(key)
            self.items[key] = {}
        self.items[key]["status"] = status

    def get_status(self, key: str) -> Optional[str]:
        return self.items.get(key, {}).get("status")


class StatusRecorder:
    """Persists job outcomes through a status store."""

    def __init__(self, store: StatusStore):
        self.store = store

    def record_status(self, job_id: str, status: Union[JobStatus, str] = JobStatus.COMPLETED) -> None:
        """Write a job's status.

        Args:
            job_id: Job identifier used as the store key.
            status: Status value to set.

        Raises:
            PersistenceError: The store rejected the update or was unreachable.
        """
        value = status.value if isinstance(status, JobStatus) else status

        try:
            self.store.upsert_status(job_id, value)
        except RecordNotFoundError as e:
            logger.error("status_record_missing", job_id=job_id, status=value)
            raise PersistenceError(
                f"No status record exists for job: {job_id}",
                job_id=job_id,
                status=value,
            ) from e
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "status_update_failed",
                job_id=job_id,
                status=value,
                error=str(e),
            )
            raise PersistenceError(
                f"Failed to update status for job: {job_id}",
                job_id=job_id,
                status=value,
            ) from e
        except Exception as e:
            logger.error(
                "status_update_unexpected_error",
                job_id=job_id,
                status=value,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise PersistenceError(
                f"Failed to update status for job: {job_id}",
                job_id=job_id,
                status=value,
            ) from e

        logger.info("job_status_recorded", job_id=job_id, status=value)
