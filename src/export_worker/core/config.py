"""Worker configuration loaded from the process environment."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from export_worker.core.errors import ConfigurationError

DEFAULT_KEY_ATTRIBUTE = "jobId"
DEFAULT_REGION = "us-east-1"
DEFAULT_TASK_DURATION_SECONDS = 10.0

_TRUE_VALUES = {"1", "true", "yes", "on"}


class WorkerConfig(BaseModel):
    """Settings for the status store and the export task."""

    model_config = {"frozen": True}

    table_name: str = Field(..., min_length=1, description="Status table name")
    key_attribute: str = Field(
        default=DEFAULT_KEY_ATTRIBUTE, min_length=1, description="Primary key attribute"
    )
    region: str = Field(default=DEFAULT_REGION, description="AWS region of the table")
    task_duration_seconds: float = Field(
        default=DEFAULT_TASK_DURATION_SECONDS, ge=0, description="Simulated export duration"
    )
    require_existing: bool = Field(
        default=False, description="Reject status updates for keys not already stored"
    )
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "WorkerConfig":
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read from; defaults to ``os.environ``.

        Returns:
            WorkerConfig with defaults applied.

        Raises:
            ConfigurationError: STATUS_TABLE_NAME is unset or a value is malformed.
        """
        env = os.environ if environ is None else environ

        table_name = env.get("STATUS_TABLE_NAME", "").strip()
        if not table_name:
            raise ConfigurationError(
                "Missing required environment variables: STATUS_TABLE_NAME",
                missing=["STATUS_TABLE_NAME"],
            )

        duration = env.get("EXPORT_TASK_DURATION_SECONDS")
        try:
            task_duration = float(duration) if duration else DEFAULT_TASK_DURATION_SECONDS
        except ValueError as e:
            raise ConfigurationError(
                f"EXPORT_TASK_DURATION_SECONDS is not a number: {duration}"
            ) from e

        return cls(
            table_name=table_name,
            key_attribute=env.get("STATUS_KEY_ATTRIBUTE") or DEFAULT_KEY_ATTRIBUTE,
            region=env.get("AWS_REGION") or DEFAULT_REGION,
            task_duration_seconds=task_duration,
            require_existing=_as_bool(env.get("STATUS_REQUIRE_EXISTING"), False),
            log_level=env.get("LOG_LEVEL") or "INFO",
            log_json=_as_bool(env.get("LOG_JSON"), True),
        )


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES
