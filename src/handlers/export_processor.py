"""Export processing Lambda handler.

Triggered by SQS batches from the export queue. Each record body is an
export job message; completed jobs are marked in the status table.

Environment variables:
- STATUS_TABLE_NAME: DynamoDB table holding job status (required)
- STATUS_KEY_ATTRIBUTE: Partition key attribute name (default: jobId)
- AWS_REGION: Region of the status table (default: us-east-1)
- EXPORT_TASK_DURATION_SECONDS: Simulated export duration (default: 10)
- STATUS_REQUIRE_EXISTING: Only update jobs already in the table
- LOG_LEVEL / LOG_JSON: Logging output
"""

from typing import Any, Optional

from export_worker.core import (
    WorkerConfig,
    bind_request_context,
    configure_logging,
    get_logger,
)
from export_worker.jobs import BatchProcessor, QueueMessage

configure_logging(level="INFO", json_format=True)
logger = get_logger(__name__)

# Reused across invocations of a warm container
_processor: Optional[BatchProcessor] = None


def _get_processor() -> BatchProcessor:
    """Get or create the batch processor."""
    global _processor
    if _processor is None:
        config = WorkerConfig.from_env()
        configure_logging(level=config.log_level, json_format=config.log_json)
        logger.info(
            "export_processor_configured",
            table_name=config.table_name,
            key_attribute=config.key_attribute,
            region=config.region,
            require_existing=config.require_existing,
        )
        _processor = BatchProcessor.from_config(config)
    return _processor


def set_processor(processor: Optional[BatchProcessor]) -> None:
    """Replace the shared processor (None forces a rebuild from the environment)."""
    global _processor
    _processor = processor


def handler(event: dict, context: Any) -> str:
    """Lambda handler for export job batches.

    Args:
        event: SQS event containing export job messages.
        context: Lambda context.

    Returns:
        Summary string with success and failure counts.
    """
    request_id = getattr(context, "aws_request_id", None)
    records = (event or {}).get("Records") or []
    bind_request_context(request_id=request_id)

    # Built before the first log line so logging follows the worker config
    processor = _get_processor()
    logger.info("export_processor_invoked", record_count=len(records))

    messages = [QueueMessage.from_sqs_record(record) for record in records]
    summary = processor.process_batch(messages)

    result = summary.to_message()
    logger.info(
        "export_processor_finished",
        success_count=summary.success_count,
        failure_count=summary.failure_count,
        failed_message_ids=summary.failed_message_ids,
    )
    return result
