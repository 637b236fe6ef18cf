"""Tests for the export processing Lambda handler."""

import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from export_worker.core.errors import ConfigurationError
from export_worker.jobs import (
    BatchProcessor,
    DynamoDBStatusStore,
    StatusRecorder,
    TaskExecutor,
)
from handlers import export_processor


def _sqs_event(*bodies) -> dict:
    return {
        "Records": [
            {
                "messageId": f"msg-{i}",
                "body": body if isinstance(body, str) else json.dumps(body),
                "eventSource": "aws:sqs",
            }
            for i, body in enumerate(bodies)
        ]
    }


class TestExportHandler:
    """Tests for handler()."""

    @pytest.fixture(autouse=True)
    def shared_processor(self, runner, store):
        processor = BatchProcessor(
            recorder=StatusRecorder(store),
            executor=TaskExecutor(runner),
        )
        export_processor.set_processor(processor)
        yield processor
        export_processor.set_processor(None)

    @pytest.fixture
    def context(self):
        return SimpleNamespace(aws_request_id="req-123")

    def test_returns_summary_string(self, context, store):
        event = _sqs_event(
            {"jobId": "J1", "taskType": "export", "timestamp": "2024-01-15T10:30:00Z"},
            {"jobId": "", "taskType": "export"},
        )

        result = export_processor.handler(event, context)

        assert result == "Processing completed. Success: 1. Failures: 1."
        assert store.items == {"J1": {"status": "Completed"}}

    def test_unsupported_task_type(self, context, runner, store):
        result = export_processor.handler(
            _sqs_event({"jobId": "J1", "taskType": "report"}), context
        )

        assert result == "Processing completed. Success: 0. Failures: 1."
        assert runner.calls == []
        assert store.items == {}

    def test_malformed_body(self, context, runner):
        result = export_processor.handler(_sqs_event("{oops"), context)

        assert result == "Processing completed. Success: 0. Failures: 1."
        assert runner.calls == []

    def test_event_without_records(self, context):
        assert export_processor.handler({}, context) == (
            "Processing completed. Success: 0. Failures: 0."
        )

    def test_odd_records_fail_per_message(self, context, store):
        event = {
            "Records": [
                {"messageId": 7, "body": json.dumps({"jobId": "J1", "taskType": "export"})},
                "not-a-record",
                {"messageId": "msg-2", "body": json.dumps({"jobId": "J2", "taskType": "export"})},
            ]
        }

        result = export_processor.handler(event, context)

        assert result == "Processing completed. Success: 2. Failures: 1."
        assert store.items == {
            "J1": {"status": "Completed"},
            "J2": {"status": "Completed"},
        }

    def test_context_without_request_id(self):
        result = export_processor.handler(
            _sqs_event({"jobId": "J1", "taskType": "export"}), None
        )

        assert result == "Processing completed. Success: 1. Failures: 0."


class TestProcessorConstruction:
    """Tests for building the shared processor from the environment."""

    @pytest.fixture(autouse=True)
    def reset_processor(self):
        export_processor.set_processor(None)
        yield
        export_processor.set_processor(None)

    def test_processor_built_once_from_environment(self, monkeypatch):
        monkeypatch.setenv("STATUS_TABLE_NAME", "export-jobs")
        monkeypatch.setenv("STATUS_KEY_ATTRIBUTE", "pk")
        monkeypatch.setenv("AWS_REGION", "eu-west-1")

        first = export_processor._get_processor()
        second = export_processor._get_processor()

        assert first is second
        assert isinstance(first.recorder.store, DynamoDBStatusStore)
        assert first.recorder.store.key_attribute == "pk"
        assert first.recorder.store.region == "eu-west-1"

    def test_logging_configured_from_worker_config(self, monkeypatch):
        monkeypatch.setenv("STATUS_TABLE_NAME", "export-jobs")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_JSON", "0")

        with patch.object(export_processor, "configure_logging") as configure:
            export_processor._get_processor()

        configure.assert_called_once_with(level="DEBUG", json_format=False)

    def test_missing_table_name_fails_invocation(self, monkeypatch):
        monkeypatch.delenv("STATUS_TABLE_NAME", raising=False)

        with pytest.raises(ConfigurationError):
            export_processor.handler(_sqs_event({"jobId": "J1", "taskType": "export"}), None)

    def test_handler_updates_dynamodb(self, monkeypatch, mock_table):
        monkeypatch.setenv("STATUS_TABLE_NAME", "export-jobs")
        monkeypatch.setenv("EXPORT_TASK_DURATION_SECONDS", "0")

        with patch("export_worker.jobs.status_store.boto3.resource") as resource:
            resource.return_value.Table.return_value = mock_table
            result = export_processor.handler(
                _sqs_event(
                    {"jobId": "J1", "taskType": "export"},
                    {"jobId": "J2", "taskType": "export"},
                ),
                SimpleNamespace(aws_request_id="req-456"),
            )

        assert result == "Processing completed. Success: 2. Failures: 0."
        assert [c.kwargs["Key"] for c in mock_table.update_item.call_args_list] == [
            {"jobId": "J1"},
            {"jobId": "J2"},
        ]
