"""Shared fixtures for the export worker test suite."""

import json
from unittest.mock import MagicMock

import pytest
from hypothesis import settings, Verbosity

from export_worker.jobs import (
    BatchProcessor,
    InMemoryStatusStore,
    QueueMessage,
    StatusRecorder,
    TaskExecutor,
)

settings.register_profile(
    "default",
    max_examples=100,
    deadline=5000,
    verbosity=Verbosity.normal,
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=10000,
    verbosity=Verbosity.quiet,
)
settings.load_profile("default")


class InstantRunner:
    """Task runner that returns immediately and remembers its calls."""

    def __init__(self, fail_for: tuple = (), error: Exception = None):
        self.calls: list[tuple[str, str]] = []
        self.fail_for = set(fail_for)
        self.error = error or RuntimeError("export backend unavailable")

    def run(self, job_id: str, task_type: str) -> None:
        self.calls.append((job_id, task_type))
        if job_id in self.fail_for:
            raise self.error


def make_message(body, message_id: str = "msg-1") -> QueueMessage:
    """Build a queue message; dict bodies are serialized to JSON."""
    raw = body if isinstance(body, (str, bytes)) or body is None else json.dumps(body)
    return QueueMessage(message_id=message_id, body=raw)


@pytest.fixture
def runner():
    return InstantRunner()


@pytest.fixture
def store():
    return InMemoryStatusStore()


@pytest.fixture
def processor(runner, store):
    """Batch processor with an instant runner and in-memory store."""
    return BatchProcessor(
        recorder=StatusRecorder(store),
        executor=TaskExecutor(runner),
    )


@pytest.fixture
def mock_table():
    """Create a mock DynamoDB table."""
    mock = MagicMock()
    mock.update_item.return_value = {}
    return mock
