#!/usr/bin/env python3
"""Run a batch of export job messages locally.

Feeds a JSON file of message bodies through the batch processor using an
in-memory status store instead of DynamoDB.

Usage:
    python scripts/run_batch.py messages.json --duration 0.5
"""

import argparse
import json
import os
import sys

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from export_worker.core import configure_logging
from export_worker.jobs import (
    BatchProcessor,
    InMemoryStatusStore,
    QueueMessage,
    SimulatedExportRunner,
    StatusRecorder,
    TaskExecutor,
)


def load_messages(path: str) -> list[QueueMessage]:
    """Load message bodies from a JSON list; objects are re-serialized."""
    with open(path, "r", encoding="utf-8") as f:
        bodies = json.load(f)

    if not isinstance(bodies, list):
        raise SystemExit(f"{path}: expected a JSON list of message bodies")

    messages = []
    for index, body in enumerate(bodies):
        raw = body if isinstance(body, str) else json.dumps(body)
        messages.append(QueueMessage(message_id=f"local-{index}", body=raw))
    return messages


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", help="JSON file containing a list of message bodies")
    parser.add_argument(
        "--duration",
        type=float,
        default=1.0,
        help="Simulated export duration in seconds (default: 1.0)",
    )
    parser.add_argument(
        "--require-existing",
        action="store_true",
        help="Reject status updates for jobs not already in the store",
    )
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(level=args.log_level, json_format=False)

    store = InMemoryStatusStore(require_existing=args.require_existing)
    processor = BatchProcessor(
        recorder=StatusRecorder(store),
        executor=TaskExecutor(SimulatedExportRunner(duration_seconds=args.duration)),
    )

    summary = processor.process_batch(load_messages(args.path))

    print("\n" + "=" * 60)
    print(summary.to_message())
    print("=" * 60)
    for result in summary.results:
        outcome = "ok" if result.succeeded else f"failed at {result.stage.value}: {result.error}"
        print(f"  {result.message_id}  job={result.job_id}  {outcome}")
    print("\nStatus store:")
    print(json.dumps(store.items, indent=2))

    return 0 if summary.failure_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
