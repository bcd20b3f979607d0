# Folder: issuewatch/scripts/send_test_report.py
# Sends one synthetic failure through the full pipeline, synchronously.
# Run it twice: the first run opens an issue, the second comments on it.
#
# Run with: python scripts/send_test_report.py
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import logging
from actions.error_reporter import ErrorReporter
from actions.guard_config import GuardConfig
from ingestion.event_schema import FailureEvent

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s")


def send_test_report():
    guard = GuardConfig.from_env()
    guard.asynchronous = False
    # Report regardless of APP_ENV
    guard.environments = [guard.current_environment()]

    if not guard.is_valid():
        print("❌ GITHUB_TOKEN and GITHUB_REPO must be set (see .env.example)")
        return 1

    event = FailureEvent(
        kind="RuntimeError",
        message="issuewatch test report",
        frames=("scripts/send_test_report.py:1:in 'send_test_report'",),
    )
    context = {"method": "GET", "path": "/issuewatch-test"}

    ErrorReporter(config=guard).report(event, context)
    print(f"✅ Report sent to {guard.github_repository} (check logs above for errors)")
    return 0


if __name__ == "__main__":
    sys.exit(send_test_report())
