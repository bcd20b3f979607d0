# Folder: issuewatch/actions/error_reporter.py
#
# The pipeline between a captured failure and GitHub.
# Called by the middleware for every 500 / unhandled exception.
#
# Flow:
# FailureEvent → guards (configured? right env? ignored kind?)
#             → fingerprint → find open issue with that fingerprint
#             → found: comment "new occurrence" | not found: create issue
#
# NOTHING in here may raise into the host app. Every failure is logged
# with an "[Issuewatch]" prefix and dropped.

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from actions.github_issues import FINGERPRINT_MARKER, GithubIssueClient
from actions.guard_config import GuardConfig, configuration
from detection.fingerprint import compute
from ingestion.event_schema import FailureEvent, RequestContext
from ingestion.failure_kinds import is_ignored

logger = logging.getLogger(__name__)

MAX_BACKTRACE_LINES = 20       # frames shown in the issue body
MAX_TITLE_MESSAGE_CHARS = 120


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def current_timestamp() -> str:
    return _utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")


def issue_title(event: FailureEvent) -> str:
    first_line = event.message.split("\n", 1)[0].strip()
    return f"[500] {event.kind}: {first_line[:MAX_TITLE_MESSAGE_CHARS]}"


def build_request_info(context: RequestContext) -> str:
    """Request block for the issue body, "" when there's nothing useful"""
    if not context:
        return ""

    method = context.get("method")
    path = context.get("path")
    remote_addr = context.get("remote_addr")

    if not (method and path):
        return ""

    parts = [f"**Request:** `{method} {path}`"]
    if remote_addr:
        parts.append(f"**Remote IP:** {remote_addr}")

    return "\n" + "\n".join(parts)


def issue_body(event: FailureEvent, context: RequestContext,
               fingerprint: str) -> str:
    backtrace = "\n".join(event.frames[:MAX_BACKTRACE_LINES])

    return f"""## Error Details

**Exception:** `{event.kind}`
**Message:** {event.message}
**First occurrence:** {current_timestamp()}
{build_request_info(context)}

## Backtrace

```
{backtrace}
```

<!-- {FINGERPRINT_MARKER}:{fingerprint} -->
"""


def occurrence_comment() -> str:
    return f"**New occurrence:** {current_timestamp()}"


class ErrorReporter:
    """
    Guards, dispatches and processes failure reports.

    config: explicit GuardConfig, or None to read the process-wide one
            at report time.
    client_factory: builds the GitHub client (swap it out in tests).
    """

    def __init__(self, config: Optional[GuardConfig] = None,
                 client_factory: Callable[..., GithubIssueClient] = GithubIssueClient):
        self.config = config
        self.client_factory = client_factory

    def report(self, event: FailureEvent,
               context: RequestContext = None) -> Optional[threading.Thread]:
        """
        Entry point. Returns the background thread in async mode
        (informational only), None otherwise. Never raises.
        """
        try:
            config = self.config if self.config is not None else configuration()

            if not config.reporting_enabled():
                return None
            if is_ignored(event.kind, config.ignored_exceptions):
                logger.debug(f"Ignoring {event.kind} (in ignored_exceptions)")
                return None

            if config.asynchronous:
                # Fire and forget - the request never waits on GitHub
                thread = threading.Thread(
                    target=self.process,
                    args=(event, context, config),
                    daemon=True
                )
                thread.start()
                return thread

            self.process(event, context, config)
            return None

        except Exception as e:
            logger.error(
                f"[Issuewatch] ErrorReporter.report raised an unexpected error: "
                f"{type(e).__name__}: {e}"
            )
            return None

    def process(self, event: FailureEvent, context: RequestContext,
                config: GuardConfig) -> None:
        """Fingerprint, then comment on the existing issue or open a new one"""
        try:
            fingerprint = compute(event)
            client = self.client_factory(
                token=config.github_token,
                repository=config.github_repository
            )

            existing_issue = client.find_issue(fingerprint)

            if existing_issue:
                client.add_comment(existing_issue, body=occurrence_comment())
                logger.info(f"{event.kind} [{fingerprint}] seen again on #{existing_issue}")
            else:
                client.create_issue(
                    title=issue_title(event),
                    body=issue_body(event, context, fingerprint),
                    labels=config.labels,
                    assignees=config.assignees
                )

        except Exception as e:
            logger.error(
                f"[Issuewatch] Failed to report exception to GitHub: "
                f"{type(e).__name__}: {e}"
            )


_default_reporter = ErrorReporter()


def report(event: FailureEvent,
           context: RequestContext = None) -> Optional[threading.Thread]:
    """Report using the process-wide configuration"""
    return _default_reporter.report(event, context)
