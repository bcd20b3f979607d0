# Folder: issuewatch/detection/fingerprint.py
#
# Turns a FailureEvent into a short stable identity (the dedup key).
#
# Same kind + same first 200 chars of message + same first APP frame
# = same fingerprint = same GitHub issue.
#
# Pure function - no state, no I/O, never raises for a valid event.

import hashlib
from typing import Sequence

from ingestion.event_schema import FailureEvent

DIGEST_LENGTH = 12             # hex chars kept from the sha256 digest
MESSAGE_PREFIX_CHARS = 200     # message chars that count towards identity
SEPARATOR = "|"

# Frames containing any of these are library / runtime code, not the app.
LIBRARY_PATH_PATTERNS = (
    "/site-packages/",
    "/dist-packages/",
    "/lib/python",
    "<frozen ",
)


def first_app_frame(frames: Sequence[str],
                    library_patterns: Sequence[str] = LIBRARY_PATH_PATTERNS) -> str:
    """
    First frame that isn't library code.
    Falls back to the very first frame, or "" when there are none.
    """
    for frame in frames:
        if not any(pattern in frame for pattern in library_patterns):
            return frame
    return frames[0] if frames else ""


def compute(event: FailureEvent,
            library_patterns: Sequence[str] = LIBRARY_PATH_PATTERNS) -> str:
    parts = [
        event.kind,
        event.message[:MESSAGE_PREFIX_CHARS],
        first_app_frame(event.frames or (), library_patterns),
    ]
    payload = SEPARATOR.join(parts)
    return hashlib.sha256(payload.encode("utf-8", "surrogatepass")).hexdigest()[:DIGEST_LENGTH]
