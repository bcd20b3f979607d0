# Folder: issuewatch/ingestion/event_schema.py
#
# These are the core data models used EVERYWHERE in the project.
# Every other file imports from here.
#
# Flow:
# exception raised in host app → middleware captures → FailureEvent built
# → error_reporter fingerprints it → GitHub issue created or commented

import traceback
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

# Contextual strings about the triggering request.
# Known keys: "method", "path", "remote_addr". May be None or empty.
RequestContext = Optional[Dict[str, str]]

# GitHub issue number / comment id
TicketRef = int
CommentRef = int


def kind_name(exc_type: type) -> str:
    """
    Name used for a failure kind.
    Builtins stay bare ("RuntimeError"), everything else is module qualified
    ("payments.errors.CardDeclined") so it can be resolved back to the class.
    """
    if exc_type.__module__ == "builtins":
        return exc_type.__qualname__
    return f"{exc_type.__module__}.{exc_type.__qualname__}"


def format_frame(frame: traceback.FrameSummary) -> str:
    return f"{frame.filename}:{frame.lineno}:in '{frame.name}'"


class FailureEvent(BaseModel):
    """
    Immutable snapshot of one captured failure.

    Built once by the middleware (or by hand) and handed to the reporter.
    No live traceback objects are kept - frames are plain strings,
    most recent call FIRST.
    """

    model_config = ConfigDict(frozen=True)

    kind: str                        # e.g. "RuntimeError"
    message: str = ""                # str(exception), unbounded
    frames: Tuple[str, ...] = ()     # e.g. "app/views.py:12:in 'checkout'"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "FailureEvent":
        # extract_tb is oldest-first, flip it
        frames = [format_frame(f) for f in traceback.extract_tb(exc.__traceback__)]
        frames.reverse()

        return cls(
            kind=kind_name(type(exc)),
            message=str(exc),
            frames=tuple(frames),
        )


def request_context_from_environ(environ: dict) -> Dict[str, str]:
    """Pull method / path / remote address out of a WSGI environ"""
    context = {}
    for key, environ_key in (
        ("method", "REQUEST_METHOD"),
        ("path", "PATH_INFO"),
        ("remote_addr", "REMOTE_ADDR"),
    ):
        value = environ.get(environ_key)
        if value:
            context[key] = value
    return context
