# Folder: issuewatch/app/middleware.py
#
# The host integration layer.
# Hooks the reporter into a Flask app without touching any route.
#
# Two ways a failure reaches us:
# 1. Flask turns an unhandled exception into a 500 → got_request_exception fires
# 2. The exception escapes Flask entirely (PROPAGATE_EXCEPTIONS, testing mode,
#    plain WSGI apps) → ErrorReportingMiddleware catches, reports, re-raises
#
# Either way the host's response / exception is left exactly as it was.

import logging
from typing import Optional

from flask import Flask, got_request_exception, request

from actions.error_reporter import ErrorReporter
from ingestion.event_schema import FailureEvent, request_context_from_environ

logger = logging.getLogger(__name__)

# Set in the WSGI environ once an exception has been reported,
# so the same exception isn't reported twice on the way out.
REPORTED_ENVIRON_KEY = "issuewatch.reported_exception"


def report_exception(reporter: ErrorReporter, exc: BaseException, environ: dict):
    """Build event + context from native objects and hand them to the reporter"""
    try:
        if environ.get(REPORTED_ENVIRON_KEY) is exc:
            return
        environ[REPORTED_ENVIRON_KEY] = exc

        event = FailureEvent.from_exception(exc)
        context = request_context_from_environ(environ)
        reporter.report(event, context)
    except Exception as e:
        # Never let instrumentation break the actual app
        logger.error(f"[Issuewatch] Middleware error: {type(e).__name__}: {e}")


class ErrorReportingMiddleware:
    """
    WSGI wrapper. Works around any WSGI app, Flask or not:

        app.wsgi_app = ErrorReportingMiddleware(app.wsgi_app)
    """

    def __init__(self, wsgi_app, reporter: Optional[ErrorReporter] = None):
        self.wsgi_app = wsgi_app
        self.reporter = reporter or ErrorReporter()

    def __call__(self, environ, start_response):
        try:
            app_iter = self.wsgi_app(environ, start_response)
        except Exception as e:
            report_exception(self.reporter, e, environ)
            raise

        return self._iterate(app_iter, environ)

    def _iterate(self, app_iter, environ):
        """Streamed bodies can fail after the app returned - report those too"""
        try:
            for chunk in app_iter:
                yield chunk
        except Exception as e:
            report_exception(self.reporter, e, environ)
            raise
        finally:
            # WSGI servers call close() on us, pass it on
            close = getattr(app_iter, "close", None)
            if close is not None:
                close()


def register_middleware(app: Flask,
                        reporter: Optional[ErrorReporter] = None) -> ErrorReporter:
    """
    Call this in your Flask app factory.
    Returns the reporter in use (handy for tests).
    """
    reporter = reporter or ErrorReporter()

    def on_request_exception(sender, exception, **extra):
        report_exception(reporter, exception, request.environ)

    # weak=False - the closure would otherwise be garbage collected
    got_request_exception.connect(on_request_exception, app, weak=False)

    app.wsgi_app = ErrorReportingMiddleware(app.wsgi_app, reporter)

    logger.info(f"Issuewatch error reporting registered on {app.name}")
    return reporter
