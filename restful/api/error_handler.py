"""Conversion of service failures into plain-text 500 envelopes.

Controllers answer client errors with envelopes, so only failures of the
service itself end up here: a decode error the controller did not handle, an
unexpected exception in a controller, or an unavailable request identifier.

Controller failures are converted by the dispatch pipeline, inside the
request's logging context, using ``log_dispatch_error``. An identifier failure
happens before that context exists and escapes the endpoint as a
``RestfulError``; the handler registered here answers it. Either way the
request still produces the "Response sent" log line.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import Response

from restful.api.responses import ResponseEnvelope
from restful.core.exceptions import RestfulError, Severity

if TYPE_CHECKING:
    from loguru import Logger

    from restful.api.service import Service

type ExceptionHandler = Callable[[Request, Exception], Awaitable[Response]]

# Severity -> loguru level name
SEVERITY_LOG_LEVELS = {
    Severity.LOW: "INFO",
    Severity.MEDIUM: "WARNING",
    Severity.HIGH: "ERROR",
    Severity.CRITICAL: "CRITICAL",
}


def log_dispatch_error(
    log: Logger, exc: Exception, request: Request
) -> ResponseEnvelope:
    """Log a failure raised while serving ``request`` and build its envelope.

    ``RestfulError`` is logged at the level of its severity and its message
    is sent to the client. Anything else is logged with its traceback and the
    client only receives the exception type.

    Args:
        log: Logger receiving the error line.
        exc: The exception raised during dispatch.
        request: The request being served.

    Returns:
        ResponseEnvelope: The plain-text 500 answering the request.
    """
    if isinstance(exc, RestfulError):
        log.log(
            SEVERITY_LOG_LEVELS[exc.severity],
            "Handling {exception_type}: {message}",
            exception_type=type(exc).__name__,
            message=exc.message,
            error_code=exc.error_code,
            fingerprint=exc.fingerprint,
            method=request.method,
            url=str(request.url),
        )
        return ResponseEnvelope.internal_server_error(str(exc))

    log.opt(exception=exc).error(
        "Unhandled {exception_type} during dispatch",
        exception_type=type(exc).__name__,
        method=request.method,
        url=str(request.url),
    )
    return ResponseEnvelope.internal_server_error(type(exc).__name__)


def restful_error_handler(log: Logger) -> ExceptionHandler:
    """Build the handler for ``RestfulError`` exceptions escaping an endpoint.

    Args:
        log: Logger receiving the error and response lines.

    Returns:
        ExceptionHandler: Async exception handler for Starlette.
    """

    async def handle(request: Request, exc: Exception) -> Response:
        if not isinstance(exc, RestfulError):
            raise TypeError(f"Expected RestfulError, got {type(exc).__name__}")

        envelope = log_dispatch_error(log, exc, request)
        log.info(
            "Response sent",
            request_id=getattr(request.state, "request_id", None),
            status_code=envelope.status_code,
        )
        return envelope.render()

    return handle


def register_exception_handlers(app: FastAPI, service: Service) -> None:
    """Register the ``RestfulError`` handler on ``app``.

    Other exceptions are never left to Starlette: its catch-all handler runs
    in the outermost middleware, which skips it in debug mode and re-raises
    after answering.

    Args:
        app: The application the service's routes are installed on.
        service: The service whose logger receives error lines.
    """
    app.add_exception_handler(RestfulError, restful_error_handler(service.log))
