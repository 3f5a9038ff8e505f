"""
=============================================================================
RECOVERY: FAULTS TO RESPONSES
=============================================================================

Handler functions build responders:

    def show_user(request: HTTPRequest) -> Responder:
        user = load_user(request.get_query("id"))   # may raise
        return json_ok(user)

If such a function fails, the client should still get a response, not a
dropped connection. Two wrappers take care of that:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   recover(func)          faults while BUILDING the responder        │
    │                          → 500 text/plain with the error message    │
    │                                                                      │
    │   serve_safely(...)      faults while WRITING the responder         │
    │                          (e.g. a file vanishing mid-stream)         │
    │                          → the error handler, with wrote=True/False │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT COUNTS AS A FAULT
=============================================================================

    func raises ValueError("bad id")     500, body "bad id"
    func returns ValueError("bad id")    500, body "bad id"
    func returns None                    404 (nothing to serve)
    func returns 42                      500, body "unexpected handler result: 42"

An exception with an empty message is rendered by its class name.

=============================================================================
"""

import functools
import logging
from typing import Callable, Optional

from ..config import get_config
from ..errors import ErrFunc
from ..http.request import HTTPRequest
from ..http.response import Head, Responder, String
from ..http.status_codes import HTTPStatus
from ..http.writer import ResponseWriter
from .static import NotFound


logger = logging.getLogger(__name__)


HandlerFunc = Callable[[HTTPRequest], Responder]


def fault_responder(fault: object) -> String:
    """
    Plain-text 500 describing a fault.

    Args:
        fault: An exception (rendered as its message) or any other value
               (rendered via repr).
    """
    if isinstance(fault, BaseException):
        message = str(fault) or type(fault).__name__
    else:
        message = f"unexpected handler result: {fault!r}"

    return String(
        body=message,
        head=Head(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            headers={"Content-Type": "text/plain; charset=utf-8"},
        ),
    )


def recover(func: HandlerFunc) -> HandlerFunc:
    """
    Wrap a handler function so it always returns a Responder.

    Usable as a decorator:

        @recover
        def index(request):
            return string_ok("hello")
    """

    @functools.wraps(func)
    def wrapper(request: HTTPRequest) -> Responder:
        try:
            result = func(request)
        except Exception as e:
            logger.exception(f"Handler failed: {request.method} {request.path}")
            return fault_responder(e)

        if result is None:
            return NotFound()
        if isinstance(result, Responder):
            return result

        logger.error(f"Handler fault: {request.method} {request.path}: {result!r}")
        return fault_responder(result)

    return wrapper


def serve_safely(
    responder: Responder,
    writer: ResponseWriter,
    request: HTTPRequest,
    err_func: Optional[ErrFunc] = None,
) -> None:
    """
    Serve `responder`, passing any exception to the error handler.

    Args:
        responder: What to serve.
        writer: Output sink.
        request: Incoming request.
        err_func: Error handler; defaults to the configured one.
    """
    try:
        responder.serve(writer, request)
    except Exception as e:
        logger.debug(f"Serving failed: {request.method} {request.path}: {e}")
        (err_func or get_config().err_func)(writer, request, writer.wrote_header, e)
