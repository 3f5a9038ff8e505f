"""
=============================================================================
WSGI ADAPTER
=============================================================================

Runs responders inside any WSGI server (wsgiref, gunicorn, uWSGI, ...).

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   WSGI server                WSGIApp                  Responder     │
    │   ───────────                ───────                  ─────────     │
    │                                                                      │
    │   environ ──────────────►  HTTPRequest  ─────────►  serve(writer,   │
    │                                                           request)  │
    │   start_response ◄───────  WSGIResponseWriter  ◄──────────┘         │
    │   write(bytes)   ◄───────  (streams body chunks)                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The writer calls start_response() when the responder writes its status
and pushes body chunks through the `write` callable start_response
returns, so files are streamed rather than buffered.

=============================================================================
USAGE
=============================================================================

    # Serve a directory
    app = WSGIApp(Dir("static"))

    # Or a handler function with a fallback chain
    public = Dir("public")
    index = File("public/index.html")

    def handler(request):
        return public.handle_opt(request) or index.handle(request)

    app = WSGIApp(handler)

    from wsgiref.simple_server import make_server
    make_server("127.0.0.1", 8080, app).serve_forever()

=============================================================================
"""

import logging
import time
from typing import Callable, Iterable, Optional, Union
from urllib.parse import parse_qs

from .errors import ErrFunc
from .handlers.recovery import HandlerFunc, recover, serve_safely
from .http.headers import Headers
from .http.request import HTTPRequest
from .http.response import Responder
from .http.status_codes import HTTPStatus, reason_phrase
from .http.writer import ResponseWriter


# Access log, one line per request:
#   127.0.0.1 "GET /index.html" 200 5120 0.84ms
access_logger = logging.getLogger("httpvalues.access")


class WSGIResponseWriter(ResponseWriter):
    """ResponseWriter on top of a WSGI start_response callable."""

    def __init__(self, start_response: Callable):
        super().__init__()
        self._start_response = start_response
        self._write: Optional[Callable[[bytes], object]] = None
        self.bytes_written = 0

    def _send_header(self, status: int, headers: Headers) -> None:
        self._write = self._start_response(
            f"{status} {reason_phrase(status)}",
            list(headers.items()),
        )

    def _send_body(self, data: bytes) -> None:
        self._write(data)
        self.bytes_written += len(data)


def request_from_environ(environ: dict) -> HTTPRequest:
    """
    Build an HTTPRequest from a WSGI environ.

    PATH_INFO arrives decoded as latin-1 per PEP 3333; it is re-decoded
    as UTF-8 so non-ASCII file names resolve correctly.
    """
    raw_path = environ.get("PATH_INFO", "") or "/"
    try:
        path = raw_path.encode("latin-1").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        path = raw_path

    headers = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[key[5:].replace("_", "-").lower()] = value
    if environ.get("CONTENT_TYPE"):
        headers["content-type"] = environ["CONTENT_TYPE"]
    if environ.get("CONTENT_LENGTH"):
        headers["content-length"] = environ["CONTENT_LENGTH"]

    body = b""
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length > 0 and environ.get("wsgi.input") is not None:
        body = environ["wsgi.input"].read(length)

    return HTTPRequest(
        method=environ.get("REQUEST_METHOD", "GET").upper(),
        path=path,
        headers=headers,
        query_params=parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True),
        version=environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
        body=body,
        client_address=(
            environ.get("REMOTE_ADDR", ""),
            int(environ.get("REMOTE_PORT") or 0),
        ),
    )


class WSGIApp:
    """
    WSGI application serving a Responder or a handler function.

    Args:
        target: A Responder served for every request, or a function
                `request -> Responder` (wrapped with recover()).
        err_func: Error handler for faults while serving; defaults to
                  the configured one.
    """

    def __init__(
        self,
        target: Union[Responder, HandlerFunc],
        err_func: Optional[ErrFunc] = None,
    ):
        if isinstance(target, Responder):
            self._handler: Optional[HandlerFunc] = None
            self._responder: Optional[Responder] = target
        elif callable(target):
            self._handler = recover(target)
            self._responder = None
        else:
            raise TypeError(f"expected Responder or callable, got {type(target).__name__}")
        self.err_func = err_func

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        start_time = time.time()

        request = request_from_environ(environ)
        writer = WSGIResponseWriter(start_response)

        if self._responder is not None:
            responder = self._responder
        else:
            responder = self._handler(request)
        serve_safely(responder, writer, request, self.err_func)

        # Nothing written at all: an empty 200, like any other sink.
        if not writer.wrote_header:
            writer.write_header(HTTPStatus.OK)

        duration_ms = (time.time() - start_time) * 1000
        access_logger.info(
            f'{request.client_address[0] or "-"} "{request.method} {request.path}" '
            f"{writer.status} {writer.bytes_written} {duration_ms:.2f}ms"
        )
        return []
