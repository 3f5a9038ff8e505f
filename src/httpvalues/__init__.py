"""
=============================================================================
HTTPVALUES - HTTP Responses as Values
=============================================================================

Small, immutable values that describe an HTTP response before it is
written, and write themselves through one contract:

    responder.serve(writer, request)

=============================================================================
PACKAGE LAYOUT
=============================================================================

    httpvalues/
    ├── http/          headers, status codes, request, writers, value responders
    ├── handlers/      File, Dir, access filters, recovery
    ├── config.py      process-wide settings and logging setup
    ├── errors.py      error handler contract and default handler
    └── wsgi.py        adapter for WSGI servers

=============================================================================
QUICK START
=============================================================================

    from httpvalues import Dir, Dirs, File, WSGIApp

    static = Dir("site", filter=Dirs(["site/public"]))
    fallback = File("site/public/index.html")

    def handler(request):
        return static.handle_opt(request) or fallback.handle(request)

    app = WSGIApp(handler)

=============================================================================
"""

__version__ = "1.0.0"

from .config import ResponderConfig, configure, get_config, setup_logging
from .errors import ErrFunc, ResponseWriteError, err_handler
from .http import (
    Headers,
    HTTPStatus,
    HTTPRequest,
    ResponseWriter,
    BufferedResponseWriter,
    Responder,
    OptionalResponder,
    Head,
    Reader,
    Bytes,
    String,
    Json,
    Xml,
    XmlDoc,
    Redirect,
    bytes_ok,
    bytes_with,
    string_ok,
    string_with,
    json_ok,
    json_with,
    xml_ok,
    xml_with,
    redirect_with,
)
from .handlers import (
    Filter,
    Dirs,
    FilterFunc,
    File,
    Dir,
    NotFound,
    recover,
    serve_safely,
)
from .wsgi import WSGIApp, WSGIResponseWriter

__all__ = [
    "__version__",
    "ResponderConfig",
    "configure",
    "get_config",
    "setup_logging",
    "ErrFunc",
    "ResponseWriteError",
    "err_handler",
    "Headers",
    "HTTPStatus",
    "HTTPRequest",
    "ResponseWriter",
    "BufferedResponseWriter",
    "Responder",
    "OptionalResponder",
    "Head",
    "Reader",
    "Bytes",
    "String",
    "Json",
    "Xml",
    "XmlDoc",
    "Redirect",
    "bytes_ok",
    "bytes_with",
    "string_ok",
    "string_with",
    "json_ok",
    "json_with",
    "xml_ok",
    "xml_with",
    "redirect_with",
    "Filter",
    "Dirs",
    "FilterFunc",
    "File",
    "Dir",
    "NotFound",
    "recover",
    "serve_safely",
    "WSGIApp",
    "WSGIResponseWriter",
]
