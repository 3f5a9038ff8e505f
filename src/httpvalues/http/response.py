"""
=============================================================================
RESPONSE VALUES
=============================================================================

Plain values that describe an HTTP response before it is written, and
know how to write themselves.

=============================================================================
THE SERVE CONTRACT
=============================================================================

Every response kind implements one method:

    responder.serve(writer, request)

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Handler code             Responder value          ResponseWriter  │
    │   ────────────             ───────────────          ──────────────  │
    │                                                                      │
    │   def user(req):           Json(                    headers         │
    │       return json_ok(  ──►   head=Head(200),  ──►   write_header()  │
    │           {"id": 1})         body={"id": 1})        write(b"...")   │
    │                                                                      │
    │   (decides WHAT)           (immutable value)        (owned by host) │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Values are immutable and hold no per-request state, so one value can be
served any number of times, from any number of threads.

=============================================================================
HEAD: THE SHARED PART
=============================================================================

Status, extra headers and the error handler are common to all value
kinds. Each kind holds them in a `head` field:

    String(head=Head(status=201, headers={"X-Id": "7"}), body="created")

Head.write() merges the headers into the writer (replacing headers of
the same name) and writes the status. A status of 0 leaves the status to
the writer, which sends 200 on the first body write.

=============================================================================
VALUE KINDS
=============================================================================

    Reader    copies a binary stream
    Bytes     writes bytes
    String    writes text as UTF-8
    Json      encodes the body as JSON
    Xml       encodes an ElementTree element (optionally wrapped in XmlDoc)
    Redirect  sends Location and a redirect status

File-backed responders live in httpvalues.handlers.static.

=============================================================================
"""

import json
import shutil
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from html import escape
from typing import Any, BinaryIO, Mapping, Optional, Tuple, Union
from urllib.parse import urljoin

from ..config import get_config
from ..errors import ErrFunc, ResponseWriteError
from .headers import HeaderValues
from .request import HTTPRequest
from .status_codes import HTTPStatus, reason_phrase
from .writer import ResponseWriter


class Responder(ABC):
    """Anything that can render itself as a complete HTTP response."""

    @abstractmethod
    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        """Write status, headers and body for `request` into `writer`."""


class OptionalResponder(Responder):
    """
    A responder that may have nothing to serve.

    =========================================================================
    TRY-THEN-FALLBACK
    =========================================================================

    try_serve() reports whether it served. A failed attempt leaves the
    writer untouched (no headers, no status, no body), so attempts can be
    chained against the same writer:

        (static.try_serve(writer, request)
            or uploads.try_serve(writer, request)
            or index_page.serve(writer, request))

    handle() and handle_opt() do the same without touching a writer:
    they return the responder that WOULD serve.

        handle(request)      always a Responder (a 404 if nothing matches)
        handle_opt(request)  a Responder, or None if nothing matches

    =========================================================================
    """

    @abstractmethod
    def try_serve(self, writer: ResponseWriter, request: HTTPRequest) -> bool:
        """Serve and return True, or return False without side effects."""

    @abstractmethod
    def handle(self, request: HTTPRequest) -> Responder:
        """Responder for `request`; never None."""

    @abstractmethod
    def handle_opt(self, request: HTTPRequest) -> Optional[Responder]:
        """Responder for `request`, or None if there is nothing to serve."""


@dataclass(frozen=True)
class Head:
    """
    Status, headers and error handler shared by all response values.

    Attributes:
        status:   HTTP status; 0 means "let the writer decide" (200).
        headers:  Headers to set, name → value or list of values.
                  Each replaces any writer header of the same name.
                  Stored as a tuple of (name, values) pairs so that Head
                  (and every value holding one) stays hashable.
        err_func: Error handler; None means the configured default.
    """

    status: int = 0
    headers: Optional[Mapping[str, HeaderValues]] = None
    err_func: Optional[ErrFunc] = None

    def __post_init__(self):
        if self.headers is not None:
            object.__setattr__(self, "headers", _freeze_headers(self.headers))

    def merge_headers(self, writer: ResponseWriter) -> None:
        """Copy configured headers into the writer, replacing same-name ones."""
        if not self.headers:
            return
        target = writer.headers
        for name, values in self.headers:
            target.delete(name)
            for value in values:
                target.add(name, value)

    def write(self, writer: ResponseWriter) -> None:
        """
        Write headers and status.

        Called exactly once per response, before the body.
        """
        self.merge_headers(writer)
        if self.status > 0:
            writer.write_header(self.status)

    def handle_err(
        self,
        writer: ResponseWriter,
        request: HTTPRequest,
        wrote: bool,
        err: Optional[BaseException],
    ) -> None:
        if err is None:
            return
        err_func = self.err_func or get_config().err_func
        err_func(writer, request, wrote, err)


def _freeze_headers(headers) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
    items = headers.items() if isinstance(headers, Mapping) else headers
    return tuple(
        (name, (values,) if isinstance(values, str) else tuple(values))
        for name, values in items
    )


# =============================================================================
# VALUE RESPONDERS
# =============================================================================

@dataclass(frozen=True)
class Reader(Responder):
    """
    Copies a response body from a binary stream.

    Caution: the stream is NOT closed here. Close it in your code.
    """

    body: Optional[BinaryIO] = None
    head: Head = field(default_factory=Head)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        self.head.write(writer)
        if self.body is None:
            return
        try:
            shutil.copyfileobj(self.body, writer, get_config().chunk_size)
        except OSError as e:
            err = ResponseWriteError(f"failed to write response: {e}", cause=e)
            self.head.handle_err(writer, request, True, err)


@dataclass(frozen=True)
class Bytes(Responder):
    """Writes a bytes body. For text, use String."""

    body: bytes = b""
    head: Head = field(default_factory=Head)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        self.head.write(writer)
        _write_body(self.head, writer, request, self.body)


@dataclass(frozen=True)
class String(Responder):
    """Writes a text body encoded as UTF-8. For bytes, use Bytes."""

    body: str = ""
    head: Head = field(default_factory=Head)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        self.head.write(writer)
        _write_body(self.head, writer, request, self.body.encode("utf-8"))


@dataclass(frozen=True)
class Json(Responder):
    """
    Encodes its body as JSON and sets Content-Type: application/json.

    The body is encoded BEFORE anything is written, so an unserializable
    body reaches the error handler with wrote=False and the handler can
    still send a proper 500.
    """

    body: Any = None
    head: Head = field(default_factory=Head)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        try:
            payload = json.dumps(self.body, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            err = ResponseWriteError(f"failed to write response as JSON: {e}", cause=e)
            self.head.handle_err(writer, request, False, err)
            return

        writer.headers.set("Content-Type", "application/json")
        self.head.write(writer)
        _write_body(self.head, writer, request, payload.encode("utf-8"))


@dataclass(frozen=True)
class XmlDoc:
    """
    Wraps an XML body to prepend the <?xml?> declaration.

    Example:
        xml_ok(XmlDoc(feed_element, encoding="utf-8"))

    Output:
        <?xml version="1.0" encoding="utf-8"?><feed>...</feed>
    """

    val: Any = None
    encoding: str = ""

    def to_xml(self) -> str:
        declaration = 'version="1.0"'
        if self.encoding:
            declaration += f" encoding={json.dumps(self.encoding)}"
        return f"<?xml {declaration}?>" + encode_xml(self.val)


def encode_xml(value: Any) -> str:
    """
    Serialize an Element or XmlDoc.

    Raises:
        TypeError: For any other value.
    """
    if isinstance(value, XmlDoc):
        return value.to_xml()
    if isinstance(value, ET.Element):
        return ET.tostring(value, encoding="unicode")
    raise TypeError(f"cannot encode {type(value).__name__} as XML")


@dataclass(frozen=True)
class Xml(Responder):
    """
    Encodes its body as XML and sets Content-Type: application/xml.

    Caution: no <?xml?> declaration is written unless the body is wrapped
    in XmlDoc. Without an encoding to declare, it can be skipped.
    """

    body: Any = None
    head: Head = field(default_factory=Head)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        try:
            payload = encode_xml(self.body)
        except (TypeError, ValueError) as e:
            err = ResponseWriteError(f"failed to write response as XML: {e}", cause=e)
            self.head.handle_err(writer, request, False, err)
            return

        writer.headers.set("Content-Type", "application/xml")
        self.head.write(writer)
        _write_body(self.head, writer, request, payload.encode("utf-8"))


@dataclass(frozen=True)
class Redirect(Responder):
    """
    Performs an HTTP redirect.

    =========================================================================
    BEHAVIOR
    =========================================================================

    - Status is head.status, or 302 Found when unset.
    - Relative links resolve against the request path:
          request "/docs/a", link "b"   ──►  Location: /docs/b
    - GET requests without a preset Content-Type get a short HTML body
      linking to the target, for clients that do not follow redirects.

    =========================================================================
    """

    link: str = ""
    head: Head = field(default_factory=Head)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        status = self.head.status or HTTPStatus.FOUND
        location = urljoin(request.path, self.link)

        self.head.merge_headers(writer)
        writer.headers.set("Location", location)

        body = b""
        if request.method == "GET" and "Content-Type" not in writer.headers:
            writer.headers.set("Content-Type", "text/html; charset=utf-8")
            body = f'<a href="{escape(location)}">{reason_phrase(status)}</a>.\n'.encode("utf-8")

        writer.write_header(status)
        if body:
            _write_body(self.head, writer, request, body)


def _write_body(head: Head, writer: ResponseWriter, request: HTTPRequest, body: bytes) -> None:
    try:
        writer.write(body)
    except OSError as e:
        err = ResponseWriteError(f"failed to write response: {e}", cause=e)
        head.handle_err(writer, request, True, err)


# =============================================================================
# SHORTCUTS
# =============================================================================
#
#     return string_ok("pong")
#     return json_with(HTTPStatus.CREATED, {"id": 7})
#     return redirect_with(HTTPStatus.SEE_OTHER, "/login")
#
# =============================================================================

def bytes_ok(body: bytes) -> Bytes:
    return bytes_with(HTTPStatus.OK, body)


def bytes_with(status: int, body: bytes) -> Bytes:
    return Bytes(body=body, head=Head(status=status))


def string_ok(body: str) -> String:
    return string_with(HTTPStatus.OK, body)


def string_with(status: int, body: str) -> String:
    return String(body=body, head=Head(status=status))


def json_ok(body: Any) -> Json:
    return json_with(HTTPStatus.OK, body)


def json_with(status: int, body: Any) -> Json:
    return Json(body=body, head=Head(status=status))


def xml_ok(body: Union[ET.Element, XmlDoc]) -> Xml:
    return xml_with(HTTPStatus.OK, body)


def xml_with(status: int, body: Union[ET.Element, XmlDoc]) -> Xml:
    return Xml(body=body, head=Head(status=status))


def redirect_with(status: int, link: str) -> Redirect:
    return Redirect(link=link, head=Head(status=status))
