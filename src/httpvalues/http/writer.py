"""
=============================================================================
RESPONSE WRITERS (THE OUTPUT SINK)
=============================================================================

Responders do not build response objects; they WRITE themselves into a
ResponseWriter supplied by the host server.

=============================================================================
WRITE ORDER
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   1. Mutate headers         writer.headers.set("Content-Type", ...) │
    │              │                                                       │
    │              ▼                                                       │
    │   2. Write status (once)    writer.write_header(200)                │
    │              │              headers are now sent                    │
    │              ▼                                                       │
    │   3. Write body bytes       writer.write(b"...")                    │
    │                             (implies write_header(200) if step 2    │
    │                              was skipped)                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Header changes after step 2 do not reach the client. A second
write_header() call is ignored and logged.

Two writers ship with the library:

- BufferedResponseWriter: records status, headers and body in memory.
  Used in tests and anywhere a response must be inspected or serialized
  to raw HTTP/1.1 bytes.
- WSGIResponseWriter (httpvalues.wsgi): streams into a WSGI server.

=============================================================================
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from .headers import Headers
from .status_codes import HTTPStatus, reason_phrase


logger = logging.getLogger(__name__)


class ResponseWriter(ABC):
    """
    Abstract output sink for one HTTP response.

    Subclasses implement _send_header() and _send_body(); the base class
    enforces the write order described in the module docstring.
    """

    def __init__(self):
        self.headers = Headers()
        self._status: Optional[int] = None

    @property
    def status(self) -> Optional[int]:
        """The status written so far, or None if none was written."""
        return self._status

    @property
    def wrote_header(self) -> bool:
        return self._status is not None

    def write_header(self, status: int) -> None:
        """
        Send the status line and current headers.

        Only the first call has an effect.

        Args:
            status: HTTP status code.
        """
        if self._status is not None:
            logger.warning(
                f"Superfluous write_header({status}): status {self._status} already written"
            )
            return
        self._status = int(status)
        self._send_header(self._status, self.headers.copy())

    def write(self, data: bytes) -> int:
        """
        Write body bytes, sending status 200 first if needed.

        Returns:
            Number of bytes written.
        """
        if self._status is None:
            self.write_header(HTTPStatus.OK)
        if not data:
            return 0
        self._send_body(bytes(data))
        return len(data)

    @abstractmethod
    def _send_header(self, status: int, headers: Headers) -> None:
        """Deliver the status and a snapshot of the headers."""

    @abstractmethod
    def _send_body(self, data: bytes) -> None:
        """Deliver a chunk of body bytes."""


class BufferedResponseWriter(ResponseWriter):
    """
    ResponseWriter that keeps the whole response in memory.

    =========================================================================
    USAGE
    =========================================================================

        writer = BufferedResponseWriter()
        File("static/readme.txt").serve(writer, request)

        writer.status                 # 200
        writer.headers.get("Content-Type")
        writer.body                   # file bytes
        writer.to_bytes()             # b"HTTP/1.1 200 OK\\r\\n..."

    =========================================================================
    """

    def __init__(self, server_name: str = "httpvalues/1.0"):
        super().__init__()
        self.server_name = server_name
        self.sent_headers: Optional[Headers] = None
        self._body = bytearray()

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    def _send_header(self, status: int, headers: Headers) -> None:
        self.sent_headers = headers

    def _send_body(self, data: bytes) -> None:
        self._body.extend(data)

    def to_bytes(self) -> bytes:
        """
        Serialize the recorded response as HTTP/1.1 bytes.

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\\r\\n              ← Status line
            Content-Type: text/plain\\r\\n
            Content-Length: 5\\r\\n            ← Added if missing
            Date: Wed, 01 Jan 2026 ...\\r\\n    ← Added if missing
            Server: httpvalues/1.0\\r\\n        ← Added if missing
            \\r\\n                              ← Separator
            hello                              ← Body

        =====================================================================

        A response that never wrote a status serializes as 200, the same
        as a real connection closing without output.
        """
        status = self._status if self._status is not None else int(HTTPStatus.OK)
        headers = (self.sent_headers or self.headers).copy()

        if "Content-Length" not in headers:
            headers.set("Content-Length", str(len(self._body)))
        if "Date" not in headers:
            headers.set("Date", format_http_date(datetime.now(timezone.utc)))
        if "Server" not in headers:
            headers.set("Server", self.server_name)

        lines = [f"HTTP/1.1 {status} {reason_phrase(status)}"]
        for name, value in headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        return "\r\n".join(lines).encode("utf-8") + b"\r\n" + bytes(self._body)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT

    Args:
        dt: Datetime to format (should be UTC).
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
