"""
=============================================================================
INCOMING REQUEST
=============================================================================

The request side of the serve contract. Responders only need a few
things from it:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   FIELD          USED BY                                            │
    │   ─────          ───────                                            │
    │   path           Dir (path resolution), Redirect (relative links)   │
    │   method         File (no body for HEAD), Redirect (body for GET)   │
    │   headers        error handlers, user code                          │
    └─────────────────────────────────────────────────────────────────────┘

The request is owned by whatever server accepted the connection. Host
adapters (see httpvalues.wsgi) build one per incoming request.

=============================================================================
PATH DECODING
=============================================================================

`path` is the URL-decoded path WITHOUT the query string:

    target "/files/a%20b.txt?download=1"
    path   "/files/a b.txt"
    query  {"download": ["1"]}

No traversal checks happen here. Deciding whether "/../etc/passwd" may
be served is the job of the responder that maps paths to files.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from urllib.parse import parse_qs, unquote, urlparse


@dataclass
class HTTPRequest:
    """
    Represents an incoming HTTP request.

    Attributes:
        method:         HTTP method ("GET", "HEAD", "POST", ...)
        path:           Decoded request path without query string
        version:        HTTP version string
        headers:        Header name → value, names LOWERCASE
        query_params:   Query parameter → list of values
        body:           Raw request body
        client_address: (ip, port) of the client
    """

    method: str = "GET"
    path: str = "/"
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        headers: Optional[Mapping[str, str]] = None,
        **kwargs,
    ) -> "HTTPRequest":
        """
        Build a request from a method and a raw request target.

        Args:
            method: HTTP method.
            target: Request target as sent on the request line,
                    e.g. "/static/app.js?v=3".
            headers: Request headers (any case; stored lowercase).
            **kwargs: Remaining HTTPRequest fields.

        Example:
            request = HTTPRequest.from_target("GET", "/a%20b?x=1")
            request.path          # "/a b"
            request.get_query("x")  # "1"
        """
        parsed = urlparse(target)
        return cls(
            method=method.upper(),
            path=unquote(parsed.path) or "/",
            query_params=parse_qs(parsed.query, keep_blank_values=True),
            headers={name.lower(): value for name, value in (headers or {}).items()},
            **kwargs,
        )

    @property
    def host(self) -> str:
        return self.headers.get("host", "")

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter, or `default`."""
        values = self.query_params.get(name, [])
        return values[0] if values else default
