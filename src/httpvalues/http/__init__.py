"""
=============================================================================
HTTP MODULE
=============================================================================

The HTTP building blocks response values are written with:

    headers.py        Headers - case-insensitive, multi-valued header map
    status_codes.py   HTTPStatus - status codes and reason phrases
    mime_types.py     Content-Type detection from file extensions
    request.py        HTTPRequest - the incoming request
    writer.py         ResponseWriter - the output sink
    response.py       Responder, Head and the value responders

=============================================================================
"""

from .headers import Headers, canonical_header_name
from .status_codes import HTTPStatus, reason_phrase
from .mime_types import get_mime_type, get_content_type
from .request import HTTPRequest
from .writer import ResponseWriter, BufferedResponseWriter, format_http_date
from .response import (
    Responder,
    OptionalResponder,
    Head,
    # Value responders
    Reader,
    Bytes,
    String,
    Json,
    Xml,
    XmlDoc,
    Redirect,
    # Shortcuts
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

__all__ = [
    # Headers and status
    "Headers",
    "canonical_header_name",
    "HTTPStatus",
    "reason_phrase",

    # MIME types
    "get_mime_type",
    "get_content_type",

    # Request and writer
    "HTTPRequest",
    "ResponseWriter",
    "BufferedResponseWriter",
    "format_http_date",

    # Responders
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

    # Shortcuts
    "bytes_ok",
    "bytes_with",
    "string_ok",
    "string_with",
    "json_ok",
    "json_with",
    "xml_ok",
    "xml_with",
    "redirect_with",
]
