"""
=============================================================================
FILE AND DIRECTORY RESPONDERS
=============================================================================

Serve files from disk as response values.

    File("static/index.html")        exactly this file
    Dir("static")                    whatever file the request path names
    NotFound()                       bare 404

=============================================================================
PATH RESOLUTION (Dir)
=============================================================================

    Request: GET /css/site.css          Dir("static", filter=...)

    ┌─────────────────────────────────────────────────────────────────────┐
    │  1. Strip one leading "/"           "css/site.css"                   │
    │  2. Reject ".." anywhere            "/../etc/passwd"      → 404     │
    │     Reject trailing "/"             "/css/"               → 404     │
    │  3. Join with the root              "static/css/site.css"           │
    │  4. Ask the filter (if any)         Dirs(["static/css"])  → allowed │
    │  5. File("static/css/site.css")                                     │
    └─────────────────────────────────────────────────────────────────────┘

Every rejection yields File() with an empty path, which never exists.
A traversal attempt, a filtered path and a missing file all look the
same to the client: 404, no body. The response does not reveal which
check failed.

Resolution touches the filesystem only for the final existence check.
That makes it safe to PROBE a directory without writing anything:

    static.handle_opt(request)           # File or None
    static.try_serve(writer, request)    # True, or False with no output

which is what fallback chains are built on:

    (Dir("build").try_serve(writer, request)
        or Dir("public").try_serve(writer, request)
        or File("public/index.html").serve(writer, request))

=============================================================================
KNOWN LIMITATIONS
=============================================================================

- Only ".." and a trailing separator are rejected. Symlinks inside the
  root are followed like regular files.
- No directory listings, range requests or caching headers.
- A file can vanish between the existence check and open(). The error
  propagates to the caller (see httpvalues.handlers.recovery).

=============================================================================
"""

import logging
import os
import shutil
import stat
from dataclasses import dataclass, field
from typing import Optional

from ..config import get_config
from ..http.mime_types import get_content_type
from ..http.request import HTTPRequest
from ..http.response import Head, OptionalResponder, Responder
from ..http.status_codes import HTTPStatus
from ..http.writer import ResponseWriter
from .filters import Filter, as_filter


logger = logging.getLogger(__name__)


_SEPARATORS = tuple({"/", os.sep, os.altsep or "/"})


@dataclass(frozen=True)
class NotFound(Responder):
    """Writes status 404 and nothing else: no headers, no body."""

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        writer.write_header(HTTPStatus.NOT_FOUND)


@dataclass(frozen=True)
class File(OptionalResponder):
    """
    Serves the file at `path`, or a 404 if there is no such file.

    =========================================================================
    USAGE
    =========================================================================

        favicon = File("static/favicon.ico",
                       head=Head(headers={"Cache-Control": "max-age=86400"}))

        def handler(request):
            if request.path == "/favicon.ico":
                return favicon
            return static.handle(request)

    An empty path means "no file" and is never looked up on disk.

    =========================================================================
    """

    path: str = ""
    head: Head = field(default_factory=Head)

    def exists(self) -> bool:
        """
        True if `path` names an existing non-directory.

        Best effort: the answer can be stale by the time the file is
        opened.
        """
        path = self.path
        if not path or path == "." or path.endswith(_SEPARATORS):
            return False
        try:
            return not stat.S_ISDIR(os.stat(path).st_mode)
        except (OSError, ValueError):
            # ValueError: embedded NUL byte
            return False

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        """
        Stream the file, or write a bare 404 if it does not exist.

        The 404 does NOT carry the configured headers; they describe the
        file, and there is no file.

        Raises:
            OSError: If the file cannot be opened or read after passing
                     the existence check.
        """
        if not self.exists():
            NotFound().serve(writer, request)
            return
        self._serve_content(writer, request)

    def try_serve(self, writer: ResponseWriter, request: HTTPRequest) -> bool:
        if not self.exists():
            return False
        self._serve_content(writer, request)
        return True

    def handle(self, request: HTTPRequest) -> Responder:
        return self

    def handle_opt(self, request: HTTPRequest) -> Optional[Responder]:
        return self if self.exists() else None

    def _serve_content(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        # Open before touching the writer: a failed open leaves it clean.
        with open(self.path, "rb") as f:
            size = os.fstat(f.fileno()).st_size

            if "Content-Type" not in writer.headers:
                writer.headers.set("Content-Type", get_content_type(self.path))
            writer.headers.set("Content-Length", str(size))

            self.head.merge_headers(writer)
            writer.write_header(self.head.status or HTTPStatus.OK)

            if request.method != "HEAD":
                shutil.copyfileobj(f, writer, get_config().chunk_size)


@dataclass(frozen=True)
class Dir(OptionalResponder):
    """
    Serves files from the directory tree under `path`.

    Attributes:
        path:   Root directory. The root itself is never served.
        filter: Optional access filter, or a plain `path -> bool`
                function. None allows every resolved path.
        head:   Status, headers and error handler copied onto every
                File this directory resolves.

    Dir values are immutable; build one at startup and share it.
    """

    path: str
    filter: Optional[Filter] = None
    head: Head = field(default_factory=Head)

    def __post_init__(self):
        object.__setattr__(self, "filter", as_filter(self.filter))

    def resolve(self, request: HTTPRequest) -> File:
        """
        Map the request path to a File under the root.

        Returns:
            File at the joined path, or File() if the path was rejected.
            Equal requests always resolve to equal Files.
        """
        rel = request.path
        if rel.startswith("/"):
            rel = rel[1:]

        if ".." in rel:
            logger.warning(f"Path traversal attempt: {request.path}")
            return File()
        if rel.endswith(_SEPARATORS):
            return File()

        joined = _join(self.path, rel)
        if not joined:
            return File()

        if self.filter is not None and not self.filter.allow(_to_slash(joined)):
            logger.debug(f"Filtered out: {joined}")
            return File()

        return File(path=joined, head=self.head)

    def serve(self, writer: ResponseWriter, request: HTTPRequest) -> None:
        self.resolve(request).serve(writer, request)

    def try_serve(self, writer: ResponseWriter, request: HTTPRequest) -> bool:
        return self.resolve(request).try_serve(writer, request)

    def handle(self, request: HTTPRequest) -> Responder:
        file = self.resolve(request)
        if file.exists():
            return file
        return NotFound()

    def handle_opt(self, request: HTTPRequest) -> Optional[Responder]:
        file = self.resolve(request)
        return file if file.exists() else None


def _join(root: str, rel: str) -> str:
    # An absolute `rel` stays under `root`: "static" + "/etc" is "static/etc".
    parts = [part for part in (root, rel.lstrip("".join(_SEPARATORS))) if part]
    if not parts:
        return ""
    return os.path.normpath(os.path.join(*parts))


def _to_slash(path: str) -> str:
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")
