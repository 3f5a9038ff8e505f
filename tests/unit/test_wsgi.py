"""
Unit tests for the WSGI adapter.
"""

import io
import logging
from wsgiref.util import setup_testing_defaults

import pytest

from httpvalues.handlers import Dir, Dirs, File
from httpvalues.http import Responder, json_ok
from httpvalues.wsgi import WSGIApp, request_from_environ


def make_environ(path: str = "/", method: str = "GET", **extra) -> dict:
    environ = {"PATH_INFO": path, "REQUEST_METHOD": method}
    environ.update(extra)
    setup_testing_defaults(environ)
    return environ


def call(app, path: str = "/", method: str = "GET", **extra):
    """Run one request through `app`; returns (status, headers, body)."""
    captured = {}
    chunks = []

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = dict(headers)
        return chunks.append

    result = app(make_environ(path, method, **extra), start_response)
    body = b"".join(chunks) + b"".join(result)
    return captured["status"], captured["headers"], body


class Silent(Responder):
    """Responder that writes nothing at all."""

    def serve(self, writer, request):
        pass


class TestRequestFromEnviron:
    """Tests for environ → HTTPRequest."""

    def test_basic_fields(self):
        """Test method, path, query and headers."""
        environ = make_environ(
            "/search",
            "post",
            QUERY_STRING="q=files&page=2",
            HTTP_X_REQUEST_ID="abc",
            REMOTE_ADDR="10.0.0.1",
            REMOTE_PORT="5555",
        )

        request = request_from_environ(environ)

        assert request.method == "POST"
        assert request.path == "/search"
        assert request.get_query("q") == "files"
        assert request.get_header("X-Request-Id") == "abc"
        assert request.client_address == ("10.0.0.1", 5555)

    def test_body(self):
        """Test that the body is read from wsgi.input."""
        environ = make_environ(
            "/echo",
            "POST",
            CONTENT_TYPE="application/json",
            CONTENT_LENGTH="7",
        )
        environ["wsgi.input"] = io.BytesIO(b'{"a":1}')

        request = request_from_environ(environ)

        assert request.body == b'{"a":1}'
        assert request.get_header("content-type") == "application/json"

    def test_utf8_path(self):
        """Test that PEP 3333 latin-1 paths are re-decoded as UTF-8."""
        raw = "/café.txt".encode("utf-8").decode("latin-1")
        request = request_from_environ(make_environ(raw))

        assert request.path == "/café.txt"


class TestWSGIApp:
    """Tests for WSGIApp."""

    def test_serves_directory(self, site):
        """Test a file served through a Dir responder."""
        status, headers, body = call(WSGIApp(Dir("static")), "/public/readme.txt")

        assert status == "200 OK"
        assert headers["Content-Type"] == "text/plain; charset=utf-8"
        assert body == b"public readme"

    def test_missing_file(self, site):
        """Test that a miss is a 404."""
        status, _, body = call(WSGIApp(Dir("static")), "/nope.txt")

        assert status == "404 Not Found"
        assert body == b""

    def test_head_request(self, site):
        """Test that HEAD sends no body."""
        status, headers, body = call(WSGIApp(Dir("static")), "/index.html", "HEAD")

        assert status == "200 OK"
        assert headers["Content-Length"] == "14"
        assert body == b""

    def test_handler_function_with_fallback(self, site):
        """Test a handler chaining a filtered Dir into a fallback File."""
        public = Dir("static", filter=Dirs(["static/public"]))
        index = File("static/index.html")
        app = WSGIApp(lambda request: public.handle_opt(request) or index.handle(request))

        assert call(app, "/public/readme.txt")[2] == b"public readme"
        assert call(app, "/private/readme.txt")[2] == b"<h1>index</h1>"

    def test_non_ascii_file_name(self, site):
        """Test serving a file with a UTF-8 name."""
        (site / "café.txt").write_text("coffee")
        raw = "/café.txt".encode("utf-8").decode("latin-1")

        status, _, body = call(WSGIApp(Dir("static")), raw)

        assert status == "200 OK"
        assert body == b"coffee"

    def test_handler_exception_is_500(self):
        """Test that a failing handler still gets a response."""
        def handler(request):
            raise ValueError("boom")

        status, _, body = call(WSGIApp(handler), "/x")

        assert status == "500 Internal Server Error"
        assert body == b"boom"

    def test_json_handler(self):
        """Test a handler returning a JSON value."""
        app = WSGIApp(lambda request: json_ok({"path": request.path}))
        status, headers, body = call(app, "/api")

        assert status == "200 OK"
        assert headers["Content-Type"] == "application/json"
        assert body == b'{"path": "/api"}\n'

    def test_silent_responder_is_empty_200(self):
        """Test that a responder writing nothing yields an empty 200."""
        status, _, body = call(WSGIApp(Silent()), "/")

        assert status == "200 OK"
        assert body == b""

    def test_access_log(self, site, caplog):
        """Test the one-line access log."""
        with caplog.at_level(logging.INFO, logger="httpvalues.access"):
            call(WSGIApp(Dir("static")), "/index.html")

        assert '"GET /index.html" 200 14' in caplog.text

    def test_rejects_other_targets(self):
        """Test that only responders and callables are accepted."""
        with pytest.raises(TypeError):
            WSGIApp(42)

    def test_nul_byte_path_is_404(self, site):
        """Test that a NUL byte in the path is served as a plain miss."""
        status, _, body = call(WSGIApp(Dir("static")), "/a\x00b")

        assert status == "404 Not Found"
        assert body == b""
