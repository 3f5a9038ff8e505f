"""
Unit tests for fault recovery and the default error handler.
"""

import logging

from httpvalues.errors import ResponseWriteError, err_handler
from httpvalues.handlers import NotFound, recover, serve_safely
from httpvalues.http import BufferedResponseWriter, Responder, string_ok


class Exploding(Responder):
    """Responder that fails after writing `prefix`."""

    def __init__(self, prefix: bytes = b""):
        self.prefix = prefix

    def serve(self, writer, request):
        if self.prefix:
            writer.write(self.prefix)
        raise OSError("connection reset")


class FailingWriter(BufferedResponseWriter):
    """Writer whose body writes fail."""

    def _send_body(self, data):
        raise OSError("broken pipe")


class TestRecover:
    """Tests for the recover() wrapper."""

    def test_passes_responders_through(self, make_request):
        """Test that a normal result is returned unchanged."""
        response = string_ok("ok")
        handler = recover(lambda request: response)

        assert handler(make_request()) is response

    def test_raised_exception_is_500(self, writer, make_request):
        """Test that a raised exception becomes a plain-text 500."""
        @recover
        def handler(request):
            raise ValueError("bad id")

        handler(make_request("/user")).serve(writer, make_request("/user"))

        assert writer.status == 500
        assert writer.sent_headers.get("Content-Type") == "text/plain; charset=utf-8"
        assert writer.body == b"bad id"

    def test_returned_exception_is_500(self, writer, make_request):
        """Test that a returned exception is treated like a raised one."""
        handler = recover(lambda request: ValueError("bad id"))
        handler(make_request()).serve(writer, make_request())

        assert writer.status == 500
        assert writer.body == b"bad id"

    def test_empty_message_uses_class_name(self, writer, make_request):
        """Test the body for exceptions without a message."""
        @recover
        def handler(request):
            raise RuntimeError()

        handler(make_request()).serve(writer, make_request())
        assert writer.body == b"RuntimeError"

    def test_none_is_404(self, make_request):
        """Test that returning nothing means nothing to serve."""
        handler = recover(lambda request: None)
        assert handler(make_request()) == NotFound()

    def test_unexpected_value_is_500(self, writer, make_request):
        """Test that other return values are faults."""
        handler = recover(lambda request: 42)
        handler(make_request()).serve(writer, make_request())

        assert writer.status == 500
        assert writer.body == b"unexpected handler result: 42"

    def test_failure_is_logged(self, make_request, caplog):
        """Test that a raised exception is logged with the request."""
        @recover
        def handler(request):
            raise KeyError("user")

        with caplog.at_level(logging.ERROR):
            handler(make_request("/user"))

        assert "Handler failed: GET /user" in caplog.text

    def test_keeps_function_metadata(self):
        """Test that the wrapper looks like the wrapped function."""
        def show_user(request):
            """Show a user."""

        wrapped = recover(show_user)

        assert wrapped.__name__ == "show_user"
        assert wrapped.__doc__ == "Show a user."


class TestServeSafely:
    """Tests for serve_safely()."""

    def test_fault_before_write_is_500(self, writer, make_request):
        """Test that the default handler can still send a 500."""
        serve_safely(Exploding(), writer, make_request())

        assert writer.status == 500
        assert writer.body == b"connection reset"

    def test_fault_after_write_reports_wrote(self, writer, make_request):
        """Test that the handler learns the status was already sent."""
        calls = []
        serve_safely(
            Exploding(b"partial"),
            writer,
            make_request(),
            lambda w, r, wrote, err: calls.append((wrote, str(err))),
        )

        assert calls == [(True, "connection reset")]
        assert writer.status == 200
        assert writer.body == b"partial"

    def test_success_calls_no_handler(self, writer, make_request):
        """Test that a clean serve does not reach the handler."""
        calls = []
        serve_safely(string_ok("fine"), writer, make_request(), lambda *args: calls.append(args))

        assert calls == []
        assert writer.body == b"fine"


class TestErrHandler:
    """Tests for the default error handler."""

    def test_none_is_ignored(self, writer, make_request):
        """Test that a missing error writes nothing."""
        err_handler(writer, make_request(), False, None)
        assert writer.status is None

    def test_not_wrote_sends_500(self, writer, make_request):
        """Test the plain-text 500 response."""
        err_handler(writer, make_request(), False, ValueError("boom"))

        assert writer.status == 500
        assert writer.sent_headers.get("Content-Type") == "text/plain; charset=utf-8"
        assert writer.body == b"boom"

    def test_wrote_only_logs(self, writer, make_request, caplog):
        """Test that an already-started response is only logged."""
        writer.write_header(200)

        with caplog.at_level(logging.ERROR):
            err_handler(writer, make_request("/x"), True, ValueError("boom"))

        assert writer.status == 200
        assert "GET /x: boom" in caplog.text

    def test_secondary_write_error_is_logged(self, make_request, caplog):
        """Test that a failing error response is logged, not raised."""
        writer = FailingWriter()

        with caplog.at_level(logging.ERROR):
            err_handler(writer, make_request("/x"), False, ValueError("boom"))

        assert writer.status == 500
        assert "secondary error while writing error response" in caplog.text

    def test_write_error_chains_cause(self):
        """Test that the cause is kept on ResponseWriteError."""
        cause = OSError("broken pipe")
        err = ResponseWriteError("failed", cause=cause)

        assert err.__cause__ is cause
        assert str(err) == "failed"
