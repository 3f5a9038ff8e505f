"""
Unit tests for the command line entry point.
"""

import pytest

from httpvalues.__main__ import build_handler, main
from httpvalues.handlers import File, NotFound
from httpvalues.http import HTTPRequest


class TestBuildHandler:
    """Tests for the CLI request handler."""

    def test_serves_from_root(self, site):
        """Test that files under the root are served."""
        handler = build_handler("static")
        assert handler(HTTPRequest(path="/index.html")) == File("static/index.html")

    def test_allow_list(self, site):
        """Test that --allow restricts what is served."""
        handler = build_handler("static", allow=["static/public"])

        assert handler(HTTPRequest(path="/public/readme.txt")) == File("static/public/readme.txt")
        assert handler(HTTPRequest(path="/private/readme.txt")) == NotFound()

    def test_fallback(self, site):
        """Test that --fallback answers misses."""
        handler = build_handler("static", fallback="static/index.html")
        assert handler(HTTPRequest(path="/missing")) == File("static/index.html")


class TestMain:
    """Tests for argument handling."""

    def test_version(self, capsys):
        """Test --version."""
        with pytest.raises(SystemExit) as exc:
            main(["--version"])

        assert exc.value.code == 0
        assert "httpvalues" in capsys.readouterr().out

    def test_root_must_be_directory(self, tmp_path):
        """Test that a missing root is a usage error."""
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "missing")])

        assert exc.value.code == 2
