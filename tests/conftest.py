"""
pytest configuration and fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpvalues.config import ResponderConfig, configure
from httpvalues.http import BufferedResponseWriter, HTTPRequest


@pytest.fixture(autouse=True)
def default_config():
    """Reset the process-wide configuration around every test."""
    previous = configure(ResponderConfig())
    yield
    configure(previous)


@pytest.fixture
def writer() -> BufferedResponseWriter:
    """Fresh in-memory response writer."""
    return BufferedResponseWriter()


@pytest.fixture
def make_request():
    """Factory for requests: make_request("/a?b=1", method="HEAD")."""
    def _make(target: str = "/", method: str = "GET", **kwargs) -> HTTPRequest:
        return HTTPRequest.from_target(method, target, **kwargs)
    return _make


@pytest.fixture
def site(tmp_path: Path, monkeypatch) -> Path:
    """
    Static tree under a temporary working directory.

        static/
        ├── index.html
        ├── sub/
        ├── public/
        │   ├── readme.txt
        │   └── data.json
        └── private/
            └── readme.txt

    The working directory is the parent of static/, so relative roots
    like Dir("static") resolve inside it.
    """
    root = tmp_path / "static"
    (root / "sub").mkdir(parents=True)
    (root / "public").mkdir()
    (root / "private").mkdir()

    (root / "index.html").write_text("<h1>index</h1>")
    (root / "public" / "readme.txt").write_text("public readme")
    (root / "public" / "data.json").write_text('{"a": 1}')
    (root / "private" / "readme.txt").write_text("private readme")

    monkeypatch.chdir(tmp_path)
    return root
