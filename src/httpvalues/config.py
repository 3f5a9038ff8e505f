"""
=============================================================================
CONFIGURATION
=============================================================================

Process-wide settings for response values and file streaming.

=============================================================================
SINGLE WRITER, BEFORE FIRST USE
=============================================================================

The active configuration is read by every responder while serving. It is
installed once, at startup, before the first request:

    config = ResponderConfig.from_env()
    configure(config)        # validates, then installs
    setup_logging(config)

    app = WSGIApp(Dir("static"))

Responders never modify it. Calling configure() while requests are in
flight is not supported.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field

from .errors import ErrFunc, err_handler


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ResponderConfig:
    """
    Configuration for response values.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    ERROR HANDLING
    - err_func: default error handler for values without their own

    FILE STREAMING
    - chunk_size

    LOGGING / IDENTITY
    - log_level, server_name

    =========================================================================
    """

    err_func: ErrFunc = field(default=err_handler)
    """
    Error handler used when a response value has no err_func of its own.
    """

    chunk_size: int = 64 * 1024
    """
    Read size in bytes when streaming files and readers.
    """

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    server_name: str = "httpvalues/1.0"
    """
    Value for the Server header when serializing buffered responses.
    """

    @classmethod
    def from_env(cls) -> "ResponderConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPVALUES_CHUNK_SIZE   Streaming chunk size (default: 65536)
        HTTPVALUES_LOG_LEVEL    Logging level (default: INFO)
        HTTPVALUES_SERVER_NAME  Server header value (default: httpvalues/1.0)

        =====================================================================
        """
        return cls(
            chunk_size=int(os.getenv("HTTPVALUES_CHUNK_SIZE", str(64 * 1024))),
            log_level=os.getenv("HTTPVALUES_LOG_LEVEL", "INFO"),
            server_name=os.getenv("HTTPVALUES_SERVER_NAME", "httpvalues/1.0"),
        )

    def validate(self) -> None:
        """Raise ValueError for unusable values."""
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")

        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if not callable(self.err_func):
            raise ValueError("err_func must be callable")


_active = ResponderConfig()


def configure(config: ResponderConfig) -> ResponderConfig:
    """
    Validate and install the process-wide configuration.

    Returns:
        The previously active configuration.
    """
    global _active
    config.validate()
    previous, _active = _active, config
    return previous


def get_config() -> ResponderConfig:
    """Return the active configuration."""
    return _active


def setup_logging(config: ResponderConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpvalues").setLevel(level)
