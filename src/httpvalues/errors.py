"""
=============================================================================
ERROR HANDLING
=============================================================================

Response values can fail while rendering: a JSON body that will not
encode, a client that disconnects mid-body. Such failures are handed to
an error handler (ErrFunc) instead of being raised into the server.

=============================================================================
THE ERROR HANDLER CONTRACT
=============================================================================

    err_func(writer, request, wrote, err)

    wrote=False  Nothing reached the writer yet. The handler should
                 write an error response (usually 500).

    wrote=True   Status and maybe part of the body are already out.
                 The response cannot be changed; log the error.

If writing the error response fails as well, the secondary error is
logged.

The default handler is err_handler(). It can be replaced per value
(Head.err_func) or process-wide through httpvalues.config.configure().

=============================================================================
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .http.request import HTTPRequest
    from .http.writer import ResponseWriter


logger = logging.getLogger(__name__)


ErrFunc = Callable[["ResponseWriter", "HTTPRequest", bool, Optional[BaseException]], None]


class ResponseWriteError(Exception):
    """
    Raised (and passed to error handlers) when a response body could not
    be written or encoded. The underlying exception is chained as
    __cause__.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.__cause__ = cause


def err_handler(
    writer: "ResponseWriter",
    request: "HTTPRequest",
    wrote: bool,
    err: Optional[BaseException],
) -> None:
    """
    Default ErrFunc.

    Writes the error as a plain-text 500 response when nothing was written
    yet; otherwise, or if that write fails, logs it.

    Use this function as the template for custom handlers.
    """
    if err is None:
        return

    if not wrote:
        try:
            writer.headers.set("Content-Type", "text/plain; charset=utf-8")
            writer.write_header(500)
            writer.write(str(err).encode("utf-8"))
            return
        except OSError as write_err:
            err = ResponseWriteError(
                f"secondary error while writing error response: {write_err}",
                cause=write_err,
            )

    logger.error(f"{request.method} {request.path}: {err}")
