"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes used by the server and the helpers that turn them into the
full status line text stored on a response:

    HTTP/1.1 404 Not Found
    ──┬───── ─┬─ ────┬────
      │       │      │
    Version  Code  Reason phrase

Responses in this package carry their status line as plain text, so any
line can be set by hand. This enum only exists to produce the common
lines without typos.

=============================================================================
"""

from enum import IntEnum


DEFAULT_VERSION = "HTTP/1.1"


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
        >>> HTTPStatus.NOT_FOUND.status_line()
        'HTTP/1.1 404 Not Found'
    """

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    GONE = 410
    IM_A_TEAPOT = 418           # RFC 2324

    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        """Reason phrase that follows the code on the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    def status_line(self, version: str = DEFAULT_VERSION) -> str:
        """
        Render the full status line for this code.

        Args:
            version: Protocol version token placed first on the line.

        Returns:
            Status line text without the trailing CRLF.
        """
        return f"{version} {int(self)} {self.phrase}"


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",

    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.GONE: "Gone",
    HTTPStatus.IM_A_TEAPOT: "I'm a teapot",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}
