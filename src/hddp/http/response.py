"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Responses in hddp are built ONCE, when a route is registered, and turned
into bytes straight away. The route table keeps only those bytes, so the
hot path of a connection is a dictionary lookup plus a sendall().

    register time                               request time
    ─────────────                               ────────────
    HttpResponse ──to_bytes()──► bytes ──store──► RouteTable ──resolve()──► socket

=============================================================================
WIRE FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n                ← status line
    Content-Type: text/html\r\n        ← headers, "Name: Value" joined by CRLF
    X-Custom: yes                      ←   (no CRLF after the last header)
    \r\n\r\n                           ← separator
    <h1>Hello</h1>                     ← body

Nothing is added behind the caller's back: no Content-Length, no Date, no
Server header. Each connection carries a single response and is closed
afterwards, so the end of the body is the end of the stream.

Header order in the output follows insertion order, but callers must not
rely on it.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .status_codes import HTTPStatus


DEFAULT_STATUS_LINE = HTTPStatus.OK.status_line()
DEFAULT_CONTENT_TYPE = "text/html"


def _default_headers() -> Dict[str, str]:
    return {"Content-Type": DEFAULT_CONTENT_TYPE}


@dataclass
class HttpResponse:
    """
    A response waiting to be serialized.

    Defaults to "HTTP/1.1 200 OK" with "Content-Type: text/html". The
    mutators return self so they chain:

        response = (HttpResponse("<h1>Gone</h1>")
            .set_status(HTTPStatus.GONE)
            .add_header("Cache-Control", "no-store"))
    """

    body: str = ""
    status_line: str = DEFAULT_STATUS_LINE
    headers: Dict[str, str] = field(default_factory=_default_headers)

    def set_status_line(self, status_line: str) -> "HttpResponse":
        """Replace the whole status line, e.g. "HTTP/1.1 418 I'm a teapot"."""
        self.status_line = status_line
        return self

    def set_status(self, status: HTTPStatus) -> "HttpResponse":
        """Set the status line from a status code."""
        return self.set_status_line(status.status_line())

    def add_header(self, name: str, value: str) -> "HttpResponse":
        """
        Set a response header.

        Names are case-sensitive here; adding an existing name replaces
        its value.
        """
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response to the bytes sent on the wire.

        Returns:
            status_line CRLF headers CRLF CRLF body, UTF-8 encoded.
        """
        header_block = "\r\n".join(f"{name}: {value}" for name, value in self.headers.items())
        return f"{self.status_line}\r\n{header_block}\r\n\r\n{self.body}".encode("utf-8")


class ResponseBuilder:
    """
    Fluent builder for HttpResponse.

        data = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .header("Location", "/pizza/1")
            .html("<h1>Created</h1>")
            .to_bytes())

    Starts from the same defaults as HttpResponse.
    """

    def __init__(self):
        self._status_line = DEFAULT_STATUS_LINE
        self._headers: Dict[str, str] = _default_headers()
        self._body = ""

    # =========================================================================
    # STATUS METHODS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status_line = status.status_line()
        return self

    def status_line(self, status_line: str) -> "ResponseBuilder":
        """Use a literal status line instead of one built from a code."""
        self._status_line = status_line
        return self

    # =========================================================================
    # HEADER METHODS
    # =========================================================================

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        self._headers.update(headers)
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    # =========================================================================
    # BODY METHODS
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the response body.

        Bytes are decoded as UTF-8, since bodies are stored as text.
        """
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        self._body = body
        return self

    def html(self, html: str) -> "ResponseBuilder":
        self._body = html
        return self.content_type(DEFAULT_CONTENT_TYPE)

    def text(self, text: str) -> "ResponseBuilder":
        self._body = text
        return self.content_type("text/plain")

    # =========================================================================
    # BUILD METHODS
    # =========================================================================

    def build(self) -> HttpResponse:
        return HttpResponse(
            body=self._body,
            status_line=self._status_line,
            headers=dict(self._headers),
        )

    def to_bytes(self) -> bytes:
        """Build and serialize in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def build_response(body: str) -> HttpResponse:
    """Build a 200 text/html response around body."""
    return HttpResponse(body=body)


def serialize(response: HttpResponse) -> bytes:
    """Serialize a response to its wire bytes."""
    return response.to_bytes()


def not_found_response(body: str) -> HttpResponse:
    """Build the 404 text/html response used as the routing fallback."""
    return HttpResponse(body=body).set_status(HTTPStatus.NOT_FOUND)
