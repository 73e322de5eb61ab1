"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything that deals with HTTP messages rather than sockets:

    request.py       Raw bytes → HttpRequest (lenient parser)
    response.py      HttpResponse / ResponseBuilder → bytes
    route_table.py   (path, method) → pre-serialized response bytes
    status_codes.py  HTTPStatus enum → "HTTP/1.1 404 Not Found"

=============================================================================
HTTP MESSAGE FORMAT
=============================================================================

    REQUEST:                          RESPONSE:
    ─────────                         ──────────
    GET /path HTTP/1.1\r\n            HTTP/1.1 200 OK\r\n
    Header: Value\r\n                 Header: Value\r\n
    \r\n                              Header: Value\r\n\r\n
    [body]                            [body]

=============================================================================
"""

from .request import (
    HttpRequest,
    RequestParser,
    ParseError,
    InvalidEncoding,
    MalformedRequest,
    parse_request,
)
from .response import (
    HttpResponse,
    ResponseBuilder,
    build_response,
    serialize,
    not_found_response,
)
from .route_table import RouteTable
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HttpRequest",
    "RequestParser",
    "ParseError",
    "InvalidEncoding",
    "MalformedRequest",
    "parse_request",

    # Response building
    "HttpResponse",
    "ResponseBuilder",
    "build_response",
    "serialize",
    "not_found_response",

    # Routing
    "RouteTable",

    # Status codes
    "HTTPStatus",
]
