"""
=============================================================================
HDDP - Minimal HTTP/1.1 Server
=============================================================================

A small HTTP/1.1 server on raw Python sockets that serves canned
responses.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         HDDP ARCHITECTURE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. LISTENER (core.socket_server)                                  │
    │      - Binds the TCP socket, accepts connections                    │
    │      - One new thread per accepted connection                       │
    │                                                                      │
    │   2. CONNECTION HANDLER (server.handle_connection)                  │
    │      - One recv(), one parse, one lookup, one sendall(), close      │
    │                                                                      │
    │   3. REQUEST PARSER (http.request)                                  │
    │      - Lenient: any method, any version, case-kept headers          │
    │                                                                      │
    │   4. ROUTE TABLE (http.route_table)                                 │
    │      - (path, method) → response bytes, serialized up front         │
    │      - Lock-guarded, routes can change while serving                │
    │                                                                      │
    │   5. RESPONSE BUILDER (http.response)                               │
    │      - Status line, headers, body → bytes                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUICK START
=============================================================================

    from hddp import HTTPServer, HttpResponse

    server = HTTPServer()
    server.add_route("GET", "/pizza", HttpResponse("<h1>Pizza</h1>"))
    server.run()

Or from the command line:

    python -m hddp --port 8080 --route GET /pizza "<h1>Pizza</h1>"

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, handle_connection
from .config import ServerConfig
from .core import BindError, ReadError, WriteError
from .http import (
    HttpRequest,
    HttpResponse,
    ResponseBuilder,
    RouteTable,
    HTTPStatus,
    ParseError,
    InvalidEncoding,
    MalformedRequest,
    build_response,
    parse_request,
    serialize,
)
from .pages import load_page

__all__ = [
    "HTTPServer",
    "ServerConfig",
    "handle_connection",
    "HttpRequest",
    "HttpResponse",
    "ResponseBuilder",
    "RouteTable",
    "HTTPStatus",
    "build_response",
    "parse_request",
    "serialize",
    "load_page",
    "BindError",
    "ReadError",
    "WriteError",
    "ParseError",
    "InvalidEncoding",
    "MalformedRequest",
    "__version__",
]
