"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together:

    ┌──────────────┐  accept   ┌────────────┐  thread  ┌──────────────────────┐
    │ SocketServer │ ────────► │ Connection │ ───────► │ handle_connection()  │
    └──────────────┘           └────────────┘          └──────────┬───────────┘
                                                                  │
                           ┌──────────────────────────────────────┘
                           ▼
        recv() ──► RequestParser ──► RouteTable.resolve() ──► sendall() ──► close

=============================================================================
REQUEST FLOW
=============================================================================

1. The accept loop wraps the client socket in a Connection and calls
   HTTPServer._dispatch(), which starts a new thread and returns at once.
2. The thread reads one buffer, parses it, resolves (method, path) in the
   shared RouteTable and writes the stored bytes back.
3. The connection is closed. There is no keep-alive.

Responses are serialized when routes are registered, so serving a request
never builds a response.

=============================================================================
FAILURES
=============================================================================

    Read fails         → log, close without answering
    Request malformed  → log, close without answering (no 400 is sent)
    Write fails        → log, give up; nothing is retried
    Anything else      → logged with traceback, confined to the thread

Only failing to bind the listening address reaches the caller (BindError).

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ReadError, WriteError
from .http import (
    HttpResponse, RequestParser, ParseError,
    RouteTable,
)
from .http.route_table import ResponseLike
from .pages import load_default_page, load_not_found_page


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("hddp.access")

_default_parser = RequestParser()


def handle_connection(
    conn: Connection,
    route_table: RouteTable,
    parser: Optional[RequestParser] = None,
) -> None:
    """
    Serve exactly one request on conn, then close it.

    Never raises: every failure is logged and ends this connection only.

    Args:
        conn: The accepted client connection. Owned by this call.
        route_table: The shared table to resolve the request against.
        parser: Request parser, a shared stateless one by default.
    """
    parser = parser or _default_parser

    with conn:
        try:
            _serve(conn, route_table, parser)
        except Exception as e:
            logger.exception(f"[{conn.id}] Unexpected error serving {conn.client_ip}: {e}")


def _serve(conn: Connection, route_table: RouteTable, parser: RequestParser) -> None:
    try:
        raw_request = conn.read_request()
    except ReadError as e:
        logger.warning(f"[{conn.id}] {e}")
        return

    try:
        request = parser.parse(raw_request)
    except ParseError as e:
        # No response is defined for bad requests; the client just
        # sees the connection close.
        logger.warning(f"[{conn.id}] Dropping malformed request from {conn.client_ip}: {e}")
        return

    response = route_table.resolve(request.method, request.path)
    access_logger.info(f"{request.method} {request.path} -> {_status_of(response)}")

    try:
        conn.send_response(response)
    except WriteError as e:
        logger.warning(f"[{conn.id}] {e}")


def _status_of(response: bytes) -> str:
    """Status line of serialized response bytes, for logging."""
    return response.split(b"\r\n", 1)[0].decode("utf-8", errors="replace")


class HTTPServer:
    """
    HTTP/1.1 server serving canned responses.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=8080))

        server.add_route("GET", "/pizza", HttpResponse("<h1>Pizza</h1>"))
        server.add_route(
            "POST", "/test",
            HttpResponse("<h1>POST received</h1>").set_status(HTTPStatus.CREATED),
        )

        server.run()    # configures logging, then blocks in listen()

    Routes can be added or removed from any thread while the server is
    listening; the next connection sees the change.

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        route_table: Optional[RouteTable] = None,
        serve_index: bool = True,
    ):
        """
        Initialize the HTTP server.

        Args:
            config: Server configuration. Defaults are used if not provided.
            route_table: Table to serve from. By default a new one is made
                         whose not-found body is read from the pages dir.
            serve_index: Register the default page as GET /. Ignored when a
                         route_table is passed in.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        if route_table is None:
            route_table = RouteTable(not_found_body=load_not_found_page(self.config.pages_dir))
            if serve_index:
                route_table.add_route("GET", "/", HttpResponse(load_default_page(self.config.pages_dir)))

        # The one table shared by every connection thread
        self._routes = route_table

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()

    @property
    def routes(self) -> RouteTable:
        return self._routes

    @property
    def address(self) -> Tuple[str, int]:
        """Address actually listened on (real port when configured with 0)."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, method: str, path: str, response: ResponseLike) -> "HTTPServer":
        """
        Serve response for method and path. Replaces any earlier route.

        Returns:
            Self for method chaining.
        """
        self._routes.add_route(method, path, response)
        return self

    def remove_route(self, path: str) -> "HTTPServer":
        """Stop serving every method of path."""
        self._routes.remove_route(path)
        return self

    def remove_method(self, method: str, path: str) -> "HTTPServer":
        """Stop serving one method of path."""
        self._routes.remove_method(method, path)
        return self

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Configure logging and serve until interrupted.

        Args:
            host: Override config host.
            port: Override config port.

        Raises:
            BindError: If the address is unavailable.
        """
        self._setup_logging()

        if len(self._routes):
            logger.info(f"Registered routes:\n{self._routes.format_routes()}")

        # SIGINT becomes shutdown() once listening; this only covers an
        # interrupt that arrives before the handlers are installed.
        try:
            self.listen((host or self.config.host, self.config.port if port is None else port))
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")

    def listen(self, address: Optional[Tuple[str, int]] = None):
        """
        Bind address and accept connections until shutdown().

        Blocks. Every accepted connection is served on its own thread.

        Args:
            address: (host, port) to bind, config host/port by default.

        Raises:
            BindError: If the address is unavailable.
        """
        if address is not None:
            self.config.host, self.config.port = address

        self._socket_server.start(self._dispatch)

    def shutdown(self):
        """
        Stop accepting connections.

        Connections already being served finish on their own threads.
        """
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait until the listening socket is bound. False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Wait until listen() has closed the socket. False on timeout."""
        return self._socket_server.wait_for_shutdown(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("hddp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _dispatch(self, conn: Connection):
        """
        Start a thread serving conn. Called on the accept thread.

        One thread per connection, unbounded: there is no pool and no
        admission control.
        """
        thread = threading.Thread(
            target=handle_connection,
            args=(conn, self._routes, self._parser),
            name=f"hddp-conn-{conn.id}",
            daemon=True,
        )
        thread.start()
