"""
=============================================================================
TCP LISTENER
=============================================================================

Binds the listening socket and accepts connections until shut down.

    ┌───────────────────────┐
    │   Listening Socket    │     Bound to host:port
    │   (Server Socket)     │     Never sends/receives data
    └───────────┬───────────┘
                │ accept()
        ┌───────┼───────────────────────┐
        ▼       ▼                       ▼
    Connection Connection   ...     Connection
        │
        └──► connection_handler(conn)   ← must return quickly

The accept loop does no request processing itself. It wraps each client
socket in a Connection and hands it to a callback; the HTTP layer's
callback starts a thread per connection, so a slow client never holds up
the next accept().

=============================================================================
FAILURE MODES
=============================================================================

    bind() fails     → BindError raised to the caller of start(). This is
                       the only fatal error.
    accept() fails   → logged, loop continues with the next accept().
    callback raises  → logged, loop continues.

=============================================================================
SOCKET OPTIONS
=============================================================================

SO_REUSEADDR lets the server rebind right after a restart instead of
waiting out TIME_WAIT. TCP_NODELAY disables Nagle's algorithm: responses
are written in one go and should leave immediately.

The listening socket has a 1 second timeout so the loop can notice
shutdown() without needing a connection to arrive.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

ACCEPT_POLL_INTERVAL = 1.0


class BindError(OSError):
    """The listening address could not be bound."""

    def __init__(self, address: Tuple[str, int], reason: Exception):
        message = f"Failed to bind {address[0]}:{address[1]}: {getattr(reason, 'strerror', None) or reason}"
        errno = getattr(reason, "errno", None)
        if errno is None:
            super().__init__(message)
        else:
            super().__init__(errno, message)
        self.address = address


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle_connection(conn: Connection):
            threading.Thread(target=serve, args=(conn,)).start()

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown()

    start() blocks, so tests and embedding code typically run it in a
    background thread and use wait_until_ready() / address / shutdown().
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the socket server.

        Args:
            config: Server configuration (host, port, backlog, buffer size,
                    timeout). The socket is only created in start().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening, cleared again on cleanup
        self._ready_event = threading.Event()
        self._shutdown_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        The (host, port) the server is listening on.

        Once bound this is the real socket address, so a configured port
        of 0 reports the port the OS picked.
        """
        if self._socket is not None:
            try:
                host, port = self._socket.getsockname()[:2]
                return (host, port)
            except OSError:
                pass
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(ACCEPT_POLL_INTERVAL)
        return sock

    def _setup_signals(self):
        """
        Turn SIGINT / SIGTERM into a clean shutdown().

        Python only allows installing signal handlers from the main
        thread; when started from any other thread the process default
        handlers stay in place.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, shutting down...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. It
                                runs on the accept thread and should hand
                                the connection off rather than serve it.

        Raises:
            BindError: If the configured address is unavailable.
        """
        bind_address = (self.config.host, self.config.port)
        self._socket = self._create_socket()

        try:
            self._socket.bind(bind_address)
            self._socket.listen(self.config.backlog)
        except (OSError, OverflowError) as e:
            # OverflowError: port outside 0-65535
            logger.error(f"Failed to bind to {bind_address[0]}:{bind_address[1]}: {e}")
            self._socket.close()
            self._socket = None
            raise BindError(bind_address, e) from e

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        host, port = self.address
        logger.info(f"Started listening on http://{host}:{port}")
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Poll tick, check _running again
            except OSError as e:
                if not self._running:
                    break  # Socket closed by shutdown
                logger.error(f"Accept error: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            try:
                conn = Connection(
                    socket=client_socket,
                    address=client_address,
                    buffer_size=self.config.buffer_size,
                    timeout=self.config.timeout,
                )
                connection_handler(conn)
            except Exception as e:
                logger.exception(f"Failed to dispatch connection from {client_address[0]}: {e}")
                client_socket.close()

    def shutdown(self):
        """
        Stop accepting connections.

        Safe to call from any thread and more than once. Connections that
        are already being served are not waited for.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        self._shutdown_event.set()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the socket is bound and listening.

        Returns:
            True once listening, False if timeout expired first.
        """
        return self._ready_event.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the server to shut down.

        Returns:
            True if shutdown completed, False if timeout.
        """
        return self._shutdown_event.wait(timeout)
