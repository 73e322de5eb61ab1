"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps an accepted client socket for exactly ONE request/response cycle.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     Connection Lifecycle                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED              │
    │              │             │                        ▲                │
    │              └─────────────┴──── on any failure ────┘                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no keep-alive and no pipelining: a connection is read once,
answered once and closed.

=============================================================================
ONE SHOT READS AND WRITES
=============================================================================

read_request() performs a single recv() of up to buffer_size bytes. Whatever
arrived in that one call IS the request; a request split across several TCP
segments, or longer than the buffer, is seen truncated and will usually fail
to parse.

send_response() performs a single sendall(). If it fails part way, the rest
of the response is lost; nothing is retried or resumed.

Failures surface as ReadError / WriteError so the caller can log them and
move on. They never reach the accept loop or other connections.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 1024


class ReadError(ConnectionError):
    """Reading the request from the client socket failed."""


class WriteError(ConnectionError):
    """Writing the response to the client socket failed."""


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket, owned exclusively by this object.
        address: Client's (ip, port) tuple.
        id: Short identifier used to correlate log lines.
        state: Current lifecycle state.
        created_at: Timestamp when the connection was accepted.
        buffer_size: Maximum bytes read for the request.
        timeout: Socket timeout in seconds, None blocks forever.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = DEFAULT_BUFFER_SIZE
    timeout: Optional[float] = None

    def __post_init__(self):
        # Accepted sockets may inherit the listener's timeout, so set ours
        # explicitly. None means fully blocking.
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read the request with a single recv() call.

        Returns:
            Up to buffer_size bytes. Empty bytes mean the client closed
            without sending anything.

        Raises:
            ReadError: If the socket fails or times out.
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)
        except OSError as e:
            # socket.timeout is an OSError subclass too
            raise ReadError(f"Failed to read from {self.client_ip}:{self.client_port}: {e}") from e

        self.state = ConnectionState.PROCESSING
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> None:
        """
        Send the response with a single sendall() call.

        Raises:
            WriteError: If the client went away or the socket failed.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
        except OSError as e:
            raise WriteError(f"Failed to write to {self.client_ip}:{self.client_port}: {e}") from e

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        Sends FIN first, then drains anything the client still has in
        flight before releasing the socket. Closing with unread data in the
        kernel buffer makes the OS answer with RST, which can destroy the
        response we just sent before the client reads it.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
