"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The socket plumbing under the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates, binds and listens on the TCP socket                     │
    │  • Runs the accept() loop                                           │
    │  • Hands every new connection to a callback                         │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ one thread per connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Wraps one client socket                                          │
    │  • One recv() for the request, one sendall() for the response       │
    │  • Closes after a single exchange (no keep-alive)                   │
    └─────────────────────────────────────────────────────────────────────┘

Concurrency is thread-per-connection with no pool and no cap: every accepted
connection gets its own thread for as long as it lives.

=============================================================================
"""

from .socket_server import SocketServer, BindError
from .connection import Connection, ConnectionState, ReadError, WriteError

__all__ = [
    "SocketServer",     # Accept loop
    "BindError",        # Listening address unavailable
    "Connection",       # One-shot client socket wrapper
    "ConnectionState",
    "ReadError",
    "WriteError",
]
