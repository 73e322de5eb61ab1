"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables live in one dataclass, validated once at startup.

    ServerConfig()                       # defaults, for development
    ServerConfig(port=0)                 # let the OS pick a port (tests)
    ServerConfig.from_env()              # HDDP_* environment variables

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    PAGES
    - pages_dir

    LOGGING
    - log_level
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """Port to listen on. 0 asks the OS for a free port."""

    backlog: int = 128
    """Maximum number of connections queued before accept()."""

    buffer_size: int = 1024
    """
    Bytes read from a client in its single recv().

    Anything the client sends beyond this is never read, so a request must
    fit its request line and headers within the buffer.
    """

    timeout: Optional[float] = None
    """
    Client socket timeout in seconds.
    None = block forever; a silent client keeps its thread until it
    disconnects.
    """

    # ─────────────────────────────────────────────────────────────────────
    # PAGES
    # ─────────────────────────────────────────────────────────────────────

    pages_dir: str = "pages"
    """
    Directory holding default/index.html (served at GET /) and
    404/index.html (the not-found body). Relative paths resolve against
    the working directory.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HDDP_HOST         Server host (default: 127.0.0.1)
        HDDP_PORT         Server port (default: 8080)
        HDDP_PAGES_DIR    Pages directory (default: pages)
        HDDP_BUFFER_SIZE  Request read size in bytes (default: 1024)
        HDDP_LOG_LEVEL    Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("HDDP_HOST", "127.0.0.1"),
            port=int(os.getenv("HDDP_PORT", "8080")),
            pages_dir=os.getenv("HDDP_PAGES_DIR", "pages"),
            buffer_size=int(os.getenv("HDDP_BUFFER_SIZE", "1024")),
            log_level=os.getenv("HDDP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}.")
