"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Generator, Optional, Tuple
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from hddp import HTTPServer, ServerConfig


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /hello HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a form body."""
    body = b"name=margherita&size=large"
    return (
        b"POST /pizza HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def pages_dir(tmp_path: Path) -> Path:
    """A pages directory with a default page and a not-found page."""
    (tmp_path / "default").mkdir()
    (tmp_path / "default" / "index.html").write_text("<h1>Welcome</h1>", encoding="utf-8")
    (tmp_path / "404").mkdir()
    (tmp_path / "404" / "index.html").write_text("<h1>Not here</h1>", encoding="utf-8")
    return tmp_path


def send_raw(address: Tuple[str, int], data: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and read until it closes the connection."""
    with socket.create_connection(address, timeout=timeout) as s:
        s.sendall(data)
        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class ServerThread:
    """Runs an HTTPServer's listen loop in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self) -> Tuple[str, int]:
        return self.server.address

    def start(self):
        self._thread = threading.Thread(target=self.server.listen, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        self.server.wait_for_shutdown(timeout=5.0)

        if self._thread:
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        return send_raw(self.address, data)


@pytest.fixture
def test_server(pages_dir: Path) -> Generator[ServerThread, None, None]:
    """A running server on an ephemeral port with GET /hello registered."""
    from hddp import HttpResponse

    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        pages_dir=str(pages_dir),
        log_level="WARNING",
    ))
    server.add_route("GET", "/hello", HttpResponse("hi"))

    running = ServerThread(server)
    running.start()

    yield running

    running.stop()
