"""
Integration tests: a real listening server and raw client sockets.
"""

import socket
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from hddp import HTTPServer, ServerConfig, BindError, HttpResponse


class TestServing:
    """Requests against a running server."""

    def test_registered_route(self, test_server):
        """Test GET /hello end to end."""
        response = test_server.request(b"GET /hello HTTP/1.1\r\nHost: x\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 200 OK")
        assert response.endswith(b"hi")
        assert response == b"HTTP/1.1 200 OK\r\nContent-Type: text/html\r\n\r\nhi"

    def test_unregistered_path(self, test_server):
        """Test that an unknown path gets the not-found response."""
        response = test_server.request(b"GET /nope HTTP/1.1\r\nHost: x\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 404 Not Found\r\n")
        assert response.endswith(b"<h1>Not here</h1>")

    def test_default_page(self, test_server):
        """Test the default page at GET /."""
        response = test_server.request(b"GET / HTTP/1.1\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 200 OK")
        assert response.endswith(b"<h1>Welcome</h1>")

    def test_post_with_body(self, test_server, sample_post_request):
        """Test that a request body doesn't affect routing."""
        test_server.server.add_route("POST", "/pizza", HttpResponse("<h1>Ordered</h1>"))

        response = test_server.request(sample_post_request)

        assert response.endswith(b"<h1>Ordered</h1>")

    @pytest.mark.parametrize("raw", [
        b"GARBAGE\r\n\r\n",
        b"GET /hello HTTP/1.1\r\nno colon here\r\n\r\n",
        b"GET /hello HTTP/1.1\r\nHost: x\r\n",
    ])
    def test_malformed_request_closed_without_response(self, test_server, raw):
        """Test that malformed requests get an empty reply."""
        assert test_server.request(raw) == b""

    def test_server_survives_bad_clients(self, test_server):
        """Test that a client disconnecting early doesn't stop the server."""
        with socket.create_connection(test_server.address):
            pass
        test_server.request(b"\xff\xfe\r\n\r\n")

        response = test_server.request(b"GET /hello HTTP/1.1\r\n\r\n")

        assert response.endswith(b"hi")

    def test_one_request_per_connection(self, test_server):
        """Test that the server closes after a single response."""
        two = b"GET /hello HTTP/1.1\r\n\r\nGET /hello HTTP/1.1\r\n\r\n"

        response = test_server.request(two)

        assert response.count(b"HTTP/1.1 200 OK") == 1


class TestLiveRoutes:
    """Route changes while the server is listening."""

    def test_add_route_while_listening(self, test_server):
        """Test that a route added at runtime is served by later connections."""
        assert test_server.request(b"GET /late HTTP/1.1\r\n\r\n").startswith(b"HTTP/1.1 404")

        test_server.server.add_route("GET", "/late", HttpResponse("arrived"))

        assert test_server.request(b"GET /late HTTP/1.1\r\n\r\n").endswith(b"arrived")

    def test_remove_route_while_listening(self, test_server):
        """Test that a removed route is no longer served."""
        test_server.server.remove_route("/hello")

        response = test_server.request(b"GET /hello HTTP/1.1\r\n\r\n")

        assert response.startswith(b"HTTP/1.1 404 Not Found")


class TestConcurrency:
    """Many clients at once."""

    def test_concurrent_clients(self, test_server):
        """Test that parallel clients all get complete responses."""
        request = b"GET /hello HTTP/1.1\r\nHost: x\r\n\r\n"

        with ThreadPoolExecutor(max_workers=16) as executor:
            responses = list(executor.map(lambda _: test_server.request(request), range(64)))

        assert all(r == b"HTTP/1.1 200 OK\r\nContent-Type: text/html\r\n\r\nhi" for r in responses)

    def test_slow_client_doesnt_block_others(self, test_server):
        """Test that an idle connection doesn't hold up other clients."""
        with socket.create_connection(test_server.address):
            response = test_server.request(b"GET /hello HTTP/1.1\r\n\r\n")

        assert response.endswith(b"hi")


class TestLifecycle:
    """Binding and shutdown."""

    def test_bind_error(self, pages_dir):
        """Test that listening on an occupied port raises BindError."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            port = blocker.getsockname()[1]

            server = HTTPServer(ServerConfig(port=port, pages_dir=str(pages_dir)))

            with pytest.raises(BindError) as exc_info:
                server.listen(("127.0.0.1", port))

        assert exc_info.value.address == ("127.0.0.1", port)
        assert isinstance(exc_info.value, OSError)
        assert not server.is_running

    @pytest.mark.parametrize("port", [70000, -1])
    def test_out_of_range_port_is_bind_error(self, pages_dir, port):
        """Test that a port outside 0-65535 passed to listen() raises BindError."""
        server = HTTPServer(ServerConfig(port=0, pages_dir=str(pages_dir)))

        with pytest.raises(BindError) as exc_info:
            server.listen(("127.0.0.1", port))

        assert exc_info.value.address == ("127.0.0.1", port)
        assert "Failed to bind" in str(exc_info.value)
        assert not server.is_running

    def test_shutdown_stops_listen(self, pages_dir):
        """Test that shutdown() makes listen() return."""
        server = HTTPServer(ServerConfig(port=0, pages_dir=str(pages_dir)))
        thread = threading.Thread(target=server.listen, daemon=True)
        thread.start()
        assert server.wait_until_ready(timeout=5.0)
        address = server.address

        server.shutdown()
        assert server.wait_for_shutdown(timeout=5.0)
        thread.join(timeout=5.0)

        assert not thread.is_alive()
        assert not server.is_running
        with pytest.raises(OSError):
            socket.create_connection(address, timeout=1.0).close()
