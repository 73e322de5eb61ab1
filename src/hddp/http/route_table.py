"""
=============================================================================
ROUTE TABLE
=============================================================================

Maps (path, method) pairs to pre-serialized response bytes.

One RouteTable is created when the server starts and is shared by every
connection thread for the life of the process. Routes can be added and
removed while connections are being served.

=============================================================================
LAYOUT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  RouteTable                                                          │
    │                                                                      │
    │    _routes:                                                          │
    │      "/"       ──► { "GET":  b"HTTP/1.1 200 OK\r\n..." }             │
    │      "/pizza"  ──► { "GET":  b"HTTP/1.1 200 OK\r\n...",              │
    │                      "POST": b"HTTP/1.1 201 Created\r\n..." }        │
    │                                                                      │
    │    _not_found:  b"HTTP/1.1 404 Not Found\r\n..."   (fixed)           │
    │                                                                      │
    │    _lock:       threading.Lock                                       │
    └─────────────────────────────────────────────────────────────────────┘

Matching is EXACT string comparison on both keys: no prefixes, no
wildcards, no trailing-slash or case normalization. "/pizza/" and "/pizza"
are different routes, and so are "GET" and "get".

=============================================================================
THREAD SAFETY
=============================================================================

Every public method takes the same lock for the duration of one dictionary
read or write, and nothing else. In particular:

    - Responses are serialized BEFORE the lock is taken
    - The lock is never held while a connection reads or writes
    - The raw dictionaries are never handed out; inspection methods
      return copies

So a reader sees either the table before an update or after it, never a
per-path map that is half built, and a slow client never stalls anyone
else's lookup.

=============================================================================
"""

import logging
import threading
from typing import Dict, List, Tuple, Union

from .response import HttpResponse, not_found_response


logger = logging.getLogger(__name__)

DEFAULT_NOT_FOUND_BODY = "404"

ResponseLike = Union[HttpResponse, bytes]


class RouteTable:
    """
    Thread-safe registry of canned responses.

    Usage:
        table = RouteTable(not_found_body="<h1>Nothing here</h1>")
        table.add_route("GET", "/pizza", HttpResponse("<h1>Pizza</h1>"))

        table.resolve("GET", "/pizza")   # → serialized pizza response
        table.resolve("POST", "/pizza")  # → table.not_found

        table.remove_method("GET", "/pizza")
        table.remove_route("/pizza")     # no-op, already gone
    """

    def __init__(self, not_found_body: str = DEFAULT_NOT_FOUND_BODY):
        """
        Create an empty table.

        Args:
            not_found_body: Body of the 404 response returned for every
                            lookup that matches no route. It is serialized
                            here, once, and never changes afterwards.
        """
        self._routes: Dict[str, Dict[str, bytes]] = {}
        self._not_found = not_found_response(not_found_body).to_bytes()
        self._lock = threading.Lock()

    @property
    def not_found(self) -> bytes:
        """Serialized fallback returned for unregistered routes."""
        return self._not_found

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def resolve(self, method: str, path: str) -> bytes:
        """
        Find the response bytes registered for method and path.

        Args:
            method: Request method, compared verbatim.
            path: Request path, compared verbatim.

        Returns:
            The registered bytes, or not_found when nothing matches.
            Never raises.
        """
        with self._lock:
            methods = self._routes.get(path)
            if methods is not None:
                response = methods.get(method)
                if response is not None:
                    return response
        return self._not_found

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def add_route(self, method: str, path: str, response: ResponseLike) -> None:
        """
        Register a response for method and path.

        The response is serialized once, here. Registering the same
        (method, path) again silently replaces the earlier response.

        Args:
            method: Request method to match, e.g. "GET".
            path: Exact request path to match, e.g. "/pizza".
            response: An HttpResponse, or bytes that are already serialized.
        """
        data = response if isinstance(response, bytes) else response.to_bytes()

        with self._lock:
            self._routes.setdefault(path, {})[method] = data

        logger.debug(f"Route added: {method} {path} ({len(data)} bytes)")

    def remove_route(self, path: str) -> None:
        """Drop every method registered under path. Unknown paths are ignored."""
        with self._lock:
            removed = self._routes.pop(path, None)

        if removed is not None:
            logger.debug(f"Route removed: {path} ({', '.join(sorted(removed))})")

    def remove_method(self, method: str, path: str) -> None:
        """
        Drop a single method registered under path.

        Unknown paths or methods are ignored. When the last method of a
        path goes, the path goes with it.
        """
        with self._lock:
            methods = self._routes.get(path)
            if methods is None or method not in methods:
                return
            del methods[method]
            if not methods:
                del self._routes[path]

        logger.debug(f"Route removed: {method} {path}")

    # =========================================================================
    # INSPECTION
    # =========================================================================

    def methods(self, path: str) -> List[str]:
        """Methods registered under path, sorted."""
        with self._lock:
            return sorted(self._routes.get(path, ()))

    def routes(self) -> List[Tuple[str, str]]:
        """
        Snapshot of every registered route as (method, path) pairs.

        Sorted by path, then method. The snapshot does not follow later
        changes to the table.
        """
        with self._lock:
            return sorted(
                ((method, path) for path, methods in self._routes.items() for method in methods),
                key=lambda route: (route[1], route[0]),
            )

    def __contains__(self, route: Tuple[str, str]) -> bool:
        method, path = route
        with self._lock:
            return method in self._routes.get(path, ())

    def __len__(self) -> int:
        """Number of registered (method, path) routes."""
        with self._lock:
            return sum(len(methods) for methods in self._routes.values())

    def format_routes(self) -> str:
        """
        Human-readable route listing, e.g.

              GET      /
              GET      /pizza
              POST     /test
        """
        return "\n".join(f"  {method:8} {path}" for method, path in self.routes())
