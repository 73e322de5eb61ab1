"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes read off a client socket into a structured HttpRequest.

The parser is deliberately LENIENT. It checks only what it needs to route a
request: a request line with three tokens and "Name: Value" header lines.
Methods and versions are taken verbatim, so "BREW /pot HTCPCP/1.0" parses
just as well as "GET / HTTP/1.1".

=============================================================================
REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  GET /hello HTTP/1.1\r\n          ← request line (3 tokens)         │
    │  Host: example.com\r\n            ← header lines                    │
    │  User-Agent: curl/8.0\r\n                                           │
    │  \r\n                             ← blank line separator            │
    │  name=pizza                       ← body (whatever is left)         │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT FAILS
=============================================================================

    InvalidEncoding   - buffer is not valid UTF-8
    MalformedRequest  - no \r\n\r\n separator
                      - no request line, or not exactly 3 tokens on it
                      - a header line without ':'

Both are ParseError subclasses, so callers that don't care about the
difference can catch ParseError.

Notable leniencies:
    - Header names keep their case ("Content-Type" stays "Content-Type")
    - Repeated headers overwrite (last one wins)
    - Body is not checked against Content-Length

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict


HEADER_TERMINATOR = "\r\n\r\n"


class ParseError(ValueError):
    """Raised when a buffer cannot be turned into an HttpRequest."""


class InvalidEncoding(ParseError):
    """The buffer is not valid UTF-8 text."""


class MalformedRequest(ParseError):
    """The buffer decodes but does not have the shape of an HTTP request."""


@dataclass
class HttpRequest:
    """
    A parsed HTTP request.

    All fields are plain strings copied out of the decoded buffer, so a
    request stays valid after the receive buffer is reused or dropped.

    Attributes:
        method:  Request method token, e.g. "GET". Not validated.
        path:    Request target exactly as sent, e.g. "/pizza".
        version: Protocol version token, informational only.
        headers: Header name → value, names case-sensitive as received.
        body:    Text after the blank line separator.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def get_header(self, name: str, default: str = "") -> str:
        """
        Look up a header by its exact name.

        Header names are stored as received, so this lookup is
        case-sensitive: get_header("host") won't find "Host".
        """
        return self.headers.get(name, default)


class RequestParser:
    """
    Parses raw request bytes into HttpRequest objects.

        Raw bytes
            │
            ▼
        1. Decode as UTF-8 ───────────── fails → InvalidEncoding
            │
            ▼
        2. Split at first \r\n\r\n ────── missing → MalformedRequest
            │
            ▼
        3. Request line → method, path, version
            │                          not 3 tokens → MalformedRequest
            ▼
        4. Header lines → dict ───────── no ':' → MalformedRequest
            │
            ▼
        HttpRequest(method, path, version, headers, body)

    The parser holds no state between calls and is safe to share across
    connection threads.
    """

    def parse(self, data: bytes) -> HttpRequest:
        """
        Parse raw HTTP request data into an HttpRequest.

        Args:
            data: Bytes read from the client socket.

        Returns:
            The parsed request.

        Raises:
            InvalidEncoding: If data is not valid UTF-8.
            MalformedRequest: If data is not shaped like an HTTP request.
        """
        # Decode the whole buffer up front: a single bad byte anywhere
        # (body included) rejects the request.
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEncoding(f"Request is not valid UTF-8: {e}") from e

        head, separator, body = text.partition(HEADER_TERMINATOR)
        if not separator:
            raise MalformedRequest("Missing header/body separator")

        lines = self._split_lines(head)
        if not lines:
            raise MalformedRequest("Empty request")

        method, path, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        return HttpRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            body=body,
        )

    def _split_lines(self, head: str) -> list[str]:
        # Lines end with "\n"; a trailing "\r" is dropped so bare-LF
        # clients still parse.
        if not head:
            return []
        return [line[:-1] if line.endswith("\r") else line for line in head.split("\n")]

    def _parse_request_line(self, line: str) -> tuple[str, str, str]:
        """
        Split the request line into method, path and version.

        Any run of whitespace separates tokens. The line must hold
        exactly three of them.
        """
        tokens = line.split()
        if len(tokens) < 3:
            raise MalformedRequest(f"Incomplete request line: {line!r}")
        if len(tokens) > 3:
            raise MalformedRequest(f"Too many tokens in request line: {line!r}")

        method, path, version = tokens
        return method, path, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: Value" lines into a dictionary.

        Split on the FIRST colon only, so values may contain colons
        ("Host: localhost:8080"). Both sides are trimmed and a repeated
        name replaces the earlier value.
        """
        headers: Dict[str, str] = {}

        for line in lines:
            name, colon, value = line.partition(":")
            if not colon:
                raise MalformedRequest(f"Header line without ':': {line!r}")
            headers[name.strip()] = value.strip()

        return headers


def parse_request(data: bytes) -> HttpRequest:
    """
    Convenience function to parse an HTTP request.

    Args:
        data: Raw HTTP request bytes.

    Returns:
        Parsed HttpRequest.

    Raises:
        ParseError: If the request is malformed or not UTF-8.
    """
    return RequestParser().parse(data)
