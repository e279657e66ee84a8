"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Builds the minimal responses this server sends.

There are no headers. A response is the status line, and for a
successful request the blank-line separator plus the whole file:

    200:   HTTP/1.1 200 OK\r\n\r\n<file content>
    403:   HTTP/1.1 403 Forbidden
    404:   HTTP/1.1 404 Not Found

The version token is echoed from the request line, so a client that sent
"HTTP/1.0" gets "HTTP/1.0 200 OK" back.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional

from .status_codes import HTTPStatus


CONTENT_SEPARATOR = "\r\n\r\n"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

        Handler returns          to_bytes()              Connection sends
        HTTPResponse    ─────►   serializes    ─────►    raw bytes

    Attributes:
        version: Protocol version echoed from the request.
        status:  Response status.
        body:    File content for successful responses, None otherwise.
    """

    version: str
    status: HTTPStatus
    body: Optional[str] = None

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {self.status.status_line}"

    def to_text(self) -> str:
        """Assemble the full response as text."""
        if self.body is None:
            return self.status_line
        return self.status_line + CONTENT_SEPARATOR + self.body

    def to_bytes(self) -> bytes:
        """Serialize the response as UTF-8 bytes for sending over the socket."""
        return self.to_text().encode("utf-8")


def ok(version: str, content: str) -> HTTPResponse:
    """200 OK carrying the file content."""
    return HTTPResponse(version, HTTPStatus.OK, content)


def forbidden(version: str) -> HTTPResponse:
    """403 Forbidden, no body."""
    return HTTPResponse(version, HTTPStatus.FORBIDDEN)


def not_found(version: str) -> HTTPResponse:
    """404 Not Found, no body."""
    return HTTPResponse(version, HTTPStatus.NOT_FOUND)
