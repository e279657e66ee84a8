"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can answer with.

    HTTP/1.1 200 OK
             ─── ──
              │   │
              │   └── Reason phrase
              └────── Status code

There is no 5xx here. A request that fails unexpectedly is
answered by closing the connection, not with an error status.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200            # File found inside the allowlist and sent
    FORBIDDEN = 403     # Resolved outside the Allowed Directory Set
    NOT_FOUND = 404     # Inside the allowlist, but no such file

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES[self]

    @property
    def status_line(self) -> str:
        """Code and phrase, e.g. "404 Not Found"."""
        return f"{self.value} {self.phrase}"

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
}
