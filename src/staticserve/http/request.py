"""
=============================================================================
HTTP REQUEST LINE PARSING
=============================================================================

Turns the decoded text of a request into a RequestLine.

Only the FIRST line of the request is ever looked at:

    ┌─────────────────────────────────────────────────────────────────┐
    │  GET /docs/index.html?v=2 HTTP/1.1\r\n    ← request line       │
    │  └─┘ └──────────────────┘ └──────┘                              │
    │  Method   Path + Query     Version                              │
    ├─────────────────────────────────────────────────────────────────┤
    │  Host: localhost\r\n                      ← ignored            │
    │  User-Agent: curl/8.4.0\r\n               ← ignored            │
    │  \r\n                                                           │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
MALFORMED INPUT
=============================================================================

A request that cannot be parsed does not produce an error response.
parse_request() returns None and the caller closes the connection
without sending anything:

    ""                         → None  (empty request)
    "GET /"                    → None  (fewer than 3 tokens)
    "GET / HTTP/1.1"           → RequestLine("GET", "/", "HTTP/1.1")
    "get /a HTTP/1.0 extra"    → RequestLine("GET", "/a", "HTTP/1.0")

Tokens are separated by single spaces, exactly as written on the wire.
Two spaces in a row produce an empty token rather than being collapsed.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


METHOD_GET = "GET"


@dataclass(frozen=True)
class RequestLine:
    """
    A parsed HTTP request line.

    Attributes:
        method:  Upper-cased HTTP method ("GET", "POST", ...).
        path:    Raw request target, query string included.
        version: Protocol version token, echoed back in the response.
    """

    method: str
    path: str
    version: str

    @property
    def is_get(self) -> bool:
        return self.method == METHOD_GET


def parse_request(text: str) -> Optional[RequestLine]:
    """
    Parse the request line out of trimmed request text.

    Args:
        text: Decoded, whitespace-trimmed request text.

    Returns:
        The parsed RequestLine, or None if the text is empty or the first
        line has fewer than three space-separated tokens.
    """
    if not text:
        return None

    first_line = text.split("\n")[0]
    tokens = first_line.split(" ")

    # [0] method, [1] resource path, [2] protocol version
    if len(tokens) < 3:
        return None

    return RequestLine(
        method=tokens[0].strip().upper(),
        path=tokens[1].strip(),
        version=tokens[2].strip(),
    )
