"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The small slice of HTTP/1.x this server speaks:

    request.py       Request line parsing (method, path, version)
    response.py      Status line + body serialization
    status_codes.py  The three statuses the server can send

=============================================================================
"""

from .request import RequestLine, parse_request, METHOD_GET
from .response import (
    HTTPResponse,
    ok,             # 200 OK
    forbidden,      # 403 Forbidden
    not_found,      # 404 Not Found
)
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "RequestLine",
    "parse_request",
    "METHOD_GET",

    # Response building
    "HTTPResponse",
    "ok",
    "forbidden",
    "not_found",

    # Status codes
    "HTTPStatus",
]
