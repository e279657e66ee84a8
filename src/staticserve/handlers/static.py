"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Maps a GET request path onto a file under the hosting root, enforces the
directory allowlist, and builds the response.

=============================================================================
RESOLUTION STEPS
=============================================================================

    Request path: "/docs//guide/?lang=en"
          │
          ├──► strip query string      "/docs//guide/"
          ├──► collapse "//" once      "/docs/guide/"
          ├──► trailing "/" → index    "/docs/guide/index.html"
          ├──► hosting root + path     "/srv/site/docs/guide/index.html"
          ├──► canonicalize            resolve ".", "..", symlinks
          │
          └──► guard: is the containing directory in the allowlist?
                   │
                   ├── no  → 403 Forbidden (even if the file exists)
                   ├── yes, file missing → 404 Not Found
                   └── yes, file exists  → 200 OK + content

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

The hosting root and the request path are joined by plain string
concatenation, so a request can name ANY location:

    GET /../../etc/passwd HTTP/1.1
        → "/srv/site/../../etc/passwd"

Comparing that string directly against the allowlist would be fragile.
Instead the candidate is canonicalized with Path.resolve() first:

    "/srv/site/../../etc/passwd"  ──resolve──►  "/etc/passwd"
    containing directory "/etc"   ──►  not allowed  ──►  403

Symlinks are followed too, so a link inside the site that points at
/etc is judged by where it really points.

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet

from ..http.request import RequestLine
from ..http.response import HTTPResponse, ok, forbidden, not_found


logger = logging.getLogger(__name__)


class AccessDenied(PermissionError):
    """Raised when a resolved resource lies outside the allowed directories."""

    def __init__(self, path: str):
        super().__init__(f"Unauthorized resource: {path}")
        self.path = path


@dataclass(frozen=True)
class ResolvedResource:
    """
    Filesystem location derived from a request path.

    Attributes:
        path:      Canonical filesystem path of the candidate file.
        exists:    True if the path names an existing regular file.
        directory: Canonical containing directory, as compared with the
                   allowlist.
    """

    path: Path
    exists: bool
    directory: str


class StaticFileHandler:
    """
    Handler for serving files out of the allowed directories.

    Usage:
        allowed = scan_allowed_directories(["/srv/site"])
        handler = StaticFileHandler("/srv/site", allowed)
        response = handler.handle(RequestLine("GET", "/", "HTTP/1.1"))
    """

    def __init__(
        self,
        hosting_root: str,
        allowed_directories: AbstractSet[str],
        index_file: str = "index.html",
    ):
        """
        Args:
            hosting_root: Base directory request paths are appended to.
            allowed_directories: The Allowed Directory Set (canonical paths).
            index_file: File served for paths ending in "/".
        """
        self.hosting_root = str(Path(hosting_root).resolve())
        self.allowed_directories = allowed_directories
        self.index_file = index_file

    def resolve(self, raw_path: str) -> ResolvedResource:
        """
        Map a raw request path to a filesystem resource and guard it.

        Args:
            raw_path: Request target as sent, query string included.

        Returns:
            The resolved resource, whose directory is in the allowlist.

        Raises:
            AccessDenied: If the containing directory is not allowed.
        """
        path = raw_path.split("?", 1)[0]
        path = path.replace("//", "/")

        if path.endswith("/"):
            path += self.index_file

        candidate = Path(self.hosting_root + path).resolve()
        resource = ResolvedResource(
            path=candidate,
            exists=candidate.is_file(),
            directory=str(candidate.parent),
        )

        self._ensure_allowed(resource)
        return resource

    def _ensure_allowed(self, resource: ResolvedResource):
        if resource.directory not in self.allowed_directories:
            raise AccessDenied(str(resource.path))

    def handle(self, request: RequestLine) -> HTTPResponse:
        """
        Serve a GET request.

        Args:
            request: The parsed request line.

        Returns:
            200 with the file content, 403 outside the allowlist, or 404.
        """
        try:
            resource = self.resolve(request.path)
        except AccessDenied as e:
            logger.warning(f"Denied {request.path!r}: {e}")
            return forbidden(request.version)

        if not resource.exists:
            return not_found(request.version)

        # read_bytes() keeps "\r\n" intact; text mode would translate it
        content = resource.path.read_bytes().decode("utf-8", errors="replace")
        return ok(request.version, content)
