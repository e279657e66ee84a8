"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized, immutable configuration for the static file server.

=============================================================================
WHY A FROZEN CONFIG CLASS?
=============================================================================

The configuration is built exactly once at startup and then handed to
every component that needs it:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION FLOW                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   defaults ──► environment ──► command line ──► ServerConfig        │
    │                                                      │               │
    │                     ┌────────────────┬───────────────┤               │
    │                     ▼                ▼               ▼               │
    │               SocketServer    StaticFileHandler   ThreadPool        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

frozen=True means no component can change a setting behind another
component's back. To derive a variant, use dataclasses.replace().

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments
       └── staticserve --port 8000 --dirs ./public

    2. Environment variables
       └── STATICSERVE_PORT=8000 staticserve

    3. Default values (in this dataclass)

=============================================================================
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Optional, Tuple


def default_hosting_root() -> str:
    """Directory containing the running program."""
    return os.path.dirname(os.path.abspath(sys.argv[0]))


def parse_timeout(value: str) -> Optional[float]:
    """
    Parse a timeout setting. An empty value or "none" means no timeout.

        "30"   → 30.0
        "none" → None
        ""     → None
    """
    value = value.strip()
    if not value or value.lower() == "none":
        return None
    return float(value)


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the static file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, max_request_size, timeout

    CONTENT SETTINGS
    - hosting_root, permitted_dirs, index_file

    THREADING SETTINGS
    - min_workers, max_workers

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    "0.0.0.0" listens on every local interface.
    """

    port: int = 80
    """
    The port that accepts TCP (HTTP) traffic.
    80 requires root on Unix; use 8000+ during development.
    """

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 1024
    """Bytes requested from the socket per recv() call."""

    max_request_size: int = 8192
    """
    Upper bound on the bytes read for a single request.
    Anything past this is truncated; only the request line matters.
    """

    timeout: Optional[float] = 30.0
    """
    Socket read timeout in seconds.
    None = block forever on a silent client.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    hosting_root: str = field(default_factory=default_hosting_root)
    """
    Base directory that URL paths are resolved against.
    "/docs/a.html" → hosting_root + "/docs/a.html"
    """

    permitted_dirs: Tuple[str, ...] = ()
    """
    Directories (and everything below them) that may serve files.
    Empty = only the hosting root tree.
    """

    index_file: str = "index.html"
    """File served for request paths ending in "/"."""

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 4
    max_workers: int = 16

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR)."""

    log_format: str = "text"
    """Access log format: 'text' (one line) or 'json'."""

    @property
    def allowed_roots(self) -> Tuple[str, ...]:
        """Permitted root directories, falling back to the hosting root."""
        return self.permitted_dirs or (self.hosting_root,)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        STATICSERVE_HOST       Bind address (default: 0.0.0.0)
        STATICSERVE_PORT       Listening port (default: 80)
        STATICSERVE_ROOT       Hosting root (default: program directory)
        STATICSERVE_DIRS       Permitted dirs, separated by os.pathsep
        STATICSERVE_WORKERS    Min worker threads (max is twice this)
        STATICSERVE_TIMEOUT    Read timeout in seconds (default: 30;
                               empty or "none" disables it)
        STATICSERVE_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================
        """
        workers = int(os.getenv("STATICSERVE_WORKERS", "4"))
        dirs = os.getenv("STATICSERVE_DIRS", "")
        return cls(
            host=os.getenv("STATICSERVE_HOST", "0.0.0.0"),
            port=int(os.getenv("STATICSERVE_PORT", "80")),
            hosting_root=os.getenv("STATICSERVE_ROOT") or default_hosting_root(),
            permitted_dirs=tuple(d for d in dirs.split(os.pathsep) if d),
            min_workers=workers,
            max_workers=workers * 2,
            timeout=parse_timeout(os.getenv("STATICSERVE_TIMEOUT", "30")),
            log_level=os.getenv("STATICSERVE_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad setting stops the process before
        any socket is opened.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_request_size < self.buffer_size:
            raise ValueError("max_request_size must be >= buffer_size")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not os.path.isdir(self.hosting_root):
            raise ValueError(f"Hosting root is not a directory: {self.hosting_root}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format!r}")
