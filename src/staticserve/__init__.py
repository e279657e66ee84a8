"""
=============================================================================
STATICSERVE - Minimal Static File HTTP Server
=============================================================================

Serves files from an explicit allowlist of directories over raw TCP
sockets. One request per connection, GET only, no headers.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    staticserve/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m staticserve)
    ├── server.py            # StaticServer orchestrator
    ├── config.py            # ServerConfig frozen dataclass
    ├── allowlist.py         # Allowed Directory Set scanner
    ├── access_log.py        # Per-connection access log entries
    ├── core/                # Low-level components
    │   ├── socket_server.py # TCP listener and accept loop
    │   ├── connection.py    # Client socket wrapper
    │   ├── registry.py      # Connection table
    │   └── thread_pool.py   # Worker threads
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # Response serialization
    │   └── status_codes.py  # 200 / 403 / 404
    └── handlers/
        └── static.py        # Path resolution and allowlist guard

=============================================================================
QUICK START
=============================================================================

    from staticserve import StaticServer, ServerConfig

    server = StaticServer(ServerConfig(
        port=8000,
        hosting_root="/srv/site",
        permitted_dirs=("/srv/site/public",),
    ))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import StaticServer, create_app
from .config import ServerConfig

__all__ = ["StaticServer", "ServerConfig", "create_app", "__version__"]
