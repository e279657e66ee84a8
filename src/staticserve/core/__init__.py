"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking and concurrency plumbing underneath the static server:

    ┌─────────────────────────────────────────────────────────────────────┐
    │  SOCKET SERVER      Binds the port, runs the accept loop            │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ new connection
                  ┌─────────────────┴─────────────────┐
                  ▼                                   ▼
    ┌───────────────────────────┐       ┌───────────────────────────┐
    │  CONNECTION TABLE         │       │  THREAD POOL              │
    │  endpoint → Connection    │       │  runs one handler per     │
    │  (removed on close)       │       │  connection on a worker   │
    └───────────────────────────┘       └───────────────────────────┘
                                                      │
                                                      ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │  CONNECTION         Reads the request, writes the response, closes  │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .registry import ConnectionTable
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",     # TCP listener and accept loop
    "Connection",       # Client socket wrapper
    "ConnectionState",  # Connection lifecycle states
    "ConnectionTable",  # Open connections by remote endpoint
    "ThreadPool",       # Worker threads for connection handling
]
