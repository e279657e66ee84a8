"""
=============================================================================
CONNECTION TABLE
=============================================================================

Bookkeeping of open client connections, keyed by remote endpoint.

    accept()  ──► add(conn)      acceptor thread
    close()   ──► remove(conn)   worker thread, when handling finishes

Entries are written by the acceptor and removed by many workers at once,
so every access goes through one lock.

The table is never used for routing. It exists so the server can report
and, on shutdown, close whatever is still open.

=============================================================================
"""

import threading
import logging
from typing import Dict, List, Tuple

from .connection import Connection


logger = logging.getLogger(__name__)


class ConnectionTable:
    """
    Thread-safe map of remote endpoint → open Connection.

    Usage:
        table = ConnectionTable()
        table.add(conn)
        ...
        table.remove(conn)
    """

    def __init__(self):
        self._connections: Dict[Tuple[str, int], Connection] = {}
        self._lock = threading.Lock()

    def add(self, conn: Connection):
        """Record a newly accepted connection."""
        with self._lock:
            previous = self._connections.get(conn.address)
            self._connections[conn.address] = conn

        if previous is not None:
            # The OS reused an endpoint whose entry was never removed
            logger.warning(f"Replacing stale table entry for {conn.address}")

    def remove(self, conn: Connection) -> bool:
        """
        Remove a connection's entry.

        Only removes the entry if it still belongs to this connection, so a
        late close can never evict a newer connection from the same endpoint.

        Returns:
            True if an entry was removed.
        """
        with self._lock:
            if self._connections.get(conn.address) is conn:
                del self._connections[conn.address]
                return True
            return False

    def snapshot(self) -> List[Connection]:
        """Copy of the currently open connections."""
        with self._lock:
            return list(self._connections.values())

    def __contains__(self, address: Tuple[str, int]) -> bool:
        with self._lock:
            return address in self._connections

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)
