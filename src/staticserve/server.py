"""
=============================================================================
STATIC FILE SERVER
=============================================================================

The orchestrator that ties the components together.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   startup:   ServerConfig ──► scan_allowed_directories()            │
    │                                   │ (OSError here = fatal)          │
    │                                   ▼                                  │
    │                             StaticFileHandler                        │
    │                                                                      │
    │   serving:   SocketServer.accept()                                   │
    │                  │                                                   │
    │                  ├──► ConnectionTable.add(conn)                      │
    │                  └──► ThreadPool.submit(_process_connection)         │
    │                                   │                                  │
    │                                   ▼   (worker thread)               │
    │                         read_request()                               │
    │                         parse_request()  ── None ──► send nothing   │
    │                         GET?             ── no   ──► send nothing   │
    │                         StaticFileHandler.handle()                   │
    │                         send_response()                              │
    │                         access log, close, ConnectionTable.remove    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ERROR ISOLATION
=============================================================================

Everything that can go wrong while serving ONE connection is caught in
_process_connection(): a decode problem, an unreadable file, a client
that hangs up mid-send. The failure is logged, that connection is
closed, and every other connection carries on. The client simply sees
the connection close; there is no 500 response.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .allowlist import scan_allowed_directories
from .access_log import AccessLogger, RequestLog
from .core import SocketServer, Connection, ConnectionTable, ThreadPool
from .handlers import StaticFileHandler
from .http import HTTPResponse, parse_request


logger = logging.getLogger(__name__)


class StaticServer:
    """
    Static file server over raw TCP.

    Usage:
        config = ServerConfig(port=8000, hosting_root="/srv/site")
        server = StaticServer(config)
        server.run()  # Blocks until Ctrl+C / SIGTERM / shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Validated immediately.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
        )
        self._connections = ConnectionTable()
        self._access_log = AccessLogger(log_format=self.config.log_format)

        # Built in run(), after the allowlist scan
        self._handler: Optional[StaticFileHandler] = None

        self._running = False

    @property
    def connections(self) -> ConnectionTable:
        return self._connections

    @property
    def socket_server(self) -> SocketServer:
        return self._socket_server

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def prepare(self) -> StaticFileHandler:
        """
        Scan the permitted directories and build the file handler.

        Raises:
            OSError: If any permitted directory cannot be scanned.
        """
        logger.info("Warming up...")

        allowed = scan_allowed_directories(self.config.allowed_roots)
        logger.info(
            f"Serving {self.config.hosting_root} "
            f"({len(allowed)} allowed directories)"
        )

        self._handler = StaticFileHandler(
            hosting_root=self.config.hosting_root,
            allowed_directories=allowed,
            index_file=self.config.index_file,
        )
        return self._handler

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: If the allowlist scan or the port bind fails.
        """
        self._setup_logging()
        self.prepare()

        self._thread_pool.start()
        self._running = True

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Ask a running server to stop. Returns immediately."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("staticserve").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False

        logger.info(
            f"Stopping {self._thread_pool.worker_count} workers "
            f"({self._thread_pool.pending} connections still queued)"
        )
        logger.debug(f"Thread pool stats: {self._thread_pool.stats}")
        self._thread_pool.shutdown(wait=True, timeout=30.0)

        for conn in self._connections.snapshot():
            logger.warning(f"[{conn.id}] Closing connection left open at shutdown")
            conn.close()
            self._connections.remove(conn)

        logger.info("Server stopped")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Record a new connection and queue it for a worker.

        Runs on the acceptor thread, so it must not block on the client.
        """
        self._connections.add(conn)

        try:
            self._thread_pool.submit(self._process_connection, args=(conn,))
        except RuntimeError as e:
            # Pool already shutting down
            logger.warning(f"[{conn.id}] Rejecting connection: {e}")
            conn.close()
            self._connections.remove(conn)

    def _process_connection(self, conn: Connection):
        """
        Handle one connection from first byte to close (worker thread).

        The connection is closed and removed from the table on every exit
        path, and no exception escapes this method.
        """
        text = ""
        response: Optional[HTTPResponse] = None

        try:
            with conn:
                text = conn.read_request()
                logger.debug(f"[{conn.id}] Client {conn.client_ip}:{conn.client_port} -> Server: {text!r}")

                response = self.handle_request(text)
                if response is not None:
                    conn.send_response(response.to_bytes())

        except Exception as e:
            logger.exception(f"[{conn.id}] Failed to handle client {conn.client_ip}:{conn.client_port}: {e}")

        finally:
            self._connections.remove(conn)
            self._log_access(conn, text, response)

    def handle_request(self, text: str) -> Optional[HTTPResponse]:
        """
        Turn request text into a response.

        Args:
            text: Decoded, trimmed request text.

        Returns:
            The response to send, or None if nothing should be sent
            (empty or malformed request, or a method other than GET).
        """
        if self._handler is None:
            raise RuntimeError("Server not prepared; call prepare() or run() first")

        request = parse_request(text)
        if request is None:
            return None

        if not request.is_get:
            logger.debug(f"Ignoring {request.method} request for {request.path!r}")
            return None

        return self._handler.handle(request)

    def _log_access(self, conn: Connection, text: str, response: Optional[HTTPResponse]):
        self._access_log.log(RequestLog(
            connection_id=conn.id,
            client=f"{conn.client_ip}:{conn.client_port}",
            request_line=text.split("\n")[0].strip(),
            status_code=int(response.status) if response is not None else None,
            bytes_sent=conn.bytes_sent,
            duration_ms=conn.age * 1000,
            timestamp=AccessLogger.timestamp(),
        ))


def create_app(config: Optional[ServerConfig] = None) -> StaticServer:
    """Factory function for creating server instances."""
    return StaticServer(config)
