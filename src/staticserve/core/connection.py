"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with the reading, writing and closing
behavior the server needs.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. A request sent in one write()
may show up in several recv() calls:

    Client sends:
        "GET /index.html HTTP/1.1\r\nHost: x\r\n\r\n"

    Server might receive:
        recv() → "GET /inde"
        recv() → "x.html HTTP/1.1\r\nHost: x\r\n\r\n"

A single recv() would hand the parser "GET /inde" and the request would
be dropped as malformed. So read_request() keeps reading until one of:

    1. The end of the request line (\n) has arrived
    2. The client half-closed its side (recv() returns b"")
    3. max_request_size bytes are buffered (the rest is truncated)

Only the request line is used afterwards, so headers still in flight are
never waited for, and truncating a huge request never changes the outcome.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    NEW ──► READING ──► WRITING ──► CLOSING ──► CLOSED
              │                        ▲
              └────────────────────────┘
              (nothing to send: silent drop)

There is no keep-alive. Every connection carries exactly one request.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Tuple
import uuid


logger = logging.getLogger(__name__)


LINE_END = b"\n"


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """

    NEW = "new"              # Just accepted, nothing read yet
    READING = "reading"      # Collecting request bytes
    WRITING = "writing"      # Sending the response
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple, the Connection Table key.
        id: Short unique identifier for log correlation.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        bytes_sent: Number of response bytes written.
    """

    socket: socket.socket
    address: Tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    bytes_sent: int = 0

    buffer_size: int = 1024
    max_request_size: int = 8192
    timeout: float = 30.0

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    def read_request(self) -> str:
        """
        Read one request from the socket and decode it.

        ┌─────────────────────────────────────────────────────────────────┐
        │                    read_request() Flow                           │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   while no \n and under max_request_size:                        │
        │       recv(buffer_size) → buffer                                 │
        │       b"" → client done sending, stop                            │
        │                                                                  │
        │   truncate to max_request_size                                   │
        │   decode UTF-8 (bad bytes → U+FFFD), strip whitespace            │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘

        Returns:
            The trimmed request text. Empty if the client sent nothing.

        Raises:
            TimeoutError: If the read times out before any byte arrives.
        """
        self.state = ConnectionState.READING

        try:
            while (LINE_END not in self._buffer
                   and len(self._buffer) < self.max_request_size):
                chunk = self._recv()
                if not chunk:
                    break  # Client closed its side
                self._buffer += chunk

        except socket.timeout:
            if not self._buffer:
                raise TimeoutError("Request read timeout")
            # A request line with no line ending is still usable
            logger.debug(f"[{self.id}] Read timed out, using {len(self._buffer)} buffered bytes")

        data = self._buffer[:self.max_request_size]
        self._buffer = b""

        return data.decode("utf-8", errors="replace").strip()

    def _recv(self) -> bytes:
        """
        Receive data from the socket.

        Returns:
            Received bytes, or empty bytes if the connection was reset.
        """
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a response larger than the kernel send buffer is
        still delivered completely.

        Returns:
            True if the send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            self.bytes_sent += len(data)
            return True
        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN so the client sees end-of-response
        2. drain anything the client still sends
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Client already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except (socket.timeout, OSError):
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                text = conn.read_request()
                conn.send_response(response)
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Ensure the connection is closed on every exit path."""
        self.close()
        return False
