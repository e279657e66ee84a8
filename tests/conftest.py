"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Generator
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from staticserve import StaticServer, ServerConfig


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """
    A hosting root with nested directories, plus a file outside it.

        tmp_path/
        ├── secret.txt          (outside the site)
        └── site/
            ├── index.html      "hi"
            ├── about.html
            ├── docs/
            │   ├── index.html
            │   └── guide.txt
            └── private/
                └── keys.txt
    """
    root = tmp_path / "site"
    (root / "docs").mkdir(parents=True)
    (root / "private").mkdir()

    (root / "index.html").write_text("hi", encoding="utf-8")
    (root / "about.html").write_text("<h1>About</h1>", encoding="utf-8")
    (root / "docs" / "index.html").write_text("docs home", encoding="utf-8")
    (root / "docs" / "guide.txt").write_bytes(b"line one\r\nline two\r\n")
    (root / "private" / "keys.txt").write_text("hunter2", encoding="utf-8")

    (tmp_path / "secret.txt").write_text("top secret", encoding="utf-8")

    return root


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def make_config(site: Path, free_port: int) -> Callable[..., ServerConfig]:
    """Build a test configuration, overriding any field by keyword."""
    def factory(**overrides) -> ServerConfig:
        settings = dict(
            host="127.0.0.1",
            port=free_port,
            hosting_root=str(site),
            min_workers=2,
            max_workers=4,
            timeout=2.0,
            log_level="WARNING",
        )
        settings.update(overrides)
        return ServerConfig(**settings)

    return factory


class ServerThread:
    """Runs a StaticServer in a background thread."""

    def __init__(self, server: StaticServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.config.port

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.socket_server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def running_server(make_config) -> Generator[ServerThread, None, None]:
    """A server serving the `site` tree on a free port."""
    server_thread = ServerThread(StaticServer(make_config()))
    server_thread.start()

    yield server_thread

    server_thread.stop()


def exchange(port: int, payload: bytes, half_close: bool = True) -> bytes:
    """
    Send raw bytes to the server and collect everything it sends back
    until it closes the connection.
    """
    with socket.create_connection(("127.0.0.1", port), timeout=5.0) as client:
        client.sendall(payload)
        if half_close:
            client.shutdown(socket.SHUT_WR)

        received = b""
        while True:
            chunk = client.recv(4096)
            if not chunk:
                return received
            received += chunk


@pytest.fixture
def client(running_server: ServerThread) -> Callable[..., bytes]:
    """Send a request to the running server and return the raw response."""
    def send(payload, **kwargs) -> bytes:
        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return exchange(running_server.port, payload, **kwargs)

    return send
