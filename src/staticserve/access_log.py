"""
=============================================================================
ACCESS LOGGING
=============================================================================

One log entry per handled connection, on the "staticserve.access" logger.

=============================================================================
LOG FORMATS
=============================================================================

TEXT (default, for humans):

    127.0.0.1:52144 - [18/Oct/2026:09:12:01 +0000] "GET / HTTP/1.1" 200 48 1.72ms

JSON (for log aggregators):

    {"connection_id": "3f2a9c1e", "client": "127.0.0.1:52144", ...}

A connection that produced no response (empty request, malformed request
line, non-GET method) is logged with status "-" and 0 bytes. The file
content is never logged, only its size.

=============================================================================
"""

import time
import json
import logging
from dataclasses import dataclass, asdict
from typing import Optional


logger = logging.getLogger("staticserve.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one connection.

    Attributes:
        connection_id:  Connection identifier, matches core log lines.
        client:         "ip:port" of the remote endpoint.
        request_line:   First line of the request as received.
        status_code:    Response status, or None if nothing was sent.
        bytes_sent:     Response size in bytes.
        duration_ms:    Time from accept to response sent.
        timestamp:      When the entry was produced.
    """

    connection_id: str
    client: str
    request_line: str
    status_code: Optional[int]
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        status = self.status_code if self.status_code is not None else "-"
        return (
            f'{self.client} - [{self.timestamp}] '
            f'"{self.request_line}" {status} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms'
        )


class AccessLogger:
    """
    Emits RequestLog entries in the configured format.

    Usage:
        access = AccessLogger(log_format="json")
        access.log(entry)
    """

    def __init__(self, log_format: str = "text", log_level: int = logging.INFO):
        self.log_format = log_format
        self.log_level = log_level

    def log(self, entry: RequestLog):
        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

    @staticmethod
    def timestamp() -> str:
        return time.strftime("%d/%b/%Y:%H:%M:%S %z")
