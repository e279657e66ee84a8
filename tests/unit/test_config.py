"""
Unit tests for configuration, the access log and the CLI.
"""

import dataclasses
import json
import logging
import os

import pytest

from staticserve import __version__
from staticserve.__main__ import build_parser, config_from_args, main
from staticserve.access_log import AccessLogger, RequestLog
from staticserve.config import ServerConfig


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self, tmp_path):
        config = ServerConfig(hosting_root=str(tmp_path))

        assert config.port == 80
        assert config.host == "0.0.0.0"
        assert config.buffer_size == 1024
        assert config.index_file == "index.html"

    def test_allowed_roots_default_to_hosting_root(self, tmp_path):
        config = ServerConfig(hosting_root=str(tmp_path))

        assert config.allowed_roots == (str(tmp_path),)

    def test_allowed_roots_from_permitted_dirs(self, tmp_path):
        config = ServerConfig(hosting_root=str(tmp_path), permitted_dirs=("/a", "/b"))

        assert config.allowed_roots == ("/a", "/b")

    def test_immutable(self, tmp_path):
        config = ServerConfig(hosting_root=str(tmp_path))

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.port = 8080

    @pytest.mark.parametrize("overrides", [
        {"port": 0},
        {"port": 70000},
        {"min_workers": 0},
        {"min_workers": 4, "max_workers": 2},
        {"buffer_size": 0},
        {"buffer_size": 2048, "max_request_size": 1024},
        {"timeout": 0},
        {"log_format": "xml"},
    ])
    def test_validate_rejects(self, tmp_path, overrides):
        config = ServerConfig(hosting_root=str(tmp_path), **overrides)

        with pytest.raises(ValueError):
            config.validate()

    def test_validate_rejects_missing_root(self, tmp_path):
        with pytest.raises(ValueError):
            ServerConfig(hosting_root=str(tmp_path / "nope")).validate()

    def test_validate_accepts_no_timeout(self, tmp_path):
        ServerConfig(hosting_root=str(tmp_path), timeout=None).validate()

    def test_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STATICSERVE_PORT", "8123")
        monkeypatch.setenv("STATICSERVE_ROOT", str(tmp_path))
        monkeypatch.setenv("STATICSERVE_DIRS", os.pathsep.join(["/a", "/b"]))
        monkeypatch.setenv("STATICSERVE_WORKERS", "3")
        monkeypatch.setenv("STATICSERVE_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.port == 8123
        assert config.hosting_root == str(tmp_path)
        assert config.permitted_dirs == ("/a", "/b")
        assert (config.min_workers, config.max_workers) == (3, 6)
        assert config.log_level == "DEBUG"


    @pytest.mark.parametrize("raw", ["", "none", "None"])
    def test_from_env_timeout_disabled(self, tmp_path, monkeypatch, raw):
        monkeypatch.setenv("STATICSERVE_ROOT", str(tmp_path))
        monkeypatch.setenv("STATICSERVE_TIMEOUT", raw)

        assert ServerConfig.from_env().timeout is None

    def test_from_env_timeout_seconds(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STATICSERVE_ROOT", str(tmp_path))
        monkeypatch.setenv("STATICSERVE_TIMEOUT", "2.5")

        assert ServerConfig.from_env().timeout == 2.5

class TestAccessLog:
    """Tests for RequestLog formatting."""

    def _entry(self, status=200) -> RequestLog:
        return RequestLog(
            connection_id="abcd1234",
            client="127.0.0.1:5000",
            request_line="GET / HTTP/1.1",
            status_code=status,
            bytes_sent=21,
            duration_ms=1.23456,
            timestamp="18/Oct/2026:09:00:00 +0000",
        )

    def test_text(self):
        assert self._entry().to_text() == (
            '127.0.0.1:5000 - [18/Oct/2026:09:00:00 +0000] "GET / HTTP/1.1" 200 21 1.23ms'
        )

    def test_text_without_response(self):
        assert '" - 21 ' in self._entry(status=None).to_text()

    def test_json(self, caplog):
        with caplog.at_level(logging.INFO, logger="staticserve.access"):
            AccessLogger(log_format="json").log(self._entry())

        record = json.loads(caplog.records[-1].getMessage())
        assert record["status_code"] == 200
        assert record["duration_ms"] == 1.23


class TestCLI:
    """Tests for argument parsing and main()."""

    def test_short_flags(self):
        args = build_parser().parse_args(["-p", "8000", "-d", "/srv/a", "/srv/b"])

        assert args.port == 8000
        assert args.dirs == ["/srv/a", "/srv/b"]

    def test_long_flags(self):
        args = build_parser().parse_args(["--port", "9000", "--dirs", "/srv"])

        assert args.port == 9000
        assert args.dirs == ["/srv"]

    def test_flags_override_base(self, tmp_path):
        base = ServerConfig(hosting_root=str(tmp_path), port=1234, log_level="DEBUG")
        args = build_parser().parse_args(["-p", "8000", "-d", "/srv", "-w", "2"])

        config = config_from_args(args, base)

        assert config.port == 8000
        assert config.permitted_dirs == ("/srv",)
        assert (config.min_workers, config.max_workers) == (2, 4)
        assert config.log_level == "DEBUG"       # untouched
        assert config.hosting_root == str(tmp_path)

    def test_timeout_flag(self, tmp_path):
        base = ServerConfig(hosting_root=str(tmp_path))

        seconds = config_from_args(build_parser().parse_args(["-t", "5"]), base)
        disabled = config_from_args(build_parser().parse_args(["--timeout", "none"]), base)
        unset = config_from_args(build_parser().parse_args([]), base)

        assert seconds.timeout == 5.0
        assert disabled.timeout is None
        assert unset.timeout == 30.0

    def test_timeout_flag_rejects_garbage(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--timeout", "soon"])

    def test_dirs_absent_defaults_to_root(self, tmp_path):
        base = ServerConfig(hosting_root=str(tmp_path))
        args = build_parser().parse_args(["--root", str(tmp_path)])

        assert config_from_args(args, base).allowed_roots == (str(tmp_path),)

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])

        assert __version__ in capsys.readouterr().out

    def test_main_reports_startup_failure(self, tmp_path, capsys):
        exit_code = main(["-p", "8000", "--root", str(tmp_path / "nope")])

        assert exit_code == 1
        assert "Failed to start!" in capsys.readouterr().err
