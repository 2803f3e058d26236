"""Tests for configure_logging."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from vtp.config.models import LoggingConfig
from vtp.logging.config import configure_logging
from vtp.logging.context import job_context

pytestmark = pytest.mark.usefixtures("restore_root_logger")


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_stderr_only_by_default(self) -> None:
        configure_logging(LoggingConfig(level="warning"))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_text_format_includes_job_tag(self, capsys) -> None:
        configure_logging(LoggingConfig(level="info"))
        with job_context("ep1"):
            logging.getLogger("vtp.test").info("started")
        err = capsys.readouterr().err
        assert "[ep1] vtp.test - INFO - started" in err

    def test_json_file_output(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "vtp.log"
        configure_logging(LoggingConfig(level="debug", format="json", file=log_file))
        root = logging.getLogger()
        assert [type(h) for h in root.handlers] == [RotatingFileHandler]

        with job_context("ep2"):
            logging.getLogger("vtp.test").debug("probing")
        for handler in root.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "probing"
        assert entry["job"] == "ep2"

    def test_file_and_stderr(self, tmp_path: Path) -> None:
        configure_logging(
            LoggingConfig(file=tmp_path / "vtp.log", include_stderr=True)
        )
        assert len(logging.getLogger().handlers) == 2

    def test_unwritable_file_falls_back_to_stderr(self, tmp_path: Path, capsys):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        configure_logging(LoggingConfig(file=blocker / "vtp.log"))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert not isinstance(handlers[0], RotatingFileHandler)
        assert "Could not open log file" in capsys.readouterr().err

    @pytest.mark.parametrize(
        ("level", "expected"),
        [("info", logging.WARNING), ("debug", logging.DEBUG)],
    )
    def test_access_log_only_at_debug(self, level: str, expected: int) -> None:
        access = logging.getLogger("aiohttp.access")
        previous = access.level
        try:
            configure_logging(LoggingConfig(level=level))
            assert access.level == expected
        finally:
            access.setLevel(previous)
