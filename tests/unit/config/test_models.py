"""Tests for configuration dataclass validation."""

from __future__ import annotations

import pytest

from vtp.config.models import (
    AppConfig,
    JobsConfig,
    LoggingConfig,
    ServerConfig,
)
from vtp.introspector.cache import DEFAULT_CAPACITY


class TestServerConfig:
    """Tests for ServerConfig validation."""

    def test_defaults(self) -> None:
        config = ServerConfig()
        assert config.bind == "127.0.0.1"
        assert config.port == 8440

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_rejects_out_of_range_port(self, port: int) -> None:
        with pytest.raises(ValueError, match="port must be 1-65535"):
            ServerConfig(port=port)


class TestJobsConfig:
    def test_default_cache_size(self) -> None:
        assert JobsConfig().probe_cache_size == DEFAULT_CAPACITY

    def test_rejects_empty_cache(self) -> None:
        """Should reject a probe cache that cannot hold anything."""
        with pytest.raises(ValueError, match="at least 1"):
            JobsConfig(probe_cache_size=0)


class TestLoggingConfig:
    """Tests for LoggingConfig validation."""

    def test_level_is_case_insensitive(self) -> None:
        assert LoggingConfig(level="DEBUG").level == "DEBUG"

    def test_rejects_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="level must be one of"):
            LoggingConfig(level="verbose")

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="format must be one of"):
            LoggingConfig(format="xml")


class TestAppConfig:
    def test_sections_have_defaults(self) -> None:
        config = AppConfig()
        assert config.tools.ffmpeg == "ffmpeg"
        assert config.tools.ffprobe == "ffprobe"
        assert config.paths.url_prefix is None
        assert config.logging.file is None
