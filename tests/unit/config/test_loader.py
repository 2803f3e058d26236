"""Tests for configuration loading and precedence."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from vtp.config.env import EnvReader
from vtp.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_config,
    get_default_config_path,
    load_config_file,
)

CONFIG_TOML = """\
[tools]
ffmpeg = "/opt/ffmpeg/bin/ffmpeg"

[server]
bind = "0.0.0.0"
port = 9000

[paths]
media_dir = "/srv/media"
url_prefix = "https://cdn.example/media"

[jobs]
probe_cache_size = 50

[logging]
level = "debug"
format = "json"
max_bytes = 1024
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


class TestDefaultConfigPath:
    def test_default_location(self) -> None:
        assert get_default_config_path(EnvReader(env={})) == DEFAULT_CONFIG_FILE

    def test_env_override(self) -> None:
        reader = EnvReader(env={"VTP_CONFIG_PATH": "/etc/vtp.toml"})
        assert get_default_config_path(reader) == Path("/etc/vtp.toml")


class TestLoadConfigFile:
    """Tests for load_config_file."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_config_file(tmp_path / "absent.toml") == {}

    def test_parses_tables(self, config_file: Path) -> None:
        data = load_config_file(config_file)
        assert data["server"]["port"] == 9000

    def test_invalid_toml_ignored_by_default(self, tmp_path: Path, caplog) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[server\nport = ")
        assert load_config_file(path) == {}
        assert "Ignoring unparseable config file" in caplog.text

    def test_invalid_toml_raises_when_strict(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[server\nport = ")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_config_file(path, strict=True)


class TestGetConfig:
    """Tests for get_config precedence: CLI > env > file > defaults."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = get_config(
            config_path=tmp_path / "absent.toml", env_reader=EnvReader(env={})
        )
        assert config.tools.ffmpeg == "ffmpeg"
        assert config.server.port == 8440
        assert config.paths.url_prefix is None
        assert config.logging.level == "info"

    def test_file_values(self, config_file: Path) -> None:
        config = get_config(config_path=config_file, env_reader=EnvReader(env={}))
        assert config.tools.ffmpeg == "/opt/ffmpeg/bin/ffmpeg"
        assert config.tools.ffprobe == "ffprobe"
        assert config.server.bind == "0.0.0.0"
        assert config.server.port == 9000
        assert config.paths.media_dir == Path("/srv/media")
        assert config.paths.url_prefix == "https://cdn.example/media"
        assert config.jobs.probe_cache_size == 50
        assert config.logging.format == "json"
        assert config.logging.max_bytes == 1024

    def test_env_overrides_file(self, config_file: Path) -> None:
        reader = EnvReader(
            env={
                "VTP_SERVER_PORT": "9100",
                "VTP_FFMPEG_PATH": "/usr/local/bin/ffmpeg",
                "VTP_LOG_LEVEL": "warning",
                "VTP_OUTPUT_DIR": "/srv/out",
            }
        )
        config = get_config(config_path=config_file, env_reader=reader)
        assert config.server.port == 9100
        assert config.tools.ffmpeg == "/usr/local/bin/ffmpeg"
        assert config.logging.level == "warning"
        assert config.paths.output_dir == Path("/srv/out")

    def test_cli_overrides_env(self, config_file: Path) -> None:
        reader = EnvReader(env={"VTP_SERVER_PORT": "9100"})
        config = get_config(
            config_path=config_file,
            port=9200,
            url_prefix="https://other.example",
            env_reader=reader,
        )
        assert config.server.port == 9200
        assert config.paths.url_prefix == "https://other.example"

    def test_stderr_flag_from_env(self, config_file: Path) -> None:
        reader = EnvReader(env={"VTP_LOG_STDERR": "yes"})
        config = get_config(config_path=config_file, env_reader=reader)
        assert config.logging.include_stderr is True

    def test_config_path_from_env(self, config_file: Path) -> None:
        reader = EnvReader(env={"VTP_CONFIG_PATH": str(config_file)})
        assert get_config(env_reader=reader).server.port == 9000

    def test_invalid_merged_value_raises(self, tmp_path: Path) -> None:
        reader = EnvReader(env={"VTP_SERVER_PORT": "70000"})
        with pytest.raises(ValueError, match="port"):
            get_config(config_path=tmp_path / "absent.toml", env_reader=reader)

    def test_non_table_section_ignored(self, tmp_path: Path, caplog) -> None:
        path = tmp_path / "config.toml"
        path.write_text('server = "oops"\n')
        config = get_config(config_path=path, env_reader=EnvReader(env={}))
        assert config.server.port == 8440
        assert "[server] is not a table" in caplog.text
