"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (VTP_*)
3. Config file (~/.vtp/config.toml)
4. Default values

Environment variables:
- VTP_FFMPEG_PATH: Path to ffmpeg executable
- VTP_FFPROBE_PATH: Path to ffprobe executable
- VTP_SERVER_BIND: Address the HTTP server binds to
- VTP_SERVER_PORT: Port the HTTP server listens on
- VTP_MEDIA_DIR: Directory source files are served from
- VTP_OUTPUT_DIR: Parent directory for job output directories
- VTP_URL_PREFIX: Public URL prefix written into descriptor.json
- VTP_PROBE_CACHE_SIZE: Number of probe results kept in memory
- VTP_LOG_LEVEL: debug, info, warning or error
- VTP_LOG_FORMAT: text or json
- VTP_LOG_STDERR: also log to stderr when a log file is set (true/false)
- VTP_CONFIG_PATH: Path to config file (overrides default location)
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, TypeVar

from vtp.config.env import EnvReader
from vtp.config.models import (
    AppConfig,
    JobsConfig,
    LoggingConfig,
    PathsConfig,
    ServerConfig,
    ToolsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".vtp"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"

T = TypeVar("T")


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path, honoring VTP_CONFIG_PATH."""
    reader = env_reader or EnvReader()
    return reader.get_path("VTP_CONFIG_PATH", DEFAULT_CONFIG_FILE)


def load_config_file(path: Path, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file.
        strict: If True, raise on parse failures instead of falling back to
            defaults.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        tomllib.TOMLDecodeError: When strict=True and the file cannot be
            parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        return {}
    except tomllib.TOMLDecodeError as e:
        if strict:
            raise
        logger.warning("Ignoring unparseable config file %s: %s", path, e)
        return {}


def _first(*values: T | None) -> T | None:
    """Return the first value that is not None."""
    return next((v for v in values if v is not None), None)


def _section(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = file_config.get(name, {})
    if not isinstance(section, dict):
        logger.warning("Config section [%s] is not a table, ignoring", name)
        return {}
    return section


def _as_path(value: Any) -> Path | None:
    if value is None:
        return None
    return Path(str(value)).expanduser()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    ffmpeg_path: str | None = None,
    ffprobe_path: str | None = None,
    bind: str | None = None,
    port: int | None = None,
    media_dir: Path | None = None,
    output_dir: Path | None = None,
    url_prefix: str | None = None,
    log_level: str | None = None,
    log_format: str | None = None,
    log_file: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> AppConfig:
    """Get the application configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides VTP_CONFIG_PATH).
        ffmpeg_path: CLI override for ffmpeg path.
        ffprobe_path: CLI override for ffprobe path.
        bind: CLI override for the server bind address.
        port: CLI override for the server port.
        media_dir: CLI override for the media directory.
        output_dir: CLI override for the output directory.
        url_prefix: CLI override for the descriptor URL prefix.
        log_level: CLI override for the log level.
        log_format: CLI override for the log format.
        log_file: CLI override for the log file.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise on config file parse failures.

    Returns:
        AppConfig with merged configuration.

    Raises:
        ValueError: If a merged value fails validation.
        tomllib.TOMLDecodeError: When strict=True and the config file
            cannot be parsed.
    """
    reader = env_reader or EnvReader()
    path = config_path or get_default_config_path(reader)
    file_config = load_config_file(path, strict=strict)

    tools = _section(file_config, "tools")
    server = _section(file_config, "server")
    paths = _section(file_config, "paths")
    jobs = _section(file_config, "jobs")
    log = _section(file_config, "logging")

    defaults = AppConfig()

    return AppConfig(
        tools=ToolsConfig(
            ffmpeg=_first(
                ffmpeg_path,
                reader.get_str("VTP_FFMPEG_PATH"),
                tools.get("ffmpeg"),
                defaults.tools.ffmpeg,
            ),
            ffprobe=_first(
                ffprobe_path,
                reader.get_str("VTP_FFPROBE_PATH"),
                tools.get("ffprobe"),
                defaults.tools.ffprobe,
            ),
        ),
        server=ServerConfig(
            bind=_first(
                bind,
                reader.get_str("VTP_SERVER_BIND"),
                server.get("bind"),
                defaults.server.bind,
            ),
            port=_first(
                port,
                reader.get_int("VTP_SERVER_PORT"),
                server.get("port"),
                defaults.server.port,
            ),
        ),
        paths=PathsConfig(
            media_dir=_first(
                media_dir,
                reader.get_path("VTP_MEDIA_DIR"),
                _as_path(paths.get("media_dir")),
                defaults.paths.media_dir,
            ),
            output_dir=_first(
                output_dir,
                reader.get_path("VTP_OUTPUT_DIR"),
                _as_path(paths.get("output_dir")),
                defaults.paths.output_dir,
            ),
            url_prefix=_first(
                url_prefix,
                reader.get_str("VTP_URL_PREFIX"),
                paths.get("url_prefix"),
            ),
        ),
        jobs=JobsConfig(
            probe_cache_size=_first(
                reader.get_int("VTP_PROBE_CACHE_SIZE"),
                jobs.get("probe_cache_size"),
                defaults.jobs.probe_cache_size,
            ),
        ),
        logging=LoggingConfig(
            level=_first(
                log_level,
                reader.get_str("VTP_LOG_LEVEL"),
                log.get("level"),
                defaults.logging.level,
            ),
            format=_first(
                log_format,
                reader.get_str("VTP_LOG_FORMAT"),
                log.get("format"),
                defaults.logging.format,
            ),
            file=_first(log_file, _as_path(log.get("file"))),
            include_stderr=_first(
                reader.get_bool("VTP_LOG_STDERR"),
                log.get("include_stderr"),
                defaults.logging.include_stderr,
            ),
            max_bytes=int(log.get("max_bytes", defaults.logging.max_bytes)),
            backup_count=int(log.get("backup_count", defaults.logging.backup_count)),
        ),
    )
