"""Configuration data models.

Each section of the TOML config file maps to one dataclass here. Values are
validated on construction so a bad file or environment variable fails at
startup rather than mid-job.
"""

from dataclasses import dataclass, field
from pathlib import Path

from vtp.introspector.cache import DEFAULT_CAPACITY


@dataclass
class ToolsConfig:
    """Paths of the external tools. Bare names are looked up in PATH."""

    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"


@dataclass
class ServerConfig:
    """Configuration for `vtp serve`."""

    bind: str = "127.0.0.1"
    """Network address to bind to."""

    port: int = 8440

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")


@dataclass
class PathsConfig:
    """Where sources are read from and outputs are written to."""

    media_dir: Path = field(default_factory=Path.cwd)
    """Root directory that HTTP requests may reference source files under."""

    output_dir: Path = field(default_factory=lambda: Path.cwd() / "output")
    """Parent directory of per-job output directories."""

    url_prefix: str | None = None
    """Public URL prefix for descriptor.json. None skips the descriptor."""


@dataclass
class JobsConfig:
    """Configuration for probing and the job queue."""

    probe_cache_size: int = DEFAULT_CAPACITY

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.probe_cache_size < 1:
            raise ValueError(
                f"probe_cache_size must be at least 1, got {self.probe_cache_size}"
            )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class AppConfig:
    """Main configuration container. Aggregates all sections."""

    tools: ToolsConfig = field(default_factory=ToolsConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    jobs: JobsConfig = field(default_factory=JobsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
