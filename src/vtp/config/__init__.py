"""Configuration loading for vtp.

Settings come from CLI arguments, VTP_* environment variables and the TOML
config file, in that order of precedence.
"""

from vtp.config.env import EnvReader
from vtp.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_config,
    get_default_config_path,
    load_config_file,
)
from vtp.config.models import (
    AppConfig,
    JobsConfig,
    LoggingConfig,
    PathsConfig,
    ServerConfig,
    ToolsConfig,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "AppConfig",
    "EnvReader",
    "JobsConfig",
    "LoggingConfig",
    "PathsConfig",
    "ServerConfig",
    "ToolsConfig",
    "get_config",
    "get_default_config_path",
    "load_config_file",
]
