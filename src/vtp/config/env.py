"""Environment variable access for configuration loading.

EnvReader wraps a mapping (os.environ by default) so the loader can be
tested without touching the process environment.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_FLAG_VALUES = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


class EnvReader:
    """Read typed values from environment variables.

    Unset variables yield the default. Values that fail to parse are logged
    and also yield the default.

    Example:
        reader = EnvReader(env={"VTP_SERVER_PORT": "9000"})
        reader.get_int("VTP_SERVER_PORT", 8440)  # 9000
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        value = self._env.get(var)
        if value is None or value == "":
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer, logging a warning when the value does not parse."""
        value = self.get_str(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a path with tilde expansion. Existence is not checked."""
        value = self.get_str(var)
        if value is None:
            return default
        return Path(value).expanduser()

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a flag. Accepts 1/0, true/false, yes/no and on/off."""
        value = self.get_str(var)
        if value is None:
            return default
        flag = _FLAG_VALUES.get(value.strip().casefold())
        if flag is None:
            logger.warning("Invalid boolean value for %s: %s", var, value)
            return default
        return flag
