"""JSON log formatting."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has, plus the ones JobContextFilter adds.
# Anything else on a record came from extra= and is reported as context.
_RESERVED_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
    "taskName",
    "job_slug",
    "job_tag",
}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys: ``timestamp`` (UTC, ISO-8601), ``level``, ``message``, then
    ``logger`` unless it is the root logger, ``job`` when the record was
    logged inside job_context(), ``context`` for extra= attributes and
    ``exception`` for a formatted traceback.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        slug = getattr(record, "job_slug", None)
        if slug:
            entry["job"] = slug

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["context"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, default=str)
