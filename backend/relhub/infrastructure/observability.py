"""Structured Logging — one JSON object per line, or plain text for local runs.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Record ids (contact_id, task_id, interaction_id) and error context
      (error_code, path, state_key) appear only when the caller passed them as extra
    - setup_logging replaces its own handler on repeat calls instead of stacking
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "contact_id", "task_id", "interaction_id", "error_code", "path", "state_key",
)
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s — %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class _RelhubHandler(logging.StreamHandler):
    pass


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the relhub handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _RelhubHandler)]:
        root.removeHandler(existing)

    handler = _RelhubHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
