"""Root logger setup for the API server and the CLI.

Both entry points call :func:`configure_logging` once at startup with values
from ``Settings`` (``LOG_LEVEL``, ``LOG_FORMAT``, ``SANITIZE_LOGS``).
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from marketflow.utils.validation import sanitize_log_message

# ``extra=`` keys the request middleware and the workflow repository attach
CONTEXT_FIELDS = (
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "workflow_id",
    "node_id",
)

_QUIET_LOGGERS = ("httpx", "uvicorn.access", "watchdog")


class SanitizingFilter(logging.Filter):
    """Redact credentials from the message and its string arguments.

    ``custom-llm`` nodes carry an ``apiKey`` in their data, so any log line
    that echoes node data has to pass through here.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = sanitize_log_message(str(record.msg))
        if record.args:
            record.args = tuple(
                sanitize_log_message(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with any :data:`CONTEXT_FIELDS` present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``time - logger - LEVEL - message``"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(
    level: str = "INFO",
    format: str = "text",
    sanitize_logs: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Replace the root handlers with a single stream handler.

    Args:
        level: Level name; unknown names fall back to INFO.
        format: ``"text"`` or ``"json"``.
        sanitize_logs: Attach :class:`SanitizingFilter`.
        stream: Destination, stdout by default. The CLI passes stderr so
            command output stays parseable.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JSONFormatter() if format.lower() == "json" else TextFormatter())
    if sanitize_logs:
        handler.addFilter(SanitizingFilter())

    root = logging.getLogger()
    root.setLevel(log_level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
