"""
Logging setup for the NAD matcher CLI.

``configure_logging(config, debug=...)`` is called once per CLI command,
after the config is loaded and before any catalog is read.  Library modules
only ever do ``logging.getLogger(__name__)``.

Console output goes to stderr so that ``--json`` output on stdout stays
machine-readable.  ``AppConfig.debug`` forces DEBUG regardless of the
configured level.

With ``json_format = true`` in the ``[logging]`` section every record is one
JSON object.  Values passed through ``extra=`` become top-level keys, which
the workflows use for ``workflow`` and ``duration_seconds``::

    {"ts": "2025-01-15T09:30:00Z", "level": "INFO",
     "logger": "nad_matcher.workflows.base", "msg": "...",
     "workflow": "countries_to_module", "duration_seconds": 0.004}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nad_matcher.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg, exc, extras."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, object] = {
            "ts": ts.strftime(TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        entry.update(
            (k, v) for k, v in vars(record).items()
            if k not in _RESERVED_ATTRS and not k.startswith("_")
        )
        return json.dumps(entry, default=str)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonLineFormatter()
    formatter = logging.Formatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)
    # UTC, to match the trailing "Z"
    formatter.converter = time.gmtime
    return formatter


def configure_logging(config: "LoggingConfig", debug: bool = False) -> int:
    """Install stderr (and optional file) handlers on the root logger.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        debug:  Force DEBUG level (``AppConfig.debug``).

    Returns:
        The effective numeric level.
    """
    level = logging.DEBUG if debug else logging.getLevelName(config.level)
    formatter = _make_formatter(config.json_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    return level
