"""
Logging setup for the aesthetic advisor CLI.

``configure_logging(config, debug=...)`` is called once per CLI command,
before the engine inputs are loaded. Library modules only ever do
``logger = logging.getLogger(__name__)``.

Handlers
--------
  console  stderr, so ``typer.prompt`` questions on stdout stay readable
  file     optional, appended to ``config.log_file`` (parent dirs created)

JSON lines (``json_format = true`` under [logging])::

    {"ts": "2026-03-02T18:04:11Z", "level": "INFO",
     "logger": "aesthetic_advisor.engine.session", "msg": "Session reset: ...",
     "session_id": "session_3f9a0c1b2d4e"}

Anything passed through ``extra=`` (the engine attaches ``session_id``) is
copied to the top level of the JSON object.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aesthetic_advisor.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes present on every LogRecord; anything else came from extra=.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg`` plus extras."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "ts":     created.strftime(LOG_DATE_FORMAT),
            "level":  record.levelname,
            "logger": record.name,
            "msg":    record.getMessage(),
        }
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def _build_formatter(config: "LoggingConfig") -> logging.Formatter:
    if config.json_format:
        return _JsonFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(config: "LoggingConfig", debug: bool = False) -> None:
    """Install console (and optional file) handlers on the root logger.

    Args:
        config: ``AppConfig.logging``.
        debug:  ``AppConfig.debug``; forces DEBUG regardless of
                ``config.level`` so branch jumps and eliminations show up.
    """
    level = logging.DEBUG if debug else getattr(logging, config.level, logging.INFO)
    formatter = _build_formatter(config)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
