"""
Logging setup for the cost scorer CLI.

``configure_logging(config, debug=...)`` is called once per CLI command,
after the config is loaded and before any records are read. Library modules
only ever do ``logger = logging.getLogger(__name__)``.

Handlers go to stderr. ``score`` prints its JSON payload on stdout, so the
two never interleave when the output is piped into another tool.

With ``json_format = true`` under ``[logging]`` each record becomes one JSON
line. Bracket labels are Korean (``"10억~16억"``), so the line is written
with ``ensure_ascii=False``::

    {"ts": "2025-03-12T09:00:00Z", "level": "WARNING",
     "logger": "cost_scorer.scoring.brackets",
     "msg": "Bracket '16억' duplicates ordering key 2280000000.0; ..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

if TYPE_CHECKING:
    from cost_scorer.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Keys present on every LogRecord; anything else arrived through ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``, extras."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: dict = {
            "ts": created.strftime(LOG_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = {
            key: val
            for key, val in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        }
        line.update(extras)
        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str, ensure_ascii=False)


def resolve_level(config: "LoggingConfig", debug: bool = False) -> int:
    """Numeric level for ``config``; ``debug`` forces DEBUG."""
    if debug:
        return logging.DEBUG
    return getattr(logging, config.level.upper(), logging.INFO)


def configure_logging(
    config: "LoggingConfig",
    debug: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Install root handlers from the ``[logging]`` config section.

    Args:
        config: ``AppConfig.logging``.
        debug:  ``AppConfig.debug``; when set, everything down to DEBUG is
                emitted regardless of ``config.level``.
        stream: Console stream, stderr by default.
    """
    level = resolve_level(config, debug)
    formatter: logging.Formatter = (
        _JsonLineFormatter()
        if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    console = logging.StreamHandler(stream or sys.stderr)
    handlers: list[logging.Handler] = [console]

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
