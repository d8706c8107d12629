"""
Caelex Logging Setup (Structured JSON)

Modules log through `logging.getLogger(__name__)`; this module attaches
a single handler to the "caelex" logger so every record under the
package is emitted as one JSON line (or plain text for local use).
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from . import config

# Extra attributes copied into the JSON payload when present on a record
EXTRA_FIELDS = (
    "pack_id",
    "domain",
    "risk_level",
    "overall_score",
    "pack_hash_short",
    "requirement_id",
    "duration_ms",
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the "caelex" logger.

    Safe to call repeatedly: existing handlers installed by a previous
    call are replaced rather than duplicated.

    Args:
        level: Log level name (default: CX_LOG_LEVEL)
        fmt: "json" or "text" (default: CX_LOG_FORMAT)

    Returns:
        The configured package logger
    """
    level = (level or config.CX_LOG_LEVEL).upper()
    fmt = (fmt or config.CX_LOG_FORMAT).lower()

    logger = logging.getLogger("caelex")
    logger.setLevel(getattr(logging, level, logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_caelex_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler._caelex_handler = True
    logger.addHandler(handler)
    return logger
