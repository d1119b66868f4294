from __future__ import annotations
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone

from skillhub.domain import Event
from skillhub.ports import EventBus


def _json_formatter(record: logging.LogRecord) -> str:
    base = {
        "level": record.levelname,
        "logger": record.name,
        "msg": record.getMessage(),
        "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
    }
    extra = getattr(record, "extra", None)
    if isinstance(extra, dict):
        base.update(extra)
    if record.exc_info:
        base["exc"] = logging.Formatter().formatException(record.exc_info)
    return json.dumps(base, ensure_ascii=False, default=str)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return _json_formatter(record)


def setup_logging(logs_dir: Path, level: str = "INFO", *, console: bool = True) -> logging.Logger:
    """
    Logging for the ``skillhub`` logger tree:
      - stderr (optional)
      - {logs_dir}/skillhub.log with rotation
    Both in JSON, one object per line.
    """
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    logfile = logs_dir / "skillhub.log"

    logger = logging.getLogger("skillhub")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    if console:
        stream_h = logging.StreamHandler()
        stream_h.setFormatter(JsonFormatter())
        stream_h.setLevel(logging.WARNING)
        logger.addHandler(stream_h)

    file_h = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    file_h.setFormatter(JsonFormatter())
    file_h.setLevel(logger.level)
    logger.addHandler(file_h)

    logger.propagate = False
    logger.info("logging.initialized", extra={"extra": {"logfile": str(logfile)}})
    return logger


def attach_event_logger(bus: EventBus, logger: Optional[logging.Logger] = None) -> None:
    """Log every event published on the bus."""
    base_logger = logger or logging.getLogger("skillhub.events")

    def _handler(ev: Event) -> None:
        base_logger.info(
            "event",
            extra={
                "extra": {
                    "time": datetime.fromtimestamp(ev.ts, tz=timezone.utc).isoformat(),
                    "type": ev.type,
                    "source": ev.source,
                    "payload": dict(ev.payload),
                }
            },
        )

    bus.subscribe("", _handler)
