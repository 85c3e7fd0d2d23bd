from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Mapping

from ipro.domain.errors import ValidationError

# Services log to these channels; each one also gets its own file.
LOG_CHANNELS: dict[str, str] = {
    "ipro.cashflow": "cashflow.log",
    "ipro.orders": "orders.log",
    "ipro.services.stock_service": "stock.log",
}

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; `extra=` fields are carried as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _handler(path: Path, level: int) -> RotatingFileHandler:
    fh = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    fh.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    fh.setLevel(level)
    return fh


def _attach(logger: logging.Logger, path: Path, level: int) -> None:
    target = os.path.abspath(path)
    for h in logger.handlers:
        if isinstance(h, RotatingFileHandler) and h.baseFilename == target:
            return
    logger.addHandler(_handler(path, level))


def parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValidationError(f"Unknown log level: {level!r}")
    return value


def setup_logging(
    logs_dir: Path,
    level: int | str = logging.INFO,
    channels: Mapping[str, str] = LOG_CHANNELS,
    console: bool = False,
) -> None:
    """
    Root logger writes app.log and errors.log under logs_dir; every entry in
    channels adds a dedicated file for that logger name. With console=True,
    warnings and above also go to stderr in plain text.

    Safe to call repeatedly: a file already attached is not attached twice.
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    level = parse_level(level)

    root = logging.getLogger()
    root.setLevel(level)
    _attach(root, logs_dir / "app.log", level)
    _attach(root, logs_dir / "errors.log", logging.ERROR)

    if console and not any(type(h) is logging.StreamHandler for h in root.handlers):
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        sh.setLevel(logging.WARNING)
        root.addHandler(sh)

    for name, filename in channels.items():
        logger = logging.getLogger(name)
        _attach(logger, logs_dir / filename, level)
        logger.setLevel(level)
