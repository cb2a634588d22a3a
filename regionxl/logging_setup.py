# regionxl/logging_setup.py
from __future__ import annotations
import logging, os, sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_NAME = "regionxl"
FILE_HANDLER_NAME = "regionxl_file"

def _app_dir() -> Path:
    # Frozen builds log next to the executable; source runs log in the project root.
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    return Path(__file__).resolve().parents[1]

def _log_dir() -> Path:
    base = Path(os.getenv("REGIONXL_LOG_DIR") or (_app_dir() / "logs"))
    base.mkdir(parents=True, exist_ok=True)
    return base

def log_file_path() -> Path:
    return _log_dir() / f"{APP_NAME}.log"

def configure_logging(level: int | None = None) -> logging.Logger:
    level_name = (os.getenv("REGIONXL_LOG_LEVEL") or "").upper()
    lvl = getattr(logging, level_name, None) if level_name else None
    lvl = lvl or level or logging.INFO

    root = logging.getLogger()
    # Idempotent: one file handler per process
    if any(getattr(h, "name", "") == FILE_HANDLER_NAME for h in root.handlers):
        return logging.getLogger(APP_NAME)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(processName)s | %(name)s:%(lineno)d | %(message)s"
    )

    fh = RotatingFileHandler(log_file_path(), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    fh.setFormatter(fmt)
    fh.name = FILE_HANDLER_NAME

    root.addHandler(fh)
    root.setLevel(lvl)
    # openpyxl reports workbook problems through warnings.warn
    logging.captureWarnings(True)

    return logging.getLogger(APP_NAME)
