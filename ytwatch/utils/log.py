# ytwatch/utils/log.py
# Shared logging setup for ytwatch.
# get_logger(name) configures the root logger once (console, plus an optional
# rotating file when LOG_TO_FILE=true) and returns a named logger.

from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

_INITIALIZED = False


def _level_from_env() -> int:
    lvl = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), None)
    return lvl if isinstance(lvl, int) else logging.INFO


def _init_root() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    lvl = _level_from_env()
    root = logging.getLogger()
    root.setLevel(lvl)

    # Drop handlers left over from a previous init (tests, reloads)
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler()
    ch.setLevel(lvl)
    ch.setFormatter(logging.Formatter(_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT))
    root.addHandler(ch)

    if os.getenv("LOG_TO_FILE", "false").lower() == "true":
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_dir / os.getenv("LOG_FILE", "ytwatch.log"),
            maxBytes=int(os.getenv("LOG_MAX_BYTES", "1048576")),
            backupCount=int(os.getenv("LOG_BACKUPS", "5")),
        )
        fh.setLevel(lvl)
        fh.setFormatter(logging.Formatter(_DEFAULT_FMT, datefmt=_DEFAULT_DATEFMT))
        root.addHandler(fh)

    # requests logs every connection through urllib3; keep that out of INFO runs
    logging.getLogger("urllib3").setLevel(max(lvl, logging.WARNING))

    _INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Return a named logger under the shared ytwatch setup.

    Watchers and the entry point log under "ytwatch"; emitters use
    "ytwatch.emit" so dry-run payload dumps can be filtered on their own.
    """
    _init_root()
    return logging.getLogger(name)
