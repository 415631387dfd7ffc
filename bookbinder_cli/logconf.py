# bookbinder_cli/logconf.py
import datetime
import logging
import os
import pathlib
import sys


def init(level: str = "INFO", log_dir: str | os.PathLike | None = None):
    """Configure root logger once per run.

    A dated file handler is added when *log_dir* (or `BOOKBINDER_LOG_DIR`) is set.
    """
    fmt = "%(asctime)s | %(levelname)-5s | %(module)s | %(message)s"
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    log_dir = log_dir or os.getenv("BOOKBINDER_LOG_DIR")
    if log_dir:
        path = pathlib.Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(path / f"bookbinder_{datetime.date.today()}.log", encoding="utf-8")
        )

    logging.basicConfig(
        level=getattr(logging, level.upper(), 20),
        format=fmt,
        handlers=handlers,
        force=True,
    )
