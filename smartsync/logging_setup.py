from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ThirdPartyFilter(logging.Filter):
    """Let smartsync logs through; keep library chatter to warnings and up."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("smartsync."):
            return True
        # googleapiclient logs every discovery cache miss at INFO/WARNING
        if record.name.startswith("googleapiclient.discovery_cache"):
            return record.levelno >= logging.ERROR
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    level: int | str = logging.INFO,
    log_dir: str | Path | None = None,
) -> None:
    """
    Configure the root logger with a stderr handler and, when ``log_dir`` is
    given, a file handler with everything at DEBUG.

    Safe to call more than once: existing handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyFilter())
    root.addHandler(ch)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / "smartsync.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
