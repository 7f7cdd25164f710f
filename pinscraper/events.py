import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class EventSink:
    """Receives structured events (phase changes, counts, failures) from the scrape core."""

    def emit(self, event: str, **fields: Any) -> None:
        raise NotImplementedError


class LoggingEventSink(EventSink):
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("pinscraper")

    def emit(self, event: str, **fields: Any) -> None:
        level = logging.ERROR if event.endswith("_failed") else logging.INFO
        if not fields:
            self.logger.log(level, "%s", event)
            return
        details = " ".join(f"{k}={v}" for k, v in fields.items())
        self.logger.log(level, "%s %s", event, details)


def setup_logging(log_dir: Path = Path("logs"), level: str = "INFO") -> logging.Logger:
    """
    Console output plus two daily-rotated files kept for two weeks:
        combined.log → everything
        error.log    → ERROR and above
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)

    combined = TimedRotatingFileHandler(
        log_dir / "combined.log", when="midnight", backupCount=14, encoding="utf-8"
    )
    combined.setFormatter(formatter)

    errors = TimedRotatingFileHandler(
        log_dir / "error.log", when="midnight", backupCount=14, encoding="utf-8"
    )
    errors.setLevel(logging.ERROR)
    errors.setFormatter(formatter)

    logger = logging.getLogger("pinscraper")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in (console, combined, errors):
        logger.addHandler(handler)
    logger.propagate = False
    return logger
