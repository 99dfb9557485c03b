import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .utils import get_user_data_path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _find_file_handler(root: logging.Logger, log_path: Path):
    for handler in root.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == log_path.absolute():
            return handler
    return None


def setup_app_logging(log_path=None, level: int = logging.INFO) -> Path:
    """Send speed-control logs to a rotating file in the user data dir.

    Safe to call again with the same path; the existing handler is reused.
    """
    log_path = Path(log_path or get_user_data_path("logs.txt"))
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    if _find_file_handler(root, log_path) is not None:
        return log_path

    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    logging.captureWarnings(True)
    sys.excepthook = _log_unhandled
    logging.info("Speed control logging to %s (level=%s)", log_path, logging.getLevelName(level))
    return log_path


def _log_unhandled(exc_type, exc_value, exc_tb):
    logging.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))
