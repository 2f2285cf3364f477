# geocoin/logging_config.py
import logging
import os
import tempfile
from logging import StreamHandler, FileHandler
from typing import Optional, Tuple

LOG_FILE_NAME = "geocoin.log"


def _ensure_dir(path: str) -> bool:
    """Ensure a directory exists and is writable; return True if ready."""
    try:
        os.makedirs(path, exist_ok=True)
        probe = os.path.join(path, ".writetest")
        with open(probe, "w", encoding="utf-8") as f:
            f.write("ok")
        os.remove(probe)
        return True
    except OSError:
        return False


def _pick_logs_location() -> Tuple[str, str]:
    """
    Decide a logs dir and file path with fallbacks:
      1) <project_root>/logs/
      2) <home>/geocoin_logs/
      3) <temp>/geocoin_logs/
    Returns: (logs_dir, log_file)
    """
    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
    candidates = [
        os.path.join(project_root, "logs"),
        os.path.join(os.path.expanduser("~"), "geocoin_logs"),
        os.path.join(tempfile.gettempdir(), "geocoin_logs"),
    ]

    for logs_dir in candidates:
        if _ensure_dir(logs_dir):
            return logs_dir, os.path.join(logs_dir, LOG_FILE_NAME)

    fallback_dir = os.getcwd()
    return fallback_dir, os.path.join(fallback_dir, LOG_FILE_NAME)


def setup_logging(level: int = logging.INFO, console: bool = True) -> Optional[str]:
    """
    Configure the root logger once: file handler (if any location is
    writable) plus an optional console handler.

    Safe to call multiple times (no duplicate handlers). Returns the log file
    path, or None when logging to the console only.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if getattr(logger, "_geocoin_handlers_installed", False):
        return getattr(logger, "_geocoin_log_file", None)

    logs_dir, log_file = _pick_logs_location()

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        file_handler = FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"[Logger] Warning: failed to attach file handler at {log_file}: {e}")
        log_file = None

    if console:
        console_handler = StreamHandler()
        console_handler.setFormatter(formatter)
        # the game screen is the console; keep it to warnings and up
        console_handler.setLevel(max(level, logging.WARNING))
        logger.addHandler(console_handler)

    logger._geocoin_handlers_installed = True  # type: ignore[attr-defined]
    logger._geocoin_log_file = log_file  # type: ignore[attr-defined]

    logger.info("Logging initialized.")
    logger.info(f"Logs directory: {logs_dir}")
    if log_file:
        logger.info(f"Log file: {log_file}")
    else:
        logger.info("File logging disabled (console only).")
    return log_file
