# smart_shopping/config/logging_config.py

"""Per-run logging for smart_shopping.

Every launch writes ``logs/run_<YYYYMMDD_HHMMSS>.log`` at DEBUG with the
full ``smart_shopping.*`` logger tree: Gemini requests, parse failures,
session transitions and storage writes. Only the newest
``Settings.LOG_RETENTION`` run files are kept.

Warnings from the Gemini SDK and its HTTP stack are written to the same
file, so a failed search can be traced without re-running it.

The console only receives warnings and errors, and the headless CLI keeps
stdout for JSON. The TUI owns the terminal, so it calls
:func:`detach_console_handler` before starting and logs to the file only.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from smart_shopping.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

APP_LOGGER = "smart_shopping"
SDK_LOGGERS = ("google_genai", "httpx")


def _active_log_file(logger: logging.Logger) -> Path | None:
    """Return the file of an already attached run handler, if any."""
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def _prune_old_logs(logs_dir: Path, keep: int) -> None:
    """Delete all but the newest *keep* run logs."""
    runs = sorted(logs_dir.glob("run_*.log"))
    for stale in runs[:-keep] if keep > 0 else runs:
        try:
            stale.unlink()
        except OSError:
            # Another process may still hold it open on some platforms
            continue


def setup_logging() -> Path:
    """Attach the run-file and console handlers; returns the run file.

    Calling it again reuses the handlers from the first call.
    """
    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(logging.DEBUG)

    existing = _active_log_file(app_logger)
    if existing is not None:
        return existing

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    _prune_old_logs(logs_dir, Settings.LOG_RETENTION - 1)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{stamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    app_logger.addHandler(file_handler)
    app_logger.addHandler(console_handler)

    for name in SDK_LOGGERS:
        sdk_logger = logging.getLogger(name)
        sdk_logger.setLevel(logging.WARNING)
        sdk_logger.addHandler(file_handler)

    app_logger.info(
        "Logging to %s (model=%s, api key %s)",
        log_file,
        Settings.GEMINI_MODEL,
        "set" if Settings.GOOGLE_API_KEY else "missing",
    )
    return log_file


def detach_console_handler() -> None:
    """Stop writing ``smart_shopping`` records to stderr; the run file stays."""
    app_logger = logging.getLogger(APP_LOGGER)
    for handler in list(app_logger.handlers):
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            app_logger.removeHandler(handler)
            handler.close()
