"""
Logging utilities for Banana Studio.

All records go through the "banana_studio" logger. setup_logging() is called
by the command-line front end only; it attaches:
- a file handler on logs/banana_studio.log, truncated at every start
- a console handler on stderr
- a sys.excepthook wrapper so crashes end up in the log

Library callers that never call setup_logging() get plain propagation to
whatever logging configuration their host application has.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import APP_NAME, APP_VERSION

LOGGER_NAME = "banana_studio"

# <project root>/logs, next to src/
LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"
LOG_FILE = LOG_DIR / "banana_studio.log"

FILE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(message)s"

_logger: Optional[logging.Logger] = None
_initialized = False


def _open_log_file() -> Optional[logging.Handler]:
    """File handler for LOG_FILE, or None when the directory is not writable."""
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        # 'w' mode: one log per run
        handler = logging.FileHandler(LOG_FILE, mode="w", encoding="utf-8")
    except OSError as e:
        print(f"[WARN] Could not set up file logging in {LOG_DIR}: {e}", file=sys.stderr)
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(log_to_file: bool = True, console_level: int = logging.INFO) -> logging.Logger:
    """
    Configure the banana_studio logger once per process.

    Args:
        log_to_file: Also write DEBUG and above to LOG_FILE.
        console_level: Minimum level echoed to stderr.

    Returns:
        The configured logger. Later calls return it unchanged.
    """
    global _logger, _initialized

    if _initialized and _logger:
        return _logger

    _logger = logging.getLogger(LOGGER_NAME)
    _logger.setLevel(logging.DEBUG)
    _logger.handlers.clear()

    file_handler = _open_log_file() if log_to_file else None
    if file_handler is not None:
        _logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    _logger.addHandler(console_handler)

    _logger.debug(f"{APP_NAME} v{APP_VERSION} starting (Python {sys.version.split()[0]})")
    if file_handler is not None:
        _logger.debug(f"Log file: {LOG_FILE}")

    _install_excepthook()

    _initialized = True
    return _logger


def _install_excepthook() -> None:
    """Route uncaught exceptions (except Ctrl+C) through the logger first."""
    previous_hook = sys.excepthook

    def log_uncaught(exc_type, exc_value, exc_traceback):
        if _logger and not issubclass(exc_type, KeyboardInterrupt):
            _logger.critical("Uncaught exception:", exc_info=(exc_type, exc_value, exc_traceback))
        previous_hook(exc_type, exc_value, exc_traceback)

    sys.excepthook = log_uncaught


def get_logger() -> logging.Logger:
    """The configured logger, or the bare named logger before setup_logging()."""
    if _logger is not None:
        return _logger
    return logging.getLogger(LOGGER_NAME)


def log_debug(message: str) -> None:
    get_logger().debug(message)


def log_info(message: str) -> None:
    get_logger().info(message)


def log_warning(message: str) -> None:
    get_logger().warning(message)


def log_exception(message: str) -> None:
    """Log at ERROR with the active exception's traceback."""
    get_logger().exception(message)


def log_api_call(endpoint: str, success: bool, details: str = "") -> None:
    """
    Log one Gemini request.

    Args:
        endpoint: Model/mode label of the call
        success: Whether an image came back
        details: Error text or response summary
    """
    msg = f"API [{'SUCCESS' if success else 'FAILED'}] {endpoint}"
    if details:
        msg += f" - {details}"
    get_logger().log(logging.INFO if success else logging.ERROR, msg)


def log_generation_start(mode: str, model_id: str, attachments: int = 0) -> None:
    get_logger().info(f"Generation started: {mode} (model={model_id}, attachments={attachments})")


def log_generation_complete(mode: str, success: bool, details: str = "") -> None:
    """Log the end of one execute() call, at ERROR when it failed."""
    msg = f"Generation {'completed' if success else 'failed'}: {mode}"
    if details:
        msg += f" - {details}"
    get_logger().log(logging.INFO if success else logging.ERROR, msg)
