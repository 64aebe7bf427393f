import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_DIR = Path.home() / ".bookfinder"
LOG_FILE = LOG_DIR / "bookfinder.log"

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marks the handlers this module attached to the root logger
HANDLER_TAG = "_bookfinder_handler"

def _tagged(handler: logging.Handler, name: str) -> logging.Handler:
    setattr(handler, HANDLER_TAG, name)
    return handler

def _find_handler(root: logging.Logger, name: str):
    return next((h for h in root.handlers if getattr(h, HANDLER_TAG, None) == name), None)

def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return _tagged(handler, "console")

def _file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_FILE, maxBytes=10*1024*1024, backupCount=5, encoding='utf-8'
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return _tagged(handler, "file")

def setup_logging(level: int = logging.INFO):
    """
    Console output at `level`, everything the root logger lets through goes to
    the rotating log file. The root logger sits at INFO unless `level` asks for
    more. Safe to call again: existing handlers are reused and only the levels
    change.
    """
    root = logging.getLogger()
    root.setLevel(min(level, logging.INFO))

    console = _find_handler(root, "console")
    if console is None:
        console = _console_handler()
        root.addHandler(console)
    console.setLevel(level)

    current = _find_handler(root, "file")
    if current is not None and current.baseFilename != os.path.abspath(LOG_FILE):
        root.removeHandler(current)
        current.close()
        current = None
    if current is None:
        root.addHandler(_file_handler())
        logging.info(f"Logging initialized. Log file: {LOG_FILE}")

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
