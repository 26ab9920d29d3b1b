"""Logging configuration for git-branch-pruner"""
import copy
import logging
import sys
from pathlib import Path
from typing import Optional

LOG_DIR = Path.home() / '.git-branch-pruner'
LOG_FILE_NAME = 'git-branch-pruner.log'

# Client libraries that log every request at DEBUG
THIRD_PARTY_LOGGERS = ('git.cmd', 'github', 'urllib3')

LEVEL_COLORS = {
    logging.DEBUG: '\033[36m',     # Cyan
    logging.INFO: '\033[32m',      # Green
    logging.WARNING: '\033[33m',   # Yellow
    logging.ERROR: '\033[31m',     # Red
    logging.CRITICAL: '\033[35m',  # Magenta
}
RESET = '\033[0m'


class ColoredFormatter(logging.Formatter):
    """Colors the level name when stderr is a terminal."""

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno)
        if color and sys.stderr.isatty():
            # Other handlers share the record
            record = copy.copy(record)
            record.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(record)


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode='w')  # Overwrite each run
    handler.setLevel(logging.DEBUG)
    # Fetch stages run on worker threads
    handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    return handler


def setup_logging(verbose: bool = False, debug: bool = False, log_file: Optional[Path] = None) -> Optional[Path]:
    """
    Configure logging for the application.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages with timestamps and also
            write everything to log_file
        log_file: Debug log location, defaults to ~/.git-branch-pruner/git-branch-pruner.log

    Returns:
        Path of the debug log file, or None when not in debug mode
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    if debug:
        console_handler.setFormatter(ColoredFormatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    else:
        console_handler.setFormatter(ColoredFormatter(fmt='[%(name)s] %(message)s'))
    root_logger.addHandler(console_handler)

    if not debug:
        return None

    log_file = log_file or LOG_DIR / LOG_FILE_NAME
    root_logger.addHandler(_file_handler(log_file))
    return log_file


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, named without the package prefix (services.git.github)."""
    if name.startswith('git_branch_pruner.'):
        name = name[len('git_branch_pruner.'):]
    return logging.getLogger(name)
