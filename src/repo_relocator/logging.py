"""Run logs for repo-relocator.

Every module logs through get_logger(), which hands out children of the
"repo_relocator" logger. setup_logging() configures that one parent, so a
single call per run routes the whole package into ~/repo-relocator/logs/.
"""

import logging
import sys
from pathlib import Path

# Default log directory
DEFAULT_LOG_DIR = Path.home() / "repo-relocator" / "logs"


def setup_logging(
    name: str,
    log_dir: Path | None = None,
    level: int = logging.INFO,
    console: bool = True,
) -> logging.Logger:
    """Send the package's log records to <log_dir>/<name>.log.

    Handlers go on the "repo_relocator" logger rather than on a logger per
    component. Component loggers carry no handlers of their own and
    propagate to it, so records from every component interleave in one
    file in the order they happen. This covers loggers created at import
    time before this is called and records emitted from worker threads.

    Args:
        name: Run name (used for log filename)
        log_dir: Directory for log files (defaults to ~/repo-relocator/logs/)
        level: Logging level (defaults to INFO)
        console: Whether to also log to stderr (defaults to True)

    Returns:
        The configured package logger
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("repo_relocator")
    logger.setLevel(level)

    # Avoid adding duplicate handlers if already configured
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_dir / f"{name}.log", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a repo-relocator component.

    Args:
        name: Logger name (will be prefixed with 'repo_relocator.')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"repo_relocator.{name}")
