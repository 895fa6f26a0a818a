"""Logging configuration and utilities."""
import logging
import sys
from pathlib import Path
from typing import Optional

from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_formatter(json_output: bool) -> logging.Formatter:
    if json_output:
        return jsonlogger.JsonFormatter(
            JSON_FORMAT,
            timestamp=True,
            json_ensure_ascii=False
        )
    return logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the root logger once for the whole process.

    Module loggers created with ``logging.getLogger(__name__)`` propagate
    to it.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit one JSON object per record instead of plain text
        log_file: Optional path to log file

    Returns:
        The configured root logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicate handlers when called again (reload, tests)
    for handler in list(root.handlers):
        if getattr(handler, "_notekeeper", False):
            root.removeHandler(handler)

    formatter = _build_formatter(json_output)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    console_handler._notekeeper = True
    root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        file_handler._notekeeper = True
        root.addHandler(file_handler)

    return root
