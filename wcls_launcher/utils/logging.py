"""Logging configuration for the language server launcher.

Provides centralized logging with token redaction so GitHub credentials
are never written to log files. Console output goes to stderr because
stdout carries the language server protocol.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional, Union


# Secret patterns to redact from logs
SECRET_PATTERNS = [
    # Authorization headers
    (re.compile(r'(authorization["\s:=]+(?:bearer|token)\s+)\S+', re.IGNORECASE), r'\1[REDACTED]'),
    # GitHub token formats
    (re.compile(r'\bgh[pousr]_[A-Za-z0-9]{20,}\b'), '[REDACTED]'),
    (re.compile(r'\bgithub_pat_[A-Za-z0-9_]{20,}\b'), '[REDACTED]'),
    # token=... in URLs or key/value text
    (re.compile(r'(token["\s:=]+)[^\s,}\]&]+', re.IGNORECASE), r'\1[REDACTED]'),
]


class RedactingFormatter(logging.Formatter):
    """Custom formatter that redacts secrets from log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting any secrets."""
        message = super().format(record)
        for pattern, replacement in SECRET_PATTERNS:
            message = pattern.sub(replacement, message)
        return message


def parse_level(level: Union[int, str]) -> int:
    """Convert a level name ("debug", "WARNING") or number to a logging level."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure launcher logging with secret redaction.

    Args:
        level: Logging level or level name (default INFO)
        log_file: Optional file path for log output
        console: Whether to output to stderr (default True)

    Returns:
        Configured logger instance
    """
    level = parse_level(level)
    logger = logging.getLogger("wcls_launcher")
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = RedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
