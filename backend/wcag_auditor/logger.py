"""
Logging configuration.
"""
import logging
import os
import sys

# Create logger
logger = logging.getLogger("wcag_auditor")
logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

# Console handler on stderr, stdout carries the report
console_handler = logging.StreamHandler(sys.stderr)
console_handler.setLevel(logging.DEBUG)

# Formatter
formatter = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
console_handler.setFormatter(formatter)

# Add handler
if not logger.handlers:
    logger.addHandler(console_handler)


def set_level(level: str) -> None:
    """Change the log level at runtime (CLI --verbose)."""
    logger.setLevel(level.upper())
