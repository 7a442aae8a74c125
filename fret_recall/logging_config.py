"""Centralized logging configuration for Fret Recall.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "fret_recall": logging.INFO,
    "fret_recall.cli": logging.INFO,
    # Pitch pipeline, set to DEBUG for per-frame output
    "fret_recall.detection": logging.INFO,
    "fret_recall.note_matcher": logging.INFO,
    "fret_recall.question_generator": logging.INFO,
    "fret_recall.note_game_core": logging.INFO,
    "fret_recall.core": logging.INFO,
    "fret_recall.audio": logging.INFO,
    "fret_recall.logger": logging.WARNING,  # Logger module itself should be quiet
    # Libraries/third-party
    "aubio": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'fret_recall' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("fret_recall"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        # Swap any existing handlers for the shared one
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.addHandler(_console_handler)
        logger.propagate = False

    logging.getLogger("fret_recall").info("Logging configuration complete")
