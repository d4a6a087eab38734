"""
Colored logging formatter for the record generator.

Console output gets one color per level, plus highlighting for the
progress and success lines a generation run prints.
"""

import logging
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """
    Logging formatter that adds ANSI color codes to log messages.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }

    SUCCESS = '\033[92m'      # Bright Green
    PROGRESS = '\033[94m'     # Bright Blue
    HIGHLIGHT = '\033[96m'    # Bright Cyan

    RESET = '\033[0m'
    BOLD = '\033[1m'

    # Prefixes written by the log_* helpers below
    SUCCESS_MARK = "✓"
    PROGRESS_MARK = "→"
    HIGHLIGHT_MARK = "•"
    SECTION_MARK = "="

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        """
        Args:
            fmt: Log format string (uses default if None)
            use_colors: Whether to use colors; ignored when stderr is not a TTY
        """
        if fmt is None:
            fmt = "%(levelname)s: %(message)s"
        super().__init__(fmt)
        self.use_colors = use_colors and hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted_message = super().format(record)
        if not self.use_colors:
            return formatted_message

        if record.levelno >= logging.WARNING:
            return f"{self.COLORS[record.levelname]}{formatted_message}{self.RESET}"

        message = record.getMessage().lstrip()
        if message.startswith(self.SUCCESS_MARK):
            return f"{self.SUCCESS}{self.BOLD}{formatted_message}{self.RESET}"
        if message.startswith(self.PROGRESS_MARK) or message.startswith("Generating:"):
            return f"{self.PROGRESS}{formatted_message}{self.RESET}"
        if message.startswith(self.HIGHLIGHT_MARK):
            return f"{self.HIGHLIGHT}{formatted_message}{self.RESET}"
        if message.startswith(self.SECTION_MARK * 10) or message.isupper():
            return f"{self.BOLD}{self.HIGHLIGHT}{formatted_message}{self.RESET}"
        if record.levelno == logging.DEBUG:
            return f"{self.COLORS['DEBUG']}{formatted_message}{self.RESET}"
        return formatted_message


def setup_colored_logging(level: int = logging.INFO, use_colors: bool = True) -> None:
    """
    Set up colored console logging on the root logger.

    Args:
        level: Logging level (default: INFO)
        use_colors: Whether to use colors (default: True)
    """
    formatter = ColoredFormatter(use_colors=use_colors)
    root_logger = logging.getLogger()

    # Remove existing handlers to avoid duplication
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)


def log_success(logger: logging.Logger, message: str) -> None:
    logger.info(f"{ColoredFormatter.SUCCESS_MARK} {message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    logger.info(f"{ColoredFormatter.PROGRESS_MARK} {message}")


def log_highlight(logger: logging.Logger, message: str) -> None:
    logger.info(f"{ColoredFormatter.HIGHLIGHT_MARK} {message}")


def log_section(logger: logging.Logger, section_name: str) -> None:
    """Log a section header."""
    separator = ColoredFormatter.SECTION_MARK * 60
    logger.info(separator)
    logger.info(f"  {section_name.upper()}")
    logger.info(separator)
