# boardshelf/utils/logging.py

import logging
from datetime import datetime

from colorama import Fore, Style

LEVEL_COLORS = {
    logging.DEBUG: Fore.WHITE,
    logging.INFO: Fore.CYAN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.MAGENTA,
}

_logger = logging.getLogger("boardshelf")


def timestamp() -> str:
    return f"[{datetime.now():%Y-%m-%d %H:%M:%S}]"


class ColorFormatter(logging.Formatter):
    """`[2024-01-01 12:00:00] [INFO] name: message`, colored by level.

    A record may carry its own `color` (see `log_success`).
    """

    def format(self, record: logging.LogRecord) -> str:
        color = getattr(record, "color", None) or LEVEL_COLORS.get(record.levelno, "")
        label = getattr(record, "label", None) or record.levelname
        line = f"{timestamp()} [{label}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return color + line + Style.RESET_ALL


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(isinstance(h.formatter, ColorFormatter) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(ColorFormatter())
        root.addHandler(handler)


def log_info(msg: str):
    _logger.info(msg)


def log_success(msg: str):
    _logger.info(msg, extra={"color": Fore.GREEN, "label": "SUCCESS"})


def log_warning(msg: str):
    _logger.warning(msg)


def log_error(msg: str):
    _logger.error(msg)
