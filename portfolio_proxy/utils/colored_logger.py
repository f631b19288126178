"""
Colored logging configuration for terminal output.
Provides colored output for the traffic of each upstream provider.
"""

import logging
import sys
from typing import Optional, Union


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'


# Loggers whose records may contain full request URLs
TRANSPORT_LOGGERS = ('httpx', 'httpcore')

# Provider-specific colors
PROVIDER_COLORS = {
    'chatbot': Colors.GREEN,
    'weather': Colors.BRIGHT_BLUE,
    'stock': Colors.CYAN,
    'sports': Colors.YELLOW,
    'discord': Colors.BRIGHT_MAGENTA,
    'http': Colors.BLUE,
    'default': Colors.WHITE
}


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log output."""

    LEVEL_COLORS = {
        'DEBUG': Colors.BRIGHT_BLACK,
        'INFO': Colors.WHITE,
        'WARNING': Colors.YELLOW,
        'ERROR': Colors.RED,
        'CRITICAL': Colors.BRIGHT_RED + Colors.BOLD,
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        """
        Initialize colored formatter.

        Args:
            fmt: Log format string
            datefmt: Date format string
        """
        if fmt is None:
            fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        if datefmt is None:
            datefmt = '%Y-%m-%d %H:%M:%S'
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with colors.

        Warnings and errors keep their level color even when the record
        carries a provider tag.

        Args:
            record: Log record

        Returns:
            Formatted and colored log message
        """
        level_color = self.LEVEL_COLORS.get(record.levelname, Colors.WHITE)

        provider_color = None
        if hasattr(record, 'provider_type') and record.levelno < logging.WARNING:
            provider_color = PROVIDER_COLORS.get(record.provider_type, PROVIDER_COLORS['default'])

        formatted = super().format(record)
        return f"{provider_color or level_color}{formatted}{Colors.RESET}"


class ProviderLogger:
    """Logger wrapper tagging records with the upstream provider they concern."""

    def __init__(self, logger: logging.Logger, provider_type: str):
        """
        Initialize provider logger.

        Args:
            logger: Base logger
            provider_type: Provider tag (weather, stock, sports, discord, chatbot, http)
        """
        self.logger = logger
        self.provider_type = provider_type

    def _log(self, level: int, msg: str, *args, **kwargs):
        """Log with provider type extra."""
        extra = kwargs.get('extra', {})
        extra['provider_type'] = self.provider_type
        kwargs['extra'] = extra
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        """Log info message."""
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message."""
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message."""
        self._log(logging.ERROR, msg, *args, **kwargs)


def setup_colored_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Setup colored logging for the application.

    Args:
        level: Logging level, either numeric or a name such as "DEBUG"
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    quiet_transport_loggers()


def get_provider_logger(name: str, provider_type: str) -> ProviderLogger:
    """
    Get a provider logger with colored output.

    Args:
        name: Logger name (usually __name__)
        provider_type: Provider tag (weather, stock, sports, discord, chatbot, http)

    Returns:
        ProviderLogger instance
    """
    return ProviderLogger(logging.getLogger(name), provider_type)


def quiet_transport_loggers() -> None:
    """Keep HTTP transport libraries at WARNING.

    httpx logs every request URL at INFO, and provider keys travel in the
    query string.
    """
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
