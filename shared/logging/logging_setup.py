"""Logging for the dashboard: pytz timestamps, colored console, optional log file."""

from datetime import datetime
from pytz import timezone
import logging.config
import logging
import os
from logging import Logger


_ANSI_RESET = "\033[0m"
_COLOR_MAP: dict[str, str] = {
    "cyan":    "\033[36m",
    "green":   "\033[32m",
    "yellow":  "\033[33m",
    "red":     "\033[31m",
    "magenta": "\033[35m",
    "blue":    "\033[34m",
    "white":   "\033[37m",
}
# used when a record carries no explicit color
_LEVEL_COLORS: dict[int, str] = {
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "red",
}
_LEVEL_MARKERS: dict[int, str] = {
    logging.WARNING: "⚠️ ",
    logging.ERROR: "⛔ ",
    logging.CRITICAL: "⛔ ",
}


def _get_loglevel() -> int:
    level_name = os.getenv("LOG_LEVEL", "info").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


class CustomFormatter(logging.Formatter):
    """Timestamps in the configured timezone, warnings and errors get a marker."""

    def __init__(self, tz_name, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, self.tz)
        return dt.strftime(datefmt) if datefmt else dt.isoformat()

    def format(self, record):
        line = super().format(record)
        marker = _LEVEL_MARKERS.get(record.levelno)
        if marker is None:
            return line
        # the marker goes in front of the message, after timestamp and level
        message = record.getMessage()
        return line.replace(message, marker + message, 1) if message else line


class ColoredFormatter(CustomFormatter):
    """Console formatter. A ``color`` on the record wins over the level's color."""

    def format(self, record) -> str:
        line = super().format(record)
        color_name = getattr(record, "color", None) or _LEVEL_COLORS.get(record.levelno)
        ansi = _COLOR_MAP.get(color_name, "") if color_name else ""
        return f"{ansi}{line}{_ANSI_RESET}" if ansi else line


class ColorLogger(logging.LoggerAdapter):
    """Logger adapter that accepts an optional ``color=`` keyword on every log call::

        logger.info("Page %d of %d", 1, 3, color="cyan")

    Colors only reach the console handler. The log file stays plain text.
    """

    def __init__(self, logger: Logger):
        super().__init__(logger, {})

    def process(self, msg, kwargs):
        color = kwargs.pop("color", None)
        if color is not None:
            kwargs["extra"] = {**(kwargs.get("extra") or {}), "color": color}
        return msg, kwargs


def _get_log_dir() -> str | None:
    """LOG_DIR wins over ROOT_DIR/logs. Without either, only the console handler is configured."""
    if os.getenv("LOG_DIR"):
        return os.environ["LOG_DIR"]
    if os.getenv("ROOT_DIR"):
        return os.path.join(os.environ["ROOT_DIR"], "logs")
    return None


def setup_logging() -> ColorLogger:
    loglevel = _get_loglevel()
    tz_name = os.getenv("TIMEZONE", "Europe/Berlin")
    log_dir = _get_log_dir()

    line_format = "%(asctime)s - %(levelname)s - %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    handlers: dict = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "colored",
            "level": loglevel,
            "stream": "ext://sys.stdout",
        },
    }
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "level": loglevel,
            "filename": os.path.join(log_dir, "dashboard.log"),
            "encoding": "utf-8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"()": CustomFormatter, "format": line_format, "datefmt": date_format, "tz_name": tz_name},
            "colored": {"()": ColoredFormatter, "format": line_format, "datefmt": date_format, "tz_name": tz_name},
        },
        "handlers": handlers,
        "root": {"handlers": list(handlers), "level": loglevel},
    })

    # httpx logs every request at info level
    logging.getLogger("httpx").setLevel(logging.DEBUG if loglevel <= logging.DEBUG else logging.WARNING)

    return ColorLogger(logging.getLogger("dashboard"))
