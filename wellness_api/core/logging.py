import logging
import logging.config
import os
from datetime import datetime

from pytz import timezone

from wellness_api.core.config import Settings


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders asctime in a configured timezone."""

    def __init__(self, tz_name, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.tz = timezone(tz_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, self.tz)
        return dt.strftime(datefmt) if datefmt else dt.isoformat()


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure root logging once for the whole process."""
    debug_mode = settings.log_level.lower() == "debug"
    loglevel = logging.getLevelName(settings.log_level.upper())
    if not isinstance(loglevel, int):
        loglevel = logging.INFO

    formatter = {
        "()": TimezoneFormatter,
        "fmt": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        "datefmt": "%Y-%m-%d %H:%M:%S",
        "tz_name": settings.timezone,
    }
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": loglevel,
            "stream": "ext://sys.stdout",
        },
    }
    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "standard",
            "level": loglevel,
            "filename": os.path.join(settings.log_dir, "app.log"),
            "encoding": "utf-8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": formatter},
        "handlers": handlers,
        "root": {"handlers": list(handlers), "level": loglevel},
    })

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug_mode else logging.WARNING)

    return logging.getLogger("wellness_api")
