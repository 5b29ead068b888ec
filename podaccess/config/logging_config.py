import logging
import logging.config
from pythonjsonlogger import json

from podaccess.config.app_config import APP_LOG_LEVEL, APP_LOG_FORMAT

# APP_LOG_LEVEL set in app config
LOG_LEVEL = APP_LOG_LEVEL

# JSON formatter for structured logs
class JsonFormatter(json.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["pathname"] = record.pathname
        log_record["lineno"] = record.lineno


def build_logging_config(level: str = LOG_LEVEL, fmt: str = APP_LOG_FORMAT) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": JsonFormatter,
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": fmt if fmt in ("json", "standard") else "json",
                "level": level,
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
    }


LOGGING_CONFIG = build_logging_config()


def setup_logging(level: str | None = None):
    """Apply the logging configuration"""
    if level is None:
        logging.config.dictConfig(LOGGING_CONFIG)
    else:
        logging.config.dictConfig(build_logging_config(level=level))
