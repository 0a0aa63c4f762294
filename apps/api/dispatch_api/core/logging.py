"""
Logging configuration for the dispatch scheduler API
"""
import logging
import logging.config
import sys

from pythonjsonlogger import jsonlogger

from dispatch_api.core.config import settings


def setup_logging(level: str = None, json_output: bool = None):
    """Configure root and library loggers once at startup."""
    level = (level or settings.log_level).upper()
    json_output = settings.log_json if json_output is None else json_output

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(funcName)s %(lineno)d",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "json" if json_output else "standard",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "": {
                "level": level,
                "handlers": ["console"],
            },
            "dispatch_api": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)
    logging.getLogger(__name__).debug("logging configured (level=%s, json=%s)", level, json_output)
