#!/usr/bin/env python3

import logging
import logging.config
from typing import Optional

from pythonjsonlogger import jsonlogger

from .config import schema_config


def setup_logging(level: Optional[str] = None):
    """Setup JSON logging configuration"""
    level = (level or schema_config.LOG_LEVEL).upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(schema_uri)s %(locator)s %(prop_uri)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False
            },
            "annotation_schema": {
                "handlers": ["console"],
                "level": level,
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)
