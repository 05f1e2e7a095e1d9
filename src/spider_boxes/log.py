import copy
import logging.config

from .consts import LOG_FILE_DEFAULT, LOG_LEVELS
from .utils import canonicalify, ensure_path

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": logging.INFO,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": logging.DEBUG,
            "formatter": "default",
            "filename": LOG_FILE_DEFAULT,
            "maxBytes": 5 * 1024 * 1024,  # 5MB
            "backupCount": 10,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        "spider_boxes": {
            "handlers": ["console", "file"],
            "level": logging.DEBUG,
            "propagate": True,
        },
        # Request logs of the API server end up in the same file.
        "uvicorn.access": {
            "handlers": ["file"],
            "level": logging.INFO,
            "propagate": True,
        },
    },
}


def build_config(logfile=None, level="INFO") -> dict:
    """Logging dict for ``logfile`` with the console at ``level``.

    The file handler always records DEBUG.
    """
    level = str(level).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    config = copy.deepcopy(LOGGING_CONFIG)
    config["handlers"]["console"]["level"] = level
    config["handlers"]["file"]["filename"] = str(canonicalify(logfile or LOG_FILE_DEFAULT))
    return config


def setup(logfile=None, level="INFO"):
    config = build_config(logfile, level)

    p = canonicalify(config["handlers"]["file"]["filename"])
    if len(p.parts) > 1:
        ensure_path(p.parent)

    logging.config.dictConfig(config)


logger = logging.getLogger("spider_boxes")
