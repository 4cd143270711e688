import logging
import logging.config
from pathlib import Path
from app.core.config import settings

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _rotating_file(filename: str, level: str) -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(Path(settings.LOG_DIR) / filename),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": LOG_BACKUPS,
    }


def build_logging_config() -> dict:
    """dictConfig for the API: console always, rotating app/error files when LOG_TO_FILE is set."""
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "detailed",
            "stream": "ext://sys.stdout",
        }
    }
    if settings.LOG_TO_FILE:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
        handlers["file"] = _rotating_file("app.log", settings.LOG_LEVEL)
        handlers["error_file"] = _rotating_file("error.log", "ERROR")
    handler_names = list(handlers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"detailed": {"format": FORMAT}},
        "handlers": handlers,
        "root": {"level": settings.LOG_LEVEL, "handlers": handler_names},
        "loggers": {
            # Services, repositories and middleware all log under "app".
            "app": {"level": settings.LOG_LEVEL, "handlers": handler_names, "propagate": False},
            "sqlalchemy.engine": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }


def configure_logging():
    logging.config.dictConfig(build_logging_config())
