# barbershop/logging_config.py

from logging.config import dictConfig


def configure_logging(level: str = "INFO") -> None:
    level = level.upper()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                    "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "level": level,
                }
            },
            "loggers": {
                "barbershop": {"handlers": ["console"], "level": level, "propagate": False},
            },
        }
    )
