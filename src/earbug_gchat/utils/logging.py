import sys
import structlog
import orjson
from typing import Any, Dict


def add_gcp_severity(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Cloud Logging reads the level from `severity`."""
    level = event_dict.get("level", method_name)
    event_dict["severity"] = "WARNING" if level == "warn" else str(level).upper()
    return event_dict


def orjson_dumps(*args: Any, **kwargs: Any) -> str:
    """ProcessorFormatter needs str, orjson gives bytes."""
    return orjson.dumps(*args, **kwargs).decode()


def setup_logging(debug: bool = False) -> Dict[str, Any]:
    """
    Combines Uvicorn, httpx and Structlog into a single JSON stream (or colored text in DEV).
    """

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        shared_processors.append(add_gcp_severity)
        renderer = structlog.processors.JSONRenderer(serializer=orjson_dumps)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json_formatter": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": renderer,
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json_formatter",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "DEBUG" if debug else "INFO",
        },
        "loggers": {
            "uvicorn": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "httpx": {"handlers": ["console"], "level": "WARNING", "propagate": False},
            "google": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        }
    }

    return config
