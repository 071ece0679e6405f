"""Logging configuration for services embedding neo-rbac.

Environment variables:
    LOG_LEVEL: explicit root level, wins over LOG_VERBOSITY
    LOG_VERBOSITY: QUIET, NORMAL, VERBOSE or DEBUG
    LOG_FORMAT: simple, detailed or json
    ENABLE_SQL_LOGGING: let asyncpg log below WARNING
    RBAC_LOG_LEVEL: level of the ``neo_rbac`` loggers only
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Dict, Optional

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LogVerbosity(str, Enum):
    """Verbosity modes mapped to a root level."""
    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_VERBOSITY_LEVELS: Dict[LogVerbosity, str] = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}

_FORMATS: Dict[LogFormat, str] = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}

# Third-party loggers held above the root level
_NOISY_LOGGERS: Dict[str, str] = {
    "httpx": "ERROR",
    "httpcore": "ERROR",
    "asyncio": "ERROR",
    "redis": "WARNING",
}


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Root level for a verbosity mode; unknown modes fall back to WARNING."""
    try:
        return _VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())]
    except ValueError:
        return "WARNING"


def _env_level(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value and value.upper() in _VALID_LEVELS:
        return value.upper()
    return None


class LoggingConfig:
    """Builds and applies the ``dictConfig`` for the process."""

    @classmethod
    def build_config(cls) -> dict:
        root_level = _env_level("LOG_LEVEL") or get_log_level_from_verbosity(
            os.getenv("LOG_VERBOSITY", "NORMAL")
        )

        try:
            format_string = _FORMATS[LogFormat(os.getenv("LOG_FORMAT", "simple").lower())]
        except ValueError:
            format_string = _FORMATS[LogFormat.SIMPLE]

        def quiet(level: str) -> dict:
            return {"level": level, "handlers": ["console"], "propagate": False}

        loggers = {name: quiet(level) for name, level in _NOISY_LOGGERS.items()}
        if os.getenv("ENABLE_SQL_LOGGING", "false").lower() != "true":
            loggers["asyncpg"] = quiet("WARNING")

        rbac_level = _env_level("RBAC_LOG_LEVEL")
        if rbac_level:
            loggers["neo_rbac"] = {"level": rbac_level}

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": format_string, "datefmt": "%Y-%m-%d %H:%M:%S"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": root_level, "handlers": ["console"]},
            "loggers": loggers,
        }

    @classmethod
    def configure(cls) -> None:
        config = cls.build_config()
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(f"Logging configured: level={config['root']['level']}")

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        logging.getLogger(module_name).setLevel(level.upper())


def setup_logging() -> None:
    """Configure logging from the environment. Call once at application startup."""
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
