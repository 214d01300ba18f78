import enum

import structlog

from config.env import env, env_to_enum


class LogFormat(enum.Enum):
    LOGFMT = "logfmt"
    JSON = "json"


DIDS_LOG_LEVEL = env.str("DIDS_LOG_LEVEL", default="INFO").upper()
DIDS_LOG_FORMAT = env_to_enum(LogFormat, env.str("DIDS_LOG_FORMAT", default="logfmt"))

timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
pre_chain = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    timestamper,
]


def _renderer(log_format: LogFormat):
    if log_format is LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    return structlog.processors.LogfmtRenderer()


def build_logging_config(level: str = DIDS_LOG_LEVEL, log_format: LogFormat = DIDS_LOG_FORMAT) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "root": {"level": level, "handlers": ["default"]},
        "loggers": {
            "src.dids": {"level": level},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
            },
        },
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": _renderer(log_format),
                "foreign_pre_chain": pre_chain,
            }
        },
    }


LOGGING = build_logging_config()
