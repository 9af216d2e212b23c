import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any

from pythonjsonlogger import jsonlogger


RUN_CONTEXT_FIELDS = ("run_id", "executable", "exit_code", "pid")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        for field_name in RUN_CONTEXT_FIELDS:
            if hasattr(record, field_name):
                log_record[field_name] = getattr(record, field_name)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


class ContextFilter(logging.Filter):
    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.context = context or {}

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.context.items():
            setattr(record, key, value)
        return True


def get_logging_config(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = True,
    log_dir: Optional[str] = None
) -> Dict[str, Any]:
    handlers_config = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "stream": "ext://sys.stderr",
            "formatter": "json" if json_format else "standard",
        }
    }

    if log_file or log_dir:
        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            log_file = str(log_path / "toolexec.log")

        handlers_config["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "filename": log_file,
            "maxBytes": 10485760,
            "backupCount": 5,
            "formatter": "json" if json_format else "standard",
        }

    handler_names = list(handlers_config.keys())

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(timestamp)s %(level)s %(name)s %(message)s",
            },
        },
        "handlers": handlers_config,
        "loggers": {
            "toolexec": {
                "handlers": handler_names,
                "level": log_level,
                "propagate": False,
            },
            "asyncio": {
                "handlers": handler_names,
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = True,
    log_dir: Optional[str] = None
) -> None:
    config = get_logging_config(
        log_level=log_level,
        log_file=log_file,
        json_format=json_format,
        log_dir=log_dir
    )
    logging.config.dictConfig(config)


def setup_logging_from_settings() -> None:
    from toolexec.common.config.settings import get_settings

    settings = get_settings()
    setup_logging(
        log_level=settings.log_level,
        json_format=settings.json_logs,
        log_dir=settings.log_dir,
    )


def get_logger(
    name: str,
    context: Optional[Dict[str, Any]] = None
) -> logging.Logger:
    logger = logging.getLogger(name)

    if context:
        context_filter = ContextFilter(context)
        logger.addFilter(context_filter)

    return logger


class LoggerAdapter(logging.LoggerAdapter):
    def __init__(
        self,
        logger: logging.Logger,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(logger, extra or {})

    def process(
        self,
        msg: str,
        kwargs: Dict[str, Any]
    ) -> tuple:
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def get_run_logger(
    run_id: str,
    executable: Optional[str] = None,
) -> LoggerAdapter:
    logger = get_logger("toolexec.run")
    extra: Dict[str, Any] = {"run_id": run_id}
    if executable:
        extra["executable"] = executable
    return LoggerAdapter(logger, extra)
