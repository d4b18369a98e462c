"""
Logging setup: JSON lines in staging and production, plain text in development.
"""
import logging
import sys

from pythonjsonlogger import jsonlogger

from core.config import settings


DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping every record with its source and the deployment."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = self.formatTime(record, self.datefmt)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['location'] = f"{record.module}.{record.funcName}:{record.lineno}"
        log_record['service'] = settings.app_name
        log_record['environment'] = settings.app_env


def build_formatter(use_json: bool) -> logging.Formatter:
    if use_json:
        return ServiceJsonFormatter('%(message)s', datefmt=DATE_FORMAT)
    return logging.Formatter('%(asctime)s %(levelname)-8s %(name)s: %(message)s', datefmt=DATE_FORMAT)


def setup_logging() -> None:
    """Replace the root handlers with one stdout handler at the configured level."""
    use_json = not settings.is_development

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(use_json))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    # SQL echo only when debugging locally
    sql_level = logging.INFO if settings.is_development and settings.debug else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.info(
        "Logging configured",
        extra={"log_level": settings.log_level, "json_logging": use_json},
    )
