import logging
import sys

from pythonjsonlogger import jsonlogger

from forecast_service.config import get_settings

settings = get_settings()

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s %(service)s %(version)s"


class ServiceContextFilter(logging.Filter):
    """Stamps every record with the service name and version."""

    def __init__(self, service: str, version: str):
        super().__init__()
        self.service = service
        self.version = version

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.version = self.version
        return True


def setup_logger(name: str) -> logging.Logger:
    """
    Set up a logger that writes one JSON object per line to stdout.

    Each line carries the service name and version next to the logger name,
    level and message, plus whatever the call site passes in ``extra``
    (by convention an ``event`` key and the city being fetched).

    Args:
        name: The name of the logger (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = getattr(logging, settings.log_level.upper())
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(ServiceContextFilter(settings.service_name, settings.app_version))
    handler.setFormatter(
        jsonlogger.JsonFormatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    )

    logger.addHandler(handler)
    logger.propagate = False

    return logger
