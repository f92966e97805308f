"""
Logging setup for the API process.
JSON lines in production, a readable single-line format everywhere else.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from core.config_loader import settings


class JSONFormatter(logging.Formatter):
    def __init__(self, service_name: str = "staffdesk-api"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": settings.ENVIRONMENT,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    level = (log_level or settings.LOG_LEVEL).upper()
    use_json = json_logs if json_logs is not None else settings.ENVIRONMENT.lower() == "production"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"))
    root_logger.addHandler(handler)

    # third-party noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger("staffdesk").info(
        "logging configured: level=%s, format=%s", level, "json" if use_json else "text"
    )
