"""Structured logging setup for batch jobs."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from leadgen.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName
        }
        if hasattr(record, "duration"):
            log_entry["duration_seconds"] = record.duration
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_job_logging(
    job_name: str,
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.INFO
) -> Path:
    """
    Configure the root logger for a job run.

    Adds a JSON file handler writing to <log_dir>/<job_name>.log and a plain
    console handler. Calling it twice for the same job does not duplicate
    handlers.

    Args:
        job_name: Job name, used for the log file name
        log_dir: Directory for log files (uses settings if not provided)
        level: Root log level

    Returns:
        Path of the JSON log file
    """
    log_dir = Path(log_dir) if log_dir else settings.logs_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{job_name}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        if getattr(handler, "_leadgen_job", None) == job_name:
            return log_file

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(JSONFormatter())
    file_handler._leadgen_job = job_name

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler._leadgen_job = job_name

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    return log_file
