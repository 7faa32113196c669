"""Logging setup for deployments and teardown handlers."""

import json
import logging

from rich.console import Console
from rich.logging import RichHandler


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Used when logs are shipped line by line (e.g. Lambda to CloudWatch).
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields attached by add-ons and cleanup steps
        if hasattr(record, "addon"):
            log_data["addon"] = record.addon
        if hasattr(record, "step"):
            log_data["step"] = record.step

        return json.dumps(log_data)


def setup_logging(
    log_level: str = "info", json_output: bool = False, console: Console | None = None
) -> None:
    """Configure root logging.

    Args:
        log_level: Logging level (debug, info, warning, error)
        json_output: Emit one JSON object per line instead of Rich console output
        console: Optional Rich console for the console handler
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler: logging.Handler
    if json_output:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,  # Override any existing config
    )
