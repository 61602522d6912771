import json
import logging
import os
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """Structured JSON log formatter.

    Dict messages are merged into the top-level payload; everything else lands
    under "message". Exception text goes under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "func": record.funcName,
            "line": record.lineno,
        }

        msg = record.msg
        if isinstance(msg, dict):
            payload.update(msg)
        else:
            payload["message"] = record.getMessage()

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once with the JSON formatter.

    Honors LOG_LEVEL when no level is given. If handlers already exist only
    their level and formatter are adjusted, so repeated calls do not duplicate
    output. Uvicorn's loggers are aligned to the same level.
    """
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    root = logging.getLogger()
    formatter = JsonFormatter()

    if root.handlers:
        for handler in root.handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
    else:
        handler = logging.StreamHandler()
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(numeric_level)


def preview(text: str, limit: int = 100) -> str:
    """Truncate long prompts for log lines."""
    return text[:limit] + "..." if len(text) > limit else text
