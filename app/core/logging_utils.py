import logging
import json
import datetime as dt
from typing import Dict, Any, Optional, Set

# LogRecord attributes that are not user supplied "extra" fields
LOG_RECORD_BUILTIN_ATTRS: Set[str] = {
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "levelname", "levelno", "lineno", "module", "msecs",
    "message", "msg", "name", "pathname", "process", "processName",
    "relativeCreated", "stack_info", "thread", "threadName", "taskName",
}

class JSONLogFormatter(logging.Formatter):
    """
    Formats log records as one JSON object per line.

    `fmt_keys` maps output keys to LogRecord attribute names, e.g.
    {"level": "levelname", "logger": "name"}. Message and timestamp are
    always present; any `extra={...}` fields passed to the logger are appended.
    """
    def __init__(self, *, fmt_keys: Optional[Dict[str, str]] = None, datefmt: Optional[str] = None):
        super().__init__(datefmt=datefmt)
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(self._build_payload(record), default=str)

    def _timestamp(self, record: logging.LogRecord) -> str:
        if self.datefmt:
            return self.formatTime(record, self.datefmt)
        return dt.datetime.fromtimestamp(record.created, tz=dt.timezone.utc).isoformat()

    def _build_payload(self, record: logging.LogRecord) -> Dict[str, Any]:
        base: Dict[str, Any] = {
            "message": record.getMessage(),
            "timestamp": self._timestamp(record),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            base["stack_info"] = self.formatStack(record.stack_info)

        payload: Dict[str, Any] = {}
        for out_key, attr in self.fmt_keys.items():
            if attr in base:
                payload[out_key] = base.pop(attr)
            else:
                value = getattr(record, attr, None)
                if value is not None:
                    payload[out_key] = value
        payload.update(base)

        # Extra fields, e.g. logger.info("...", extra={"game_id": ...})
        mapped_attrs = set(self.fmt_keys.values())
        for key, value in record.__dict__.items():
            if key in LOG_RECORD_BUILTIN_ATTRS or key in payload or key in mapped_attrs:
                continue
            payload[key] = value
        return payload
