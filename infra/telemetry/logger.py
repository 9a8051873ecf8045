import logging
import json
import sys
from typing import Dict, Any
from .base import TelemetrySink

LEVELS = {
    "failure": logging.ERROR,
    "skipped": logging.WARNING,
    "noop": logging.DEBUG,
}

class LoggerSink(TelemetrySink):
    def __init__(self, log_file=None, stream=None, level=logging.INFO):
        self._logger = logging.Logger(
            "RemoteReg.LoggerSink",
            level=level
        )

        handlers = [logging.StreamHandler(stream or sys.stderr)]
        if log_file:
            handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

        formatter = logging.Formatter('%(message)s')
        for h in handlers:
            h.setFormatter(formatter)
            self._logger.addHandler(h)

    def emit(self, event: str, payload: Dict[str, Any]) -> None:
        level = LEVELS.get(payload.get("result"), logging.INFO)

        log_entry = {
            "event": event,
            **payload
        }

        self._logger.log(
            level,
            json.dumps(log_entry, default=str, ensure_ascii=False)
        )
