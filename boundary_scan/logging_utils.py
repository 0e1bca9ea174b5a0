import logging
import json
import os
import hashlib
import time
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from .models import LogEntry, ComponentType, EventType

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class ScanJSONFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(ScanJSONFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = time.time()
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname


def get_logger(name: str):
    logger = logging.getLogger(name)
    # Handlers are attached once per logger name
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = ScanJSONFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    logger.propagate = False
    return logger


class StructuredLogger:
    def __init__(self, component: ComponentType):
        self.logger = get_logger(component.value)
        self.component = component

    def hash_payload(self, payload: Any) -> str:
        """Create a short hash of the payload for correlation."""
        dumped = json.dumps(payload, sort_keys=True, default=str)
        return hashlib.md5(dumped.encode()).hexdigest()[:16]

    def log_event(self,
                  run_id: str,
                  event_type: EventType,
                  payload: Any,
                  metrics: Optional[Dict[str, Any]] = None,
                  level: int = logging.INFO):

        entry = LogEntry(
            run_id=run_id,
            component=self.component,
            event_type=event_type,
            payload_hash=self.hash_payload(payload),
            metrics=metrics or {},
            message=str(payload)[:200]
        )

        self.logger.log(level, json.dumps(entry.model_dump(), default=str))
