"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from vaultswipe.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_command(
    request_id: str,
    command: str,
    accepted: bool,
    reason: Optional[str] = None,
    **fields: Any,
) -> None:
    """Log one ledger command outcome; rejections at WARNING"""
    extra = {
        "request_id": request_id,
        "command": command,
        "outcome": "accepted" if accepted else "rejected",
        **fields,
    }
    if reason:
        extra["reason"] = reason

    if accepted:
        logging.info(f"Command {command} applied", extra=extra)
    else:
        logging.warning(f"Command {command} rejected", extra=extra)


def log_transfer(
    request_id: str,
    variant: str,
    direction: str,
    amount: str,
    applied: bool,
    reason: Optional[str] = None,
) -> None:
    """Log a balance transfer for later reconciliation"""
    logging.info(
        "Transfer completed" if applied else "Transfer rejected",
        extra={
            "request_id": request_id,
            "step": "transfer",
            "variant": variant,
            "direction": direction,
            "amount": amount,
            "outcome": "applied" if applied else "rejected",
            "reason": reason,
        },
    )
