"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from billing_service.config import settings

LOGGER_NAME = "billing_service"


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Logger handed to components at construction"""
    return logging.getLogger(name)


def log_payment(
    logger: logging.Logger,
    request_id: str,
    loan_id: str,
    amount: str,
    settled: bool,
    installments_settled: int,
    duration_ms: float,
) -> None:
    """Log structured settlement outcome for reconciliation"""
    logger.info(
        "Payment processed",
        extra={
            "request_id": request_id,
            "loan_id": loan_id,
            "step": "payment_complete",
            "payment_outcome": "settled" if settled else "rejected",
            "amount": amount,
            "installments_settled": installments_settled,
            "duration_ms": duration_ms,
        },
    )
