"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "payoff-planner"


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


def log_comparison(
    request_id: str,
    debt_count: int,
    recommended: str,
    interest_delta: str,
    duration_ms: float,
) -> None:
    """Log structured comparison outcome for analysis"""
    logging.info(
        "Comparison completed",
        extra={
            "request_id": request_id,
            "step": "comparison_complete",
            "debt_count": debt_count,
            "recommended": recommended,
            "interest_delta": interest_delta,
            "duration_ms": duration_ms,
        },
    )
