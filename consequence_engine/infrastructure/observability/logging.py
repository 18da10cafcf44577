"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from consequence_engine.config import settings


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


def log_analysis(
    request_id: str,
    scenario_id: str,
    scenario_type: str,
    success: bool,
    duration_ms: float,
    feasible: bool | None = None,
    risk_level: str | None = None,
    total_cost: float | None = None,
) -> None:
    """Log structured analysis outcome for review"""
    logging.info(
        "Consequence analysis completed",
        extra={
            "request_id": request_id,
            "scenario_id": scenario_id,
            "scenario_type": scenario_type,
            "step": "analysis_complete",
            "outcome": "success" if success else "failure",
            "feasible": feasible,
            "risk_level": risk_level,
            "total_cost": total_cost,
            "duration_ms": duration_ms,
        },
    )
