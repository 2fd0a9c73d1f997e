"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger

from autoloan_engine.config import settings


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


def log_vehicle_prepared(vin: str, manufacturer: Optional[str], model_year: Optional[int], enriched: bool) -> None:
    """Log outcome of vehicle onboarding"""
    logging.info(
        "Vehicle prepared",
        extra={
            "step": "vehicle_onboarding",
            "vin": vin,
            "decoded_manufacturer": manufacturer,
            "decoded_model_year": model_year,
            "enriched": enriched,
        },
    )


def log_eligibility_decision(
    application_id: str,
    is_eligible: bool,
    reasons: List[str],
    duration_ms: float,
) -> None:
    """Log structured eligibility outcome for analysis"""
    logging.info(
        "Eligibility evaluated",
        extra={
            "application_id": application_id,
            "step": "eligibility_complete",
            "eligibility_outcome": "eligible" if is_eligible else "ineligible",
            "reason_count": 0 if is_eligible else len(reasons),
            "duration_ms": duration_ms,
        },
    )


def log_offer_calculated(
    application_id: str,
    loan_amount: float,
    term_months: int,
    interest_rate: float,
    monthly_payment: int,
) -> None:
    """Log priced offer terms"""
    logging.info(
        "Offer calculated",
        extra={
            "application_id": application_id,
            "step": "offer_complete",
            "loan_amount": loan_amount,
            "term_months": term_months,
            "interest_rate": interest_rate,
            "monthly_payment": monthly_payment,
        },
    )
