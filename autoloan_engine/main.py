"""Engine bootstrap for the request-handling layer"""

from typing import Optional

from autoloan_engine.config import settings
from autoloan_engine.domain.eligibility import get_default_criteria
from autoloan_engine.domain.models import EligibilityCriteria
from autoloan_engine.infrastructure.observability.logging import setup_logging


def configure(log_level: Optional[str] = None) -> EligibilityCriteria:
    """
    Set up structured logging and load the process-wide criteria.

    Call once at process start; the returned criteria are shared read-only.
    """
    setup_logging(log_level or settings.log_level)
    return get_default_criteria()
