"""Loan submission - eligibility gate before an application is accepted"""

import time
from datetime import datetime
from typing import Any, Dict, Optional, Union

from autoloan_engine.domain.eligibility import ValuationLookup, VehicleLookup, evaluate
from autoloan_engine.domain.exceptions import IneligibleLoanError
from autoloan_engine.domain.models import EligibilityCriteria, EligibilityVerdict, LoanApplication
from autoloan_engine.infrastructure.observability.logging import log_eligibility_decision
from autoloan_engine.infrastructure.observability.metrics import record_eligibility
from autoloan_engine.schemas import LoanApplicationSubmission, parse_submission


def to_loan_application(submission: Union[LoanApplication, LoanApplicationSubmission, Dict[str, Any]]) -> LoanApplication:
    """Validate raw input into a LoanApplication; dataclass instances pass through"""
    if isinstance(submission, LoanApplication):
        return submission
    parsed = parse_submission(LoanApplicationSubmission, submission)
    return LoanApplication(**parsed.model_dump())


def submit_loan_application(
    submission: Union[LoanApplication, LoanApplicationSubmission, Dict[str, Any]],
    vehicle_lookup: VehicleLookup,
    valuation_lookup: ValuationLookup,
    criteria: Optional[EligibilityCriteria] = None,
    reference_year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> EligibilityVerdict:
    """
    Accept a loan application only if it passes every eligibility rule.

    Returns the ELIGIBLE verdict so the caller can persist it alongside
    the application.

    Raises:
        InvalidApplicationError: Malformed submission
        IneligibleLoanError: At least one rule failed; carries every reason
    """
    start_time = time.time()
    application = to_loan_application(submission)

    verdict = evaluate(
        application,
        vehicle_lookup,
        valuation_lookup,
        criteria=criteria,
        reference_year=reference_year,
        now=now,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_eligibility(verdict.is_eligible, verdict.violated_rules)
    log_eligibility_decision(application.id, verdict.is_eligible, verdict.reasons, duration_ms)

    if not verdict.is_eligible:
        raise IneligibleLoanError(verdict.reasons, verdict.details.to_dict())

    return verdict
