"""Loan eligibility rules - reports every violated criterion, not just the first"""

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, List, Optional, Tuple

from autoloan_engine.config import settings
from autoloan_engine.domain.exceptions import VehicleNotFoundError
from autoloan_engine.domain.models import (
    EligibilityCriteria,
    EligibilityDetails,
    EligibilityStatus,
    EligibilityVerdict,
    LoanApplication,
    LoanRequest,
    Valuation,
    Vehicle,
    Violation,
    UNEMPLOYED,
)
from autoloan_engine.domain.offers import calculate_monthly_payment
from autoloan_engine.utils.date_utils import age_in_days, vehicle_age_years
from autoloan_engine.utils.money import floor_currency, format_currency

logger = logging.getLogger(__name__)

ALL_CRITERIA_MET = "All eligibility criteria met."
SYSTEM_ERROR_REASON = "Unable to complete eligibility check due to system error."
SYSTEM_ERROR_RECOMMENDATION = "Please try again later or contact support."
SYSTEM_ERROR_RULE = "system_error"

VehicleLookup = Callable[[str], Optional[Vehicle]]
ValuationLookup = Callable[[str], Optional[Valuation]]
EligibilityCheck = Callable[[LoanRequest, EligibilityCriteria], Optional[Violation]]


@lru_cache(maxsize=1)
def get_default_criteria() -> EligibilityCriteria:
    """Criteria built from process settings, loaded once"""
    return EligibilityCriteria.from_settings(settings)


def _naira(amount: float) -> str:
    return f"₦{format_currency(amount)}"


def _percent(ratio: float) -> str:
    return f"{ratio * 100:.1f}%"


def is_valuation_fresh(request: LoanRequest, criteria: EligibilityCriteria) -> bool:
    return (
        request.valuation_age_days is not None
        and request.valuation_age_days <= criteria.max_valuation_age_days
    )


def loan_to_value_ratio(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[float]:
    """LTV against a fresh valuation; None when no usable valuation exists"""
    if request.valuation_unavailable or request.vehicle_value is None:
        return None
    if not is_valuation_fresh(request, criteria):
        return None
    if request.vehicle_value <= 0:
        return float("inf")
    return request.loan_amount / request.vehicle_value


def debt_to_income_ratio(request: LoanRequest, criteria: EligibilityCriteria) -> float:
    """Hypothetical payment at the configured DTI base rate over monthly income"""
    payment = calculate_monthly_payment(
        request.loan_amount,
        criteria.base_annual_rate_for_dti,
        request.term_months,
    )
    if request.monthly_income <= 0:
        return float("inf")
    return payment / request.monthly_income


def check_vehicle_age(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    if request.vehicle_age_years <= criteria.max_vehicle_age_years:
        return None
    return Violation(
        rule="vehicle_age",
        reason=(
            f"Vehicle is too old ({request.vehicle_age_years} years). "
            f"Maximum allowed age is {criteria.max_vehicle_age_years} years."
        ),
        recommendation="Consider a newer vehicle for loan eligibility.",
    )


def check_employment(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    if request.employment_status != UNEMPLOYED:
        return None
    return Violation(
        rule="employment",
        reason="Employment status is unemployed. Loan requires stable income source.",
        recommendation="Please provide proof of employment or alternative income source.",
    )


def check_min_income(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    if request.monthly_income >= criteria.min_monthly_income:
        return None
    return Violation(
        rule="min_income",
        reason=(
            f"Monthly income ({_naira(request.monthly_income)}) is below minimum "
            f"requirement ({_naira(criteria.min_monthly_income)})."
        ),
        recommendation=f"Minimum monthly income of {_naira(criteria.min_monthly_income)} is required.",
    )


def check_loan_term(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    if request.term_months in criteria.valid_term_months:
        return None
    valid_terms = ", ".join(str(term) for term in sorted(criteria.valid_term_months))
    return Violation(
        rule="loan_term",
        reason=f"Loan term {request.term_months} months is not valid. Valid terms are: {valid_terms} months.",
        recommendation=f"Choose from available loan terms: {valid_terms} months.",
    )


def check_min_loan_amount(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    if request.loan_amount >= criteria.min_loan_amount:
        return None
    return Violation(
        rule="min_loan_amount",
        reason=(
            f"Requested amount ({_naira(request.loan_amount)}) is below minimum "
            f"({_naira(criteria.min_loan_amount)})."
        ),
        recommendation=f"Minimum loan amount is {_naira(criteria.min_loan_amount)}.",
    )


def check_max_loan_amount(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    if request.loan_amount <= criteria.max_loan_amount:
        return None
    return Violation(
        rule="max_loan_amount",
        reason=(
            f"Requested amount ({_naira(request.loan_amount)}) exceeds maximum "
            f"({_naira(criteria.max_loan_amount)})."
        ),
        recommendation=f"Maximum loan amount is {_naira(criteria.max_loan_amount)}.",
    )


def check_loan_to_value(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    """
    LTV requires the latest valuation.

    Missing, unavailable and stale valuations each fail on their own;
    freshness gates only the ratio comparison.
    """
    if request.valuation_unavailable:
        return Violation(
            rule="valuation_unavailable",
            reason="Unable to retrieve vehicle valuation. Valuation is required for loan processing.",
            recommendation="Please ensure vehicle valuation is available and try again.",
        )

    if request.vehicle_value is None:
        return Violation(
            rule="no_valuation",
            reason="No vehicle valuation found. Vehicle valuation is required for loan processing.",
            recommendation="Please request a vehicle valuation before applying for a loan.",
        )

    if not is_valuation_fresh(request, criteria):
        return Violation(
            rule="stale_valuation",
            reason=(
                f"Vehicle valuation is older than {criteria.max_valuation_age_days} days. "
                "A recent valuation is required."
            ),
            recommendation="Please request a new vehicle valuation.",
        )

    ltv = loan_to_value_ratio(request, criteria)
    if ltv <= criteria.max_loan_to_value:
        return None

    max_amount = floor_currency(request.vehicle_value * criteria.max_loan_to_value)
    return Violation(
        rule="loan_to_value",
        reason=(
            f"Loan-to-Value ratio ({_percent(ltv)}) exceeds maximum allowed "
            f"({criteria.max_loan_to_value * 100:g}%)."
        ),
        recommendation=f"Consider reducing loan amount to {_naira(max_amount)} or less.",
    )


def check_debt_to_income(request: LoanRequest, criteria: EligibilityCriteria) -> Optional[Violation]:
    dti = debt_to_income_ratio(request, criteria)
    if dti <= criteria.max_debt_to_income:
        return None

    payment_ceiling = floor_currency(max(request.monthly_income, 0) * criteria.max_debt_to_income)
    return Violation(
        rule="debt_to_income",
        reason=(
            f"Debt-to-Income ratio ({_percent(dti)}) exceeds maximum allowed "
            f"({criteria.max_debt_to_income * 100:g}%)."
        ),
        recommendation=(
            "Consider reducing loan amount or extending loan term to lower monthly "
            f"payment below {_naira(payment_ceiling)}."
        ),
    )


# Every check runs for every request; order fixes the order of reported reasons
ELIGIBILITY_CHECKS: Tuple[EligibilityCheck, ...] = (
    check_vehicle_age,
    check_employment,
    check_min_income,
    check_loan_term,
    check_min_loan_amount,
    check_max_loan_amount,
    check_loan_to_value,
    check_debt_to_income,
)


def build_loan_request(
    application: LoanApplication,
    vehicle_lookup: VehicleLookup,
    latest_valuation_lookup: ValuationLookup,
    reference_year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> LoanRequest:
    """
    Resolve the vehicle and its latest valuation into an evaluation snapshot.

    A missing vehicle raises. A failing valuation lookup is recorded on the
    snapshot so the LTV rule can report it.

    Raises:
        VehicleNotFoundError: vehicle lookup returned nothing
    """
    vehicle = vehicle_lookup(application.vehicle_id)
    if vehicle is None:
        raise VehicleNotFoundError(f"Vehicle with ID {application.vehicle_id} not found")

    vehicle_value = None
    valuation_age = None
    valuation_unavailable = False
    try:
        valuation = latest_valuation_lookup(application.vehicle_id)
    except Exception as e:
        logger.warning(f"Could not retrieve valuation for vehicle {application.vehicle_id}: {e}")
        valuation_unavailable = True
    else:
        if valuation is not None:
            vehicle_value = valuation.estimated_value
            valuation_age = age_in_days(valuation.valuation_date, now)

    return LoanRequest(
        vehicle_age_years=vehicle_age_years(vehicle.year, reference_year),
        employment_status=application.employment_status,
        monthly_income=application.monthly_income,
        term_months=application.term_months,
        loan_amount=application.loan_amount,
        vehicle_value=vehicle_value,
        valuation_age_days=valuation_age,
        valuation_unavailable=valuation_unavailable,
    )


def assemble_verdict(
    violations: List[Violation],
    details: EligibilityDetails,
    system_error: bool = False,
) -> EligibilityVerdict:
    """Fold violations into a verdict; the sentinel reason stands only for a clean pass"""
    reasons = [v.reason for v in violations]
    recommendations = [v.recommendation for v in violations if v.recommendation]
    rules = [v.rule for v in violations]

    if system_error:
        reasons.append(SYSTEM_ERROR_REASON)
        recommendations.append(SYSTEM_ERROR_RECOMMENDATION)
        rules.append(SYSTEM_ERROR_RULE)

    is_eligible = not reasons
    return EligibilityVerdict(
        is_eligible=is_eligible,
        status=EligibilityStatus.ELIGIBLE if is_eligible else EligibilityStatus.INELIGIBLE,
        reasons=reasons or [ALL_CRITERIA_MET],
        details=details,
        recommendations=recommendations or None,
        violated_rules=rules,
    )


def evaluate_request(
    request: LoanRequest,
    criteria: Optional[EligibilityCriteria] = None,
    details: Optional[EligibilityDetails] = None,
) -> EligibilityVerdict:
    """
    Run every eligibility check against a snapshot.

    A check that raises is logged and turned into the system error reason;
    the remaining checks still run.
    """
    if criteria is None:
        criteria = get_default_criteria()
    if details is None:
        details = EligibilityDetails(
            monthly_income=request.monthly_income,
            requested_amount=request.loan_amount,
            employment_status=request.employment_status,
            loan_term=request.term_months,
        )

    details.vehicle_age = request.vehicle_age_years
    details.vehicle_value = request.vehicle_value

    violations: List[Violation] = []
    system_error = False

    for check in ELIGIBILITY_CHECKS:
        try:
            violation = check(request, criteria)
        except Exception:
            logger.exception(f"Eligibility check {check.__name__} failed")
            system_error = True
            continue
        if violation is not None:
            violations.append(violation)

    try:
        details.ltv_ratio = loan_to_value_ratio(request, criteria)
        details.dti_ratio = debt_to_income_ratio(request, criteria)
    except Exception:
        # Already reported by the failing check
        system_error = True

    return assemble_verdict(violations, details, system_error)


def evaluate(
    application: LoanApplication,
    vehicle_lookup: VehicleLookup,
    latest_valuation_lookup: ValuationLookup,
    criteria: Optional[EligibilityCriteria] = None,
    reference_year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> EligibilityVerdict:
    """
    Main entry point: evaluate a loan application against all criteria.

    Never raises. Lookup failures and unexpected errors produce an
    INELIGIBLE verdict carrying the generic system error reason.
    """
    if criteria is None:
        criteria = get_default_criteria()
    if now is None:
        now = datetime.now(timezone.utc)

    logger.info(f"Checking eligibility for loan application: {application.id}")

    details = EligibilityDetails(
        monthly_income=application.monthly_income,
        requested_amount=application.loan_amount,
        employment_status=application.employment_status,
        loan_term=application.term_months,
    )

    try:
        request = build_loan_request(
            application,
            vehicle_lookup,
            latest_valuation_lookup,
            reference_year=reference_year,
            now=now,
        )
        verdict = evaluate_request(request, criteria, details)
    except Exception as e:
        logger.error(f"Error checking eligibility for application {application.id}: {e}")
        verdict = assemble_verdict([], details, system_error=True)

    logger.info(
        f"Eligibility check completed for application {application.id}. Status: {verdict.status.value}"
    )
    return verdict
