"""Offer generation - price an accepted application"""

from typing import Any, Dict, Optional, Union

from autoloan_engine.config import settings
from autoloan_engine.domain.models import LoanApplication, LoanOffer, OfferParameters, Valuation, Vehicle
from autoloan_engine.domain.offers import (
    calculate_offer_details,
    generate_payment_schedule,
    get_base_rate_for_term,
)
from autoloan_engine.infrastructure.observability.logging import log_offer_calculated
from autoloan_engine.infrastructure.observability.metrics import record_offer
from autoloan_engine.schemas import OfferRequest, parse_submission
from autoloan_engine.utils.date_utils import vehicle_age_years


def build_offer_parameters(
    application: LoanApplication,
    vehicle: Vehicle,
    valuation: Optional[Valuation] = None,
    credit_score: Optional[int] = None,
    reference_year: Optional[int] = None,
) -> OfferParameters:
    """Assemble pricing inputs from the stored records"""
    return OfferParameters(
        loan_amount=application.loan_amount,
        base_interest_rate=get_base_rate_for_term(
            application.term_months, settings.default_base_interest_rate
        ),
        term_months=application.term_months,
        vehicle_value=valuation.estimated_value if valuation is not None else None,
        vehicle_age=vehicle_age_years(vehicle.year, reference_year) if vehicle.year else None,
        employment_status=application.employment_status,
        credit_score=credit_score,
    )


def generate_offer(
    application: LoanApplication,
    vehicle: Vehicle,
    valuation: Optional[Valuation] = None,
    request: Union[OfferRequest, Dict[str, Any], None] = None,
    reference_year: Optional[int] = None,
) -> LoanOffer:
    """
    Price an offer for an application that already passed eligibility.

    Flow:
    1. Build offer parameters from application, vehicle and valuation
    2. Risk-adjust the term's base rate and compute payment totals
    3. Optionally attach the full amortization schedule

    Raises:
        InvalidApplicationError: Malformed offer request
        InvalidPaymentParametersError: Non-positive amount or term
    """
    offer_request = parse_submission(OfferRequest, request or {})

    params = build_offer_parameters(
        application,
        vehicle,
        valuation,
        credit_score=offer_request.credit_score,
        reference_year=reference_year,
    )
    calculation = calculate_offer_details(params)

    schedule = None
    if offer_request.include_schedule:
        schedule = generate_payment_schedule(
            params.loan_amount, calculation.effective_apr, params.term_months
        )

    record_offer(calculation.effective_apr, params.loan_amount)
    log_offer_calculated(
        application.id,
        params.loan_amount,
        params.term_months,
        calculation.effective_apr,
        calculation.monthly_payment,
    )

    return LoanOffer(
        application_id=application.id,
        loan_amount=params.loan_amount,
        term_months=params.term_months,
        interest_rate=calculation.effective_apr,
        calculation=calculation,
        schedule=schedule,
    )
