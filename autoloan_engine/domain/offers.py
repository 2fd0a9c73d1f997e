"""Offer pricing engine - risk-adjusted rates and amortization math"""

import logging
from types import MappingProxyType
from typing import Iterator, List, Mapping

from autoloan_engine.domain.exceptions import InvalidPaymentParametersError
from autoloan_engine.domain.models import (
    OfferParameters,
    PaymentCalculation,
    RateFactors,
    ScheduleEntry,
    RETIRED,
    SELF_EMPLOYED,
)
from autoloan_engine.utils.money import floor_currency, round_currency

logger = logging.getLogger(__name__)

# Annual base rates by loan term in months
BASE_RATES: Mapping[int, float] = MappingProxyType({
    12: 0.12,
    24: 0.14,
    36: 0.15,
    48: 0.16,
    60: 0.18,
})

DEFAULT_BASE_RATE = 0.15

MIN_RATE = 0.05
MAX_RATE = 0.30


def calculate_monthly_payment(principal: float, annual_rate: float, term_months: int) -> int:
    """
    Calculate the fixed monthly payment for an amortized loan.

    Formula: M = P * r(1+r)^n / ((1+r)^n - 1)
    - P: principal
    - r: monthly rate (annual_rate / 12)
    - n: number of monthly payments

    Result is rounded to the nearest whole currency unit, halves away from zero.

    Raises:
        InvalidPaymentParametersError: principal <= 0, annual_rate < 0 or term_months <= 0
    """
    if principal <= 0 or annual_rate < 0 or term_months <= 0:
        raise InvalidPaymentParametersError(
            f"Invalid payment calculation parameters: principal={principal}, "
            f"annual_rate={annual_rate}, term_months={term_months}"
        )

    monthly_rate = annual_rate / 12
    compound = (1 + monthly_rate) ** term_months

    # Rates too small to move the compound factor amortize like zero
    if monthly_rate == 0 or compound == 1:
        return round_currency(principal / term_months)

    payment = principal * monthly_rate * compound / (compound - 1)

    result = round_currency(payment)
    logger.debug(
        "Monthly payment %s for principal=%s rate=%.4f term=%s",
        result, principal, annual_rate, term_months,
    )
    return result


def calculate_total_payable(monthly_payment: int, term_months: int) -> int:
    """Total of all scheduled payments over the term"""
    return monthly_payment * term_months


def adjust_interest_rate(base_rate: float, factors: RateFactors) -> float:
    """
    Apply risk adjustments to a base annual rate.

    Each factor is judged independently against the same snapshot and
    contributes an additive adjustment:
    - LTV:        > 75% +2.0%, > 60% +1.0%
    - Age:        > 10y +3.0%, > 5y  +1.5%
    - Employment: self-employed +1.5%, retired +1.0%
    - Credit:     < 600 +4.0%, < 700 +2.0%, > 800 -1.0%

    The result is clamped to [5%, 30%].
    """
    adjusted = base_rate

    ltv = factors.loan_to_value
    if ltv is not None:
        if ltv > 0.75:
            adjusted += 0.02
        elif ltv > 0.60:
            adjusted += 0.01

    age = factors.vehicle_age
    if age is not None:
        if age > 10:
            adjusted += 0.03
        elif age > 5:
            adjusted += 0.015

    if factors.employment_status:
        status = factors.employment_status.lower()
        if status == SELF_EMPLOYED:
            adjusted += 0.015
        elif status == RETIRED:
            adjusted += 0.01

    score = factors.credit_score
    if score is not None:
        if score < 600:
            adjusted += 0.04
        elif score < 700:
            adjusted += 0.02
        elif score > 800:
            adjusted -= 0.01

    final_rate = max(MIN_RATE, min(MAX_RATE, adjusted))
    logger.debug("Adjusted rate %.4f -> %.4f", base_rate, final_rate)
    return final_rate


def get_base_rate_for_term(term_months: int, default: float = DEFAULT_BASE_RATE) -> float:
    """Base rate for a term, falling back to `default` for unlisted terms"""
    rate = BASE_RATES.get(term_months)
    if rate is None:
        logger.warning(
            "No base rate configured for %s months term, using default %.2f%%",
            term_months, default * 100,
        )
        return default
    return rate


def build_rate_factors(params: OfferParameters) -> RateFactors:
    """Collect whichever risk inputs the offer parameters carry"""
    loan_to_value = None
    if params.vehicle_value and params.loan_amount:
        loan_to_value = params.loan_amount / params.vehicle_value

    return RateFactors(
        loan_to_value=loan_to_value,
        vehicle_age=params.vehicle_age,
        employment_status=params.employment_status,
        credit_score=params.credit_score,
    )


def calculate_offer_details(params: OfferParameters) -> PaymentCalculation:
    """
    Main entry point: price an offer.

    Term table rate (or params.base_interest_rate for unlisted terms),
    risk adjustment, then amortized payment and totals. The effective APR
    is reported as the adjusted rate.
    """
    base_rate = BASE_RATES.get(params.term_months, params.base_interest_rate)
    adjusted_rate = adjust_interest_rate(base_rate, build_rate_factors(params))

    monthly_payment = calculate_monthly_payment(params.loan_amount, adjusted_rate, params.term_months)
    total_payable = calculate_total_payable(monthly_payment, params.term_months)

    return PaymentCalculation(
        monthly_payment=monthly_payment,
        total_payable=total_payable,
        total_interest=total_payable - params.loan_amount,
        effective_apr=adjusted_rate,
    )


def calculate_max_loan_amount(monthly_payment_capacity: float, annual_rate: float, term_months: int) -> float:
    """
    Largest principal whose payment fits the given monthly capacity.

    Inverse of the payment formula: P = M * ((1+r)^n - 1) / (r(1+r)^n), floored.
    At zero rate the capacity is simply multiplied by the term.
    """
    monthly_rate = annual_rate / 12
    compound = (1 + monthly_rate) ** term_months

    if monthly_rate == 0 or compound == 1:
        return monthly_payment_capacity * term_months

    return floor_currency(monthly_payment_capacity * (compound - 1) / (monthly_rate * compound))


def iter_payment_schedule(principal: float, annual_rate: float, term_months: int) -> Iterator[ScheduleEntry]:
    """
    Yield amortization entries one period at a time.

    Interest is rounded per period and never redistributed, so the final
    balance may carry a residual instead of landing on exactly zero. The
    residual compounds with the rate, so long high-rate schedules can end
    far from zero.
    Reported balances are floored at zero.
    """
    monthly_payment = calculate_monthly_payment(principal, annual_rate, term_months)
    monthly_rate = annual_rate / 12
    remaining_balance = principal

    for payment_number in range(1, term_months + 1):
        interest_amount = round_currency(remaining_balance * monthly_rate)
        principal_amount = monthly_payment - interest_amount
        remaining_balance -= principal_amount

        yield ScheduleEntry(
            payment_number=payment_number,
            payment_amount=monthly_payment,
            principal_amount=principal_amount,
            interest_amount=interest_amount,
            remaining_balance=max(0, remaining_balance),
        )


def generate_payment_schedule(principal: float, annual_rate: float, term_months: int) -> List[ScheduleEntry]:
    """Full amortization schedule, one entry per month"""
    return list(iter_payment_schedule(principal, annual_rate, term_months))
