"""Prometheus metrics for monitoring eligibility outcomes, rule failures and offer pricing"""

from typing import Iterable, Optional

from prometheus_client import Counter, Histogram

# VIN metrics
vin_validation_counter = Counter(
    "autoloan_vin_validation_total",
    "VIN validations performed during vehicle onboarding",
    ["outcome"],  # valid | required | length | invalid_characters | checksum_mismatch
)

# Eligibility metrics
eligibility_counter = Counter(
    "autoloan_eligibility_total",
    "Total loan eligibility evaluations",
    ["outcome"],  # eligible | ineligible
)

eligibility_violation_counter = Counter(
    "autoloan_eligibility_violation_total",
    "Eligibility rule failures by rule",
    ["rule"],
)

# Offer metrics
offer_rate_histogram = Histogram(
    "autoloan_offer_rate",
    "Risk-adjusted annual interest rate of generated offers",
    buckets=[0.05, 0.10, 0.12, 0.15, 0.18, 0.20, 0.25, 0.30],
)

offer_amount_histogram = Histogram(
    "autoloan_offer_amount",
    "Principal of generated offers",
    buckets=[500_000, 1_000_000, 2_500_000, 5_000_000, 10_000_000, 25_000_000, 50_000_000],
)


def record_vin_validation(code: Optional[str]) -> None:
    """Record VIN validation outcome; code is None for a valid VIN"""
    vin_validation_counter.labels(outcome=code or "valid").inc()


def record_eligibility(is_eligible: bool, rules: Iterable[str]) -> None:
    """Record eligibility outcome and each violated rule"""
    outcome = "eligible" if is_eligible else "ineligible"
    eligibility_counter.labels(outcome=outcome).inc()

    for rule in rules:
        eligibility_violation_counter.labels(rule=rule).inc()


def record_offer(interest_rate: float, loan_amount: float) -> None:
    """Record pricing distribution of an offer"""
    offer_rate_histogram.observe(interest_rate)
    offer_amount_histogram.observe(loan_amount)
