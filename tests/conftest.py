"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from autoloan_engine.domain.models import (
    EligibilityCriteria,
    LoanApplication,
    Valuation,
    Vehicle,
)


# Fixed clock so vehicle ages and valuation freshness are deterministic
REFERENCE_YEAR = 2026
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)

HONDA_VIN = "1HGBH41JXMN109186"


@pytest.fixture
def criteria() -> EligibilityCriteria:
    """Default lending criteria"""
    return EligibilityCriteria(
        max_loan_to_value=0.80,
        max_debt_to_income=0.40,
        min_monthly_income=150_000,
        max_vehicle_age_years=15,
        valid_term_months=frozenset({12, 24, 36, 48, 60}),
        min_loan_amount=500_000,
        max_loan_amount=50_000_000,
        base_annual_rate_for_dti=0.15,
        max_valuation_age_days=30,
    )


@pytest.fixture
def vehicle() -> Vehicle:
    """Six year old sedan"""
    return Vehicle(
        id="veh_1",
        vin=HONDA_VIN,
        make="Honda",
        model="Accord",
        year=2020,
        mileage=45_000,
        condition="good",
    )


@pytest.fixture
def valuation() -> Valuation:
    """Fresh valuation, five days old"""
    return Valuation(
        id="val_1",
        vehicle_id="veh_1",
        estimated_value=5_000_000,
        valuation_date=NOW - timedelta(days=5),
        source="market",
    )


@pytest.fixture
def application() -> LoanApplication:
    """Application that passes every rule against `vehicle` and `valuation`"""
    return LoanApplication(
        id="app_1",
        vehicle_id="veh_1",
        loan_amount=2_000_000,  # LTV 40%
        term_months=36,
        monthly_income=500_000,
        employment_status="employed",
    )


@pytest.fixture
def make_lookups() -> Callable:
    """Build in-memory vehicle and valuation lookups"""

    def _make(vehicles: Dict[str, Vehicle], valuations: Optional[Dict[str, Valuation]] = None):
        valuations = valuations or {}

        def vehicle_lookup(vehicle_id: str) -> Optional[Vehicle]:
            return vehicles.get(vehicle_id)

        def valuation_lookup(vehicle_id: str) -> Optional[Valuation]:
            return valuations.get(vehicle_id)

        return vehicle_lookup, valuation_lookup

    return _make
