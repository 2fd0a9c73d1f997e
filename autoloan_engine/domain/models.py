"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional


# Employment status values shared by eligibility and pricing
EMPLOYED = "employed"
SELF_EMPLOYED = "self_employed"
RETIRED = "retired"
UNEMPLOYED = "unemployed"


@dataclass(frozen=True)
class VinValidation:
    """Outcome of VIN format and check digit validation"""

    is_valid: bool
    code: Optional[str] = None  # required | length | invalid_characters | checksum_mismatch
    reason: Optional[str] = None


@dataclass(frozen=True)
class DecodedVin:
    """Manufacturer and model year read from a valid VIN"""

    vin: str
    manufacturer: Optional[str]
    model_year: Optional[int]


@dataclass
class Vehicle:
    """Vehicle record supplied by the persistence layer"""

    id: str
    vin: str
    make: Optional[str]
    model: Optional[str]
    year: Optional[int]
    mileage: Optional[int] = None
    condition: Optional[str] = None
    transmission: Optional[str] = None
    fuel_type: Optional[str] = None
    color: Optional[str] = None


@dataclass
class Valuation:
    """Market valuation of a vehicle at a point in time"""

    id: str
    vehicle_id: str
    estimated_value: float
    valuation_date: datetime
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    source: Optional[str] = None


@dataclass
class LoanApplication:
    """Loan application as submitted by the borrower"""

    id: str
    vehicle_id: str
    loan_amount: float
    term_months: int
    monthly_income: float
    employment_status: str


@dataclass(frozen=True)
class EligibilityCriteria:
    """Process-wide eligibility thresholds, immutable once loaded"""

    max_loan_to_value: float
    max_debt_to_income: float
    min_monthly_income: float
    max_vehicle_age_years: int
    valid_term_months: FrozenSet[int]
    min_loan_amount: float
    max_loan_amount: float
    base_annual_rate_for_dti: float
    max_valuation_age_days: int = 30

    @classmethod
    def from_settings(cls, settings: Any) -> "EligibilityCriteria":
        return cls(
            max_loan_to_value=settings.max_loan_to_value,
            max_debt_to_income=settings.max_debt_to_income,
            min_monthly_income=settings.min_monthly_income,
            max_vehicle_age_years=settings.max_vehicle_age_years,
            valid_term_months=frozenset(settings.valid_term_months),
            min_loan_amount=settings.min_loan_amount,
            max_loan_amount=settings.max_loan_amount,
            base_annual_rate_for_dti=settings.base_annual_rate_for_dti,
            max_valuation_age_days=settings.max_valuation_age_days,
        )


@dataclass(frozen=True)
class LoanRequest:
    """Snapshot of everything the eligibility rules look at"""

    vehicle_age_years: int
    employment_status: str
    monthly_income: float
    term_months: int
    loan_amount: float
    vehicle_value: Optional[float] = None
    valuation_age_days: Optional[float] = None
    valuation_unavailable: bool = False  # Lookup raised, as opposed to no valuation on file


@dataclass(frozen=True)
class Violation:
    """A single failed eligibility rule"""

    rule: str
    reason: str
    recommendation: Optional[str] = None


class EligibilityStatus(str, Enum):
    ELIGIBLE = "ELIGIBLE"
    INELIGIBLE = "INELIGIBLE"


@dataclass
class EligibilityDetails:
    """Ratios and inputs computed during evaluation; None means not computed"""

    ltv_ratio: Optional[float] = None
    dti_ratio: Optional[float] = None
    vehicle_age: Optional[int] = None
    monthly_income: Optional[float] = None
    requested_amount: Optional[float] = None
    vehicle_value: Optional[float] = None
    employment_status: Optional[str] = None
    loan_term: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass
class EligibilityVerdict:
    """Output of eligibility evaluation"""

    is_eligible: bool
    status: EligibilityStatus
    reasons: List[str]
    details: EligibilityDetails
    recommendations: Optional[List[str]] = None
    violated_rules: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class OfferParameters:
    """Inputs to offer pricing"""

    loan_amount: float
    base_interest_rate: float
    term_months: int
    vehicle_value: Optional[float] = None
    vehicle_age: Optional[int] = None
    employment_status: Optional[str] = None
    credit_score: Optional[int] = None


@dataclass(frozen=True)
class RateFactors:
    """Risk inputs to interest rate adjustment"""

    loan_to_value: Optional[float] = None
    vehicle_age: Optional[int] = None
    employment_status: Optional[str] = None
    credit_score: Optional[int] = None


@dataclass(frozen=True)
class PaymentCalculation:
    """Priced payment terms for an offer"""

    monthly_payment: int
    total_payable: int
    total_interest: float
    effective_apr: float


@dataclass(frozen=True)
class ScheduleEntry:
    """Single period in an amortization schedule"""

    payment_number: int
    payment_amount: int
    principal_amount: int
    interest_amount: int
    remaining_balance: float


@dataclass
class LoanOffer:
    """Priced offer for an accepted loan application"""

    application_id: str
    loan_amount: float
    term_months: int
    interest_rate: float
    calculation: PaymentCalculation
    schedule: Optional[List[ScheduleEntry]] = field(default=None)
