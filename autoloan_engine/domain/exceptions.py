"""Domain-specific exceptions"""

from typing import Any, Dict, List, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidVinError(DomainException):
    """Vehicle identifier failed format or check digit validation"""

    def __init__(self, code: str, reason: str):
        super().__init__(f"VIN Validation Error: {reason}")
        self.code = code
        self.reason = reason


class InvalidPaymentParametersError(DomainException):
    """Principal, rate or term is outside the domain of the payment formula"""

    pass


class InvalidApplicationError(DomainException):
    """Submitted record failed input validation"""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class VehicleNotFoundError(DomainException):
    """Referenced vehicle could not be resolved"""

    pass


class DuplicateVehicleError(DomainException):
    """A vehicle with the same VIN is already registered"""

    pass


class IneligibleLoanError(DomainException):
    """Loan application failed one or more eligibility rules"""

    def __init__(self, reasons: List[str], details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Loan application is ineligible: {', '.join(reasons)}")
        self.reasons = reasons
        self.details = details or {}
