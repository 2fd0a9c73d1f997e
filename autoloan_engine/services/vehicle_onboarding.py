"""Vehicle onboarding - VIN validation and best-effort enrichment before persistence"""

import logging
import uuid
from typing import Any, Callable, Dict, Optional, Union

from autoloan_engine.domain.exceptions import (
    DuplicateVehicleError,
    InvalidApplicationError,
    InvalidVinError,
)
from autoloan_engine.domain.models import DecodedVin, Vehicle
from autoloan_engine.domain.vin import decode_vin, validate_vin
from autoloan_engine.infrastructure.observability.logging import log_vehicle_prepared
from autoloan_engine.infrastructure.observability.metrics import record_vin_validation
from autoloan_engine.schemas import VehicleSubmission, parse_submission


def _require_valid_vin(vin: str) -> None:
    validation = validate_vin(vin)
    record_vin_validation(validation.code)
    if not validation.is_valid:
        raise InvalidVinError(validation.code, validation.reason)


def _log_vin_discrepancies(submission: VehicleSubmission, decoded: DecodedVin) -> None:
    if (
        submission.make
        and decoded.manufacturer
        and submission.make.lower() != decoded.manufacturer.lower()
    ):
        logging.warning(f"VIN suggests make: {decoded.manufacturer}, but provided: {submission.make}")

    if submission.year and decoded.model_year and submission.year != decoded.model_year:
        logging.warning(f"VIN suggests year: {decoded.model_year}, but provided: {submission.year}")


def decode_vin_or_raise(vin: str, reference_year: Optional[int] = None) -> DecodedVin:
    """
    Decode a VIN without creating a vehicle.

    Raises:
        InvalidVinError: VIN fails format or check digit validation
    """
    _require_valid_vin(vin)
    return decode_vin(vin, reference_year)


def prepare_vehicle(
    submission: Union[VehicleSubmission, Dict[str, Any]],
    vin_exists: Optional[Callable[[str], bool]] = None,
    reference_year: Optional[int] = None,
) -> Vehicle:
    """
    Validate and enrich a vehicle ready for the persistence layer.

    Flow:
    1. Validate input fields
    2. Validate VIN format and check digit
    3. Reject duplicates via the injected `vin_exists` predicate
    4. Fill missing make/year from the decoded VIN, keeping supplied values

    Raises:
        InvalidApplicationError: Malformed submission, or no year supplied
            and none decodable from the VIN
        InvalidVinError: VIN fails validation
        DuplicateVehicleError: VIN already registered
    """
    submission = parse_submission(VehicleSubmission, submission)
    _require_valid_vin(submission.vin)

    if vin_exists is not None and vin_exists(submission.vin):
        raise DuplicateVehicleError("Vehicle with this VIN already exists")

    decoded = decode_vin(submission.vin, reference_year)
    _log_vin_discrepancies(submission, decoded)

    make = submission.make or decoded.manufacturer
    year = submission.year or decoded.model_year
    if year is None:
        raise InvalidApplicationError(
            [f"year: Model year is required and could not be decoded from VIN {submission.vin}"]
        )

    enriched = make != submission.make or year != submission.year

    log_vehicle_prepared(submission.vin, decoded.manufacturer, decoded.model_year, enriched)

    return Vehicle(
        id=str(uuid.uuid4()),
        vin=submission.vin,
        make=make,
        model=submission.model,
        year=year,
        mileage=submission.mileage,
        condition=submission.condition,
        transmission=submission.transmission,
        fuel_type=submission.fuel_type,
        color=submission.color,
    )
