"""Pydantic schemas for validating records handed over by the request layer"""

from typing import Any, Dict, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError

from autoloan_engine.domain.exceptions import InvalidApplicationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


EmploymentStatusLiteral = Literal["employed", "self_employed", "retired", "unemployed"]


class VehicleSubmission(BaseModel):
    """Vehicle onboarding input; missing make/year may be filled from the VIN"""

    vin: str = Field(..., description="17-character vehicle identification number")
    make: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    mileage: Optional[int] = Field(None, ge=0)
    condition: Optional[str] = Field(None, max_length=50)
    transmission: Optional[str] = Field(None, max_length=50)
    fuel_type: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=50)


class LoanApplicationSubmission(BaseModel):
    """Loan application input"""

    id: str = Field(..., min_length=1, description="Application identifier")
    vehicle_id: str = Field(..., min_length=1, description="Vehicle identifier")
    loan_amount: float = Field(..., gt=0, description="Requested principal")
    term_months: int = Field(..., gt=0, description="Requested term in months")
    monthly_income: float = Field(..., ge=0, description="Applicant monthly income")
    employment_status: EmploymentStatusLiteral


class OfferRequest(BaseModel):
    """Optional pricing inputs for offer generation"""

    credit_score: Optional[int] = Field(None, ge=300, le=850)
    include_schedule: bool = False


def parse_submission(schema: Type[SchemaT], data: Union[SchemaT, Dict[str, Any]]) -> SchemaT:
    """
    Validate raw input against a schema.

    Raises:
        InvalidApplicationError: one message per failing field
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise InvalidApplicationError(errors) from e
