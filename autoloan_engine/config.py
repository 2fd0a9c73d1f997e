"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "autoloan-engine"
    log_level: str = "INFO"

    # Eligibility criteria (amounts in whole currency units)
    max_loan_to_value: float = 0.80
    max_debt_to_income: float = 0.40
    min_monthly_income: int = 150_000
    max_vehicle_age_years: int = 15
    valid_term_months: List[int] = [12, 24, 36, 48, 60]
    min_loan_amount: int = 500_000
    max_loan_amount: int = 50_000_000
    max_valuation_age_days: int = 30

    # Pricing
    base_annual_rate_for_dti: float = 0.15  # Used for the hypothetical DTI payment
    default_base_interest_rate: float = 0.15  # Fallback for terms without a table rate


settings = Settings()
