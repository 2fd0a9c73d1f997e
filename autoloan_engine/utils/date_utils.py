"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from typing import Optional


SECONDS_PER_DAY = 24 * 60 * 60


def current_year(today: Optional[date] = None) -> int:
    """Calendar year used as the reference for vehicle ages and model years"""
    return (today or date.today()).year


def vehicle_age_years(model_year: int, reference_year: Optional[int] = None) -> int:
    """Whole years between the model year and the reference year"""
    return (reference_year or current_year()) - model_year


def age_in_days(moment: datetime, now: Optional[datetime] = None) -> float:
    """Fractional days elapsed since `moment` (naive datetimes are treated as UTC)"""
    if now is None:
        now = datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - moment).total_seconds() / SECONDS_PER_DAY
