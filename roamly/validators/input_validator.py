"""Input validation run before any network call"""
from datetime import date
from typing import Optional

from ..schemas.request import PlanTripForm, DiaryEntryForm, DestinationForm


class ValidationError(Exception):
    """Custom validation error"""
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


def calculate_days(start_date: Optional[date], end_date: Optional[date]) -> int:
    """
    Trip length in whole calendar days

    Args:
        start_date: Trip start date
        end_date: Trip end date

    Returns:
        end - start in days, 0 when either date is missing
    """
    if not start_date or not end_date:
        return 0
    return (end_date - start_date).days


def validate_recommendation_input(form: PlanTripForm) -> int:
    """
    Validate the fields a recommendation request needs

    Args:
        form: Plan-trip form

    Returns:
        Trip length in days (always > 0)

    Raises:
        ValidationError: If a field is missing or the dates are out of order
    """
    missing = [
        name for name, value in (
            ("destination", form.destination),
            ("budget", form.budget),
            ("travel_type", form.travel_type),
        )
        if value in (None, "")
    ]
    if not form.interests:
        missing.append("interests")

    if missing:
        raise ValidationError("Please fill in all fields", {"missing": missing})

    days = calculate_days(form.start_date, form.end_date)
    if days <= 0:
        raise ValidationError(
            "End date must be after start date",
            {"start_date": str(form.start_date), "end_date": str(form.end_date)}
        )

    return days


def validate_trip_save(form: PlanTripForm) -> None:
    """
    Validate the fields needed to store a trip

    Date order is not re-checked here; the trips table accepts any dates.

    Raises:
        ValidationError: If destination, dates or budget are missing
    """
    missing = [
        name for name, value in (
            ("destination", form.destination),
            ("start_date", form.start_date),
            ("end_date", form.end_date),
            ("budget", form.budget),
        )
        if value in (None, "")
    ]
    if missing:
        raise ValidationError("Please fill in all required fields", {"missing": missing})


def validate_diary_entry(form: DiaryEntryForm) -> None:
    if not form.title.strip() or not form.content.strip():
        raise ValidationError("Please fill in title and content")


def validate_destination(form: DestinationForm) -> None:
    if not form.name.strip() or not form.location.strip():
        raise ValidationError("Please fill in name and location")
