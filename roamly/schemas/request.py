"""Request schemas for API endpoints"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from ..models.trip import TravelType


INTEREST_OPTIONS = [
    "Adventure", "Culture", "Food", "Photography", "Nature",
    "History", "Beaches", "Shopping", "Nightlife", "Wellness"
]


def _blank_to_none(v):
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


class PlanTripForm(BaseModel):
    """
    Trip details form on the plan-trip page

    Every field may be left blank; the page controller decides which
    fields a given action needs.
    """
    destination: str = Field("", max_length=200, description="e.g. 'Tokyo, Japan'")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0, description="Budget in USD")
    travel_type: Optional[TravelType] = None
    interests: List[str] = Field(default_factory=list, description="Selected interest tags")
    notes: str = Field("", description="Recommendation text, possibly edited, saved with the trip")

    @field_validator("start_date", "end_date", "budget", "travel_type", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("destination")
    @classmethod
    def strip_destination(cls, v):
        return v.strip()

    @field_validator("interests")
    @classmethod
    def dedupe_interests(cls, v):
        """Keep selection order, drop blanks and repeats"""
        selected: List[str] = []
        for interest in v:
            interest = interest.strip()
            if interest and interest not in selected:
                selected.append(interest)
        return selected

    class Config:
        json_schema_extra = {
            "example": {
                "destination": "Tokyo, Japan",
                "start_date": "2024-01-01",
                "end_date": "2024-01-05",
                "budget": 1000,
                "travel_type": "solo",
                "interests": ["Food", "Culture"]
            }
        }


class DiaryEntryForm(BaseModel):
    """New diary entry dialog"""
    title: str = Field("", max_length=200)
    content: str = ""
    location: str = Field("", max_length=200)
    entry_date: Optional[date] = Field(None, description="Defaults to today")

    @field_validator("entry_date", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        return _blank_to_none(v)


class DestinationForm(BaseModel):
    """Save destination dialog"""
    name: str = Field("", max_length=200, description="e.g. 'Hidden temple'")
    location: str = Field("", max_length=200, description="e.g. 'Kyoto, Japan'")
    description: str = ""
    category: str = Field("", max_length=100, description="Culture, Nature, Food...")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    full_name: str = Field("", max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class RecommendationRequest(BaseModel):
    """Body sent to the recommendation function"""
    model_config = {"populate_by_name": True}

    destination: str = Field(..., min_length=1)
    budget: float = Field(..., ge=0)
    travel_type: TravelType = Field(..., alias="travelType")
    interests: List[str] = Field(..., min_length=1)
    days: int = Field(..., gt=0, description="Trip length in whole days")

    def to_body(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
