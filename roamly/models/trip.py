"""Trip database model"""
from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, computed_field, field_validator


class TravelType(str, Enum):
    SOLO = "solo"
    COUPLE = "couple"
    FAMILY = "family"
    GROUP = "group"


class TripStatus(str, Enum):
    PLANNED = "planned"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Trip(BaseModel):
    """Trip model matching Supabase trips table schema"""
    id: str
    user_id: Optional[str] = None
    destination: str
    start_date: date
    end_date: date
    budget: float = Field(..., ge=0, description="Budget in USD")
    travel_type: Optional[TravelType] = None
    status: str = Field(TripStatus.PLANNED.value, description="Lifecycle status, usually one of TripStatus")
    notes: Optional[str] = ""
    created_at: Optional[datetime] = None

    @field_validator("travel_type", mode="before")
    @classmethod
    def blank_travel_type(cls, v):
        """Older rows store an empty string when no type was chosen"""
        return v or None

    @computed_field
    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days

    class Config:
        from_attributes = True
