"""Saved destination database model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class SavedDestination(BaseModel):
    """Saved destination model matching Supabase saved_destinations table schema"""
    id: str
    user_id: Optional[str] = None
    destination_name: str
    location: str
    description: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = ""
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
