"""Diary entry database model"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


class DiaryEntry(BaseModel):
    """Diary entry model matching Supabase diary_entries table schema"""
    id: str
    user_id: Optional[str] = None
    title: str
    content: str
    entry_date: date
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
