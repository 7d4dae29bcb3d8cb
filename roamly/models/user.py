"""Authenticated session model"""
from typing import Any, Optional
from pydantic import BaseModel, Field


class SessionUser(BaseModel):
    """The signed-in user as seen by a page (observed, never mutated)"""
    user_id: str = Field(..., description="Supabase auth user id")
    display_name: str = Field(..., description="full_name from user metadata, else email")
    email: Optional[str] = None
    access_token: str = Field(..., exclude=True)
    refresh_token: Optional[str] = Field(None, exclude=True)

    @classmethod
    def from_supabase(cls, session: Any) -> "SessionUser":
        """
        Build from a supabase-py Session object

        Args:
            session: Session returned by the auth client (has .user, .access_token, .refresh_token)

        Returns:
            SessionUser
        """
        user = session.user
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(
            user_id=str(user.id),
            display_name=metadata.get("full_name") or user.email or "",
            email=user.email,
            access_token=session.access_token,
            refresh_token=getattr(session, "refresh_token", None)
        )
