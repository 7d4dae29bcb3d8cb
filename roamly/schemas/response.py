"""Response schemas for API endpoints"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class Notification(BaseModel):
    """Transient message shown to the user (toast)"""
    kind: str = Field(..., description="'success' or 'error'")
    message: str


class SessionInfo(BaseModel):
    user_id: str
    display_name: str
    email: Optional[str] = None


class PageView(BaseModel):
    """
    Everything the client router needs to render one page

    When `redirect` is set the client navigates there instead of
    rendering the page.
    """
    page: str = Field(..., description="Route path of the page, e.g. '/trips'")
    state: str = Field(..., description="Controller state, e.g. 'ready-empty'")
    session: Optional[SessionInfo] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)
    redirect: Optional[str] = None
    recommendations: Optional[str] = Field(None, description="Plan-trip recommendation text")
    options: Dict[str, Any] = Field(default_factory=dict, description="Static form choices")


class ErrorResponse(BaseModel):
    """Error response"""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")
