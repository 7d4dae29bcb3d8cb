"""Middleware modules for FastAPI application"""
from .auth import AuthRequired, SessionGuard, mount_session_guard

__all__ = ["AuthRequired", "SessionGuard", "mount_session_guard"]
