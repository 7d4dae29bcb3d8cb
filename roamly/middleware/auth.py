"""Session guard for pages that need a signed-in user"""
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from fastapi import Cookie, Depends, Request, Response
from supabase import Client

from ..config import settings
from ..models.user import SessionUser
from ..utils.database import get_supabase_client

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth"
ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"


class AuthRequired(Exception):
    """Raised when an action needs a session and there is none"""
    def __init__(self, message: str = "Not authenticated"):
        self.message = message
        super().__init__(self.message)


class SessionGuard:
    """
    Tracks the auth session for the lifetime of one mounted page

    The guard never distinguishes "no session" from "could not get the
    session": both leave `session` empty and point `redirect_to` at the
    auth screen.
    """

    def __init__(self, auth: Any):
        self.auth = auth
        self.session: Optional[SessionUser] = None
        self.redirect_to: Optional[str] = None
        self._subscription = None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def require(self) -> SessionUser:
        """Return the current session or raise AuthRequired"""
        if self.session is None:
            raise AuthRequired()
        return self.session

    def check(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> Optional[SessionUser]:
        """
        Query the current session, restoring it from tokens when given

        Args:
            access_token: JWT from the request cookie/header
            refresh_token: Refresh token from the request cookie

        Returns:
            The session, or None (and a redirect to the auth screen)
        """
        try:
            if access_token:
                self.auth.set_session(access_token, refresh_token or "")
            raw_session = self.auth.get_session()
        except Exception as e:
            logger.warning(f"Session lookup failed, treating as signed out: {type(e).__name__}: {str(e)}")
            raw_session = None

        self._apply(raw_session)
        return self.session

    def subscribe(self) -> None:
        """Start listening for sign-in, sign-out and token refresh events"""
        try:
            self._subscription = self.auth.on_auth_state_change(self._on_auth_state_change)
        except Exception as e:
            logger.warning(f"Auth subscription failed, treating as signed out: {str(e)}")
            self._subscription = None
            self._apply(None)

    def unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    @contextmanager
    def mounted(self, access_token: Optional[str] = None, refresh_token: Optional[str] = None) -> Iterator["SessionGuard"]:
        """
        Hold the auth subscription while a page is mounted

        The subscription is released on exit even if the page raised.
        """
        self.subscribe()
        try:
            if self._subscription is not None:
                self.check(access_token, refresh_token)
            yield self
        finally:
            self.unsubscribe()

    def sign_out(self) -> bool:
        """
        Sign the user out

        The guard redirects to the auth screen whatever the outcome.

        Returns:
            True if the provider accepted the sign-out
        """
        try:
            self.auth.sign_out()
            signed_out = True
        except Exception as e:
            logger.error(f"✗ Sign out failed: {str(e)}")
            signed_out = False

        self.session = None
        self.redirect_to = AUTH_PATH
        return signed_out

    def _on_auth_state_change(self, event: Any, session: Any) -> None:
        logger.info(f"Auth state change: {event}")
        self._apply(session)

    def _apply(self, raw_session: Any) -> None:
        if raw_session is None:
            self.session = None
            self.redirect_to = AUTH_PATH
            return
        self.session = SessionUser.from_supabase(raw_session)
        self.redirect_to = None


def set_session_cookies(response: Response, access_token: str, refresh_token: Optional[str]) -> None:
    """Write the session tokens into HttpOnly cookies"""
    cookie_options = dict(
        httponly=True,
        secure=settings.is_production,  # HTTPS only in production
        samesite="none" if settings.is_production else "lax",  # None for cross-site in production
        max_age=settings.session_cookie_max_age_seconds
    )
    response.set_cookie(key=ACCESS_TOKEN_COOKIE, value=access_token, **cookie_options)
    if refresh_token:
        response.set_cookie(key=REFRESH_TOKEN_COOKIE, value=refresh_token, **cookie_options)


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE)
    response.delete_cookie(key=REFRESH_TOKEN_COOKIE)


def mount_session_guard(
    request: Request,
    response: Response,
    client: Client = Depends(get_supabase_client),
    access_token: Optional[str] = Cookie(None),
    refresh_token: Optional[str] = Cookie(None)
):
    """
    Dependency that mounts a SessionGuard for the duration of a request

    Declared as a plain generator so FastAPI runs the blocking session
    restore and the release in its threadpool.

    Args:
        request: FastAPI request object
        response: Response used to write refreshed tokens back
        client: Request-scoped Supabase client
        access_token: JWT from HttpOnly cookie
        refresh_token: Refresh token from HttpOnly cookie

    Yields:
        The mounted SessionGuard (session may be None)
    """
    # If no cookie, check Authorization header as fallback
    if not access_token:
        auth_header = request.headers.get("authorization")
        if auth_header and auth_header.startswith("Bearer "):
            access_token = auth_header.split(" ")[1]

    guard = SessionGuard(client.auth)
    with guard.mounted(access_token, refresh_token):
        session = guard.session
        if session is not None and access_token and session.access_token != access_token:
            # Provider refreshed the tokens while restoring the session
            set_session_cookies(response, session.access_token, session.refresh_token)
        yield guard
