"""
Roamly - AI travel companion

Every page is served as a JSON page view for the client-side router:
- Session guard on every page (redirect to /auth without a session)
- Trips, diary entries and saved destinations stored in Supabase
- One AI recommendation call on the plan-trip page, saved only on request
- Failures become notifications on the page, never retried automatically
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Dict

from fastapi import FastAPI, HTTPException, Depends, Response
from fastapi.middleware.cors import CORSMiddleware
from supabase import Client

from .agents.recommendation_agent import RecommendationRequester, build_backend
from .config import settings
from .middleware.auth import (
    AUTH_PATH,
    SessionGuard,
    clear_session_cookies,
    mount_session_guard,
    set_session_cookies,
)
from .pages import DiaryPage, DiscoverPage, HomePage, PlanTripPage, TripsPage
from .pages.base import Page
from .schemas.request import DestinationForm, DiaryEntryForm, LoginRequest, PlanTripForm, SignupRequest
from .schemas.response import ErrorResponse, Notification, PageView
from .utils.database import destinations_store, diary_store, get_supabase_client, trips_store

# Configure logging
log_file = Path(settings.log_file)
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    handlers=[
        logging.FileHandler(log_file, mode='a'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Roamly API",
    description="AI-powered travel companion: trips, diary and saved destinations",
    version="1.0.0"
)

# CORS middleware for frontend communication
allowed_origins_list = [origin.strip() for origin in settings.allowed_origins.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

PAGE_RESPONSES: Dict[int, Dict[str, Any]] = {500: {"model": ErrorResponse}}


def get_recommendation_requester(client: Client = Depends(get_supabase_client)) -> RecommendationRequester:
    return RecommendationRequester(build_backend(client))


def internal_error(message: str, error: Exception) -> HTTPException:
    logger.exception(message)
    return HTTPException(
        status_code=500,
        detail={
            "error": "InternalServerError",
            "message": message,
            "details": {"original_error": str(error)}
        }
    )


async def run_page(page: Page, action: Callable = None, failure_message: str = "Failed to load page") -> PageView:
    """
    Mount a page and, if the guard let it through, run one user action

    Args:
        page: Page controller for this request
        action: Optional coroutine function run after a successful mount
        failure_message: Message for unexpected errors

    Returns:
        The page view (with a redirect when there is no session)
    """
    try:
        if await page.mount() and action is not None:
            await action()
        return page.view()
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(failure_message, e)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


# ============================================================================
# AUTH SCREEN
# ============================================================================

@app.get("/auth", response_model=PageView)
async def auth_screen():
    """Auth screen (no session required)"""
    return PageView(page=AUTH_PATH, state="ready")


@app.post("/auth/login", response_model=PageView, responses=PAGE_RESPONSES)
async def login(request: LoginRequest, response: Response, client: Client = Depends(get_supabase_client)):
    """
    Sign in with email and password and set the session cookies

    Args:
        request: Email and password
        response: FastAPI response object to set cookies

    Returns:
        Auth page view, redirecting home on success
    """
    view = PageView(page=AUTH_PATH, state="ready")
    try:
        result = await asyncio.to_thread(
            client.auth.sign_in_with_password,
            {"email": request.email, "password": request.password}
        )
    except Exception as e:
        logger.warning(f"Login failed for {request.email}: {str(e)}")
        view.notifications.append(Notification(kind="error", message=getattr(e, "message", None) or str(e)))
        return view

    session = getattr(result, "session", None)
    if session is None:
        view.notifications.append(Notification(kind="error", message="Invalid email or password"))
        return view

    set_session_cookies(response, session.access_token, session.refresh_token)
    view.notifications.append(Notification(kind="success", message="Welcome back!"))
    view.redirect = "/"
    return view


@app.post("/auth/signup", response_model=PageView, responses=PAGE_RESPONSES)
async def signup(request: SignupRequest, response: Response, client: Client = Depends(get_supabase_client)):
    """
    Create an account; signs in straight away unless email confirmation is pending

    Args:
        request: Full name, email and password
        response: FastAPI response object to set cookies

    Returns:
        Auth page view
    """
    view = PageView(page=AUTH_PATH, state="ready")
    try:
        result = await asyncio.to_thread(client.auth.sign_up, {
            "email": request.email,
            "password": request.password,
            "options": {"data": {"full_name": request.full_name}}
        })
    except Exception as e:
        logger.warning(f"Signup failed for {request.email}: {str(e)}")
        view.notifications.append(Notification(kind="error", message=getattr(e, "message", None) or str(e)))
        return view

    session = getattr(result, "session", None)
    if session is None:
        view.notifications.append(Notification(kind="success", message="Check your email to confirm your account"))
        return view

    set_session_cookies(response, session.access_token, session.refresh_token)
    view.notifications.append(Notification(kind="success", message="Account created!"))
    view.redirect = "/"
    return view


@app.post("/auth/logout", response_model=PageView)
async def logout(response: Response, guard: SessionGuard = Depends(mount_session_guard)):
    """
    Sign out (home page action); always ends on the auth screen

    Args:
        response: FastAPI response object to clear cookies
        guard: Mounted session guard

    Returns:
        Home page view redirecting to /auth
    """
    page = HomePage(guard)
    await asyncio.to_thread(page.sign_out)
    clear_session_cookies(response)
    return page.view()


# ============================================================================
# HOME
# ============================================================================

@app.get("/", response_model=PageView, responses=PAGE_RESPONSES)
async def home(guard: SessionGuard = Depends(mount_session_guard)):
    """Home page with the user's display name and feature links"""
    return await run_page(HomePage(guard))


# ============================================================================
# PLAN TRIP
# ============================================================================

@app.get("/plan-trip", response_model=PageView, responses=PAGE_RESPONSES)
async def plan_trip(
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client),
    requester: RecommendationRequester = Depends(get_recommendation_requester)
):
    """Empty trip details form"""
    return await run_page(PlanTripPage(guard, requester, trips_store(client)))


@app.post("/plan-trip/recommendations", response_model=PageView, responses=PAGE_RESPONSES)
async def plan_trip_recommendations(
    form: PlanTripForm,
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client),
    requester: RecommendationRequester = Depends(get_recommendation_requester)
):
    """
    Ask for AI recommendations for the trip details

    The recommendations are returned for editing; nothing is saved.

    Args:
        form: Destination, dates, budget, travel type and interests
        guard: Mounted session guard
        client: Request-scoped Supabase client
        requester: Recommendation requester for the configured backend

    Returns:
        Plan-trip page view with the recommendation text
    """
    page = PlanTripPage(guard, requester, trips_store(client))
    return await run_page(
        page,
        lambda: page.request_recommendations(form),
        "Failed to get recommendations"
    )


@app.post("/plan-trip/save", response_model=PageView, responses=PAGE_RESPONSES)
async def plan_trip_save(
    form: PlanTripForm,
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client),
    requester: RecommendationRequester = Depends(get_recommendation_requester)
):
    """
    Save the trip with the (possibly edited) recommendations in `notes`

    Returns:
        Plan-trip page view redirecting to /trips on success
    """
    page = PlanTripPage(guard, requester, trips_store(client))
    return await run_page(page, lambda: page.save_trip(form), "Failed to save trip")


# ============================================================================
# TRIPS
# ============================================================================

@app.get("/trips", response_model=PageView, responses=PAGE_RESPONSES)
async def list_trips(
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    """The user's trips, latest start date first"""
    return await run_page(TripsPage(guard, trips_store(client)), failure_message="Failed to load trips")


@app.delete("/trips/{trip_id}", response_model=PageView, responses=PAGE_RESPONSES)
async def delete_trip(
    trip_id: str,
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    """Delete one trip; the returned list drops it without re-fetching"""
    page = TripsPage(guard, trips_store(client))
    return await run_page(page, lambda: page.delete(trip_id), "Failed to delete trip")


# ============================================================================
# DIARY
# ============================================================================

@app.get("/diary", response_model=PageView, responses=PAGE_RESPONSES)
async def list_diary_entries(
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    """Diary entries, latest entry date first"""
    return await run_page(DiaryPage(guard, diary_store(client)), failure_message="Failed to load diary entries")


@app.post("/diary", response_model=PageView, responses=PAGE_RESPONSES)
async def create_diary_entry(
    form: DiaryEntryForm,
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    """Create a diary entry and return the re-fetched list"""
    page = DiaryPage(guard, diary_store(client))
    return await run_page(page, lambda: page.create(form), "Failed to create entry")


@app.delete("/diary/{entry_id}", response_model=PageView, responses=PAGE_RESPONSES)
async def delete_diary_entry(
    entry_id: str,
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    page = DiaryPage(guard, diary_store(client))
    return await run_page(page, lambda: page.delete(entry_id), "Failed to delete entry")


# ============================================================================
# DISCOVER
# ============================================================================

@app.get("/discover", response_model=PageView, responses=PAGE_RESPONSES)
async def list_destinations(
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    """Saved destinations, most recently saved first"""
    return await run_page(DiscoverPage(guard, destinations_store(client)), failure_message="Failed to load destinations")


@app.post("/discover", response_model=PageView, responses=PAGE_RESPONSES)
async def save_destination(
    form: DestinationForm,
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    """Save a destination and return the re-fetched list"""
    page = DiscoverPage(guard, destinations_store(client))
    return await run_page(page, lambda: page.create(form), "Failed to save destination")


@app.delete("/discover/{destination_id}", response_model=PageView, responses=PAGE_RESPONSES)
async def remove_destination(
    destination_id: str,
    guard: SessionGuard = Depends(mount_session_guard),
    client: Client = Depends(get_supabase_client)
):
    page = DiscoverPage(guard, destinations_store(client))
    return await run_page(page, lambda: page.delete(destination_id), "Failed to remove destination")
