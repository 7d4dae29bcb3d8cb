"""Plan Trip page - recommendation request, then an explicit save"""
import logging
from enum import Enum
from typing import Optional

from ..agents.recommendation_agent import GENERIC_FAILURE, RecommendationRequester, RecommendationRequestError
from ..middleware.auth import SessionGuard
from ..models.trip import TravelType, TripStatus
from ..schemas.request import INTEREST_OPTIONS, PlanTripForm, RecommendationRequest
from ..utils.database import ResourceStore, StoreWriteError
from ..validators.input_validator import ValidationError, validate_recommendation_input, validate_trip_save
from .base import Page

logger = logging.getLogger(__name__)

TRIPS_PATH = "/trips"


class PlanTripState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    RECOMMENDATION_READY = "recommendation-ready"
    SAVING = "saving"


class PlanTripPage(Page):
    path = "/plan-trip"

    def __init__(self, guard: SessionGuard, requester: RecommendationRequester, store: ResourceStore):
        super().__init__(guard)
        self.requester = requester
        self.store = store
        self.state = PlanTripState.IDLE
        self.recommendations = ""

    async def request_recommendations(self, form: PlanTripForm) -> bool:
        """
        Validate the form and ask for recommendations once

        Nothing is sent when validation fails. On failure the page returns
        to the state it was in before the request.

        Returns:
            True if recommendations were received
        """
        try:
            days = validate_recommendation_input(form)
        except ValidationError as e:
            self.notify_error(e.message)
            return False

        request = RecommendationRequest(
            destination=form.destination,
            budget=form.budget,
            travel_type=form.travel_type,
            interests=form.interests,
            days=days
        )

        previous = self.state
        self.state = PlanTripState.REQUESTING
        try:
            recommendations = await self.requester.request(request)
        except RecommendationRequestError as e:
            logger.error(f"Error getting recommendations: {e.message}")
            self.notify_error(e.message or GENERIC_FAILURE)
            self.state = previous
            return False

        self.recommendations = recommendations
        self.state = PlanTripState.RECOMMENDATION_READY
        self.notify_success("AI recommendations generated!")
        return True

    def edit_recommendations(self, text: str) -> None:
        self.recommendations = text

    async def save_trip(self, form: PlanTripForm) -> bool:
        """
        Store the trip with the (possibly edited) recommendations as notes

        Args:
            form: Trip details; a non-empty `notes` replaces the current text

        Returns:
            True if the trip was stored (the page then navigates to /trips)
        """
        try:
            validate_trip_save(form)
        except ValidationError as e:
            self.notify_error(e.message)
            return False

        user = self._current_user()
        if user is None:
            return False

        if form.notes:
            self.edit_recommendations(form.notes)

        travel_type: Optional[TravelType] = form.travel_type
        record = {
            "user_id": user.user_id,
            "destination": form.destination,
            "start_date": form.start_date.isoformat(),
            "end_date": form.end_date.isoformat(),
            "budget": form.budget,
            "travel_type": travel_type.value if travel_type else None,
            "notes": self.recommendations,
            "status": TripStatus.PLANNED.value
        }

        previous = self.state
        self.state = PlanTripState.SAVING
        try:
            await self.store.insert(record)
        except StoreWriteError as e:
            logger.error(f"Error saving trip: {e.message}")
            self.notify_error(e.message or "Failed to save trip")
            self.state = previous
            return False

        self.state = previous
        self.notify_success("Trip saved successfully!")
        self.navigate(TRIPS_PATH)
        return True

    def view(self, **extra):
        return super().view(
            recommendations=self.recommendations or None,
            options={
                "travel_types": [t.value for t in TravelType],
                "interests": INTEREST_OPTIONS
            },
            **extra
        )
