"""My Trips page"""
from .base import ResourceListPage


class TripsPage(ResourceListPage):
    """Trips ordered by start date, newest first. Trips are created on the plan-trip page."""
    path = "/trips"
    load_error = "Failed to load trips"
    delete_success = "Trip deleted"
    delete_error = "Failed to delete trip"
