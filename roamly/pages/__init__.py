"""Page controllers"""
from .base import ListState, Page, ResourceListPage
from .diary import DiaryPage
from .discover import DiscoverPage
from .home import HomePage
from .plan_trip import PlanTripPage, PlanTripState
from .trips import TripsPage

__all__ = [
    "ListState", "Page", "ResourceListPage",
    "DiaryPage", "DiscoverPage", "HomePage",
    "PlanTripPage", "PlanTripState", "TripsPage",
]
