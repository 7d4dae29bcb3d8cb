"""Home page"""
from ..middleware.auth import AUTH_PATH
from .base import Page

FEATURES = [
    {
        "title": "Plan Trip",
        "description": "Create your perfect journey with AI-powered recommendations",
        "path": "/plan-trip"
    },
    {
        "title": "My Trips",
        "description": "View and manage your planned and past adventures",
        "path": "/trips"
    },
    {
        "title": "Travel Diary",
        "description": "Document your experiences and memories",
        "path": "/diary"
    },
    {
        "title": "Discover",
        "description": "Explore hidden gems and local experiences",
        "path": "/discover"
    },
]


class HomePage(Page):
    path = "/"

    def __init__(self, guard):
        super().__init__(guard)
        self.state = "loading"

    async def mount(self) -> bool:
        mounted = await super().mount()
        self.state = "ready" if mounted else "loading"
        return mounted

    def sign_out(self) -> bool:
        """
        Sign out and go to the auth screen

        Only the notification depends on whether the provider accepted it.
        """
        signed_out = self.guard.sign_out()
        if signed_out:
            self.notify_success("Signed out successfully")
        else:
            self.notify_error("Failed to sign out")
        self.navigate(AUTH_PATH)
        return signed_out

    def view(self, **extra):
        return super().view(options={"features": FEATURES}, **extra)
