"""Shared page controller behaviour"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from ..middleware.auth import AUTH_PATH, AuthRequired, SessionGuard
from ..models.user import SessionUser
from ..schemas.response import Notification, PageView, SessionInfo
from ..utils.database import ResourceStore, StoreDeleteError, StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)


class ListState(str, Enum):
    LOADING = "loading"
    READY_EMPTY = "ready-empty"
    READY_WITH_ITEMS = "ready-with-items"


class Page:
    """
    Base page controller

    A page lives for one mount. It owns its own state and notifications;
    nothing is shared between pages.
    """
    path = "/"

    def __init__(self, guard: SessionGuard):
        self.guard = guard
        self.state: Any = None
        self.notifications: List[Notification] = []
        self._redirect: Optional[str] = None

    @property
    def redirect(self) -> Optional[str]:
        return self._redirect or self.guard.redirect_to

    def navigate(self, path: str) -> None:
        self._redirect = path

    def notify_success(self, message: str) -> None:
        self.notifications.append(Notification(kind="success", message=message))

    def notify_error(self, message: str) -> None:
        self.notifications.append(Notification(kind="error", message=message))

    async def mount(self) -> bool:
        """
        Run the session guard

        Returns:
            False (and a redirect to the auth screen) when there is no session
        """
        if not self.guard.is_authenticated:
            logger.info(f"No session on {self.path}, redirecting to {AUTH_PATH}")
            self.navigate(AUTH_PATH)
            return False
        return True

    def _current_user(self) -> Optional[SessionUser]:
        """Session for a write action, or None after notifying and redirecting"""
        try:
            return self.guard.require()
        except AuthRequired as e:
            self.notify_error(e.message)
            self.navigate(AUTH_PATH)
            return None

    def _items(self) -> List[Dict[str, Any]]:
        return []

    def view(self, **extra) -> PageView:
        session = self.guard.session
        state = self.state.value if isinstance(self.state, Enum) else self.state
        return PageView(
            page=self.path,
            state=state or "",
            session=SessionInfo(**session.model_dump()) if session else None,
            items=self._items(),
            notifications=self.notifications,
            redirect=self.redirect,
            **extra
        )


class ResourceListPage(Page):
    """
    A page listing one user-owned table, with create and delete

    Creating re-lists the whole table. Deleting only drops the item from
    the local list; a failed delete leaves the list as it was.
    """
    load_error = "Failed to load items"
    create_success = "Item created!"
    create_error = "Failed to create item"
    delete_success = "Item deleted"
    delete_error = "Failed to delete item"

    def __init__(self, guard: SessionGuard, store: ResourceStore):
        super().__init__(guard)
        self.store = store
        self.items: List[Any] = []
        self.state = ListState.LOADING

    async def mount(self) -> bool:
        if not await super().mount():
            return False
        await self.refresh()
        return True

    async def refresh(self) -> None:
        """Re-list every row owned by the current user"""
        user = self._current_user()
        if user is None:
            return

        self.state = ListState.LOADING
        try:
            self.items = await self.store.list(user.user_id)
        except StoreReadError as e:
            logger.error(f"Error fetching {self.store.table}: {e.message}")
            self.notify_error(self.load_error)
            self.items = []
        self._settle()

    async def delete(self, record_id: str) -> bool:
        user = self._current_user()
        if user is None:
            return False

        try:
            await self.store.delete(record_id, user.user_id)
        except StoreDeleteError as e:
            logger.error(f"Error deleting {record_id} from {self.store.table}: {e.message}")
            self.notify_error(self.delete_error)
            return False

        self.notify_success(self.delete_success)
        self.items = [item for item in self.items if item.id != record_id]
        self._settle()
        return True

    async def _create(self, fields: Dict[str, Any]) -> bool:
        user = self._current_user()
        if user is None:
            return False

        try:
            await self.store.insert({"user_id": user.user_id, **fields})
        except StoreWriteError as e:
            logger.error(f"Error creating row in {self.store.table}: {e.message}")
            self.notify_error(e.message or self.create_error)
            return False

        self.notify_success(self.create_success)
        await self.refresh()
        return True

    def _settle(self) -> None:
        self.state = ListState.READY_WITH_ITEMS if self.items else ListState.READY_EMPTY

    def _items(self) -> List[Dict[str, Any]]:
        return [item.model_dump(mode="json") for item in self.items]
