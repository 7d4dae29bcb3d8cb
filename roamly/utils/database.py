"""Supabase database utility functions"""
import asyncio
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from supabase import create_client, Client

from ..config import settings
from ..models.diary_entry import DiaryEntry
from ..models.saved_destination import SavedDestination
from ..models.trip import Trip

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class StoreError(Exception):
    """Raised when a remote table call fails"""
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class StoreDeleteError(StoreError):
    pass


class SupabaseClient:
    """Supabase client factory"""

    @classmethod
    def create(cls) -> Client:
        """
        Create a fresh Supabase client

        Auth state lives on the client, so every request gets its own
        instance instead of sharing a singleton between users.
        """
        return create_client(
            supabase_url=settings.supabase_url,
            supabase_key=settings.supabase_key
        )


def get_supabase_client() -> Client:
    """FastAPI dependency returning a request-scoped Supabase client"""
    return SupabaseClient.create()


def _error_message(error: Exception) -> str:
    # postgrest APIError carries the server text on .message
    return getattr(error, "message", None) or str(error)


class ResourceStore(Generic[RecordT]):
    """
    Read/insert/delete access to one user-owned table

    Rows are always filtered by user_id on read. Ownership of writes and
    deletes is enforced by the table's row level security policies.
    """

    def __init__(
        self,
        client: Client,
        table: str,
        model: Type[RecordT],
        order_field: str = "created_at",
        descending: bool = True
    ):
        self.client = client
        self.table = table
        self.model = model
        self.order_field = order_field
        self.descending = descending

    async def _execute(self, query):
        # The supabase client is blocking; keep the event loop free
        return await asyncio.to_thread(query.execute)

    async def list(
        self,
        user_id: str,
        order_field: Optional[str] = None,
        descending: Optional[bool] = None
    ) -> List[RecordT]:
        """
        Get every row owned by a user

        Args:
            user_id: Owner's UUID
            order_field: Column to sort by (defaults to the store's sort key)
            descending: Sort direction (defaults to the store's direction)

        Returns:
            Ordered list of records

        Raises:
            StoreReadError: If the remote call fails or a row does not match the model
        """
        order_field = order_field or self.order_field
        descending = self.descending if descending is None else descending

        query = self.client.table(self.table)\
            .select('*')\
            .eq('user_id', user_id)\
            .order(order_field, desc=descending)

        try:
            result = await self._execute(query)
        except Exception as e:
            logger.error(f"✗ Failed to list {self.table}: {_error_message(e)}")
            raise StoreReadError(_error_message(e), {"table": self.table}) from e

        rows = result.data if result.data else []
        try:
            return [self.model.model_validate(row) for row in rows]
        except ValidationError as e:
            logger.error(f"✗ Unreadable row in {self.table}: {e.error_count()} validation error(s)")
            raise StoreReadError(f"Unreadable row in {self.table}", {"table": self.table, "errors": e.errors()}) from e

    async def insert(self, record: Dict[str, Any]) -> RecordT:
        """
        Insert a row

        Args:
            record: Column values, including user_id

        Returns:
            The created record

        Raises:
            StoreWriteError: If the insert fails or the created row does not match the model
        """
        try:
            result = await self._execute(self.client.table(self.table).insert(record))
        except Exception as e:
            logger.error(f"✗ Failed to insert into {self.table}: {_error_message(e)}")
            raise StoreWriteError(_error_message(e), {"table": self.table}) from e

        if not result.data:
            raise StoreWriteError(f"Failed to create record in {self.table}", {"table": self.table})

        logger.info(f"✓ Inserted row into {self.table}")
        try:
            return self.model.model_validate(result.data[0])
        except ValidationError as e:
            logger.error(f"✗ Unreadable row returned by {self.table}: {e.error_count()} validation error(s)")
            raise StoreWriteError(f"Unreadable row returned by {self.table}", {"table": self.table, "errors": e.errors()}) from e

    async def delete(self, record_id: str, user_id: Optional[str] = None) -> None:
        """
        Delete exactly one row by primary key

        Args:
            record_id: Row UUID
            user_id: Owner's UUID, added as an extra filter when given

        Raises:
            StoreDeleteError: If the call fails or no row matched
        """
        query = self.client.table(self.table)\
            .delete()\
            .eq('id', record_id)
        if user_id:
            query = query.eq('user_id', user_id)

        try:
            result = await self._execute(query)
        except Exception as e:
            logger.error(f"✗ Failed to delete from {self.table}: {_error_message(e)}")
            raise StoreDeleteError(_error_message(e), {"table": self.table, "id": record_id}) from e

        if not result.data:
            raise StoreDeleteError(
                f"No row with id {record_id} in {self.table}",
                {"table": self.table, "id": record_id}
            )

        logger.info(f"✓ Deleted {record_id} from {self.table}")


def trips_store(client: Client) -> ResourceStore[Trip]:
    return ResourceStore(client, 'trips', Trip, order_field='start_date')


def diary_store(client: Client) -> ResourceStore[DiaryEntry]:
    return ResourceStore(client, 'diary_entries', DiaryEntry, order_field='entry_date')


def destinations_store(client: Client) -> ResourceStore[SavedDestination]:
    return ResourceStore(client, 'saved_destinations', SavedDestination, order_field='created_at')
