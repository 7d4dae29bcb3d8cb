import asyncio

import pytest

from roamly.models.saved_destination import SavedDestination
from roamly.utils.database import (
    StoreDeleteError,
    StoreReadError,
    StoreWriteError,
    destinations_store,
    diary_store,
    trips_store,
)

from conftest import ALICE_ID, BOB_ID


def seed_trip(supabase, user_id, destination, start_date):
    return supabase.db.seed(
        "trips",
        user_id=user_id,
        destination=destination,
        start_date=start_date,
        end_date="2030-12-31",
        budget=500,
        travel_type="solo",
        status="planned",
        notes=""
    )


def test_list_is_scoped_to_user_and_ordered(supabase):
    seed_trip(supabase, ALICE_ID, "Lisbon", "2024-03-01")
    seed_trip(supabase, ALICE_ID, "Tokyo", "2024-06-01")
    seed_trip(supabase, BOB_ID, "Oslo", "2024-05-01")

    trips = asyncio.run(trips_store(supabase).list(ALICE_ID))

    assert [t.destination for t in trips] == ["Tokyo", "Lisbon"]
    call = supabase.db.calls_for("trips", "select")[0]
    assert ("user_id", ALICE_ID) in call["filters"]
    assert call["order"] == ("start_date", True)


def test_list_order_can_be_overridden(supabase):
    seed_trip(supabase, ALICE_ID, "Lisbon", "2024-03-01")
    seed_trip(supabase, ALICE_ID, "Tokyo", "2024-06-01")

    trips = asyncio.run(trips_store(supabase).list(ALICE_ID, order_field="destination", descending=False))

    assert [t.destination for t in trips] == ["Lisbon", "Tokyo"]


def test_list_failure_raises_read_error(supabase):
    supabase.db.fail("diary_entries", "select", "relation does not exist")

    with pytest.raises(StoreReadError) as exc:
        asyncio.run(diary_store(supabase).list(ALICE_ID))
    assert exc.value.message == "relation does not exist"


def test_insert_then_list_round_trip(supabase):
    store = destinations_store(supabase)
    created = asyncio.run(store.insert({
        "user_id": ALICE_ID,
        "destination_name": "Hidden temple",
        "location": "Kyoto, Japan",
        "description": "",
        "category": "Culture",
        "notes": ""
    }))

    listed = asyncio.run(store.list(ALICE_ID))

    assert isinstance(created, SavedDestination)
    assert listed == [created]
    assert listed[0].description == ""
    assert listed[0].category == "Culture"


def test_insert_failure_keeps_store_message(supabase):
    supabase.db.fail("trips", "insert", 'new row violates row-level security policy for table "trips"')

    with pytest.raises(StoreWriteError) as exc:
        asyncio.run(trips_store(supabase).insert({"user_id": ALICE_ID, "destination": "Rome"}))
    assert "row-level security" in exc.value.message


def test_delete_removes_exactly_one_row(supabase):
    keep = seed_trip(supabase, ALICE_ID, "Lisbon", "2024-03-01")
    gone = seed_trip(supabase, ALICE_ID, "Tokyo", "2024-06-01")
    store = trips_store(supabase)

    asyncio.run(store.delete(gone["id"], ALICE_ID))

    assert [t.id for t in asyncio.run(store.list(ALICE_ID))] == [keep["id"]]


def test_delete_unknown_id_fails(supabase):
    with pytest.raises(StoreDeleteError):
        asyncio.run(trips_store(supabase).delete("missing-id", ALICE_ID))


def test_delete_cannot_touch_another_users_row(supabase):
    bobs = seed_trip(supabase, BOB_ID, "Oslo", "2024-05-01")

    with pytest.raises(StoreDeleteError):
        asyncio.run(trips_store(supabase).delete(bobs["id"], ALICE_ID))
    assert len(supabase.db.tables["trips"]) == 1


def test_unknown_trip_status_is_kept(supabase):
    supabase.db.seed(
        "trips",
        user_id=ALICE_ID,
        destination="Lisbon",
        start_date="2024-03-01",
        end_date="2024-03-04",
        budget=500,
        travel_type="",
        status="in_progress",
        notes=""
    )

    trips = asyncio.run(trips_store(supabase).list(ALICE_ID))

    assert trips[0].status == "in_progress"
    assert trips[0].duration_days == 3


def test_unreadable_row_raises_read_error(supabase):
    supabase.db.seed("trips", user_id=ALICE_ID, destination="Lisbon", budget="lots")

    with pytest.raises(StoreReadError) as exc:
        asyncio.run(trips_store(supabase).list(ALICE_ID))
    assert exc.value.details["table"] == "trips"


def test_unreadable_created_row_raises_write_error(supabase):
    with pytest.raises(StoreWriteError):
        asyncio.run(trips_store(supabase).insert({"user_id": ALICE_ID, "destination": "Lisbon"}))
