from itinerary.models import DayData, ItineraryData, ItineraryItem
from itinerary.store import InMemoryItineraryStore


def make_itinerary(title="European Vacation"):
    return ItineraryData(
        title=title,
        days={
            "1": DayData(
                day="1",
                city="Paris",
                date="2025-05-01",
                items=[ItineraryItem(timing="12:30", category="Food", description="Lunch at Café")],
                all_meals=["lunch"],
            )
        },
    )


def test_create_and_get():
    store = InMemoryItineraryStore()
    itinerary_id = store.create(make_itinerary(), "user_1")

    assert itinerary_id.startswith("itinerary_")
    record = store.get(itinerary_id)
    assert record.user_id == "user_1"
    assert record.itinerary.days["1"].all_meals == ["lunch"]
    assert record.created_at == record.updated_at


def test_ids_are_unique():
    store = InMemoryItineraryStore()
    ids = {store.create(make_itinerary(), "user_1") for _ in range(5)}
    assert len(ids) == 5


def test_stored_snapshot_is_isolated():
    store = InMemoryItineraryStore()
    itinerary = make_itinerary()
    itinerary_id = store.create(itinerary, "user_1")

    itinerary.days["1"].items.clear()
    store.get(itinerary_id).itinerary.days["1"].city = "Lyon"

    record = store.get(itinerary_id)
    assert len(record.itinerary.days["1"].items) == 1
    assert record.itinerary.days["1"].city == "Paris"


def test_list_for_user():
    store = InMemoryItineraryStore()
    first = store.create(make_itinerary("First"), "user_1")
    store.create(make_itinerary("Other"), "user_2")
    second = store.create(make_itinerary("Second"), "user_1")

    summaries = store.list_for_user("user_1")

    assert [s.id for s in summaries] == [first, second]
    assert [s.title for s in summaries] == ["First", "Second"]
    assert summaries[0].days == 1
    assert store.list_for_user("nobody") == []


def test_update_and_delete():
    store = InMemoryItineraryStore()
    itinerary_id = store.create(make_itinerary(), "user_1")

    assert store.update(itinerary_id, make_itinerary("Renamed"))
    record = store.get(itinerary_id)
    assert record.itinerary.title == "Renamed"
    assert record.updated_at >= record.created_at

    assert store.delete(itinerary_id)
    assert store.get(itinerary_id) is None
    assert not store.delete(itinerary_id)
    assert not store.update(itinerary_id, make_itinerary())
