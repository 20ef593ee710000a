from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.restaurants import AlertPrefsUpdate, RestaurantStore
from src.restaurants.store import round_half_up

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _store(db_manager, logger_factory, **config) -> RestaurantStore:
    return RestaurantStore(db_manager, config=config, clock=lambda: NOW, logger_factory=logger_factory)


@pytest.mark.parametrize(
    ("value", "digits", "expected"),
    [(2.5, 0, 3.0), (3.49, 0, 3.0), (4.25, 1, 4.3), (4.666, 1, 4.7), (-0.5, 0, 0.0)],
)
def test_round_half_up(value, digits, expected) -> None:
    assert round_half_up(value, digits) == pytest.approx(expected)


def test_favorites_toggle_and_cap(db_manager, logger_factory) -> None:
    store = _store(db_manager, logger_factory, favorites_cap=2)
    assert store.toggle_favorite("v1", "taqueria") is True
    assert store.toggle_favorite("v1", "pupuseria") is True
    assert store.toggle_favorite("v1", "panaderia") is False
    assert store.favorite_ids("v1") == ["taqueria", "pupuseria"]
    assert "restaurants.favorites.cap_reached" in logger_factory.module_logger.events()

    assert store.toggle_favorite("v1", "taqueria") is False
    assert store.is_favorite("v1", "taqueria") is False
    assert store.toggle_favorite("v1", "panaderia") is True
    assert store.favorite_ids("v2") == []


def test_recent_cities_move_to_front_without_duplicates(db_manager, logger_factory) -> None:
    store = _store(db_manager, logger_factory, recent_cities_cap=3)
    store.push_recent_city("v1", "San José")
    store.push_recent_city("v1", "Campbell")
    assert store.push_recent_city("v1", " san josé ") == ["san josé", "Campbell"]

    store.push_recent_city("v1", "Milpitas")
    store.push_recent_city("v1", "Gilroy")
    assert store.recent_cities("v1") == ["Gilroy", "Milpitas", "san josé"]
    assert store.push_recent_city("v1", "   ") == ["Gilroy", "Milpitas", "san josé"]
    assert store.push_recent_city("v1", None) == ["Gilroy", "Milpitas", "san josé"]


def test_add_review_clamps_rating_and_defaults_recommend(db_manager, logger_factory) -> None:
    store = _store(db_manager, logger_factory, review_note_max_length=5)
    high = store.add_review("r1", 9, note="Muy rico todo")
    low = store.add_review("r1", 0)
    half = store.add_review("r1", 2.5, recommend=True)

    assert (high["rating"], high["recommend"], high["note"]) == (5, True, "Muy r")
    assert (low["rating"], low["recommend"], low["note"]) == (1, False, "")
    assert (half["rating"], half["recommend"]) == (3, True)
    assert high["createdAt"] == "2025-03-01T12:00:00.000Z"
    assert len(high["id"]) > 0


def test_reviews_are_newest_first_and_pruned(db_manager, logger_factory) -> None:
    store = _store(db_manager, logger_factory, reviews_cap=2)
    store.add_review("r1", 1)
    store.add_review("r1", 2)
    store.add_review("r1", 3)
    store.add_review("r2", 4)

    assert [review["rating"] for review in store.reviews("r1")] == [3, 2]
    assert [review["rating"] for review in store.reviews("r2")] == [4]


def test_review_stats(db_manager, logger_factory) -> None:
    store = _store(db_manager, logger_factory)
    assert store.review_stats("r1") == {"avg": 0, "count": 0, "recommendPct": 0}

    store.add_review("r1", 5)
    store.add_review("r1", 5)
    assert store.review_stats("r1") == {"avg": 5.0, "count": 2, "recommendPct": 0}

    store.add_review("r1", 4, recommend=False)
    stats = store.review_stats("r1")
    assert stats["avg"] == pytest.approx(4.7)
    assert stats["count"] == 3
    assert stats["recommendPct"] == 67


def test_alert_prefs_default_and_save(db_manager, logger_factory) -> None:
    store = _store(db_manager, logger_factory)
    assert store.get_alert_prefs("v1") == {
        "cuisine": "",
        "radiusMi": 25,
        "frequency": "weekly",
        "enabled": False,
        "createdAt": "1970-01-01T00:00:00.000Z",
    }

    saved = store.save_alert_prefs(
        "v1", AlertPrefsUpdate.model_validate({"cuisine": "mexicana", "radiusMi": 40, "enabled": True})
    )
    assert saved["radiusMi"] == 40
    assert saved["createdAt"] == "2025-03-01T12:00:00.000Z"
    assert store.get_alert_prefs("v1") == saved


def test_alert_prefs_reject_unknown_radius() -> None:
    with pytest.raises(ValidationError):
        AlertPrefsUpdate.model_validate({"radiusMi": 30})
    with pytest.raises(ValidationError):
        AlertPrefsUpdate(frequency="daily")


def test_geo_state_upsert(db_manager, logger_factory) -> None:
    store = _store(db_manager, logger_factory)
    assert store.get_geo_state("v1") is None
    store.save_geo_state("v1", 37.33, -121.88)
    updated = store.save_geo_state("v1", 37.40, -121.90)
    assert (updated["lat"], updated["lng"]) == (37.40, -121.90)
    assert store.get_geo_state("v1") == updated


@pytest.mark.parametrize("rating", [float("nan"), float("inf"), float("-inf")])
def test_add_review_rejects_non_finite_rating(db_manager, logger_factory, rating) -> None:
    store = _store(db_manager, logger_factory)
    with pytest.raises(ValueError):
        store.add_review("r1", rating)
    assert store.reviews("r1") == []
