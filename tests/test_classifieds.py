from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.classifieds import (
    ListingCreate,
    ListingStore,
    RentasFilters,
    SavedListingsStore,
    SearchQuery,
    apply_rentas_filters,
    category_choices,
    extract_pro_video_info,
    infer_listing_plan,
    is_verified_seller,
    listing_insights,
    resolve_anchor,
    search_listings,
)
from src.classifieds.rentas import parse_usd, rent_value
from src.classifieds.search import listing_price, suggest_cities, suggest_zips


def _listing(listing_id: str, city: str, price: str = "", created: str = "2025-01-01T00:00:00Z", **extra):
    record = {
        "id": listing_id,
        "category": "en-venta",
        "title": {"es": f"Anuncio {listing_id}", "en": f"Listing {listing_id}"},
        "description": {"es": "", "en": ""},
        "priceLabel": {"es": price, "en": price},
        "city": city,
        "sellerType": "personal",
        "createdAt": created,
    }
    record.update(extra)
    return record


# --- plans and verification ---------------------------------------------


@pytest.mark.parametrize(
    ("listing", "expected"),
    [
        (None, "free"),
        ({}, "free"),
        ({"isPro": True}, "pro"),
        ({"plan": "Business Lite"}, "pro"),
        ({"sellerPlan": "PREMIUM"}, "pro"),
        ({"plan": "free", "tier": "basic"}, "free"),
        ({"isPro": "yes"}, "free"),
    ],
)
def test_infer_listing_plan(listing, expected) -> None:
    assert infer_listing_plan(listing) == expected


def test_verified_seller_requires_explicit_marker() -> None:
    assert is_verified_seller(None) is False
    assert is_verified_seller({"seller": {"name": "Ana"}}) is False
    assert is_verified_seller({"verifiedSeller": True}) is True
    assert is_verified_seller({"verification": {"status": "Active"}}) is True
    assert is_verified_seller({"seller": {"verificationStatus": "VERIFIED"}}) is True
    assert is_verified_seller({"badges": ["Seller_Verified"]}) is True
    assert is_verified_seller({"badges": ["top-rated"], "verified": "true"}) is False


# --- pro video ------------------------------------------------------------


def test_extract_pro_video_block() -> None:
    description = (
        "Casa amplia\n[LEONIX_PRO_VIDEO]\nurl= https://video.example/v.mp4 \n"
        "thumb=https://video.example/t.jpg\n[/LEONIX_PRO_VIDEO]"
    )
    assert extract_pro_video_info(description) == {
        "url": "https://video.example/v.mp4",
        "thumbUrl": "https://video.example/t.jpg",
    }


def test_extract_pro_video_legacy_section() -> None:
    description = "Detalles\n\n— Video (Pro) —\nVideo: https://v.example/1\nMiniatura: https://v.example/1.jpg"
    assert extract_pro_video_info(description) == {
        "url": "https://v.example/1",
        "thumbUrl": "https://v.example/1.jpg",
    }


def test_extract_pro_video_needs_url() -> None:
    assert extract_pro_video_info(None) is None
    assert extract_pro_video_info("[LEONIX_PRO_VIDEO]\nthumb=x\n[/LEONIX_PRO_VIDEO]") is None
    assert extract_pro_video_info("sin video") is None


# --- insights -------------------------------------------------------------


def test_listing_insights_reports_missing_fields_and_duplicates() -> None:
    listing = {
        "id": "a",
        "category": "autos",
        "title": {"es": "Honda Cívic 2010", "en": ""},
        "description": {"es": "Buen estado"},
        "city": "San José",
    }
    others = [
        {"id": "b", "category": "autos", "title": {"es": "honda civic 2010"}, "city": "san jose"},
        {"id": "c", "category": "rentas", "title": {"es": "Honda Civic 2010"}, "city": "San José"},
        {"id": "a", "category": "autos", "title": {"es": "Honda Civic 2010"}, "city": "San José"},
    ]
    result = listing_insights(listing, others, "es")

    assert result["id"] == "a"
    assert result["languages"] == {"ok": False, "missing": ["en"]}
    assert result["duplicates"] == ["b"]
    assert result["hints"] == [
        "Falta el precio.",
        "Agrega una foto para generar más confianza.",
        "Agrega al menos un método de contacto (teléfono, texto o email).",
        "Autos: incluye año, marca, modelo y millaje en la descripción.",
    ]


def test_complete_listing_has_no_missing_hints() -> None:
    listing = {
        "id": "x",
        "category": "servicios",
        "title": {"es": "Jardinería", "en": "Gardening"},
        "blurb": {"es": "Corte de pasto", "en": "Lawn mowing"},
        "priceLabel": {"en": "$40"},
        "city": "Campbell",
        "hasPhoto": True,
        "phone": "408-555-0100",
    }
    result = listing_insights(listing, [], "en")
    assert result["languages"] == {"ok": True, "missing": []}
    assert result["hints"] == []


# --- rentas ---------------------------------------------------------------


def test_parse_usd_and_rent_value() -> None:
    assert parse_usd("$2,450/mes") == 2450.0
    assert parse_usd("Llamar") is None
    assert rent_value({"priceLabel": {"es": "Gratis"}}) == 0.0
    assert rent_value({"rentMonthly": 1800, "priceLabel": {"es": "$9"}}) == 1800.0
    assert rent_value({"rentMonthly": True}) is None


def test_rentas_filters_skip_unknown_values() -> None:
    listings = [
        {"id": "cheap", "rentMonthly": 1200, "beds": 0, "petsPolicy": "cats"},
        {"id": "mid", "rentMonthly": 2400, "beds": 2, "petsPolicy": "any", "sqft": 900},
        {"id": "pricey", "rentMonthly": 4200, "beds": 4, "petsPolicy": "none"},
        {"id": "unknown"},
    ]
    filters = RentasFilters.model_validate({"minRent": "$1,500", "maxRent": "3000"})
    assert [x["id"] for x in apply_rentas_filters(listings, filters)] == ["mid", "unknown"]

    dogs = RentasFilters(pets="dogs")
    assert [x["id"] for x in apply_rentas_filters(listings, dogs)] == ["mid", "unknown"]

    studio = RentasFilters(beds="studio")
    assert [x["id"] for x in apply_rentas_filters(listings, studio)] == ["cheap", "unknown"]

    big = RentasFilters(beds="4+", sqftMax="800")
    assert [x["id"] for x in apply_rentas_filters(listings, big)] == ["pricey", "unknown"]


def test_rentas_boolean_filters() -> None:
    listings = [
        {"id": "furnished", "furnished": True, "utilitiesIncluded": True, "availableNow": True},
        {"id": "bare", "furnished": False, "utilitiesIncluded": False, "availableInDays": 45},
    ]
    assert [x["id"] for x in apply_rentas_filters(listings, RentasFilters(furnished="yes"))] == ["furnished"]
    assert [x["id"] for x in apply_rentas_filters(listings, RentasFilters(utilities="included"))] == [
        "furnished"
    ]
    assert [x["id"] for x in apply_rentas_filters(listings, RentasFilters(availability="30"))] == [
        "furnished"
    ]
    assert len(apply_rentas_filters(listings)) == 2


# --- search ---------------------------------------------------------------


def test_anchor_prefers_zip_then_alias_then_default() -> None:
    zip_anchor = resolve_anchor("Los Gatos", "95110")
    assert (zip_anchor.label, zip_anchor.zip_mode) == ("ZIP 95110", True)
    assert (zip_anchor.lat, zip_anchor.lng) == (37.3483, -121.9147)

    assert resolve_anchor("SJ").label == "San José"
    assert resolve_anchor("losgatos", "9511").label == "Los Gatos"
    assert resolve_anchor("Atlantis", "00000").label == "San José"


def test_search_filters_radius_but_keeps_unknown_cities() -> None:
    listings = [
        _listing("near", "Santa Clara", "$100"),
        _listing("far", "Concord", "$50"),
        _listing("unknown", "Pueblo Lejano", "$75"),
    ]
    result = search_listings(listings, SearchQuery(city="San Jose"))

    assert result["anchor"]["label"] == "San José"
    assert result["anchor"]["zipMode"] is False
    assert {x["id"] for x in result["listings"]} == {"near", "unknown"}
    assert result["count"] == 2
    assert result["nearbyCities"][0] == "San José"
    assert "Concord" not in result["nearbyCities"]


def test_search_sorts_by_price_with_unparsable_last() -> None:
    listings = [
        _listing("b", "Campbell", "$300"),
        _listing("none", "Campbell", "Llamar"),
        _listing("a", "Campbell", "$1,200"),
        _listing("c", "Campbell", "$25"),
    ]
    asc = search_listings(listings, SearchQuery.model_validate({"sort": "priceAsc"}))
    assert [x["id"] for x in asc["listings"]] == ["c", "b", "a", "none"]
    desc = search_listings(listings, SearchQuery.model_validate({"sort": "priceDesc"}))
    assert [x["id"] for x in desc["listings"]] == ["a", "b", "c", "none"]


def test_search_newest_first_and_text_filters() -> None:
    listings = [
        _listing("old", "Milpitas", created="2024-12-01T00:00:00Z"),
        _listing("new", "Milpitas", created="2025-02-01T00:00:00Z", hasImage=True),
        _listing("job", "Milpitas", category="empleos", sellerType="negocio"),
    ]
    newest = search_listings(listings, SearchQuery(category="en-venta"))
    assert [x["id"] for x in newest["listings"]] == ["new", "old"]

    assert [x["id"] for x in search_listings(listings, SearchQuery(withPhoto=True))["listings"]] == ["new"]
    assert [x["id"] for x in search_listings(listings, SearchQuery(seller="negocio"))["listings"]] == ["job"]
    text = search_listings(listings, SearchQuery(q="  ANUNCIO new "))
    assert [x["id"] for x in text["listings"]] == ["new"]


def test_search_query_rejects_non_positive_radius() -> None:
    with pytest.raises(ValidationError):
        SearchQuery(radiusMi=0)


def test_listing_price_prefers_english_label() -> None:
    assert listing_price({"priceLabel": {"es": "$10", "en": "$12"}}) == 12.0
    assert listing_price({"priceLabel": {"es": "$10", "en": ""}}) == 10.0
    assert listing_price({}) is None


def test_city_and_zip_suggestions() -> None:
    assert "Palo Alto" in suggest_cities("palo")
    assert suggest_cities("sj") == ["San José"]
    assert suggest_cities("   ") == []
    assert all(code.startswith("9404") for code in suggest_zips("9404"))
    assert suggest_zips("") == []


def test_category_choices_localized() -> None:
    choices = category_choices("en")
    assert choices[0] == {"key": "servicios", "label": "Services"}
    assert category_choices("fr")[2] == {"key": "rentas", "label": "Rentas"}


# --- persistence ----------------------------------------------------------


def test_listing_store_round_trip(db_manager, logger_factory) -> None:
    store = ListingStore(db_manager, logger_factory=logger_factory)
    created = store.create(
        ListingCreate.model_validate(
            {
                "category": "rentas",
                "title": {"es": "Cuarto", "en": "Room"},
                "priceLabel": {"es": "$900"},
                "city": " Sunnyvale ",
                "sellerType": "negocio",
                "rentMonthly": 900,
            }
        )
    )

    assert created["category"] == "rentas"
    assert created["city"] == "Sunnyvale"
    assert created["sellerType"] == "negocio"
    assert created["rentMonthly"] == 900
    assert created["createdAt"]
    assert store.get(created["id"])["title"] == {"es": "Cuarto", "en": "Room"}
    assert [x["id"] for x in store.list_all("rentas")] == [created["id"]]
    assert store.list_all("autos") == []
    assert store.get("missing") is None
    assert "classifieds.listing.created" in logger_factory.module_logger.events()


def test_listing_create_rejects_unknown_category() -> None:
    with pytest.raises(ValidationError):
        ListingCreate.model_validate({"category": "mascotas", "title": {"es": "x"}})


def test_storage_check_reports_sample(db_manager, logger_factory) -> None:
    store = ListingStore(db_manager, logger_factory=logger_factory)
    assert store.storage_check() == {
        "ok": True,
        "read": {"ok": True, "error": None, "sampleCount": 0},
    }


def test_saved_listings_toggle_per_owner(db_manager) -> None:
    saved = SavedListingsStore(db_manager)
    assert saved.toggle("visitor-1", "a") is True
    assert saved.toggle("visitor-1", "b") is True
    assert saved.toggle("visitor-2", "a") is True
    assert saved.is_saved("visitor-1", "a") is True

    assert saved.toggle("visitor-1", "a") is False
    assert saved.is_saved("visitor-1", "a") is False
    assert saved.list("visitor-1") == ["b"]
    assert saved.list("visitor-2") == ["a"]
