"""Query policy tests against the in-memory store."""

import uuid

import pytest

from app.core.exceptions import CoordinateValidationError
from app.core.geo import GeoPoint
from app.services.query_service import GeoFilter, SightingQueryService, parse_geo_filter
from app.services.sighting_store import MemorySightingStore, NewSighting


@pytest.fixture
def populated():
    store = MemorySightingStore()
    owner = uuid.uuid4()
    store.add_owner(owner)
    s1 = store.insert(NewSighting(owner, "Ardea herodias", 10.0, 10.0))
    s2 = store.insert(NewSighting(owner, "Haliaeetus leucocephalus", 10.0, 10.01))
    s3 = store.insert(NewSighting(owner, "Vulpes vulpes", 50.0, 50.0))
    return SightingQueryService(store), owner, (s1, s2, s3)


def test_query_without_filter_returns_all_newest_first(populated):
    service, _, (s1, s2, s3) = populated
    results = service.query()
    assert [r.sighting.id for r in results] == [s3.id, s2.id, s1.id]
    assert all(r.distance is None for r in results)


def test_query_with_filter_returns_nearest_first_with_distance(populated):
    service, _, (s1, s2, _) = populated
    results = service.query(GeoFilter(GeoPoint(10, 10), 5))
    assert [r.sighting.id for r in results] == [s1.id, s2.id]
    assert results[0].distance == 0.0
    assert 1.0 < results[1].distance < 1.2


def test_query_with_filter_and_no_matches_is_empty(populated):
    service, _, _ = populated
    assert service.query(GeoFilter(GeoPoint(-45, -120), 10)) == []


def test_list_mine(populated):
    service, owner, (s1, s2, s3) = populated
    assert [s.id for s in service.list_mine(owner)] == [s3.id, s2.id, s1.id]
    assert service.list_mine(uuid.uuid4()) == []


def test_parse_geo_filter_all_present():
    geo_filter = parse_geo_filter("10", "10.5", "5")
    assert geo_filter == GeoFilter(GeoPoint(10.0, 10.5), 5.0)


@pytest.mark.parametrize(
    "lat,lon,radius",
    [
        (None, None, None),
        ("10", None, None),
        ("10", "10", None),
        (None, "10", "5"),
        ("10", None, "5"),
        ("abc", "10", "5"),
        ("10", "10", ""),
        ("nan", "10", "5"),
        ("10", "inf", "5"),
    ],
)
def test_parse_geo_filter_partial_or_unparseable_falls_back(lat, lon, radius):
    assert parse_geo_filter(lat, lon, radius) is None


def test_parse_geo_filter_rejects_out_of_range_center():
    with pytest.raises(CoordinateValidationError):
        parse_geo_filter("95", "10", "5")
    with pytest.raises(CoordinateValidationError):
        parse_geo_filter("10", "-181", "5")


def test_parse_geo_filter_negative_radius_matches_nothing(populated):
    service, _, _ = populated
    geo_filter = parse_geo_filter("10", "10", "-1")
    assert geo_filter is not None
    assert service.query(geo_filter) == []
