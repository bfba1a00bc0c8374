import pytest

from tally import Error, Ok
from tally.zone import (
    Address,
    Coordinates,
    DeliveryZone,
    ZoneErrorKind,
    ZoneResolver,
    ZoneTable,
    check_minimum,
    format_distance,
    haversine_km,
    resolve_zone,
)


def _value(result):
    match result:
        case Ok(value):
            return value
        case Error(e):
            pytest.fail(f"unexpected error: {e}")


class FailingGeocoder:
    async def geocode(self, address):
        raise ConnectionError("geocoder unreachable")


def test_haversine_known_distance():
    # one degree of latitude
    d = haversine_km(Coordinates(0, 0), Coordinates(1, 0))
    assert d == pytest.approx(111.19, abs=0.01)
    assert haversine_km(Coordinates(41.77, -88.15), Coordinates(41.77, -88.15)) == 0


def test_format_distance():
    assert format_distance(0.85) == "850m"
    assert format_distance(3.24) == "3.2km"


def test_coordinates_are_range_checked():
    with pytest.raises(ValueError):
        Coordinates(91, 0)


def test_resolve_picks_covering_tier(store, zones):
    match resolve_zone(Coordinates(41.78, -88.14), store, zones):
        case Ok(m):
            assert m.zone.label == "Nearby"
            assert m.distance_km < 2
        case Error(e):
            pytest.fail(e.message)


def test_resolve_out_of_zone(store, zones):
    match resolve_zone(Coordinates(41.90, -87.62), store, zones):
        case Error(e):
            assert e.kind is ZoneErrorKind.OUT_OF_ZONE
            assert e.distance_km > 10
            assert "pickup" in e.message
        case Ok(_):
            pytest.fail("expected OUT_OF_ZONE")


def test_resolve_without_coordinates(store, zones):
    match resolve_zone(None, store, zones):
        case Error(e):
            assert e.kind is ZoneErrorKind.INVALID_ADDRESS
        case Ok(_):
            pytest.fail("expected INVALID_ADDRESS")


def test_resolve_with_empty_table(store):
    match resolve_zone(Coordinates(41.78, -88.14), store, ZoneTable([])):
        case Error(e):
            assert e.kind is ZoneErrorKind.NO_ZONES_CONFIGURED
        case Ok(_):
            pytest.fail("expected NO_ZONES_CONFIGURED")


def test_overlapping_tiers_prefer_narrowest_then_cheapest():
    table = ZoneTable([
        DeliveryZone("Wide", radius_km=8, fee_cents=199, min_order_cents=0, eta_minutes=40),
        DeliveryZone("Pricey", radius_km=3, fee_cents=599, min_order_cents=0, eta_minutes=20),
        DeliveryZone("Cheap", radius_km=3, fee_cents=399, min_order_cents=0, eta_minutes=20),
    ])
    assert table.match(1.0).label == "Cheap"
    assert table.match(5.0).label == "Wide"
    assert table.match(9.0) is None


def test_check_minimum(zones):
    standard = next(z for z in zones if z.label == "Standard")
    match check_minimum(1800, standard):
        case Error(short):
            assert short.deficit_cents == 200
            assert short.message == "Add $2.00 more to reach the $20.00 delivery minimum."
        case Ok(_):
            pytest.fail("expected BelowMinimumOrder")
    assert isinstance(check_minimum(2000, standard), Ok)


@pytest.mark.asyncio
async def test_resolver_resolves_and_caches(resolver, geocoder, near_address):
    first = await resolver.resolve(near_address)
    second = await resolver.resolve(near_address)
    assert _value(first) == _value(second)
    assert geocoder.calls == 1
    assert (resolver.cache_stats.hits, resolver.cache_stats.misses) == (1, 1)


@pytest.mark.asyncio
async def test_resolver_normalizes_cache_key(resolver, geocoder, near_address):
    await resolver.resolve(near_address)
    shouty = Address(line1="100  MAIN ST", city="naperville", state="il", zip="60540")
    result = await resolver.resolve(shouty)
    assert isinstance(result, Ok)
    assert geocoder.calls == 1


@pytest.mark.asyncio
async def test_resolver_unknown_address(resolver, geocoder, unknown_address):
    match await resolver.resolve(unknown_address):
        case Error(e):
            assert e.kind is ZoneErrorKind.INVALID_ADDRESS
        case Ok(_):
            pytest.fail("expected INVALID_ADDRESS")
    # not-found answers are not cached
    await resolver.resolve(unknown_address)
    assert geocoder.calls == 2


@pytest.mark.asyncio
async def test_resolver_blank_address_skips_lookup(resolver, geocoder):
    result = await resolver.resolve(Address(line1=" ", city="", state="IL", zip=""))
    assert isinstance(result, Error)
    assert geocoder.calls == 0


@pytest.mark.asyncio
async def test_geocoder_failure_becomes_lookup_failed(store, zones, near_address):
    resolver = ZoneResolver(FailingGeocoder(), store=store, table=zones)
    match await resolver.resolve(near_address):
        case Error(e):
            assert e.kind is ZoneErrorKind.LOOKUP_FAILED
            assert "unreachable" in e.detail
        case Ok(_):
            pytest.fail("expected LOOKUP_FAILED")


@pytest.mark.asyncio
async def test_forget_drops_cached_geocode(resolver, geocoder, near_address):
    await resolver.resolve(near_address)
    assert await resolver.forget(near_address)
    await resolver.resolve(near_address)
    assert geocoder.calls == 2
