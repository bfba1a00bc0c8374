from datetime import datetime, timezone
from decimal import Decimal

import pytest

from tally.items import make_item
from tally.promo import DiscountType, Promo, PromoCatalog
from tally.zone import Address, Coordinates, DeliveryZone, StaticGeocoder, ZoneResolver, ZoneTable

STORE = Coordinates(41.77, -88.15)
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store():
    return STORE


@pytest.fixture
def bread():
    return make_item("line-1", "BREAD", "Sourdough", 1200, qty=2)


@pytest.fixture
def cheese():
    return make_item("line-2", "CHEESE", "Gouda", 999, qty="1.5", price_unit="lb")


@pytest.fixture
def zones():
    return ZoneTable([
        DeliveryZone("Nearby", radius_km=2.0, fee_cents=299, min_order_cents=1500, eta_minutes=25),
        DeliveryZone("Standard", radius_km=5.0, fee_cents=499, min_order_cents=2000, eta_minutes=35),
        DeliveryZone("Extended", radius_km=10.0, fee_cents=799, min_order_cents=3000, eta_minutes=45),
    ])


@pytest.fixture
def near_address():
    return Address(line1="100 Main St", city="Naperville", state="IL", zip="60540")


@pytest.fixture
def far_address():
    return Address(line1="1 Lake Shore Dr", city="Chicago", state="IL", zip="60611")


@pytest.fixture
def unknown_address():
    return Address(line1="999 Nowhere Ln", city="Nowhere", state="IL", zip="00000")


@pytest.fixture
def geocoder(near_address, far_address):
    return StaticGeocoder({
        # ~1.4 km from the store
        near_address.cache_key(): Coordinates(41.78, -88.14),
        # ~46 km from the store
        far_address.cache_key(): Coordinates(41.90, -87.62),
    })


@pytest.fixture
def resolver(geocoder, zones):
    return ZoneResolver(geocoder, store=STORE, table=zones)


@pytest.fixture
def catalog():
    return PromoCatalog([
        Promo("SAVE10", DiscountType.PERCENTAGE, Decimal(10), min_subtotal_cents=2000),
        Promo("FIVEOFF", DiscountType.FIXED_AMOUNT, Decimal(500)),
        Promo("FREE", DiscountType.PERCENTAGE, Decimal(100)),
        Promo("BIGCAP", DiscountType.PERCENTAGE, Decimal(50), max_discount_cents=1000),
        Promo("WELCOME", DiscountType.PERCENTAGE, Decimal(20), first_time_only=True),
        Promo("ONCE", DiscountType.FIXED_AMOUNT, Decimal(300), one_per_customer=True),
        Promo("OLD", DiscountType.PERCENTAGE, Decimal(10), expire_date=datetime(2026, 1, 1, tzinfo=timezone.utc)),
        Promo("SOON", DiscountType.PERCENTAGE, Decimal(10), start_date=datetime(2026, 12, 1, tzinfo=timezone.utc)),
        Promo("GONE", DiscountType.PERCENTAGE, Decimal(10), usage_limit=5, usage_count=5),
        Promo("PAUSED", DiscountType.PERCENTAGE, Decimal(10), is_active=False),
    ])
