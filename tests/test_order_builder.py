import asyncio
import re
from datetime import timedelta
from decimal import Decimal

from conftest import NOW, FakeDB, make_order

from templateshop.models.order import OrderStatus
from templateshop.models.product import Currency, LicenseType
from templateshop.services.order_service import OrderService
from templateshop.utils.validators import CheckoutItem


def test_build_order_for_known_product(catalog):
    service = OrderService(FakeDB(), catalog)

    order = asyncio.run(service.build_order("u1", "prd-1", Currency.EUR, LicenseType.COMMERCIAL))

    assert re.fullmatch(r"ord_[0-9a-f]{8}", order.order_id)
    assert order.user_id == "u1"
    assert order.status == OrderStatus.PENDING
    assert order.currency == Currency.EUR
    assert order.total_amount == Decimal(82)
    assert len(order.items) == 1
    item = order.items[0]
    assert item.product_id == "prd-1"
    assert item.product_title == "SaaS Indigo"
    assert item.license_type == LicenseType.COMMERCIAL
    assert item.price_per_unit == order.total_amount


def test_build_order_does_not_touch_store(catalog):
    db = FakeDB()
    asyncio.run(OrderService(db, catalog).build_order("u1", "prd-1", Currency.USD, LicenseType.PERSONAL))
    assert db.pool.calls == []


def test_build_order_unknown_product_returns_none(catalog):
    service = OrderService(FakeDB(), catalog)
    assert asyncio.run(service.build_order("u1", "nope", Currency.USD, LicenseType.PERSONAL)) is None


def test_build_order_draft_product_returns_none(catalog):
    service = OrderService(FakeDB(), catalog)
    assert asyncio.run(service.build_order("u1", "prd-6", Currency.USD, LicenseType.PERSONAL)) is None


def test_order_ids_are_fresh(catalog):
    service = OrderService(FakeDB(), catalog)
    ids = {
        asyncio.run(service.build_order("u1", "prd-1", Currency.USD, LicenseType.PERSONAL)).order_id
        for _ in range(20)
    }
    assert len(ids) == 20


def test_create_order_inserts_order_and_items(catalog):
    db = FakeDB()
    order = make_order(product_ids=("p1", "p2"))

    asyncio.run(OrderService(db, catalog).create_order(order))

    inserts = [call for call in db.pool.calls if call[0] == "execute"]
    assert len(inserts) == 3
    assert "INSERT INTO orders" in inserts[0][1]
    assert inserts[0][2][:3] == ("ord_1", "u1", "pending")
    assert all("INSERT INTO order_items" in call[1] for call in inserts[1:])


def test_get_order_missing_returns_none(catalog):
    assert asyncio.run(OrderService(FakeDB(), catalog).get_order("ord_x")) is None


def test_get_order_loads_items(catalog):
    db = FakeDB(results={
        "fetchrow": [{
            "order_id": "ord_1", "user_id": "u1", "status": "paid", "currency": "USD",
            "total_amount": Decimal(78), "created_at": None, "updated_at": None,
        }],
        "fetch": [[
            {"product_id": "p1", "variant_id": "v1", "product_title": None,
             "license_type": "personal", "price_per_unit": Decimal(39)},
            {"product_id": "p1", "variant_id": "v2", "product_title": None,
             "license_type": "personal", "price_per_unit": Decimal(39)},
        ]],
    })

    order = asyncio.run(OrderService(db, catalog).get_order("ord_1"))

    assert order.status == OrderStatus.PAID
    assert order.product_ids == ["p1"]



def _coupon_row(code="SAVE10", type_="percent", amount=10, currency=None, **overrides):
    row = {
        "coupon_id": "c1", "code": code, "type": type_, "amount": amount, "currency": currency,
        "is_active": True, "expires_at": None, "max_uses": None, "used_count": 0, "created_at": NOW,
    }
    row.update(overrides)
    return row


def _cart(*pairs):
    return [CheckoutItem(product_id=pid, license_type=lic) for pid, lic in pairs]


def test_cart_order_dedupes_items(catalog):
    service = OrderService(FakeDB(), catalog)
    items = _cart(
        ("prd-1", LicenseType.PERSONAL),
        ("prd-1", LicenseType.PERSONAL),
        ("prd-1", LicenseType.COMMERCIAL),
        ("prd-2", LicenseType.COMMERCIAL),
    )

    result = asyncio.run(service.build_cart_order("u1", items, Currency.USD))

    order = result["order"]
    assert [(i.product_id, i.license_type) for i in order.items] == [
        ("prd-1", LicenseType.PERSONAL),
        ("prd-1", LicenseType.COMMERCIAL),
        ("prd-2", LicenseType.COMMERCIAL),
    ]
    assert order.subtotal == order.total_amount == Decimal(39 + 89 + 119)
    assert order.discount == 0
    assert order.product_ids == ["prd-1", "prd-2"]


def test_cart_order_applies_percent_coupon(catalog):
    db = FakeDB(results={"fetchrow": [_coupon_row()]})
    service = OrderService(db, catalog)
    items = _cart(("prd-1", LicenseType.PERSONAL), ("prd-2", LicenseType.COMMERCIAL))

    result = asyncio.run(service.build_cart_order("u1", items, Currency.USD, " save10 ", now=NOW))

    assert db.pool.calls[0][2] == ("SAVE10",)
    order = result["order"]
    assert order.subtotal == 158
    assert order.discount == 16
    assert order.total_amount == 142
    assert [i.price_per_unit for i in order.items] == [Decimal(35), Decimal(107)]
    assert order.coupon_id == "c1"
    assert order.coupon_code == "SAVE10"


def test_cart_order_keeps_total_above_zero(catalog):
    db = FakeDB(results={"fetchrow": [_coupon_row(type_="fixed", amount=500)]})
    service = OrderService(db, catalog)

    result = asyncio.run(service.build_cart_order(
        "u1", _cart(("prd-4", LicenseType.PERSONAL)), Currency.USD, "SAVE10", now=NOW
    ))

    assert result["order"].discount == 18
    assert result["order"].total_amount == 1


def test_cart_order_rejects_unusable_coupons(catalog):
    items = _cart(("prd-1", LicenseType.PERSONAL))
    cases = [
        (None, "Coupon is invalid or inactive."),
        (_coupon_row(is_active=False), "Coupon is invalid or inactive."),
        (_coupon_row(expires_at=NOW - timedelta(days=1)), "Coupon has expired."),
        (_coupon_row(max_uses=5, used_count=5), "Coupon usage limit reached."),
    ]
    for row, message in cases:
        db = FakeDB(results={"fetchrow": [row]})
        result = asyncio.run(OrderService(db, catalog).build_cart_order(
            "u1", items, Currency.USD, "SAVE10", now=NOW
        ))
        assert result == {"success": False, "reason": "invalid", "error": message}


def test_cart_order_unknown_product(catalog):
    service = OrderService(FakeDB(), catalog)
    items = _cart(("prd-1", LicenseType.PERSONAL), ("nope", LicenseType.PERSONAL))

    result = asyncio.run(service.build_cart_order("u1", items, Currency.USD))

    assert result["success"] is False
    assert result["reason"] == "not_found"
    assert result["error"] == "Product not found: nope"


def test_mark_paid_reports_update(catalog):
    db = FakeDB(results={"fetchrow": [{"coupon_id": None}, None]})
    service = OrderService(db, catalog)

    assert asyncio.run(service.mark_paid("ord_1")) is True
    assert asyncio.run(service.mark_paid("ord_1")) is False
    assert [call[0] for call in db.pool.calls] == ["fetchrow", "fetchrow"]


def test_mark_paid_consumes_coupon(catalog):
    db = FakeDB(results={"fetchrow": [{"coupon_id": "c1"}]})

    assert asyncio.run(OrderService(db, catalog).mark_paid("ord_1")) is True

    kind, query, args = db.pool.calls[1]
    assert kind == "execute"
    assert "UPDATE coupons" in query
    assert args == ("c1",)
