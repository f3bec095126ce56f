from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List

import pytest

from templateshop.models.download_token import DownloadToken
from templateshop.models.order import Order, OrderItem, OrderStatus
from templateshop.models.product import Currency, LicenseType
from templateshop.services.catalog_service import CatalogService

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeConnection:
    """Stands in for an asyncpg connection; records every query."""

    def __init__(self, pool):
        self.pool = pool

    async def _call(self, kind, query, args, default):
        self.pool.calls.append((kind, query, args))
        if self.pool.error is not None:
            raise self.pool.error
        queued = self.pool.results.get(kind)
        if queued:
            return queued.pop(0)
        return default

    async def execute(self, query, *args):
        return await self._call("execute", query, args, "INSERT 0 1")

    async def fetch(self, query, *args):
        return await self._call("fetch", query, args, [])

    async def fetchrow(self, query, *args):
        return await self._call("fetchrow", query, args, None)

    async def fetchval(self, query, *args):
        return await self._call("fetchval", query, args, None)

    @asynccontextmanager
    async def transaction(self):
        yield self


class FakePool:
    def __init__(self, results: Dict[str, list] = None, error: Exception = None):
        self.results = results or {}
        self.error = error
        self.calls = []

    @asynccontextmanager
    async def acquire(self):
        yield FakeConnection(self)


class FakeDB:
    def __init__(self, results: Dict[str, list] = None, error: Exception = None):
        self.pool = FakePool(results, error)


class FakeOrderService:
    def __init__(self, orders: List[Order] = ()):
        self.orders = {order.order_id: order for order in orders}
        self.paid = []

    async def get_order(self, order_id):
        return self.orders.get(order_id)

    async def mark_paid(self, order_id):
        order = self.orders[order_id]
        self.orders[order_id] = order.model_copy(update={"status": OrderStatus.PAID})
        self.paid.append(order_id)
        return True


class FakeTokenService:
    """In-memory token store with the same query semantics as the SQL one."""

    def __init__(self, tokens: List[DownloadToken] = ()):
        self.tokens = list(tokens)
        self.created = []
        self.locks = []

    @asynccontextmanager
    async def serialized(self, user_id, product_id):
        self.locks.append((user_id, product_id))
        yield None

    async def get_recent_tokens(self, user_id, product_id, now, limit=5, conn=None):
        matching = [
            t for t in self.tokens
            if t.user_id == user_id and t.product_id == product_id and t.expires_at > now
        ]
        matching.sort(key=lambda t: t.created_at, reverse=True)
        return matching[:limit]

    async def create_token(self, user_id, product_id, expires_at, max_uses, conn=None):
        token = DownloadToken(
            token_id=f"tok_{len(self.tokens) + 1}",
            user_id=user_id,
            product_id=product_id,
            expires_at=expires_at,
            max_uses=max_uses,
            used_count=0,
            created_at=NOW
        )
        self.tokens.append(token)
        self.created.append(token)
        return token


class FakeAuditService:
    def __init__(self):
        self.events = []

    async def record(self, action, target_type, actor_user_id=None, target_id=None, details=None):
        self.events.append({
            "action": action,
            "target_type": target_type,
            "actor_user_id": actor_user_id,
            "target_id": target_id,
            "details": details,
        })
        return {"success": True}


def make_token(token_id="old", user_id="u1", product_id="p1", expires_in=timedelta(days=10),
               used_count=0, max_uses=10, age=timedelta(days=1)):
    return DownloadToken(
        token_id=token_id,
        user_id=user_id,
        product_id=product_id,
        expires_at=NOW + expires_in,
        max_uses=max_uses,
        used_count=used_count,
        created_at=NOW - age
    )


def make_order(order_id="ord_1", user_id="u1", product_ids=("p1",), status=OrderStatus.PENDING):
    return Order(
        order_id=order_id,
        user_id=user_id,
        status=status,
        currency=Currency.USD,
        total_amount=Decimal(39) * len(product_ids),
        items=[
            OrderItem(
                product_id=pid,
                variant_id=f"var_{i}",
                license_type=LicenseType.PERSONAL,
                price_per_unit=Decimal(39)
            )
            for i, pid in enumerate(product_ids)
        ]
    )


@pytest.fixture
def catalog():
    return CatalogService()
