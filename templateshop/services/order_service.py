import logging
import secrets
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from .coupon_service import CouponService
from ..models.order import Order, OrderItem, OrderStatus
from ..models.product import Currency, LicenseType
from ..utils.pricing import coupon_discount, distribute_discount, price_for
from ..utils.validators import CheckoutItem

ORDER_COLUMNS = """
    order_id, user_id, status, currency, total_amount, subtotal, discount,
    coupon_id::text AS coupon_id, coupon_code, created_at, updated_at
"""

class OrderService:
    def __init__(self, db, catalog, coupon_service: Optional[CouponService] = None):
        self.db = db
        self.catalog = catalog
        self.coupons = coupon_service or CouponService(db)
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def new_order_id() -> str:
        return f"ord_{secrets.token_hex(4)}"

    async def build_order(self, user_id: str, product_id: str, currency: Currency,
                          license_type: LicenseType) -> Optional[Order]:
        """ساخت سفارش در حافظه، بدون ذخیره و پرداخت"""
        product = await self.catalog.get_product_by_id(product_id)
        if not product:
            return None

        total = price_for(product, license_type, currency)
        return Order(
            order_id=self.new_order_id(),
            user_id=user_id,
            status=OrderStatus.PENDING,
            currency=currency,
            total_amount=total,
            subtotal=total,
            items=[
                OrderItem(
                    product_id=product.product_id,
                    product_title=product.title,
                    license_type=license_type,
                    price_per_unit=total
                )
            ]
        )

    @staticmethod
    def dedupe_items(items: Iterable[CheckoutItem]) -> List[CheckoutItem]:
        """حذف آیتم‌های تکراری با کلید محصول و لایسنس"""
        seen = set()
        unique = []
        for item in items:
            key = (item.product_id, item.license_type)
            if key in seen:
                continue
            seen.add(key)
            unique.append(item)
        return unique

    async def build_cart_order(self, user_id: str, items: Iterable[CheckoutItem],
                               currency: Currency, coupon_code: Optional[str] = None,
                               now: Optional[datetime] = None) -> Dict[str, Any]:
        """ساخت سفارش چندآیتمی با اعمال کوپن، بدون ذخیره"""
        checkout_items = self.dedupe_items(items)
        if not checkout_items:
            return {
                'success': False,
                'reason': 'invalid',
                'error': 'No checkout items provided.'
            }

        lines = []
        for item in checkout_items:
            product = await self.catalog.get_product_by_id(item.product_id)
            if not product:
                return {
                    'success': False,
                    'reason': 'not_found',
                    'error': f'Product not found: {item.product_id}'
                }
            lines.append((product, item.license_type, price_for(product, item.license_type, currency)))

        amounts = [amount for _, _, amount in lines]
        subtotal = sum(amounts, Decimal(0))
        if subtotal <= 0:
            return {'success': False, 'reason': 'invalid', 'error': 'Subtotal is invalid.'}

        coupon = None
        discount = Decimal(0)
        code = self.coupons.normalize_code(coupon_code)
        if code:
            coupon = await self.coupons.get_by_code(code)
            if not coupon:
                return {'success': False, 'reason': 'invalid', 'error': 'Coupon is invalid or inactive.'}
            reason = coupon.rejection_reason(now or datetime.now(timezone.utc))
            if reason:
                return {'success': False, 'reason': 'invalid', 'error': reason}

            discount = coupon_discount(subtotal, coupon, currency)
            if discount >= subtotal:
                discount = subtotal - 1

        final_amounts = distribute_discount(amounts, discount)
        total = sum(final_amounts, Decimal(0))
        if total <= 0:
            return {
                'success': False,
                'reason': 'invalid',
                'error': 'Checkout total must be greater than zero.'
            }

        order = Order(
            order_id=self.new_order_id(),
            user_id=user_id,
            status=OrderStatus.PENDING,
            currency=currency,
            total_amount=total,
            subtotal=subtotal,
            discount=discount,
            coupon_id=coupon.coupon_id if coupon else None,
            coupon_code=coupon.code if coupon else None,
            items=[
                OrderItem(
                    product_id=product.product_id,
                    product_title=product.title,
                    license_type=license_type,
                    price_per_unit=final
                )
                for (product, license_type, _), final in zip(lines, final_amounts)
            ]
        )
        return {'success': True, 'order': order}

    async def create_order(self, order: Order) -> Order:
        """ذخیره سفارش و آیتم‌های آن"""
        async with self.db.pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute("""
                    INSERT INTO orders (
                        order_id, user_id, status, currency, total_amount,
                        subtotal, discount, coupon_id, coupon_code
                    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8::uuid, $9)
                """,
                    order.order_id,
                    order.user_id,
                    order.status.value,
                    order.currency.value,
                    order.total_amount,
                    order.subtotal,
                    order.discount,
                    order.coupon_id,
                    order.coupon_code
                )

                for item in order.items:
                    await conn.execute("""
                        INSERT INTO order_items (
                            order_id, product_id, variant_id, product_title,
                            license_type, price_per_unit
                        ) VALUES ($1, $2, $3, $4, $5, $6)
                    """,
                        order.order_id,
                        item.product_id,
                        item.variant_id,
                        item.product_title,
                        item.license_type.value,
                        item.price_per_unit
                    )

        self.logger.info(f"Order {order.order_id} created for {order.user_id}")
        return order

    async def get_order(self, order_id: str) -> Optional[Order]:
        """دریافت سفارش به همراه آیتم‌ها"""
        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE order_id = $1
            """, order_id)
            if not row:
                return None

            items = await conn.fetch("""
                SELECT product_id, variant_id, product_title,
                       license_type, price_per_unit
                FROM order_items
                WHERE order_id = $1
                ORDER BY item_id
            """, order_id)

        return Order(**dict(row), items=[OrderItem(**dict(i)) for i in items])

    async def get_user_orders(self, user_id: str, limit: int = 10) -> List[Order]:
        """دریافت سفارشات کاربر"""
        async with self.db.pool.acquire() as conn:
            rows = await conn.fetch(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE user_id = $1
                ORDER BY created_at DESC
                LIMIT $2
            """, user_id, limit)
        return [Order(**dict(row)) for row in rows]

    async def mark_paid(self, order_id: str) -> bool:
        """تغییر وضعیت سفارش در انتظار به پرداخت شده و ثبت مصرف کوپن"""
        async with self.db.pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow("""
                    UPDATE orders
                    SET status = $1,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE order_id = $2 AND status = $3
                    RETURNING coupon_id::text AS coupon_id
                """, OrderStatus.PAID.value, order_id, OrderStatus.PENDING.value)
                if not row:
                    return False

                if row['coupon_id']:
                    await conn.execute("""
                        UPDATE coupons
                        SET used_count = used_count + 1
                        WHERE coupon_id = $1::uuid AND is_active
                    """, row['coupon_id'])
        return True
