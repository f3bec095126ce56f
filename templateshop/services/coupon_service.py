import logging
from datetime import datetime
from typing import Optional
from ..models.coupon import Coupon, CouponType
from ..models.product import Currency

COUPON_COLUMNS = """
    coupon_id::text AS coupon_id, code, type, amount, currency, is_active,
    expires_at, max_uses, used_count, created_at
"""

class CouponService:
    """کوپن‌های تخفیف"""

    def __init__(self, db):
        self.db = db
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def normalize_code(code: Optional[str]) -> Optional[str]:
        if not code:
            return None
        code = code.strip().upper()
        return code or None

    async def get_by_code(self, code: str) -> Optional[Coupon]:
        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                SELECT {COUPON_COLUMNS}
                FROM coupons
                WHERE code = $1
            """, code)
        return Coupon(**dict(row)) if row else None

    async def create_coupon(self, code: str, coupon_type: CouponType, amount: int,
                            currency: Optional[Currency] = None,
                            expires_at: Optional[datetime] = None,
                            max_uses: Optional[int] = None) -> Coupon:
        """ثبت کوپن جدید"""
        if coupon_type == CouponType.PERCENT:
            currency = None
        async with self.db.pool.acquire() as conn:
            row = await conn.fetchrow(f"""
                INSERT INTO coupons (code, type, amount, currency, expires_at, max_uses)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {COUPON_COLUMNS}
            """,
                self.normalize_code(code),
                coupon_type.value,
                amount,
                currency.value if currency else None,
                expires_at,
                max_uses
            )

        self.logger.info(f"Coupon {row['code']} created")
        return Coupon(**dict(row))
