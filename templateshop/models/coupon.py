from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import Field
from .base import TimeStampedModel
from .product import Currency

class CouponType(str, Enum):
    PERCENT = "percent"
    FIXED = "fixed"

class Coupon(TimeStampedModel):
    """Discount code applied at checkout"""
    coupon_id: str
    code: str
    type: CouponType
    amount: int = Field(ge=0)
    currency: Optional[Currency] = None
    is_active: bool = True
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = None
    used_count: int = 0

    def rejection_reason(self, now: datetime) -> Optional[str]:
        """دلیل غیرقابل استفاده بودن کوپن، یا None"""
        if not self.is_active:
            return "Coupon is invalid or inactive."
        if self.expires_at and self.expires_at < now:
            return "Coupon has expired."
        if self.max_uses is not None and self.used_count >= self.max_uses:
            return "Coupon usage limit reached."
        return None
