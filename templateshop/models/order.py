from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel
from .base import TimeStampedModel
from .product import Currency, LicenseType

class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

class OrderItem(BaseModel):
    """Individual item in an order"""
    product_id: str
    variant_id: Optional[str] = None
    product_title: Optional[str] = None
    license_type: LicenseType
    price_per_unit: Decimal

class Order(TimeStampedModel):
    """Order model for purchases"""
    order_id: str
    user_id: str
    status: OrderStatus = OrderStatus.PENDING
    currency: Currency
    total_amount: Decimal
    subtotal: Optional[Decimal] = None
    discount: Decimal = Decimal(0)
    coupon_id: Optional[str] = None
    coupon_code: Optional[str] = None
    items: List[OrderItem] = []

    @property
    def product_ids(self) -> List[str]:
        """Distinct product ids in first-seen order"""
        return list(dict.fromkeys(item.product_id for item in self.items))
