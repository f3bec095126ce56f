from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from ..models.product import BASE_CURRENCY, Currency, LicenseType

class CheckoutItem(BaseModel):
    product_id: str = Field(min_length=1)
    license_type: LicenseType

class CheckoutRequest(BaseModel):
    """بدنه درخواست خرید؛ یک محصول یا سبد خرید"""
    product_id: Optional[str] = Field(default=None, min_length=1)
    license_type: Optional[LicenseType] = None
    items: List[CheckoutItem] = Field(default_factory=list, max_length=50)
    currency: Currency = BASE_CURRENCY
    coupon_code: Optional[str] = Field(
        default=None, min_length=2, max_length=32, pattern=r"^[A-Za-z0-9_-]+$"
    )

    @field_validator("coupon_code", mode="before")
    @classmethod
    def strip_coupon(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    @model_validator(mode="after")
    def single_item_as_cart(self) -> "CheckoutRequest":
        if not self.items:
            if not self.product_id or self.license_type is None:
                raise ValueError("product_id and license_type, or items, are required")
            self.items = [CheckoutItem(product_id=self.product_id, license_type=self.license_type)]
        return self

class PaymentWebhook(BaseModel):
    """اعلان درگاه پرداخت"""
    order_id: str = Field(min_length=1)
    status: str
    reference: Optional[str] = None

    @field_validator("status")
    @classmethod
    def normalize_status(cls, value: str) -> str:
        return value.strip().lower()

class ApiKeyCreateRequest(BaseModel):
    """نام کلید API"""
    name: str = Field(default="Default Key", max_length=80)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, value: Optional[str]) -> str:
        return (value or "").strip() or "Default Key"
