from decimal import Decimal
from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict, Field

class LicenseType(str, Enum):
    PERSONAL = "personal"
    COMMERCIAL = "commercial"

class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"

BASE_CURRENCY = Currency.USD

class ProductStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"

class BasePrice(BaseModel):
    """License prices in the base currency"""
    personal: Decimal = Field(ge=0)
    commercial: Decimal = Field(ge=0)

    def for_license(self, license_type: LicenseType) -> Decimal:
        return getattr(self, license_type.value)

class Product(BaseModel):
    """Product model for templates and bundles"""
    product_id: str
    slug: str
    title: str
    summary: str = ""
    description: str = ""
    category: str = ""
    tags: List[str] = []
    tech: List[str] = []
    rtl: bool = False
    is_bundle: bool = False
    status: ProductStatus = ProductStatus.PUBLISHED
    base_price_usd: BasePrice
    is_new: bool = False
    is_best_seller: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_published(self) -> bool:
        return self.status == ProductStatus.PUBLISHED
