from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from ..mock_data import PRODUCTS
from ..models.product import BASE_CURRENCY, Currency, LicenseType, Product
from ..utils.pricing import price_for

class CatalogService:
    """کاتالوگ فقط‌خواندنی محصولات"""

    def __init__(self, products: Optional[Iterable[Dict[str, Any]]] = None):
        rows = PRODUCTS if products is None else products
        self.products: List[Product] = [Product.model_validate(row) for row in rows]
        self._by_id = {p.product_id: p for p in self.products}
        self._by_slug = {p.slug: p for p in self.products}

    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        """دریافت محصول منتشر شده با شناسه"""
        product = self._by_id.get(product_id)
        return product if product and product.is_published else None

    async def get_product_by_slug(self, slug: str) -> Optional[Product]:
        """دریافت محصول منتشر شده با اسلاگ"""
        product = self._by_slug.get(slug)
        return product if product and product.is_published else None

    async def get_published_products(self) -> List[Product]:
        return [p for p in self.products if p.is_published]

    async def filter_products(self, search: Optional[str] = None, category: Optional[str] = None,
                              tech: Optional[str] = None, rtl: Optional[str] = None,
                              type_: Optional[str] = None,
                              license_type: LicenseType = LicenseType.PERSONAL,
                              currency: Currency = BASE_CURRENCY,
                              min_price: Optional[Decimal] = None,
                              max_price: Optional[Decimal] = None,
                              sort: str = "new") -> List[Product]:
        """جستجو و فیلتر محصولات"""
        needle = search.strip().lower() if search else ""
        result = []

        for item in await self.get_published_products():
            if needle:
                haystack = " ".join([item.title, item.summary, *item.tags, *item.tech]).lower()
                if needle not in haystack:
                    continue

            if tech and tech != "all" and not any(t.lower() == tech.lower() for t in item.tech):
                continue

            if category and category != "all" and item.category != category:
                continue

            if rtl == "yes" and not item.rtl:
                continue
            if rtl == "no" and item.rtl:
                continue

            if type_ == "bundle" and not item.is_bundle:
                continue
            if type_ == "template" and item.is_bundle:
                continue

            price = price_for(item, license_type, currency)
            if min_price is not None and price < min_price:
                continue
            if max_price is not None and price > max_price:
                continue

            result.append(item)

        if sort == "price":
            result.sort(key=lambda p: price_for(p, LicenseType.PERSONAL, currency))
        elif sort == "popular":
            result.sort(key=lambda p: not p.is_best_seller)
        else:
            result.sort(key=lambda p: not p.is_new)

        return result
